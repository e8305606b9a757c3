from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Protocol, runtime_checkable

from tastebuddy.achievements.metrics import UserMetrics

Criteria = Callable[[UserMetrics], bool]


@runtime_checkable
class AchievementRule(Protocol):
    code: str
    name: str
    description: str
    category: str

    def qualifies(self, metrics: UserMetrics) -> bool:
        '''
        Return True when the metrics satisfy the rule. Must be pure, read
        nothing but ``metrics``, and stay True as activity only grows, since
        a grant can never be taken back.
        '''
        ...

    def metadata(self) -> dict[str, Any]:
        ...


@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    name: str
    description: str
    category: str
    criteria: Criteria = field(compare=False)
    metadata: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}), compare=False
    )

    @classmethod
    def from_rule(cls, rule: AchievementRule) -> AchievementDefinition:
        return cls(
            id=rule.code,
            name=rule.name,
            description=rule.description,
            category=rule.category,
            criteria=rule.qualifies,
            metadata=MappingProxyType(dict(rule.metadata())),
        )
