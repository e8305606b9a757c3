from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from tastebuddy.achievements.interface import AchievementDefinition, AchievementRule
from tastebuddy.achievements.rules import meals, quality, recipes, social, special

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AchievementCatalog:
    '''
    Immutable set of achievement definitions, in registration order.

    Built once and shared; nothing mutates it after construction, so
    concurrent readers need no locking.
    '''

    definitions: tuple[AchievementDefinition, ...]
    _index: Mapping[str, AchievementDefinition] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        index: dict[str, AchievementDefinition] = {}
        kept: list[AchievementDefinition] = []
        # Avoid duplicates by code, first one wins
        for definition in self.definitions:
            if definition.id in index:
                logger.warning(f'Duplicate achievement id ignored: {definition.id}')
                continue
            index[definition.id] = definition
            kept.append(definition)
        object.__setattr__(self, 'definitions', tuple(kept))
        object.__setattr__(self, '_index', MappingProxyType(index))

    @classmethod
    def from_rules(cls, rules: Iterable[AchievementRule]) -> AchievementCatalog:
        return cls(tuple(AchievementDefinition.from_rule(r) for r in rules))

    def all_definitions(self) -> tuple[AchievementDefinition, ...]:
        return self.definitions

    def get(self, achievement_id: str) -> Optional[AchievementDefinition]:
        return self._index.get(achievement_id)

    def ids(self) -> frozenset[str]:
        return frozenset(self._index)

    def __iter__(self) -> Iterator[AchievementDefinition]:
        return iter(self.definitions)

    def __len__(self) -> int:
        return len(self.definitions)

    def __contains__(self, achievement_id: object) -> bool:
        return achievement_id in self._index


DEFAULT_RULES: tuple[AchievementRule, ...] = (
    *recipes.RULES,
    *quality.RULES,
    *social.RULES,
    *meals.RULES,
    *special.RULES,
)


@lru_cache(maxsize=1)
def default_catalog() -> AchievementCatalog:
    catalog = AchievementCatalog.from_rules(DEFAULT_RULES)
    logger.info(f'Loaded {len(catalog)} achievement definitions')
    return catalog
