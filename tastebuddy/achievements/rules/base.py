from __future__ import annotations

from typing import Any

from tastebuddy.achievements.metrics import UserMetrics


class ThresholdRule:
    '''Earned once a single metric reaches ``threshold``.'''

    code: str = ''
    name: str = ''
    description: str = ''
    category: str = ''
    icon: str = ''
    color: str = ''

    metric: str = ''  # a UserMetrics field
    threshold: int = 1
    # strictly above the threshold instead of at-or-above
    exclusive: bool = False

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.metric and cls.metric not in UserMetrics.field_names():
            raise TypeError(f'{cls.__name__}: unknown metric {cls.metric!r}')

    def qualifies(self, metrics: UserMetrics) -> bool:
        value = getattr(metrics, self.metric)
        if self.exclusive:
            return value > self.threshold
        return value >= self.threshold

    def metadata(self) -> dict[str, Any]:
        return {
            'icon': self.icon,
            'color': self.color,
            'metric': self.metric,
            'threshold': self.threshold,
            'exclusive': self.exclusive,
        }

    def __repr__(self) -> str:
        op = '>' if self.exclusive else '>='
        return f'<{type(self).__name__} {self.code}: {self.metric} {op} {self.threshold}>'


class FlagRule:
    '''Earned while a boolean metric is set.'''

    code: str = ''
    name: str = ''
    description: str = ''
    category: str = ''
    icon: str = ''
    color: str = ''

    flag: str = ''

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.flag and cls.flag not in UserMetrics.field_names():
            raise TypeError(f'{cls.__name__}: unknown metric {cls.flag!r}')

    def qualifies(self, metrics: UserMetrics) -> bool:
        return bool(getattr(metrics, self.flag))

    def metadata(self) -> dict[str, Any]:
        return {'icon': self.icon, 'color': self.color, 'metric': self.flag}
