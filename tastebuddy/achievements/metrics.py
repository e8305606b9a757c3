from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping

from tastebuddy.errors import NotFoundError
from tastebuddy.stores.interface import AchievementStore
from tastebuddy.utils.tracing import trace_span

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserMetrics:
    '''Current activity counts for one user. Derived, never stored.'''

    user_id: str
    recipes_authored: int = 0
    followers_count: int = 0
    following_count: int = 0
    mutual_follows_count: int = 0
    ratings_received: int = 0
    ratings_given: int = 0
    comments_posted: int = 0
    comments_received: int = 0
    max_comments_on_recipe: int = 0
    meals_logged: int = 0
    photos_uploaded: int = 0
    favorites_received: int = 0
    compliments_received: int = 0
    unique_ingredients: int = 0
    five_star_recipes: int = 0
    quality_recipes: int = 0
    is_site_owner: bool = False

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls) if f.name != 'user_id')

    @classmethod
    def from_row(cls, user_id: str, row: Mapping[str, Any]) -> UserMetrics:
        '''Build metrics from a store row. Missing or NULL values become zero.'''
        values: dict[str, Any] = {}
        for f in fields(cls):
            if f.name == 'user_id':
                continue
            raw = row.get(f.name)
            if isinstance(f.default, bool):
                values[f.name] = bool(raw)
            else:
                values[f.name] = max(0, int(raw or 0))
        return cls(user_id=user_id, **values)


class MetricCollector:
    def __init__(self, store: AchievementStore) -> None:
        self.store = store

    def collect(self, user_id: str) -> UserMetrics:
        with trace_span('achievements.collect', {'user_id': user_id}):
            row = self.store.get_user_metrics(user_id)
        if row is None:
            raise NotFoundError(user_id)
        return UserMetrics.from_row(user_id, row)
