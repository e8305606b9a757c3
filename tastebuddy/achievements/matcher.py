from __future__ import annotations

import logging

from tastebuddy.achievements.catalog import AchievementCatalog
from tastebuddy.achievements.metrics import UserMetrics

logger = logging.getLogger(__name__)


class AchievementMatcher:
    '''Maps metrics to the ids of every achievement they currently satisfy.'''

    def __init__(self, catalog: AchievementCatalog) -> None:
        self.catalog = catalog

    def qualifying(self, metrics: UserMetrics) -> frozenset[str]:
        earned: set[str] = set()
        for definition in self.catalog:
            try:
                if definition.criteria(metrics):
                    earned.add(definition.id)
            except Exception:
                # One broken rule must not block the rest of the catalog
                logger.exception(
                    f'Criteria for {definition.id} raised for user {metrics.user_id}'
                )
        return frozenset(earned)
