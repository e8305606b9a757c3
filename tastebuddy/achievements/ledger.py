from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping

from tastebuddy.errors import GrantConflictError, StoreUnavailableError
from tastebuddy.stores.interface import AchievementStore
from tastebuddy.utils.tracing import trace_span

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AchievementGrant:
    user_id: str
    achievement_id: str
    earned_at: datetime

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> AchievementGrant:
        return cls(
            user_id=str(row['user_id']),
            achievement_id=str(row['achievement_id']),
            earned_at=row['earned_at'],
        )


class GrantLedger:
    '''
    Append-only record of which achievements each user holds.

    ``grant`` is an insert-if-absent: an id the user already holds, whether
    from an earlier evaluation or a concurrent one that got there first, is
    left out of the returned rows rather than reported as an error.
    '''

    # Re-diff attempts when a store rejects a whole batch on conflict
    max_conflict_retries: int = 3

    def __init__(self, store: AchievementStore) -> None:
        self.store = store

    def granted(self, user_id: str) -> list[AchievementGrant]:
        rows = self.store.get_existing_grants(user_id)
        return [AchievementGrant.from_row(r) for r in rows]

    def existing_grants(self, user_id: str) -> frozenset[str]:
        return frozenset(g.achievement_id for g in self.granted(user_id))

    def grant(
        self, user_id: str, achievement_ids: Iterable[str]
    ) -> list[AchievementGrant]:
        # Sorted so overlapping concurrent inserts take row locks in one order
        pending = sorted(set(achievement_ids))
        if not pending:
            return []

        with trace_span('achievements.grant', {'user_id': user_id}) as span:
            for _ in range(self.max_conflict_retries):
                try:
                    rows = self.store.insert_grants(user_id, pending)
                except GrantConflictError:
                    held = self.existing_grants(user_id)
                    logger.info(
                        f'Grant conflict for user {user_id}, '
                        f'{len(held & set(pending))} already granted'
                    )
                    pending = [aid for aid in pending if aid not in held]
                    if not pending:
                        span.metadata['inserted'] = 0
                        return []
                    continue

                grants = [AchievementGrant.from_row(r) for r in rows]
                skipped = set(pending) - {g.achievement_id for g in grants}
                if skipped:
                    logger.info(
                        f'Already granted to user {user_id}: {", ".join(sorted(skipped))}'
                    )
                span.metadata['inserted'] = len(grants)
                return grants

        raise StoreUnavailableError(
            f'Could not insert grants for user {user_id}: conflicts kept recurring'
        )
