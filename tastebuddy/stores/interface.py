from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol, runtime_checkable


@runtime_checkable
class AchievementStore(Protocol):
    '''Everything the achievement engine needs from persistence.'''

    def get_user_metrics(self, user_id: str) -> Optional[dict[str, Any]]:
        '''
        Return raw activity counts for the user in one read, keyed by
        UserMetrics field name, or None when the user does not exist.
        '''
        ...

    def get_existing_grants(self, user_id: str) -> list[dict[str, Any]]:
        '''Return the user's grant rows (user_id, achievement_id, earned_at).'''
        ...

    def insert_grants(
        self, user_id: str, achievement_ids: Iterable[str]
    ) -> list[dict[str, Any]]:
        '''
        Insert grants atomically and return only the rows actually inserted.
        Ids already held are left out of the result, not reported as errors.
        Stores that cannot do this raise GrantConflictError and insert nothing.
        '''
        ...
