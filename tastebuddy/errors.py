from __future__ import annotations

from typing import Any, Optional


class AchievementError(Exception):
    '''Base class for every error raised by the achievement engine.'''


class NotFoundError(AchievementError):
    def __init__(self, user_id: Any) -> None:
        super().__init__(f'User {user_id!r} does not exist')
        self.user_id = user_id


class StoreUnavailableError(AchievementError):
    '''The backing store could not be reached or timed out. Safe to retry.'''


class StoreQueryError(AchievementError):
    '''
    The store rejected a statement: a missing column or table, bad data, a
    failed constraint other than the grant uniqueness. Retrying the same
    evaluation fails the same way.
    '''


class PairEvaluationError(AchievementError):
    '''
    One or both actors of a paired evaluation failed.

    Both actors are always attempted. ``results`` and ``errors`` are indexed
    like ``user_ids``: a failed actor has a None result and its exception in
    ``errors``, a successful one the reverse.
    '''

    def __init__(
        self,
        user_ids: tuple[str, str],
        results: tuple[Any, Any],
        errors: tuple[Optional[BaseException], Optional[BaseException]],
    ) -> None:
        failed = ', '.join(
            repr(uid) for uid, error in zip(user_ids, errors) if error is not None
        )
        super().__init__(f'Achievement evaluation failed for {failed}')
        self.user_ids = user_ids
        self.results = results
        self.errors = errors

    @property
    def failures(self) -> list[tuple[str, BaseException]]:
        return [
            (uid, error) for uid, error in zip(self.user_ids, self.errors)
            if error is not None
        ]

    @property
    def retryable(self) -> bool:
        return all(isinstance(e, StoreUnavailableError) for _, e in self.failures)


class GrantConflictError(AchievementError):
    '''
    A grant insert hit the (user_id, achievement_id) unique constraint and the
    whole statement was rejected. Raised only by stores that cannot skip
    conflicting rows themselves; the grant ledger resolves it.
    '''
