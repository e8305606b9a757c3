from __future__ import annotations

import logging
from typing import Optional

from tastebuddy.achievements.engine import AchievementsEngine, EvaluationResult
from tastebuddy.errors import PairEvaluationError

logger = logging.getLogger(__name__)


class PairCoordinator:
    '''
    Evaluates the two users one action affects, such as follower and
    followee. A runs to completion before B starts, and B is attempted even
    if A failed. If either failed, PairEvaluationError is raised after both
    attempts and carries whichever result succeeded.
    '''

    def __init__(self, engine: AchievementsEngine) -> None:
        self.engine = engine

    def evaluate_pair(
        self, user_id_a: str, user_id_b: str
    ) -> tuple[EvaluationResult, EvaluationResult]:
        user_ids = (user_id_a, user_id_b)
        results: list[Optional[EvaluationResult]] = [None, None]
        errors: list[Optional[BaseException]] = [None, None]

        for i, user_id in enumerate(user_ids):
            try:
                results[i] = self.engine.evaluate(user_id)
            except Exception as e:
                logger.warning(
                    f'Achievement evaluation failed for user {user_id}: {e!r}'
                )
                errors[i] = e

        if any(e is not None for e in errors):
            raise PairEvaluationError(
                user_ids, (results[0], results[1]), (errors[0], errors[1])
            )
        return results[0], results[1]  # type: ignore[return-value]
