from __future__ import annotations

import logging
from typing import Optional

from tastebuddy.achievements.coordinator import PairCoordinator
from tastebuddy.achievements.engine import AchievementsEngine, EvaluationResult
from tastebuddy.achievements.events import (
    AchievementEvent,
    CommentPostedEvent,
    FollowCreatedEvent,
    FollowRemovedEvent,
    MealLoggedEvent,
    PhotoUploadedEvent,
    RatingSubmittedEvent,
    RecipeFavoritedEvent,
    RecipePublishedEvent,
)
from tastebuddy.achievements.retry import RetryQueue
from tastebuddy.errors import (
    NotFoundError,
    PairEvaluationError,
    StoreQueryError,
    StoreUnavailableError,
)
from tastebuddy.utils.tracing import trace_span

logger = logging.getLogger(__name__)


class AchievementHooks:
    '''
    Entry points for the modules whose actions can unlock achievements.

    Call them after the action has committed. They never raise: the action
    has already succeeded and achievement evaluation is a side effect of it.
    Users whose evaluation failed because the store was unavailable are
    queued; the queue is only worked off by ``drain_retries``, never inside
    a dispatch, so a triggering request never waits on someone else's retry.
    '''

    def __init__(
        self,
        engine: AchievementsEngine,
        coordinator: Optional[PairCoordinator] = None,
        retries: Optional[RetryQueue] = None,
    ) -> None:
        self.engine = engine
        self.coordinator = coordinator or PairCoordinator(engine)
        self.retries = retries if retries is not None else RetryQueue()

    def dispatch(self, event: AchievementEvent) -> list[EvaluationResult]:
        # preserve order, dedupe (rating your own recipe is one actor)
        actors = tuple(dict.fromkeys(event.actors))

        with trace_span(
            'achievements.dispatch', {'event_type': event.type, 'actors': len(actors)}
        ):
            try:
                if len(actors) == 1:
                    results = [self.engine.evaluate(actors[0])]
                else:
                    results = list(self.coordinator.evaluate_pair(*actors))
            except PairEvaluationError as e:
                for user_id, error in e.failures:
                    self._handle_failure(event, user_id, error)
                results = [r for r in e.results if r is not None]
            except Exception as e:
                self._handle_failure(event, actors[0], e)
                results = []

        return results

    def drain_retries(self, limit: Optional[int] = None) -> int:
        '''Re-evaluate queued users, oldest first. Returns how many succeeded.'''
        return self.retries.drain(self.engine.evaluate, limit=limit)

    def _handle_failure(
        self, event: AchievementEvent, user_id: str, error: BaseException
    ) -> None:
        if isinstance(error, StoreUnavailableError):
            logger.warning(
                f'Store unavailable evaluating {user_id} after {event.type}, '
                f'queued for retry: {error}'
            )
            self.retries.push(user_id)
        elif isinstance(error, StoreQueryError):
            logger.error(
                f'Store rejected the achievement query for {user_id} after '
                f'{event.type}, not retrying: {error}'
            )
        elif isinstance(error, NotFoundError):
            logger.warning(f'Skipping achievements after {event.type}: {error}')
        else:
            logger.error(
                f'Achievement evaluation failed for {user_id} after {event.type}',
                exc_info=error,
            )

    def recipe_published(self, author_id: str) -> list[EvaluationResult]:
        return self.dispatch(RecipePublishedEvent(author_id))

    def recipe_favorited(self, recipe_author_id: str) -> list[EvaluationResult]:
        return self.dispatch(RecipeFavoritedEvent(recipe_author_id))

    def rating_submitted(
        self, rater_id: str, recipe_author_id: str
    ) -> list[EvaluationResult]:
        return self.dispatch(RatingSubmittedEvent(rater_id, recipe_author_id))

    def comment_posted(
        self, commenter_id: str, recipe_author_id: str
    ) -> list[EvaluationResult]:
        return self.dispatch(CommentPostedEvent(commenter_id, recipe_author_id))

    def meal_logged(self, author_id: str) -> list[EvaluationResult]:
        return self.dispatch(MealLoggedEvent(author_id))

    def photo_uploaded(self, owner_id: str) -> list[EvaluationResult]:
        return self.dispatch(PhotoUploadedEvent(owner_id))

    def follow_created(
        self, follower_id: str, followee_id: str
    ) -> list[EvaluationResult]:
        return self.dispatch(FollowCreatedEvent(follower_id, followee_id))

    def follow_removed(
        self, follower_id: str, followee_id: str
    ) -> list[EvaluationResult]:
        return self.dispatch(FollowRemovedEvent(follower_id, followee_id))
