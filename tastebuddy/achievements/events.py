from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

EventType = Literal[
    'recipe_published',
    'recipe_favorited',
    'rating_submitted',
    'comment_posted',
    'meal_logged',
    'photo_uploaded',
    'follow_created',
    'follow_removed',
]


@dataclass(frozen=True)
class RecipePublishedEvent:
    author_id: str

    @property
    def type(self) -> EventType:
        return 'recipe_published'

    @property
    def actors(self) -> tuple[str, ...]:
        return (self.author_id,)


@dataclass(frozen=True)
class RecipeFavoritedEvent:
    recipe_author_id: str

    @property
    def type(self) -> EventType:
        return 'recipe_favorited'

    @property
    def actors(self) -> tuple[str, ...]:
        return (self.recipe_author_id,)


@dataclass(frozen=True)
class RatingSubmittedEvent:
    rater_id: str
    recipe_author_id: str

    @property
    def type(self) -> EventType:
        return 'rating_submitted'

    @property
    def actors(self) -> tuple[str, ...]:
        return (self.rater_id, self.recipe_author_id)


@dataclass(frozen=True)
class CommentPostedEvent:
    commenter_id: str
    recipe_author_id: str

    @property
    def type(self) -> EventType:
        return 'comment_posted'

    @property
    def actors(self) -> tuple[str, ...]:
        return (self.commenter_id, self.recipe_author_id)


@dataclass(frozen=True)
class MealLoggedEvent:
    author_id: str

    @property
    def type(self) -> EventType:
        return 'meal_logged'

    @property
    def actors(self) -> tuple[str, ...]:
        return (self.author_id,)


@dataclass(frozen=True)
class PhotoUploadedEvent:
    owner_id: str

    @property
    def type(self) -> EventType:
        return 'photo_uploaded'

    @property
    def actors(self) -> tuple[str, ...]:
        return (self.owner_id,)


@dataclass(frozen=True)
class FollowCreatedEvent:
    follower_id: str
    followee_id: str

    @property
    def type(self) -> EventType:
        return 'follow_created'

    @property
    def actors(self) -> tuple[str, ...]:
        return (self.follower_id, self.followee_id)


@dataclass(frozen=True)
class FollowRemovedEvent:
    follower_id: str
    followee_id: str

    @property
    def type(self) -> EventType:
        return 'follow_removed'

    @property
    def actors(self) -> tuple[str, ...]:
        return (self.follower_id, self.followee_id)


AchievementEvent = Union[
    RecipePublishedEvent,
    RecipeFavoritedEvent,
    RatingSubmittedEvent,
    CommentPostedEvent,
    MealLoggedEvent,
    PhotoUploadedEvent,
    FollowCreatedEvent,
    FollowRemovedEvent,
]
