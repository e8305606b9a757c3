from __future__ import annotations

import logging
from typing import Protocol

from tastebuddy.achievements.interface import AchievementDefinition
from tastebuddy.models.notification import Notification
from tastebuddy.utils.env import env_bool

logger = logging.getLogger(__name__)


class NotificationEmitter(Protocol):
    def notify(self, user_id: str, achievement: AchievementDefinition) -> None:
        ...


class DatabaseNotifier:
    '''Creates an in-app notification row for every new grant.'''

    def notify(self, user_id: str, achievement: AchievementDefinition) -> None:
        row = Notification.achievement_earned(
            user_id=user_id,
            achievement_id=achievement.id,
            name=achievement.name,
            description=achievement.description,
        )
        logger.debug(f'Created notification {row.get("id")} for user {user_id}')


class NullNotifier:
    def notify(self, user_id: str, achievement: AchievementDefinition) -> None:
        logger.debug(f'Notifications disabled, not announcing {achievement.id}')


def notifier_from_env() -> NotificationEmitter:
    if env_bool('NOTIFICATIONS_ENABLED', True):
        return DatabaseNotifier()
    return NullNotifier()
