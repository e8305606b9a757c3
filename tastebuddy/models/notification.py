from typing import Any

from tastebuddy.models.base import BaseModel
from tastebuddy.utils.constants import (
    ACHIEVEMENT_NOTIFICATION_TITLE,
    ACHIEVEMENT_NOTIFICATION_TYPE,
)


class Notification(BaseModel):
    table = 'notifications'

    @classmethod
    def achievement_earned(
        cls, user_id: str, achievement_id: str, name: str, description: str
    ) -> dict[str, Any]:
        return cls.create(
            {
                'user_id': user_id,
                'type': ACHIEVEMENT_NOTIFICATION_TYPE,
                'title': ACHIEVEMENT_NOTIFICATION_TITLE,
                'message': f'You earned "{name}": {description}',
                'related_achievement_id': achievement_id,
            }
        )
