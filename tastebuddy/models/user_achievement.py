from typing import Any, Iterable, cast

from tastebuddy.database.db_manager import DBManager
from tastebuddy.models.base import BaseModel


class UserAchievement(BaseModel):
    table = 'user_achievements'

    @classmethod
    def for_user(cls, user_id: str) -> list[dict[str, Any]]:
        return cls.get_many(
            'user_id = %s',
            (user_id,),
            order_by='earned_at ASC, achievement_id ASC',
            columns='user_id, achievement_id, earned_at',
        )

    @classmethod
    def insert_missing(
        cls, user_id: str, achievement_ids: Iterable[str]
    ) -> list[dict[str, Any]]:
        '''
        Insert one row per id in a single statement and return only the rows
        actually inserted. Ids the user already holds, including ones a
        concurrent transaction committed a moment ago, are skipped by the
        unique constraint instead of failing the statement.
        '''
        ids = sorted(set(achievement_ids))
        if not ids:
            return []
        with DBManager() as db:
            rows = db.fetchall(
                '''
                INSERT INTO user_achievements (user_id, achievement_id)
                SELECT %s, ids.achievement_id
                FROM unnest(%s::text[]) AS ids(achievement_id)
                ON CONFLICT (user_id, achievement_id) DO NOTHING
                RETURNING user_id, achievement_id, earned_at
                ''',
                (user_id, ids),
            )
        return cast(list[dict[str, Any]], rows)
