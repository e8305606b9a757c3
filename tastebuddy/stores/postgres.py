from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Optional

import psycopg
from psycopg import errors as pg_errors
from psycopg_pool import PoolTimeout

from tastebuddy.database.db_manager import CONNECTION_ERRORS
from tastebuddy.errors import GrantConflictError, StoreQueryError, StoreUnavailableError
from tastebuddy.models.user import User
from tastebuddy.models.user_achievement import UserAchievement


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    '''Keep driver exceptions out of the engine.'''
    try:
        yield
    except pg_errors.UniqueViolation as e:
        raise GrantConflictError(f'{operation}: {e}') from e
    except (PoolTimeout, *CONNECTION_ERRORS) as e:
        raise StoreUnavailableError(f'{operation} failed: {e}') from e
    except psycopg.Error as e:
        raise StoreQueryError(f'{operation} failed: {e}') from e


class PostgresAchievementStore:
    def __init__(self, owner_email: Optional[str] = None) -> None:
        self.owner_email = owner_email or os.getenv('SITE_OWNER_EMAIL') or None

    def get_user_metrics(self, user_id: str) -> Optional[dict[str, Any]]:
        with store_errors('Reading activity metrics'):
            return User.activity_metrics(user_id, self.owner_email)

    def get_existing_grants(self, user_id: str) -> list[dict[str, Any]]:
        with store_errors('Reading achievement grants'):
            return UserAchievement.for_user(user_id)

    def insert_grants(
        self, user_id: str, achievement_ids: Iterable[str]
    ) -> list[dict[str, Any]]:
        with store_errors('Inserting achievement grants'):
            return UserAchievement.insert_missing(user_id, achievement_ids)
