from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional

from tastebuddy.errors import GrantConflictError


class InMemoryAchievementStore:
    '''
    Thread-safe store with the same contract as the Postgres store.

    A single lock plays the part of the database's unique constraint. With
    ``conditional_insert=False`` it behaves like a store without
    ON CONFLICT support: a batch containing any held id is rejected whole
    with GrantConflictError.
    '''

    def __init__(self, conditional_insert: bool = True) -> None:
        self.conditional_insert = conditional_insert
        self._lock = threading.Lock()
        self._metrics: dict[str, dict[str, Any]] = {}
        self._grants: dict[str, dict[str, datetime]] = {}
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)
        self.insert_calls = 0
        self.rows: list[dict[str, Any]] = []

    def add_user(self, user_id: str, **metrics: Any) -> None:
        with self._lock:
            self._metrics[user_id] = dict(metrics)

    def set_metric(self, user_id: str, name: str, value: Any) -> None:
        with self._lock:
            self._metrics[user_id][name] = value

    def bump(self, user_id: str, name: str, delta: int = 1) -> None:
        with self._lock:
            counts = self._metrics[user_id]
            counts[name] = int(counts.get(name) or 0) + delta

    def get_user_metrics(self, user_id: str) -> Optional[dict[str, Any]]:
        with self._lock:
            counts = self._metrics.get(user_id)
            return dict(counts) if counts is not None else None

    def get_existing_grants(self, user_id: str) -> list[dict[str, Any]]:
        with self._lock:
            held = self._grants.get(user_id, {})
            rows = [
                {'user_id': user_id, 'achievement_id': aid, 'earned_at': at}
                for aid, at in held.items()
            ]
        return sorted(rows, key=lambda r: (r['earned_at'], r['achievement_id']))

    def insert_grants(
        self, user_id: str, achievement_ids: Iterable[str]
    ) -> list[dict[str, Any]]:
        ids = sorted(set(achievement_ids))
        with self._lock:
            self.insert_calls += 1
            held = self._grants.setdefault(user_id, {})
            conflicts = [aid for aid in ids if aid in held]
            if conflicts and not self.conditional_insert:
                raise GrantConflictError(
                    f'duplicate key (user_id, achievement_id)=({user_id}, {conflicts[0]})'
                )
            inserted = []
            for aid in ids:
                if aid in held:
                    continue
                self._clock += timedelta(seconds=1)
                held[aid] = self._clock
                inserted.append(
                    {'user_id': user_id, 'achievement_id': aid, 'earned_at': self._clock}
                )
            self.rows.extend(inserted)
            return inserted

    def grant_count(self, user_id: str, achievement_id: str) -> int:
        '''Number of rows ever inserted for the pair.'''
        with self._lock:
            return sum(
                1
                for r in self.rows
                if r['user_id'] == user_id and r['achievement_id'] == achievement_id
            )
