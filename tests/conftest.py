from dataclasses import dataclass, field
from typing import Any

import pytest


@dataclass
class FakeDB:
    fetchone_results: list[Any] = field(default_factory=list)
    fetchall_results: list[Any] = field(default_factory=list)
    executed: list[tuple[str, Any]] = field(default_factory=list)
    last_query: str | None = None
    last_params: Any = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def fetchone(self, query: str, params=None):
        self.last_query = query
        self.last_params = params
        if self.fetchone_results:
            return self.fetchone_results.pop(0)

    def fetchall(self, query: str, params=None):
        self.last_query = query
        self.last_params = params
        if self.fetchall_results:
            return self.fetchall_results.pop(0)
        return []

    def execute(self, query: str, params=None) -> None:
        self.executed.append((query, params))


class FakeDBManager:
    def __init__(self, db: FakeDB):
        self._db = db

    def __call__(self):
        return self._db


class RecordingNotifier:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[tuple[str, str]] = []

    def notify(self, user_id, achievement) -> None:
        if self.fail:
            raise RuntimeError('notification service down')
        self.sent.append((user_id, achievement.id))


@pytest.fixture()
def fake_db() -> FakeDB:
    return FakeDB()


@pytest.fixture()
def store():
    from tastebuddy.stores.memory import InMemoryAchievementStore

    return InMemoryAchievementStore()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def engine(store, notifier):
    from tastebuddy.achievements.engine import build_engine

    return build_engine(store, notifier=notifier)


@pytest.fixture()
def failing_notifier() -> RecordingNotifier:
    return RecordingNotifier(fail=True)


@pytest.fixture()
def patch_db(monkeypatch, fake_db):
    '''Route a module's DBManager to the shared FakeDB.'''

    def _patch(target_module) -> FakeDB:
        monkeypatch.setattr(target_module, 'DBManager', FakeDBManager(fake_db))
        return fake_db

    return _patch
