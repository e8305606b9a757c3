import psycopg
import pytest

import tastebuddy.database.db_manager as db_mod
from tastebuddy.database.db_manager import DBManager
from tastebuddy.errors import StoreUnavailableError


class _Cursor:
    def __init__(self, conn):
        self.conn = conn
        self.description = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, query, params=None):
        self.conn.calls.append((query, params))
        if self.conn.fail_times:
            self.conn.fail_times -= 1
            raise psycopg.OperationalError('server closed the connection')
        self.description = [type('Col', (), {'name': 'n'})()]

    def fetchall(self):
        return [{'n': 1}]


class _Conn:
    def __init__(self, fail_times=0):
        self.fail_times = fail_times
        self.calls = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self):
        return _Cursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


@pytest.fixture()
def no_pool(monkeypatch):
    monkeypatch.setattr(DBManager, '_pool', None)
    monkeypatch.setenv('DATABASE_URL', 'postgresql://localhost/tastebuddy_test')


def _connect_with(monkeypatch, conns):
    def _connect(conninfo, row_factory=None):
        return conns.pop(0)

    monkeypatch.setattr(db_mod.psycopg, 'connect', _connect)


def test_requires_context():
    with pytest.raises(RuntimeError):
        DBManager().fetchall('SELECT 1')


def test_connect_failure_is_store_unavailable(monkeypatch, no_pool):
    def _refuse(conninfo, row_factory=None):
        raise psycopg.OperationalError('connection refused')

    monkeypatch.setattr(db_mod.psycopg, 'connect', _refuse)

    with pytest.raises(StoreUnavailableError):
        with DBManager():
            pass


def test_missing_database_url(monkeypatch):
    monkeypatch.setattr(DBManager, '_pool', None)
    monkeypatch.delenv('DATABASE_URL', raising=False)

    with pytest.raises(RuntimeError):
        with DBManager():
            pass


def test_commits_on_clean_exit(monkeypatch, no_pool):
    conn = _Conn()
    _connect_with(monkeypatch, [conn])

    with DBManager() as db:
        assert db.fetchone('SELECT 1 AS n') == {'n': 1}

    assert conn.committed
    assert conn.closed


def test_rolls_back_on_error(monkeypatch, no_pool):
    conn = _Conn()
    _connect_with(monkeypatch, [conn])

    with pytest.raises(ValueError):
        with DBManager():
            raise ValueError('boom')

    assert conn.rolled_back
    assert not conn.committed


def test_reconnects_once_after_connection_error(monkeypatch, no_pool):
    broken, fresh = _Conn(fail_times=1), _Conn()
    _connect_with(monkeypatch, [broken, fresh])

    with DBManager() as db:
        rows = db.fetchall('SELECT 1 AS n')

    assert rows == [{'n': 1}]
    assert broken.closed
    assert fresh.committed


def test_second_connection_error_is_store_unavailable(monkeypatch, no_pool):
    _connect_with(monkeypatch, [_Conn(fail_times=1), _Conn(fail_times=1)])

    with pytest.raises(StoreUnavailableError):
        with DBManager() as db:
            db.execute('UPDATE users SET name = name')


def test_named_params_are_bound_as_mapping(monkeypatch, no_pool):
    conn = _Conn()
    _connect_with(monkeypatch, [conn])

    with DBManager() as db:
        db.fetchall('SELECT %(user_id)s AS n', {'user_id': 'u1'})
        db.execute('SELECT %s', ['u1'])

    assert conn.calls[0][1] == {'user_id': 'u1'}
    assert conn.calls[1][1] == ('u1',)
