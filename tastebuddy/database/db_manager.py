import logging
import os
from functools import wraps
from typing import (
    Any,
    Callable,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool, PoolTimeout

from tastebuddy.errors import StoreUnavailableError
from tastebuddy.utils.constants import DEFAULT_POOL_MAX_SIZE, DEFAULT_POOL_MIN_SIZE
from tastebuddy.utils.env import env_int

T = TypeVar('T')
Params = Union[Iterable[Any], Mapping[str, Any], None]

logger = logging.getLogger(__name__)

# Errors that mean the server or connection went away, not that the SQL is wrong
CONNECTION_ERRORS = (psycopg.OperationalError, psycopg.InterfaceError)


def require_connection(func: Callable) -> Callable:
    '''Decorator to ensure DBManager is used within a context manager.'''

    @wraps(func)
    def wrapper(self: 'DBManager', *args, **kwargs) -> Any:
        if not self._connected:
            raise RuntimeError(
                'DBManager is not in a context. Use "with DBManager() as db:"'
            )
        return func(self, *args, **kwargs)

    return wrapper


def _bind(params: Params) -> Any:
    '''Named placeholders take a mapping, positional ones a tuple.'''
    if isinstance(params, Mapping):
        return dict(params)
    return tuple(params or ())


def _database_url() -> str:
    conninfo = os.getenv('DATABASE_URL')
    if not conninfo:
        raise RuntimeError('DATABASE_URL is not set')
    return conninfo


class DBManager:
    '''Postgres DB manager.

    One instance is one transaction: it commits when the ``with`` block exits
    cleanly and rolls back otherwise. Connection failures that survive a
    reconnect-and-retry are raised as StoreUnavailableError.
    '''

    # Shared pool across the process
    _pool: ConnectionPool | None = None

    def __init__(self) -> None:
        self._connected: bool = False
        self._pg_conn: psycopg.Connection | None = None
        self._from_pool: bool = False

    @classmethod
    def init_pool(
        cls,
        db_url: Optional[str] = None,
        min_size: Optional[int] = None,
        max_size: Optional[int] = None,
    ) -> None:
        '''Initialize a global connection pool for reuse across evaluations.'''
        if cls._pool is not None:
            return
        cls._pool = ConnectionPool(
            conninfo=db_url or _database_url(),
            min_size=min_size or env_int('DB_POOL_MIN_SIZE', DEFAULT_POOL_MIN_SIZE),
            max_size=max_size or env_int('DB_POOL_MAX_SIZE', DEFAULT_POOL_MAX_SIZE),
            kwargs={'row_factory': dict_row},
            open=True,
        )
        logger.info('Initialized Postgres connection pool')

    @classmethod
    def close_pool(cls) -> None:
        '''Close the global connection pool if it exists.'''
        if cls._pool is not None:
            try:
                cls._pool.close()
            finally:
                cls._pool = None

    def _acquire(self) -> None:
        try:
            if self.__class__._pool is not None:
                self._pg_conn = self.__class__._pool.getconn()
                self._from_pool = True
            else:
                self._pg_conn = psycopg.connect(_database_url(), row_factory=dict_row)
                self._from_pool = False
        except (PoolTimeout, *CONNECTION_ERRORS) as e:
            raise StoreUnavailableError(f'Could not connect to Postgres: {e}') from e

    def _release(self) -> None:
        if self._pg_conn is None:
            return
        try:
            if self._from_pool and self.__class__._pool is not None:
                # a broken connection is discarded by the pool on put
                self.__class__._pool.putconn(self._pg_conn)
            else:
                self._pg_conn.close()
        finally:
            self._pg_conn = None
            self._from_pool = False

    def __enter__(self) -> 'DBManager':
        self._acquire()
        self._connected = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not self._connected:
            return
        try:
            if exc_type is None:
                try:
                    self._pg_conn.commit()
                except CONNECTION_ERRORS as e:
                    raise StoreUnavailableError(f'Commit failed: {e}') from e
            else:
                try:
                    self._pg_conn.rollback()
                except CONNECTION_ERRORS:
                    logger.warning('Rollback failed on a broken connection')
        finally:
            self._release()
            self._connected = False

    def _reconnect(self) -> None:
        '''Drop the current connection and open a new one.'''
        try:
            self._release()
        except Exception as e:  # best-effort close
            logger.warning(f'Error while closing connection during reconnect: {e}')
        self._acquire()

    def _run_with_retry(self, fn: Callable[[], T]) -> T:
        '''Run fn, reconnect on a connection error and retry once.'''
        try:
            return fn()
        except CONNECTION_ERRORS as e:
            logger.warning(
                f'DB operation failed due to connection issue: {e}. '
                f'Reconnecting and retrying once...'
            )
        self._reconnect()
        try:
            return fn()
        except CONNECTION_ERRORS as e:
            raise StoreUnavailableError(f'Postgres unavailable: {e}') from e

    def _exec_pg(self, query: str, params: Params) -> None:
        assert self._pg_conn is not None
        with self._pg_conn.cursor() as cur:
            cur.execute(query, _bind(params))

    def _select_pg(
        self, query: str, params: Params
    ) -> Tuple[List[dict[str, Any]], List[str]]:
        assert self._pg_conn is not None
        with self._pg_conn.cursor() as cur:
            cur.execute(query, _bind(params))
            rows: List[dict[str, Any]] = cur.fetchall() if cur.description else []
            cols: List[str] = (
                [d.name for d in cur.description] if cur.description else []
            )
            return rows, cols

    @require_connection
    def execute(self, query: str, params: Params = None) -> None:
        '''Execute a statement that does not return rows.'''
        try:
            self._run_with_retry(lambda: self._exec_pg(query, params))
        except psycopg.Error as e:
            logger.error(
                f'Postgres execute() error: {e}\nQuery: {query}\nParams: {params}'
            )
            raise

    @require_connection
    def fetchall(
        self, query: str, params: Params = None
    ) -> List[dict[str, Any]]:
        '''Return all rows as a list of dictionaries.'''
        try:
            rows, _ = self._run_with_retry(lambda: self._select_pg(query, params))
            return rows
        except psycopg.Error as e:
            logger.error(
                f'Postgres fetchall() error: {e}\nQuery: {query}\nParams: {params}'
            )
            raise

    @require_connection
    def fetchone(
        self, query: str, params: Params = None
    ) -> Optional[dict[str, Any]]:
        '''Return a single row as a dictionary, or None if no result.'''
        rows = self.fetchall(query, params)
        return rows[0] if rows else None
