from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Callable, Optional

from tastebuddy.errors import StoreUnavailableError
from tastebuddy.utils.constants import DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_QUEUE_SIZE
from tastebuddy.utils.env import env_int

logger = logging.getLogger(__name__)


class RetryQueue:
    '''
    Users whose evaluation was dropped because the store was unavailable.

    Nothing runs in the background: the queue is drained by whoever calls
    ``drain``. Each user appears at most once; a user is given up after
    ``max_attempts`` failed evaluations, counting the original one.
    '''

    def __init__(
        self, max_attempts: Optional[int] = None, max_size: Optional[int] = None
    ) -> None:
        if max_attempts is None:
            max_attempts = env_int('ACHIEVEMENT_RETRY_ATTEMPTS', DEFAULT_RETRY_ATTEMPTS)
        if max_size is None:
            max_size = env_int('ACHIEVEMENT_RETRY_QUEUE_SIZE', DEFAULT_RETRY_QUEUE_SIZE)
        self.max_attempts = max_attempts
        self.max_size = max_size
        self._lock = threading.Lock()
        self._pending: OrderedDict[str, int] = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._pending

    def push(self, user_id: str, attempts: int = 1) -> bool:
        '''Queue a user after a failed evaluation. False if it was dropped.'''
        with self._lock:
            if user_id in self._pending:
                self._pending[user_id] = max(self._pending[user_id], attempts)
                return True
            if attempts >= self.max_attempts:
                logger.error(
                    f'Giving up on achievement evaluation for user {user_id} '
                    f'after {attempts} attempts'
                )
                return False
            if len(self._pending) >= self.max_size:
                logger.error(f'Retry queue full, dropping user {user_id}')
                return False
            self._pending[user_id] = attempts
            return True

    def drain(self, evaluate: Callable[[str], object], limit: Optional[int] = None) -> int:
        '''Re-run queued evaluations in FIFO order. Returns how many succeeded.'''
        with self._lock:
            batch = list(self._pending.items())[:limit]
            for user_id, _ in batch:
                del self._pending[user_id]

        succeeded = 0
        for user_id, attempts in batch:
            try:
                evaluate(user_id)
            except StoreUnavailableError as e:
                logger.warning(f'Retry {attempts + 1} for user {user_id} failed: {e}')
                self.push(user_id, attempts + 1)
            except Exception:
                logger.exception(f'Retry for user {user_id} failed, not requeued')
            else:
                succeeded += 1
        return succeeded
