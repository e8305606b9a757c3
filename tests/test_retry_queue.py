from tastebuddy.achievements.retry import RetryQueue
from tastebuddy.errors import StoreQueryError, StoreUnavailableError


def test_push_dedupes_users():
    queue = RetryQueue(max_attempts=3, max_size=10)

    assert queue.push('u1')
    assert queue.push('u1')
    assert len(queue) == 1


def test_push_drops_when_full():
    queue = RetryQueue(max_attempts=3, max_size=1)

    assert queue.push('u1')
    assert not queue.push('u2')
    assert 'u2' not in queue


def test_drain_evaluates_in_fifo_order():
    queue = RetryQueue(max_attempts=3, max_size=10)
    for uid in ('u1', 'u2', 'u3'):
        queue.push(uid)
    seen = []

    assert queue.drain(seen.append, limit=2) == 2
    assert seen == ['u1', 'u2']
    assert list(queue._pending) == ['u3']


def test_drain_gives_up_after_max_attempts():
    queue = RetryQueue(max_attempts=3, max_size=10)
    queue.push('u1')
    calls = []

    def _down(user_id):
        calls.append(user_id)
        raise StoreUnavailableError('still down')

    queue.drain(_down)
    assert 'u1' in queue
    queue.drain(_down)
    assert 'u1' not in queue
    assert calls == ['u1', 'u1']


def test_drain_drops_non_retryable_errors():
    queue = RetryQueue(max_attempts=3, max_size=10)
    queue.push('u1')

    def _bug(user_id):
        raise ValueError('bad data')

    assert queue.drain(_bug) == 0
    assert len(queue) == 0


def test_settings_come_from_env(monkeypatch):
    monkeypatch.setenv('ACHIEVEMENT_RETRY_ATTEMPTS', '5')
    monkeypatch.setenv('ACHIEVEMENT_RETRY_QUEUE_SIZE', '7')

    queue = RetryQueue()

    assert queue.max_attempts == 5
    assert queue.max_size == 7


def test_explicit_zero_disables_retries(monkeypatch):
    monkeypatch.setenv('ACHIEVEMENT_RETRY_ATTEMPTS', '5')
    monkeypatch.setenv('ACHIEVEMENT_RETRY_QUEUE_SIZE', '7')

    no_attempts = RetryQueue(max_attempts=0)
    no_room = RetryQueue(max_size=0)

    assert no_attempts.max_attempts == 0
    assert not no_attempts.push('u1')
    assert no_room.max_size == 0
    assert not no_room.push('u1')


def test_drain_drops_query_errors():
    queue = RetryQueue(max_attempts=3, max_size=10)
    queue.push('u1')

    def _broken(user_id):
        raise StoreQueryError('relation "meals" does not exist')

    assert queue.drain(_broken) == 0
    assert 'u1' not in queue
