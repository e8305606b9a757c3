from psycopg import errors as pg_errors

from tastebuddy.achievements.engine import build_engine
from tastebuddy.achievements.events import FollowCreatedEvent, RatingSubmittedEvent
from tastebuddy.achievements.hooks import AchievementHooks
from tastebuddy.achievements.retry import RetryQueue
from tastebuddy.errors import StoreQueryError, StoreUnavailableError
from tastebuddy.stores.postgres import PostgresAchievementStore


def _hooks(engine):
    return AchievementHooks(engine, retries=RetryQueue(max_attempts=3, max_size=10))


def test_recipe_published_evaluates_author(store, engine):
    store.add_user('u1', recipes_authored=1)

    results = _hooks(engine).recipe_published('u1')

    assert [r.new_ids for r in results] == [['first_recipe']]


def test_follow_created_evaluates_both_actors_in_order(store, engine):
    store.add_user('a', following_count=10, mutual_follows_count=1)
    store.add_user('b', followers_count=10, mutual_follows_count=1)

    results = _hooks(engine).follow_created('a', 'b')

    assert [r.user_id for r in results] == ['a', 'b']
    assert set(results[0].new_ids) == {'tastemaker', 'bff'}
    assert set(results[1].new_ids) == {'social_butterfly', 'bff'}


def test_follow_removed_grants_nothing_new_and_revokes_nothing(store, engine):
    store.add_user('a', following_count=10)
    store.add_user('b', followers_count=10)
    hooks = _hooks(engine)
    hooks.follow_created('a', 'b')
    store.set_metric('a', 'following_count', 9)
    store.set_metric('b', 'followers_count', 9)

    results = hooks.follow_removed('a', 'b')

    assert [r.new_achievements for r in results] == [[], []]
    assert 'social_butterfly' in results[1].all_ids


def test_rating_own_recipe_is_one_evaluation(store, engine, monkeypatch):
    store.add_user('u1', ratings_given=10)
    calls = []
    evaluate = engine.evaluate

    def _counting(user_id):
        calls.append(user_id)
        return evaluate(user_id)

    monkeypatch.setattr(engine, 'evaluate', _counting)

    results = _hooks(engine).dispatch(RatingSubmittedEvent('u1', 'u1'))

    assert calls == ['u1']
    assert results[0].new_ids == ['critic']


def test_hooks_never_raise_and_queue_unavailable_users(store, engine, monkeypatch):
    store.add_user('a')
    store.add_user('b', followers_count=10)
    read = store.get_user_metrics

    def _flaky(user_id):
        if user_id == 'a':
            raise StoreUnavailableError('timeout')
        return read(user_id)

    monkeypatch.setattr(store, 'get_user_metrics', _flaky)
    hooks = _hooks(engine)

    results = hooks.dispatch(FollowCreatedEvent('a', 'b'))

    assert [r.user_id for r in results] == ['b']
    assert 'a' in hooks.retries
    assert 'b' not in hooks.retries


def test_unknown_user_is_not_queued(store, engine):
    hooks = _hooks(engine)

    assert hooks.meal_logged('ghost') == []
    assert len(hooks.retries) == 0


def test_unexpected_errors_are_absorbed(store, engine, monkeypatch):
    store.add_user('u1')

    def _bug(user_id):
        raise KeyError('oops')

    monkeypatch.setattr(engine, 'evaluate', _bug)
    hooks = _hooks(engine)

    assert hooks.photo_uploaded('u1') == []
    assert len(hooks.retries) == 0


def test_dispatch_does_not_run_queued_retries(store, engine, monkeypatch):
    store.add_user('a', recipes_authored=1)
    store.add_user('b', meals_logged=1)
    hooks = _hooks(engine)
    read = store.get_user_metrics
    outage = {'on': True}

    def _flaky(user_id):
        if outage['on']:
            raise StoreUnavailableError('timeout')
        return read(user_id)

    monkeypatch.setattr(store, 'get_user_metrics', _flaky)
    assert hooks.recipe_published('a') == []
    assert 'a' in hooks.retries

    outage['on'] = False
    hooks.meal_logged('b')

    assert 'a' in hooks.retries
    assert store.grant_count('a', 'first_recipe') == 0

    assert hooks.drain_retries() == 1
    assert len(hooks.retries) == 0
    assert store.grant_count('a', 'first_recipe') == 1


def test_query_errors_are_logged_but_not_queued(store, engine, monkeypatch):
    store.add_user('u1')

    def _broken(user_id):
        raise StoreQueryError('column r.author_id does not exist')

    monkeypatch.setattr(store, 'get_user_metrics', _broken)
    hooks = _hooks(engine)

    assert hooks.recipe_published('u1') == []
    assert 'u1' not in hooks.retries


def test_broken_metrics_query_is_not_retried_as_an_outage(monkeypatch):
    import tastebuddy.models.user as user_mod

    class _UndefinedColumnDB:
        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

        def fetchone(self, query, params=None):
            raise pg_errors.UndefinedColumn('column r.author_id does not exist')

    monkeypatch.setattr(user_mod, 'DBManager', _UndefinedColumnDB)
    hooks = _hooks(build_engine(PostgresAchievementStore()))

    assert hooks.recipe_published('u1') == []
    assert len(hooks.retries) == 0
