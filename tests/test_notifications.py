import tastebuddy.models.base as base_mod
from tastebuddy.achievements.catalog import default_catalog
from tastebuddy.achievements.notifications import (
    DatabaseNotifier,
    NullNotifier,
    notifier_from_env,
)


def test_database_notifier_creates_achievement_row(patch_db):
    db = patch_db(base_mod)
    db.fetchall_results.append([{'id': 7}])
    definition = default_catalog().get('first_recipe')

    DatabaseNotifier().notify('u1', definition)

    assert db.last_query.startswith('INSERT INTO notifications')
    assert db.last_params[0] == 'u1'
    assert db.last_params[1] == 'ACHIEVEMENT_EARNED'
    assert db.last_params[2] == 'Achievement Unlocked!'
    assert definition.name in db.last_params[3]
    assert db.last_params[4] == 'first_recipe'


def test_notifications_can_be_disabled(monkeypatch):
    monkeypatch.setenv('NOTIFICATIONS_ENABLED', 'false')
    assert isinstance(notifier_from_env(), NullNotifier)

    monkeypatch.delenv('NOTIFICATIONS_ENABLED')
    assert isinstance(notifier_from_env(), DatabaseNotifier)
