import dataclasses

import pytest

from tastebuddy.achievements.catalog import AchievementCatalog, default_catalog
from tastebuddy.achievements.metrics import UserMetrics
from tastebuddy.achievements.rules.base import ThresholdRule


class _Rule(ThresholdRule):
    code = 'abc'
    name = 'Rule'
    description = 'Desc'
    category = 'TEST'
    metric = 'recipes_authored'
    threshold = 1


def test_catalog_dedupes_by_code():
    class _Other(_Rule):
        name = 'Other'

    class _Xyz(_Rule):
        code = 'xyz'

    catalog = AchievementCatalog.from_rules([_Rule(), _Other(), _Xyz()])

    assert [d.id for d in catalog] == ['abc', 'xyz']
    assert catalog.get('abc').name == 'Rule'


def test_catalog_is_read_only():
    catalog = AchievementCatalog.from_rules([_Rule()])
    definition = catalog.get('abc')

    with pytest.raises(dataclasses.FrozenInstanceError):
        definition.name = 'changed'  # type: ignore[misc]
    with pytest.raises(TypeError):
        definition.metadata['threshold'] = 99  # type: ignore[index]
    with pytest.raises(dataclasses.FrozenInstanceError):
        catalog.definitions = ()  # type: ignore[misc]


def test_default_catalog_is_built_once():
    assert default_catalog() is default_catalog()


def test_default_catalog_contents():
    catalog = default_catalog()

    for code in (
        'first_recipe',
        'social_butterfly',
        'bff',
        'five_star_chef',
        'hot_topic',
        'first_meal',
        'first_shot',
        'supreme_leader',
    ):
        assert code in catalog
    assert len(catalog.ids()) == len(catalog)
    assert catalog.get('social_butterfly').metadata['threshold'] == 10


def test_unknown_metric_is_rejected_at_class_creation():
    with pytest.raises(TypeError):

        class _Broken(ThresholdRule):
            code = 'broken'
            metric = 'not_a_metric'


def test_empty_metrics_qualify_for_nothing():
    metrics = UserMetrics(user_id='u1')
    assert not any(d.criteria(metrics) for d in default_catalog())
