from tastebuddy import cli
from tastebuddy.achievements.catalog import default_catalog


def test_catalog_lists_every_definition_without_a_database(monkeypatch, capsys):
    def _no_db(*args, **kwargs):
        raise AssertionError('catalog must not touch the database')

    monkeypatch.setattr(cli.DBManager, 'init_pool', _no_db)

    assert cli.main(['catalog']) == 0

    out = capsys.readouterr().out.splitlines()
    assert len(out) == len(default_catalog())
    assert any(line.startswith('first_recipe') for line in out)


def test_evaluate_prints_new_achievements(store, engine, capsys):
    store.add_user('u1', recipes_authored=1)
    args = cli.build_parser().parse_args(['evaluate', 'u1', 'ghost'])

    assert cli._run(args, engine) == 1

    assert 'u1: new=first_recipe total=1' in capsys.readouterr().out


def test_pair_reports_partial_failure(store, engine, capsys):
    store.add_user('a', following_count=10)
    args = cli.build_parser().parse_args(['pair', 'a', 'ghost'])

    assert cli._run(args, engine) == 1

    assert 'a: new=tastemaker total=1' in capsys.readouterr().out
