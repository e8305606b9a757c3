import argparse
import logging
from typing import Optional, Sequence

from tastebuddy.achievements.catalog import default_catalog
from tastebuddy.achievements.coordinator import PairCoordinator
from tastebuddy.achievements.engine import AchievementsEngine, EvaluationResult, build_engine
from tastebuddy.achievements.notifications import notifier_from_env
from tastebuddy.database import start_db
from tastebuddy.database.db_manager import DBManager
from tastebuddy.errors import AchievementError, PairEvaluationError
from tastebuddy.stores.postgres import PostgresAchievementStore
from tastebuddy.utils.env import load_env
from tastebuddy.utils.logs import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tastebuddy-achievements',
        description='Evaluate and inspect TasteBuddy achievements.',
    )
    sub = parser.add_subparsers(dest='command', required=True)

    evaluate = sub.add_parser('evaluate', help='evaluate one or more users')
    evaluate.add_argument('user_ids', nargs='+')

    pair = sub.add_parser('pair', help='evaluate two users touched by one action')
    pair.add_argument('user_id_a')
    pair.add_argument('user_id_b')

    show = sub.add_parser('show', help="list a user's achievements")
    show.add_argument('user_id')

    sub.add_parser('catalog', help='list every achievement definition')
    sub.add_parser('migrate', help='create tables and run pending migrations')
    return parser


def _print_result(result: EvaluationResult) -> None:
    new = ', '.join(result.new_ids) or 'none'
    print(f'{result.user_id}: new={new} total={len(result.all_achievements)}')


def _print_catalog() -> None:
    for definition in default_catalog():
        print(
            f'{definition.id:<22} {definition.category:<18} '
            f'{definition.name} - {definition.description}'
        )


def _run(args: argparse.Namespace, engine: AchievementsEngine) -> int:
    if args.command == 'evaluate':
        failures = 0
        for user_id in args.user_ids:
            try:
                _print_result(engine.evaluate(user_id))
            except AchievementError as e:
                logger.error(f'Evaluation failed for {user_id}: {e}')
                failures += 1
        return 1 if failures else 0

    if args.command == 'pair':
        try:
            results = PairCoordinator(engine).evaluate_pair(
                args.user_id_a, args.user_id_b
            )
        except PairEvaluationError as e:
            for result in e.results:
                if result is not None:
                    _print_result(result)
            logger.error(str(e))
            return 1
        for result in results:
            _print_result(result)
        return 0

    if args.command == 'show':
        for grant, definition in engine.achievements_for(args.user_id):
            name = definition.name if definition else grant.achievement_id
            print(f'{grant.earned_at:%Y-%m-%d %H:%M} {name}')
        return 0

    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_env()
    setup_logging()
    args = build_parser().parse_args(argv)
    if args.command == 'catalog':
        _print_catalog()
        return 0

    DBManager.init_pool()
    try:
        with DBManager() as db:
            start_db.run(db)
        if args.command == 'migrate':
            return 0
        engine = build_engine(PostgresAchievementStore(), notifier=notifier_from_env())
        return _run(args, engine)
    except AchievementError as e:
        logger.error(f'Achievement store unavailable: {e}')
        return 1
    finally:
        DBManager.close_pool()
