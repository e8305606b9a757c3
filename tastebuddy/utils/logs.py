import logging
import os
import sys


def setup_logging(level: int | str | None = None) -> None:
    '''Configure root logger for the entire codebase.'''
    if level is None:
        level = os.getenv('LOG_LEVEL', 'INFO').upper()
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # psycopg_pool is chatty at INFO about every connection it opens
    logging.getLogger('psycopg.pool').setLevel(logging.WARNING)
