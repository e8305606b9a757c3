from tastebuddy.database.db_manager import DBManager


def up(db_manager: DBManager):
    # Profile pages list a user's badges newest first
    db_manager.execute(
        'CREATE INDEX IF NOT EXISTS idx_user_achievements_user_earned_at '
        'ON user_achievements (user_id, earned_at DESC)'
    )


def down(db_manager: DBManager):
    db_manager.execute('DROP INDEX IF EXISTS idx_user_achievements_user_earned_at')
    db_manager.execute(
        'DELETE FROM migrations WHERE filename = %s',
        ('20261012_091500_index_user_achievements_earned_at.py',),
    )
