import logging

from tastebuddy.database.db_manager import DBManager

logger = logging.getLogger(__name__)


def init_schema(db: DBManager) -> None:
    '''Create the tables owned by the achievement engine if they are missing.

    The activity tables the metrics are read from (users, recipes, ratings,
    follows, meals, ...) belong to the application and are not created here.
    '''
    # --- MIGRATIONS TABLE ---
    db.execute(
        '''
        CREATE TABLE IF NOT EXISTS migrations (
            filename TEXT PRIMARY KEY,
            applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
        '''
    )

    # --- USER ACHIEVEMENTS (grant ledger) ---
    # Append-only. The unique constraint is what prevents duplicate grants.
    db.execute(
        '''
        CREATE TABLE IF NOT EXISTS user_achievements (
            id BIGSERIAL PRIMARY KEY,
            user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            achievement_id TEXT NOT NULL,
            earned_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT user_achievements_user_achievement_key
                UNIQUE (user_id, achievement_id)
        )
        '''
    )

    # --- NOTIFICATIONS ---
    db.execute(
        '''
        CREATE TABLE IF NOT EXISTS notifications (
            id BIGSERIAL PRIMARY KEY,
            user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            type TEXT NOT NULL,
            title TEXT NOT NULL,
            message TEXT NOT NULL,
            related_achievement_id TEXT DEFAULT NULL,
            is_read BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
        '''
    )
    db.execute(
        'CREATE INDEX IF NOT EXISTS idx_notifications_user_id '
        'ON notifications(user_id);'
    )
    logger.debug('Achievement tables created/verified')
