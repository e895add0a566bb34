import logging

from skillsheet.database.db_manager import DBManager

logger = logging.getLogger(__name__)


def init_schema(db: DBManager):
    '''Create the database schema if it doesn't already exist.'''
    # --- SHEET META TABLE (player name etc.) ---
    db.execute(
        '''
        CREATE TABLE IF NOT EXISTS sheet_meta (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
        '''
    )

    # --- SKILLS TABLE ---
    db.execute(
        '''
        CREATE TABLE IF NOT EXISTS skills (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            position INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        '''
    )

    # --- ACTIVITY RECORDS TABLE ---
    # Only the user-entered fields are stored; EXP is recomputed on load.
    db.execute(
        '''
        CREATE TABLE IF NOT EXISTS activity_records (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            skill_id TEXT NOT NULL,
            position INTEGER NOT NULL,
            date_occurred DATE NOT NULL,
            duration INTEGER NOT NULL DEFAULT 0 CHECK (duration >= 0),
            FOREIGN KEY (skill_id) REFERENCES skills(id) ON DELETE CASCADE
        )
        '''
    )
    db.execute(
        'CREATE INDEX IF NOT EXISTS idx_activity_records_skill '
        'ON activity_records (skill_id, position)'
    )
    logger.debug(f'Schema verified at {db.db_path}')
