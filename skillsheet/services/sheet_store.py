import logging
from datetime import date
from typing import Optional

from skillsheet.database.db_manager import DBManager
from skillsheet.models.sheet import Sheet
from skillsheet.models.skill import ActivityRecord, Skill
from skillsheet.services.exp_engine import recompute
from skillsheet.utils.tracing import trace_span

logger = logging.getLogger(__name__)

PLAYER_NAME_KEY = 'player_name'


def load_sheet(db: DBManager, today: Optional[date] = None) -> Sheet:
    '''Read the whole sheet back, then sort and recompute every skill.'''
    with trace_span('sheet_store.load'):
        sheet = Sheet()
        row = db.fetchone(
            'SELECT value FROM sheet_meta WHERE key = ?', (PLAYER_NAME_KEY,)
        )
        if row:
            sheet.player_name = row['value']

        for skill_row in db.fetchall('SELECT id, name FROM skills ORDER BY position'):
            sheet.skills[skill_row['id']] = Skill(name=skill_row['name'])

        record_rows = db.fetchall(
            'SELECT skill_id, date_occurred, duration FROM activity_records '
            'ORDER BY skill_id, position'
        )
        for r in record_rows:
            skill = sheet.skills.get(r['skill_id'])
            if skill is None:
                logger.warning(f'Dropping record for unknown skill {r["skill_id"]}')
                continue
            skill.records.append(
                ActivityRecord(
                    date=date.fromisoformat(r['date_occurred']),
                    duration=int(r['duration']),
                )
            )

        for skill in sheet.skills.values():
            skill.sort_by_date()
            recompute(skill, today)

    logger.info(f'Loaded sheet with {len(sheet)} skills from {db.db_path}')
    return sheet


def save_player_name(db: DBManager, player_name: str) -> None:
    db.execute(
        'INSERT INTO sheet_meta (key, value) VALUES (?, ?) '
        'ON CONFLICT(key) DO UPDATE SET value = excluded.value',
        (PLAYER_NAME_KEY, player_name),
    )


def save_skill(db: DBManager, skill_id: str, skill: Skill, position: int) -> None:
    '''Upsert a skill and replace its stored records.'''
    db.execute(
        'INSERT INTO skills (id, name, position) VALUES (?, ?, ?) '
        'ON CONFLICT(id) DO UPDATE SET name = excluded.name, '
        'position = excluded.position',
        (skill_id, skill.name, position),
    )
    db.execute('DELETE FROM activity_records WHERE skill_id = ?', (skill_id,))
    db.executemany(
        'INSERT INTO activity_records (skill_id, position, date_occurred, duration) '
        'VALUES (?, ?, ?, ?)',
        (
            (skill_id, pos, r.date.isoformat(), r.duration)
            for pos, r in enumerate(skill.records)
        ),
    )


def delete_skill(db: DBManager, skill_id: str) -> None:
    db.execute('DELETE FROM skills WHERE id = ?', (skill_id,))


def save_sheet(db: DBManager, sheet: Sheet) -> None:
    '''Write the whole sheet, dropping skills no longer on it.'''
    with trace_span('sheet_store.save', {'skills': len(sheet)}):
        save_player_name(db, sheet.player_name)
        stored = {row['id'] for row in db.fetchall('SELECT id FROM skills')}
        for skill_id in stored - set(sheet.skills):
            delete_skill(db, skill_id)
        for position, (skill_id, skill) in enumerate(sheet):
            save_skill(db, skill_id, skill, position)
