from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import date, timedelta
from pathlib import Path
from typing import Callable, Iterator, Optional

import pendulum

from skillsheet.database.db_manager import DBManager
from skillsheet.database.init_schema import init_schema
from skillsheet.models.sheet import Sheet
from skillsheet.models.skill import ActivityRecord, Skill
from skillsheet.services import sheet_store
from skillsheet.services.exp_engine import recompute
from skillsheet.utils.errors import InvalidEntry

logger = logging.getLogger(__name__)


def parse_entry_date(text: Optional[str], today: date) -> date:
    '''Parse a user supplied date. Blank means today.'''
    value = (text or '').strip().lower()
    if not value or value in ('today', 'now'):
        return today
    if value == 'yesterday':
        return today - timedelta(days=1)

    try:
        # exact keeps time-only input as a Time instead of stamping it with now
        parsed = pendulum.parse(value, strict=False, exact=True)
    except (ValueError, OverflowError) as e:
        logger.debug(f'Failed to parse date "{text}": {e}')
        raise InvalidEntry(
            'Invalid date format. '
            'Try formats like: YYYY-MM-DD, MM/DD/YYYY, "today" or "yesterday"'
        ) from e

    if isinstance(parsed, pendulum.DateTime):
        parsed = parsed.date()
    if not isinstance(parsed, date):
        raise InvalidEntry(f'"{text}" is not a calendar date')
    return date(parsed.year, parsed.month, parsed.day)


def parse_duration(text: Optional[str]) -> int:
    '''Parse a duration in whole minutes. Blank means 0.'''
    value = (text or '').strip()
    if not value:
        return 0
    try:
        minutes = int(value)
    except ValueError as e:
        raise InvalidEntry(f'Duration must be whole minutes, got "{text}"') from e
    if minutes < 0:
        raise InvalidEntry('Duration cannot be negative')
    return minutes


class SheetService:
    '''Edits the sheet, then sorts, recomputes and saves whatever changed.'''

    def __init__(
        self,
        db_path: Optional[Path | str] = None,
        clock: Callable[[], date] = date.today,
    ):
        self.db_path = db_path
        self.clock = clock
        self.sheet = Sheet()

    def _db(self) -> DBManager:
        return DBManager(self.db_path)

    def load(self) -> Sheet:
        with self._db() as db:
            init_schema(db)
            self.sheet = sheet_store.load_sheet(db, self.clock())
        return self.sheet

    def refresh(self, today: Optional[date] = None) -> None:
        '''Recompute every skill, e.g. when the day rolls over.'''
        today = today or self.clock()
        for _, skill in self.sheet:
            recompute(skill, today)

    @contextmanager
    def _saving(self) -> Iterator[DBManager]:
        '''Open a write; if it fails, reload so memory matches the database.'''
        try:
            with self._db() as db:
                yield db
        except sqlite3.Error:
            logger.error('Saving the sheet failed, reloading from disk', exc_info=True)
            self.load()
            raise

    def _commit(self, skill_id: str, skill: Skill) -> None:
        skill.sort_by_date()
        recompute(skill, self.clock())
        position = list(self.sheet.skills).index(skill_id)
        with self._saving() as db:
            sheet_store.save_skill(db, skill_id, skill, position)

    # --- Player ---
    def set_player_name(self, name: str) -> None:
        self.sheet.player_name = name
        with self._saving() as db:
            sheet_store.save_player_name(db, name)
        logger.info(f'Player renamed to "{name}"')

    # --- Skills ---
    def new_skill(self, name: Optional[str] = None) -> str:
        skill_id = self.sheet.new_skill(name)
        skill = self.sheet.get_skill(skill_id)
        self._commit(skill_id, skill)
        logger.info(f'Created skill "{skill.name}" ({skill_id})')
        return skill_id

    def rename_skill(self, skill_id: str, name: str) -> Skill:
        skill = self.sheet.get_skill(skill_id)
        skill.rename(name)
        self._commit(skill_id, skill)
        logger.info(f'Renamed skill {skill_id} to "{name}"')
        return skill

    def delete_skill(self, skill_id: str) -> Skill:
        skill = self.sheet.delete_skill(skill_id)
        # Rewrites positions of the remaining skills too
        with self._saving() as db:
            sheet_store.save_sheet(db, self.sheet)
        logger.info(f'Deleted skill "{skill.name}" ({skill_id})')
        return skill

    # --- Entries ---
    def add_entry(
        self,
        skill_id: str,
        date_text: Optional[str] = None,
        duration_text: Optional[str] = None,
    ) -> ActivityRecord:
        skill = self.sheet.get_skill(skill_id)
        entry_date = parse_entry_date(date_text, self.clock())
        duration = parse_duration(duration_text)
        record = skill.add_record(entry_date, duration)
        self._commit(skill_id, skill)
        logger.info(
            f'Logged {duration} min of "{skill.name}" on {entry_date.isoformat()}'
        )
        return record

    def edit_entry(
        self,
        skill_id: str,
        index: int,
        date_text: Optional[str] = None,
        duration_text: Optional[str] = None,
    ) -> ActivityRecord:
        '''Change an entry's date and/or duration. None leaves a field as is.'''
        skill = self.sheet.get_skill(skill_id)
        record = skill.get_record(index)

        # Validate everything before touching the record
        new_date = (
            parse_entry_date(date_text, self.clock())
            if date_text is not None
            else record.date
        )
        new_duration = (
            parse_duration(duration_text)
            if duration_text is not None
            else record.duration
        )
        record.date = new_date
        record.duration = new_duration
        self._commit(skill_id, skill)
        logger.info(f'Edited entry {index} of "{skill.name}"')
        return record

    def remove_entry(self, skill_id: str, index: int) -> ActivityRecord:
        skill = self.sheet.get_skill(skill_id)
        record = skill.remove_record(index)
        self._commit(skill_id, skill)
        logger.info(f'Removed entry {index} from "{skill.name}"')
        return record
