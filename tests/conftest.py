from datetime import date, timedelta
from typing import Callable

import pytest

from skillsheet.models.skill import ActivityRecord, Skill
from skillsheet.services.sheet_service import SheetService

TODAY = date(2026, 2, 10)


@pytest.fixture()
def today() -> date:
    return TODAY


@pytest.fixture()
def make_skill() -> Callable[..., Skill]:
    '''Build a skill from (days before TODAY, minutes) pairs, oldest first.'''

    def _make(*entries: tuple[int, int], name: str = 'Guitar') -> Skill:
        records = [
            ActivityRecord(date=TODAY - timedelta(days=ago), duration=minutes)
            for ago, minutes in entries
        ]
        return Skill(name=name, records=records)

    return _make


@pytest.fixture()
def db_path(tmp_path):
    return tmp_path / 'skillsheet.db'


@pytest.fixture()
def service(db_path) -> SheetService:
    svc = SheetService(db_path=db_path, clock=lambda: TODAY)
    svc.load()
    return svc
