from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from skillsheet.utils.constants import DEFAULT_SKILL_NAME
from skillsheet.utils.errors import IndexOutOfRange


@dataclass
class ActivityRecord:
    '''Time spent on a skill on a given day.

    base_exp and bonus_exp are derived and only meaningful right after a
    recompute over date sorted records.
    '''

    date: date = field(default_factory=date.today)
    duration: int = 0  # minutes
    base_exp: float = 0.0
    bonus_exp: float = 0.0

    @property
    def earned_exp(self) -> float:
        return self.base_exp + self.bonus_exp


@dataclass
class Skill:
    name: str = DEFAULT_SKILL_NAME
    records: list[ActivityRecord] = field(default_factory=list)

    # Derived, never persisted
    total_exp: float = 0.0
    potential_bonus: float = 0.0

    def sort_by_date(self) -> None:
        # list.sort is stable, same-day records keep their relative order
        self.records.sort(key=lambda r: r.date)

    def add_record(
        self, date: Optional[date] = None, duration: int = 0
    ) -> ActivityRecord:
        if duration < 0:
            raise ValueError('Duration must be a non-negative number of minutes')
        record = (
            ActivityRecord(duration=duration)
            if date is None
            else ActivityRecord(date=date, duration=duration)
        )
        self.records.append(record)
        return record

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self.records):
            raise IndexOutOfRange(index, len(self.records))

    def get_record(self, index: int) -> ActivityRecord:
        self._check_index(index)
        return self.records[index]

    def remove_record(self, index: int) -> ActivityRecord:
        self._check_index(index)
        return self.records.pop(index)

    def rename(self, name: str) -> None:
        self.name = name
