'''
Experience accrual for a skill's activity records.

Every record earns base EXP linear in its duration. Records logged within
``max_bonus_days`` of earlier ones also earn a streak bonus: each earlier
record still in range contributes its own earned EXP (base + bonus) scaled by
a multiplier that starts at ``streak_max_daily_bonus`` for a 0 day gap and
drops by ``daily_degradation`` per day. Bonuses therefore compound along a
chain of consecutive days.

Records must be sorted ascending by date before calling in here. Nothing is
sorted or verified, out of order input gives wrong streak bonuses.
'''

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence

from skillsheet.models.skill import ActivityRecord, Skill
from skillsheet.utils.constants import (
    EXP_PER_HOUR,
    MAX_BONUS_DAYS,
    STREAK_MAX_DAILY_BONUS,
)
from skillsheet.utils.tracing import add_span_metadata, trace_span

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpConfig:
    exp_per_hour: float = EXP_PER_HOUR
    streak_max_daily_bonus: float = STREAK_MAX_DAILY_BONUS
    max_bonus_days: int = MAX_BONUS_DAYS

    @property
    def daily_degradation(self) -> float:
        return self.streak_max_daily_bonus / self.max_bonus_days


DEFAULT_EXP_CONFIG = ExpConfig()


@dataclass(frozen=True)
class ExpSummary:
    total_exp: float
    potential_bonus: float


def base_exp(duration: int, config: ExpConfig = DEFAULT_EXP_CONFIG) -> float:
    return (duration / 60) * config.exp_per_hour


def _clear_old_streaks(
    day: date,
    window: deque[int],
    records: Sequence[ActivityRecord],
    config: ExpConfig,
) -> None:
    # Window holds record positions oldest first; trim from the old end.
    while window:
        oldest = window.popleft()
        if (day - records[oldest].date).days <= config.max_bonus_days:
            window.appendleft(oldest)
            break


def _streak_bonus(
    day: date,
    window: deque[int],
    records: Sequence[ActivityRecord],
    config: ExpConfig,
) -> float:
    bonus = 0.0
    for pos in window:
        prior = records[pos]
        num_days = (day - prior.date).days
        multiplier = config.streak_max_daily_bonus - config.daily_degradation * num_days
        bonus += prior.earned_exp * multiplier
    return bonus


def calculate_exp(
    records: Sequence[ActivityRecord],
    today: date,
    config: ExpConfig = DEFAULT_EXP_CONFIG,
) -> ExpSummary:
    '''Rewrite base/bonus EXP on each record in place.

    Returns the total EXP over all records and the bonus a new record would
    earn if logged on ``today`` (or the day after, when the earliest record
    still in the streak window is dated ``today``).
    '''
    total = 0.0
    window: deque[int] = deque()

    for pos, record in enumerate(records):
        record.base_exp = base_exp(record.duration, config)
        _clear_old_streaks(record.date, window, records, config)
        record.bonus_exp = _streak_bonus(record.date, window, records, config)
        total += record.earned_exp
        window.append(pos)

    next_day = today
    if window and records[window[0]].date == today:
        next_day = today + timedelta(days=1)
    _clear_old_streaks(next_day, window, records, config)
    potential = _streak_bonus(next_day, window, records, config)

    return ExpSummary(total_exp=total, potential_bonus=potential)


def recompute(
    skill: Skill,
    today: Optional[date] = None,
    config: ExpConfig = DEFAULT_EXP_CONFIG,
) -> ExpSummary:
    '''Recalculate every EXP figure of ``skill`` from its (sorted) records.'''
    today = today or date.today()
    with trace_span('exp.recompute', {'skill': skill.name}):
        summary = calculate_exp(skill.records, today, config)
        skill.total_exp = summary.total_exp
        skill.potential_bonus = summary.potential_bonus
        add_span_metadata('records', len(skill.records))

    logger.debug(
        f'Recomputed "{skill.name}": total={summary.total_exp:.2f}, '
        f'potential_bonus={summary.potential_bonus:.2f}'
    )
    return summary
