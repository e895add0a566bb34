import sqlite3
from datetime import date

import pytest

from skillsheet.services import sheet_store
from skillsheet.services.sheet_service import (
    SheetService,
    parse_duration,
    parse_entry_date,
)
from skillsheet.utils.errors import IndexOutOfRange, InvalidEntry, SkillNotFound

TODAY = date(2026, 2, 10)


@pytest.mark.parametrize(
    'text, expected',
    [
        (None, TODAY),
        ('', TODAY),
        ('today', TODAY),
        ('Yesterday', date(2026, 2, 9)),
        ('2026-01-31', date(2026, 1, 31)),
    ],
)
def test_parse_entry_date(text, expected):
    parsed = parse_entry_date(text, TODAY)
    assert parsed == expected
    assert type(parsed) is date


@pytest.mark.parametrize(
    'text', ['not a date', '2026-13-40', '99999999999999999999', '12:30']
)
def test_parse_entry_date_rejects_garbage(text):
    with pytest.raises(InvalidEntry):
        parse_entry_date(text, TODAY)


def test_parse_duration():
    assert parse_duration(None) == 0
    assert parse_duration(' 90 ') == 90
    for bad in ('abc', '1.5', '-10'):
        with pytest.raises(InvalidEntry):
            parse_duration(bad)


def test_add_entry_sorts_and_recomputes(service):
    skill_id = service.new_skill('Guitar')
    service.add_entry(skill_id, '2026-02-09', '60')
    service.add_entry(skill_id, '2026-02-08', '60')

    skill = service.sheet.get_skill(skill_id)
    assert [r.date for r in skill.records] == [date(2026, 2, 8), date(2026, 2, 9)]
    assert skill.records[1].bonus_exp == pytest.approx(22.0)
    assert skill.total_exp == pytest.approx(132.0)
    # Yesterday's entry feeds today's forecast at a 1 day gap, the day before at 2
    assert skill.potential_bonus == pytest.approx(77.0 * 0.4 + 55.0 * 0.3)


def test_add_entry_with_defaults(service):
    skill_id = service.new_skill()
    record = service.add_entry(skill_id)
    assert record.date == TODAY
    assert record.duration == 0


def test_invalid_entry_leaves_skill_untouched(service):
    skill_id = service.new_skill('Guitar')
    with pytest.raises(InvalidEntry):
        service.add_entry(skill_id, 'someday', '60')
    with pytest.raises(InvalidEntry):
        service.add_entry(skill_id, '2026-02-01', 'an hour')
    assert service.sheet.get_skill(skill_id).records == []


def test_edit_entry_moves_and_recomputes(service):
    skill_id = service.new_skill('Guitar')
    service.add_entry(skill_id, '2026-02-01', '60')
    service.add_entry(skill_id, '2026-02-09', '60')
    skill = service.sheet.get_skill(skill_id)
    assert skill.records[1].bonus_exp == 0.0

    # Move the oldest entry next to the newer one, it re-sorts to the end
    service.edit_entry(skill_id, 0, date_text='2026-02-10')
    assert [r.date for r in skill.records] == [date(2026, 2, 9), date(2026, 2, 10)]
    assert skill.records[1].bonus_exp == pytest.approx(22.0)

    service.edit_entry(skill_id, 1, duration_text='120')
    assert skill.records[1].duration == 120
    assert skill.records[1].base_exp == pytest.approx(110.0)


def test_edit_entry_bad_input_changes_nothing(service):
    skill_id = service.new_skill('Guitar')
    service.add_entry(skill_id, '2026-02-01', '60')
    with pytest.raises(InvalidEntry):
        service.edit_entry(skill_id, 0, date_text='2026-02-05', duration_text='x')
    record = service.sheet.get_skill(skill_id).records[0]
    assert (record.date, record.duration) == (date(2026, 2, 1), 60)


def test_remove_entry(service):
    skill_id = service.new_skill('Guitar')
    service.add_entry(skill_id, '2026-02-08', '60')
    service.add_entry(skill_id, '2026-02-09', '60')
    service.remove_entry(skill_id, 0)
    skill = service.sheet.get_skill(skill_id)
    assert len(skill.records) == 1
    assert skill.total_exp == pytest.approx(55.0)

    with pytest.raises(IndexOutOfRange):
        service.remove_entry(skill_id, 3)


def test_unknown_skill(service):
    with pytest.raises(SkillNotFound):
        service.add_entry('missing', None, '10')


def test_changes_persist_across_loads(service, db_path):
    service.set_player_name('Scott')
    guitar = service.new_skill('Guitar')
    drawing = service.new_skill('Drawing')
    service.add_entry(guitar, '2026-02-08', '60')
    service.add_entry(guitar, '2026-02-09', '30')
    service.add_entry(drawing, '2026-02-10', '45')
    service.rename_skill(drawing, 'Sketching')

    reloaded = SheetService(db_path=db_path, clock=lambda: TODAY).load()
    assert reloaded.player_name == 'Scott'
    assert [s.name for _, s in reloaded] == ['Guitar', 'Sketching']

    original = service.sheet.get_skill(guitar)
    again = reloaded.get_skill(guitar)
    assert [(r.date, r.duration) for r in again.records] == [
        (r.date, r.duration) for r in original.records
    ]
    # Derived EXP is recomputed on load, not stored
    assert again.total_exp == pytest.approx(original.total_exp)
    assert again.potential_bonus == pytest.approx(original.potential_bonus)


def test_delete_skill_persists(service, db_path):
    guitar = service.new_skill('Guitar')
    service.add_entry(guitar, '2026-02-08', '60')
    service.delete_skill(guitar)

    reloaded = SheetService(db_path=db_path, clock=lambda: TODAY).load()
    assert len(reloaded) == 0


def test_refresh_moves_forecast_forward(service):
    skill_id = service.new_skill('Guitar')
    service.add_entry(skill_id, '2026-02-10', '60')
    skill = service.sheet.get_skill(skill_id)
    assert skill.potential_bonus == pytest.approx(22.0)

    service.refresh(date(2026, 2, 20))
    assert skill.potential_bonus == 0.0


def test_failed_save_reloads_sheet_from_disk(service, monkeypatch):
    skill_id = service.new_skill('Guitar')
    service.add_entry(skill_id, '2026-02-08', '60')

    def _broken_save(*args, **kwargs):
        raise sqlite3.OperationalError('disk I/O error')

    monkeypatch.setattr(sheet_store, 'save_skill', _broken_save)
    with pytest.raises(sqlite3.OperationalError):
        service.add_entry(skill_id, '2026-02-09', '60')

    skill = service.sheet.get_skill(skill_id)
    assert [r.date for r in skill.records] == [date(2026, 2, 8)]
    assert skill.total_exp == pytest.approx(55.0)
