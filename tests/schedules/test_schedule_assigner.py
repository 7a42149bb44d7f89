from __future__ import annotations

from contextlib import contextmanager
from datetime import date, time
from typing import Optional

import pytest

from src.hr_system.hr_system.core.enums import Role, Weekday
from src.hr_system.hr_system.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.hr_system.hr_system.schedules.model import EmployeeSchedule
from src.hr_system.hr_system.schedules.overlap import ranges_overlap
from src.hr_system.hr_system.schedules.service import ScheduleAssigner
from src.hr_system.hr_system.shifts.model import Shift

MORNING = Shift(shift_id=1, shift_name="Morning", start_time=time(8, 0), end_time=time(16, 0))
NIGHT = Shift(shift_id=2, shift_name="Night", start_time=time(22, 0), end_time=time(6, 0))


class InMemoryShifts:
    def __init__(self, *shifts: Shift):
        self._shifts = {s.shift_id: s for s in shifts}

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        return self._shifts.get(shift_id)


class InMemorySchedules:
    def __init__(self, employees=(1, 2, 3), shifts=(MORNING, NIGHT)):
        self.rows: list[EmployeeSchedule] = []
        self.locked: list[int] = []
        self.fail_for: set[int] = set()
        self._employees = set(employees)
        self._shift_names = {s.shift_id: s.shift_name for s in shifts}

    def add(self, *, employee_id, shift_id=1, start_date, end_date=None, days_of_week, is_active=True):
        sc = EmployeeSchedule(
            schedule_id=len(self.rows) + 1,
            employee_id=employee_id,
            shift_id=shift_id,
            start_date=start_date,
            end_date=end_date,
            days_of_week=days_of_week,
            is_active=is_active,
            shift_name=self._shift_names.get(shift_id),
        )
        self.rows.append(sc)
        return sc.schedule_id

    @contextmanager
    def lock_employee(self, employee_id: int):
        if employee_id not in self._employees:
            raise NotFoundError("Employee not found")
        if employee_id in self.fail_for:
            raise RuntimeError("connection lost")
        self.locked.append(employee_id)
        yield self

    def find_active_overlapping(self, *, employee_id, start_date, end_date):
        return [
            sc
            for sc in self.rows
            if sc.employee_id == employee_id
            and sc.is_active
            and ranges_overlap(sc.start_date, sc.end_date, start_date, end_date)
        ]

    def create(self, *, employee_id, shift_id, start_date, end_date, days_of_week):
        return self.add(
            employee_id=employee_id,
            shift_id=shift_id,
            start_date=start_date,
            end_date=end_date,
            days_of_week=frozenset(days_of_week),
        )

    def list_active_for_employee(self, employee_id):
        return sorted(
            (sc for sc in self.rows if sc.employee_id == employee_id and sc.is_active),
            key=lambda sc: sc.start_date,
        )


def _assigner(schedules: InMemorySchedules) -> ScheduleAssigner:
    return ScheduleAssigner(schedules, InMemoryShifts(MORNING, NIGHT))


def _assign(assigner, employee_ids, *, shift_id=2, start, end=None, days=None):
    return assigner.assign_shift_to_employees(
        current_role=Role.ADMIN,
        employee_ids=employee_ids,
        shift_id=shift_id,
        start_date=start,
        end_date=end,
        days_of_week=days,
    )


def _with_mwf_first_half(schedules: InMemorySchedules, employee_id: int = 1) -> None:
    schedules.add(
        employee_id=employee_id,
        shift_id=1,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 6, 30),
        days_of_week=frozenset({Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY}),
    )


def test_employees_without_schedules_always_succeed():
    schedules = InMemorySchedules()
    result = _assign(_assigner(schedules), [1, 2, 3], start=date(2024, 1, 1))

    assert [s.employee_id for s in result.success] == [1, 2, 3]
    assert result.errors == []
    assert len(schedules.rows) == 3
    assert all(sc.shift_id == 2 and sc.end_date is None for sc in schedules.rows)


def test_omitted_days_default_to_working_week():
    schedules = InMemorySchedules()
    _assign(_assigner(schedules), [1], start=date(2024, 1, 1))

    assert schedules.rows[0].days_of_week == frozenset(
        {Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY}
    )


def test_disjoint_weekdays_in_overlapping_range_succeed():
    schedules = InMemorySchedules()
    _with_mwf_first_half(schedules)

    result = _assign(
        _assigner(schedules), [1], start=date(2024, 2, 1), end=date(2024, 3, 1), days=["Tuesday", "Thursday"]
    )

    assert [s.employee_id for s in result.success] == [1]
    assert result.errors == []


def test_shared_weekday_in_overlapping_range_fails_naming_the_shift():
    schedules = InMemorySchedules()
    _with_mwf_first_half(schedules)

    result = _assign(_assigner(schedules), [1], start=date(2024, 2, 1), end=date(2024, 3, 1), days=["Monday"])

    assert result.success == []
    assert len(result.errors) == 1
    assert result.errors[0].employee_id == 1
    assert "Morning" in result.errors[0].message
    assert len(schedules.rows) == 1


def test_disjoint_ranges_never_conflict_even_with_same_days():
    schedules = InMemorySchedules()
    _with_mwf_first_half(schedules)

    result = _assign(
        _assigner(schedules),
        [1],
        start=date(2024, 7, 1),
        end=date(2024, 12, 31),
        days=["Monday", "Wednesday", "Friday"],
    )

    assert len(result.success) == 1


def test_open_ended_existing_blocks_later_proposal():
    schedules = InMemorySchedules()
    schedules.add(employee_id=1, start_date=date(2024, 1, 1), days_of_week=frozenset({Weekday.SATURDAY}))

    result = _assign(_assigner(schedules), [1], start=date(2030, 1, 1), end=date(2030, 1, 31), days=["Sat"])

    assert [e.employee_id for e in result.errors] == [1]


def test_inactive_schedules_are_ignored():
    schedules = InMemorySchedules()
    schedules.add(
        employee_id=1,
        start_date=date(2024, 1, 1),
        days_of_week=frozenset({Weekday.MONDAY}),
        is_active=False,
    )

    result = _assign(_assigner(schedules), [1], start=date(2024, 1, 1), days=["Monday"])

    assert len(result.success) == 1


def test_unreadable_stored_days_block_assignment():
    schedules = InMemorySchedules()
    schedules.add(employee_id=1, start_date=date(2024, 1, 1), days_of_week=None)

    result = _assign(_assigner(schedules), [1], start=date(2024, 3, 1), days=["Sunday"])

    assert result.success == []
    assert result.errors[0].employee_id == 1


def test_batch_reports_each_employee_in_the_right_bucket():
    schedules = InMemorySchedules()
    _with_mwf_first_half(schedules, employee_id=2)

    result = _assign(_assigner(schedules), [1, 2, 3], start=date(2024, 2, 1), end=date(2024, 3, 1), days=["Friday"])

    assert [s.employee_id for s in result.success] == [1, 3]
    assert [e.employee_id for e in result.errors] == [2]
    assert schedules.locked == [1, 2, 3]


def test_same_employee_twice_in_one_batch_conflicts_with_itself():
    schedules = InMemorySchedules()
    result = _assign(_assigner(schedules), [1, 1], start=date(2024, 1, 1), days=["Monday"])

    assert [s.employee_id for s in result.success] == [1]
    assert [e.employee_id for e in result.errors] == [1]


def test_unknown_employee_and_unexpected_failure_do_not_stop_the_batch():
    schedules = InMemorySchedules(employees=(1, 2, 3))
    schedules.fail_for.add(2)

    result = _assign(_assigner(schedules), [99, 2, 3], start=date(2024, 1, 1))

    assert [s.employee_id for s in result.success] == [3]
    assert {e.employee_id: e.message for e in result.errors} == {
        99: "Employee not found",
        2: "Internal error while assigning",
    }


def test_unknown_shift_fails_before_processing_anyone():
    schedules = InMemorySchedules()

    with pytest.raises(NotFoundError):
        _assign(_assigner(schedules), [1, 2], shift_id=42, start=date(2024, 1, 1))

    assert schedules.locked == []
    assert schedules.rows == []


def test_end_before_start_is_rejected():
    with pytest.raises(ValidationError):
        _assign(_assigner(InMemorySchedules()), [1], start=date(2024, 2, 1), end=date(2024, 1, 31))


def test_unknown_weekday_label_is_rejected():
    with pytest.raises(ValidationError):
        _assign(_assigner(InMemorySchedules()), [1], start=date(2024, 1, 1), days=["Funday"])


def test_staff_cannot_assign():
    assigner = _assigner(InMemorySchedules())
    with pytest.raises(AuthorizationError):
        assigner.assign_shift_to_employees(
            current_role=Role.STAFF,
            employee_ids=[1],
            shift_id=1,
            start_date=date(2024, 1, 1),
        )


def test_get_employee_schedule_lists_active_rows_in_start_order():
    schedules = InMemorySchedules()
    schedules.add(employee_id=1, start_date=date(2024, 5, 1), days_of_week=frozenset({Weekday.MONDAY}))
    schedules.add(employee_id=1, start_date=date(2024, 1, 1), days_of_week=frozenset({Weekday.TUESDAY}))
    schedules.add(employee_id=2, start_date=date(2024, 1, 1), days_of_week=frozenset({Weekday.TUESDAY}))

    rows = _assigner(schedules).get_employee_schedule(1)

    assert [sc.start_date for sc in rows] == [date(2024, 1, 1), date(2024, 5, 1)]


def test_malformed_ids_are_reported_with_their_raw_value():
    schedules = InMemorySchedules()
    result = _assign(_assigner(schedules), [1, "emp-x", None, "3"], start=date(2024, 1, 1))

    assert [s.employee_id for s in result.success] == [1, 3]
    assert [e.employee_id for e in result.errors] == ["emp-x", None]
    assert schedules.locked == [1, 3]
