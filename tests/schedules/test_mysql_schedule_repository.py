from __future__ import annotations

from datetime import date

import mysql.connector
import pytest

from src.hr_system.hr_system.core.enums import Weekday
from src.hr_system.hr_system.core.exceptions import NotFoundError, ScheduleConflictError, ValidationError
from src.hr_system.hr_system.schedules.mysql_schedule_repository import MySQLScheduleRepository


class RecordingCursor:
    def __init__(self, results, fail_on=None):
        self.executed: list[tuple[str, tuple]] = []
        self.closed = False
        self.lastrowid = 41
        self._results = list(results)
        self._fail_on = fail_on

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), params))
        if self._fail_on and self._fail_on in sql:
            raise mysql.connector.IntegrityError(msg="foreign key constraint fails", errno=1452)

    def fetchall(self):
        return self._results.pop(0) if self._results else []

    def close(self):
        self.closed = True


class RecordingConnection:
    def __init__(self, cursor: RecordingCursor):
        self.cur = cursor
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self, dictionary=False):
        return self.cur

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


class SingleConnectionFactory:
    def __init__(self, *results, fail_on=None):
        self.conn = RecordingConnection(RecordingCursor(results, fail_on=fail_on))

    def connect(self):
        return self.conn


EMPLOYEE_ROW = [{"employee_id": 7}]


def _schedule_row(**overrides):
    row = {
        "schedule_id": 3,
        "employee_id": 7,
        "shift_id": 1,
        "start_date": date(2024, 1, 1),
        "end_date": None,
        "days_of_week": '["Monday", "Friday"]',
        "is_active": 1,
        "shift_name": "Morning",
    }
    row.update(overrides)
    return row


def test_employee_row_is_locked_before_overlaps_are_read():
    factory = SingleConnectionFactory(EMPLOYEE_ROW, [])
    repo = MySQLScheduleRepository(factory)

    with repo.lock_employee(7) as writer:
        writer.find_active_overlapping(employee_id=7, start_date=date(2024, 2, 1), end_date=date(2024, 3, 1))
        new_id = writer.create(
            employee_id=7,
            shift_id=2,
            start_date=date(2024, 2, 1),
            end_date=date(2024, 3, 1),
            days_of_week=frozenset({Weekday.FRIDAY, Weekday.MONDAY}),
        )

    statements = [sql for sql, _ in factory.conn.cur.executed]
    assert statements[0].endswith("FOR UPDATE")
    assert "FROM employee_schedules" in statements[1]
    assert statements[2].startswith("INSERT INTO employee_schedules")
    assert factory.conn.cur.executed[2][1] == (7, 2, date(2024, 2, 1), date(2024, 3, 1), '["Monday", "Friday"]')
    assert new_id == 41
    assert factory.conn.commits == 1
    assert factory.conn.rollbacks == 0
    assert factory.conn.cur.closed and factory.conn.closed


def test_bounded_proposal_filters_on_both_ends():
    factory = SingleConnectionFactory(EMPLOYEE_ROW, [_schedule_row()])
    repo = MySQLScheduleRepository(factory)

    with repo.lock_employee(7) as writer:
        rows = writer.find_active_overlapping(employee_id=7, start_date=date(2024, 2, 1), end_date=date(2024, 3, 1))

    sql, params = factory.conn.cur.executed[1]
    assert "(sc.end_date IS NULL OR sc.end_date >= %s)" in sql
    assert "sc.start_date <= %s" in sql
    assert params == (7, date(2024, 2, 1), date(2024, 3, 1))
    assert rows[0].days_of_week == frozenset({Weekday.MONDAY, Weekday.FRIDAY})
    assert rows[0].end_date is None


def test_open_ended_proposal_has_no_upper_bound():
    factory = SingleConnectionFactory(EMPLOYEE_ROW, [_schedule_row(days_of_week="not json")])
    repo = MySQLScheduleRepository(factory)

    with repo.lock_employee(7) as writer:
        rows = writer.find_active_overlapping(employee_id=7, start_date=date(2024, 2, 1), end_date=None)

    sql, params = factory.conn.cur.executed[1]
    assert "sc.start_date <= %s" not in sql
    assert params == (7, date(2024, 2, 1))
    assert rows[0].days_of_week is None


def test_unknown_employee_rolls_back():
    factory = SingleConnectionFactory([])
    repo = MySQLScheduleRepository(factory)

    with pytest.raises(NotFoundError):
        with repo.lock_employee(99):
            pass

    assert len(factory.conn.cur.executed) == 1
    assert factory.conn.commits == 0
    assert factory.conn.rollbacks == 1


def test_conflict_inside_the_lock_rolls_back_and_propagates():
    factory = SingleConnectionFactory(EMPLOYEE_ROW, [])
    repo = MySQLScheduleRepository(factory)

    with pytest.raises(ScheduleConflictError):
        with repo.lock_employee(7) as writer:
            writer.find_active_overlapping(employee_id=7, start_date=date(2024, 1, 1), end_date=None)
            raise ScheduleConflictError("Employee already has an active schedule in that date range (Morning)")

    assert factory.conn.commits == 0
    assert factory.conn.rollbacks == 1
    assert factory.conn.closed


def test_integrity_error_on_insert_becomes_validation_error():
    factory = SingleConnectionFactory(EMPLOYEE_ROW, [], fail_on="INSERT INTO employee_schedules")
    repo = MySQLScheduleRepository(factory)

    with pytest.raises(ValidationError, match="Rejected by the database"):
        with repo.lock_employee(7) as writer:
            writer.create(
                employee_id=7,
                shift_id=999,
                start_date=date(2024, 1, 1),
                end_date=None,
                days_of_week=frozenset({Weekday.MONDAY}),
            )

    assert factory.conn.commits == 0
    assert factory.conn.rollbacks == 1


def test_list_active_for_employee_orders_by_start():
    factory = SingleConnectionFactory([_schedule_row()])
    repo = MySQLScheduleRepository(factory)

    rows = repo.list_active_for_employee(7)

    sql, params = factory.conn.cur.executed[0]
    assert "sc.is_active=1" in sql and sql.endswith("ORDER BY sc.start_date ASC")
    assert params == (7,)
    assert [r.shift_name for r in rows] == ["Morning"]
    assert factory.conn.commits == 1
