from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from typing import AbstractSet, Iterator, Optional, Sequence

from ..common.weekdays import dump_days, parse_stored_days
from ..core.enums import Weekday
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import EmployeeSchedule
from .repository import ScheduleRepository, ScheduleWriter

_SELECT = """
    SELECT sc.schedule_id, sc.employee_id, sc.shift_id, sc.start_date, sc.end_date,
           sc.days_of_week, sc.is_active, s.shift_name
    FROM employee_schedules sc
    JOIN shifts s ON s.shift_id = sc.shift_id
"""


def _row_to_schedule(r: dict) -> EmployeeSchedule:
    return EmployeeSchedule(
        schedule_id=int(r["schedule_id"]),
        employee_id=int(r["employee_id"]),
        shift_id=int(r["shift_id"]),
        start_date=r["start_date"],
        end_date=r.get("end_date"),
        days_of_week=parse_stored_days(r.get("days_of_week")),
        is_active=bool(r["is_active"]),
        shift_name=r.get("shift_name"),
    )


class _LockedScheduleWriter(ScheduleWriter):
    """Runs on the cursor of the transaction holding the employee row lock."""

    def __init__(self, cur):
        self._cur = cur

    def find_active_overlapping(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: Optional[date],
    ) -> Sequence[EmployeeSchedule]:
        clauses = ["sc.employee_id=%s", "sc.is_active=1", "(sc.end_date IS NULL OR sc.end_date >= %s)"]
        params: list[object] = [int(employee_id), start_date]
        if end_date is not None:
            clauses.append("sc.start_date <= %s")
            params.append(end_date)

        where = " AND ".join(clauses)
        self._cur.execute(f"{_SELECT} WHERE {where} ORDER BY sc.start_date ASC", tuple(params))
        return [_row_to_schedule(r) for r in fetchall(self._cur)]

    def create(
        self,
        *,
        employee_id: int,
        shift_id: int,
        start_date: date,
        end_date: Optional[date],
        days_of_week: AbstractSet[Weekday],
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO employee_schedules(employee_id, shift_id, start_date, end_date, days_of_week, is_active)
            VALUES(%s,%s,%s,%s,%s,1)
            """,
            (int(employee_id), int(shift_id), start_date, end_date, dump_days(days_of_week)),
        )
        return int(self._cur.lastrowid)


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def lock_employee(self, employee_id: int) -> Iterator[ScheduleWriter]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock on the employee serializes concurrent check-then-create for the same person.
            cur.execute("SELECT employee_id FROM employees WHERE employee_id=%s FOR UPDATE", (int(employee_id),))
            if not fetchall(cur):
                raise NotFoundError("Employee not found")
            yield _LockedScheduleWriter(cur)

    def list_active_for_employee(self, employee_id: int) -> Sequence[EmployeeSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE sc.employee_id=%s AND sc.is_active=1 ORDER BY sc.start_date ASC",
                (int(employee_id),),
            )
            return [_row_to_schedule(r) for r in fetchall(cur)]
