from __future__ import annotations

from datetime import date
from typing import AbstractSet, ContextManager, Optional, Protocol, Sequence

from ..core.enums import Weekday
from .model import EmployeeSchedule


class ScheduleWriter(Protocol):
    """Schedule operations bound to one employee-locked transaction."""

    def find_active_overlapping(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: Optional[date],
    ) -> Sequence[EmployeeSchedule]:
        """Active schedules of the employee whose date range overlaps [start_date, end_date]."""

        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        shift_id: int,
        start_date: date,
        end_date: Optional[date],
        days_of_week: AbstractSet[Weekday],
    ) -> int:
        """Insert an active schedule. Returns schedule_id."""

        raise NotImplementedError


class ScheduleRepository(Protocol):
    def lock_employee(self, employee_id: int) -> ContextManager[ScheduleWriter]:
        """Serialize writers for one employee until the block exits.

        Leaving the block commits; an exception rolls back.
        Raises NotFoundError if the employee does not exist.
        """

        raise NotImplementedError

    def list_active_for_employee(self, employee_id: int) -> Sequence[EmployeeSchedule]:
        raise NotImplementedError
