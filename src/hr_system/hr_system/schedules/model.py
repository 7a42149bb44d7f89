from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, FrozenSet, Optional

from ..common.datetime_utils import format_date
from ..common.weekdays import sorted_labels
from ..core.enums import Weekday


@dataclass(frozen=True)
class EmployeeSchedule:
    """Domain entity: a shift assigned to an employee over a date range.

    end_date None means the assignment never expires. days_of_week is None
    when the stored value could not be interpreted.
    """

    schedule_id: int
    employee_id: int
    shift_id: int
    start_date: date
    end_date: Optional[date]
    days_of_week: Optional[FrozenSet[Weekday]]
    is_active: bool = True
    shift_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.schedule_id,
            "employeeId": self.employee_id,
            "shiftId": self.shift_id,
            "shiftName": self.shift_name,
            "startDate": format_date(self.start_date),
            "endDate": format_date(self.end_date),
            "daysOfWeek": sorted_labels(self.days_of_week) if self.days_of_week is not None else None,
            "isActive": self.is_active,
        }


@dataclass(frozen=True)
class AssignmentSuccess:
    employee_id: int
    assignment_id: int

    def to_dict(self) -> dict:
        return {"employeeId": self.employee_id, "assignmentId": self.assignment_id}


@dataclass(frozen=True)
class AssignmentError:
    """employee_id keeps the caller's raw value when it was not a valid id."""

    employee_id: Any
    message: str

    def to_dict(self) -> dict:
        return {"employeeId": self.employee_id, "message": self.message}


@dataclass
class AssignmentResult:
    success: list[AssignmentSuccess] = field(default_factory=list)
    errors: list[AssignmentError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": [s.to_dict() for s in self.success],
            "errors": [e.to_dict() for e in self.errors],
        }
