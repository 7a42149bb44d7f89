from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from ..common.validators import require_positive_id
from ..common.weekdays import parse_days_of_week
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError, ScheduleConflictError, ValidationError
from ..shifts.repository import ShiftRepository
from .model import AssignmentError, AssignmentResult, AssignmentSuccess, EmployeeSchedule
from .overlap import find_conflict
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleAssigner:
    """Use case: assign one shift to many employees without double-booking.

    Each employee is handled on its own: a conflict or a bad record only
    lands in that employee's error entry, the rest of the batch carries on.
    """

    def __init__(self, schedules: ScheduleRepository, shifts: ShiftRepository):
        self._schedules = schedules
        self._shifts = shifts

    def assign_shift_to_employees(
        self,
        *,
        current_role: Role,
        employee_ids: Sequence[Any],
        shift_id: int,
        start_date: date,
        end_date: Optional[date] = None,
        days_of_week: Optional[Iterable[str]] = None,
    ) -> AssignmentResult:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You are not allowed to assign shifts")

        shift = self._shifts.get_by_id(require_positive_id(shift_id, "shiftId"))
        if not shift:
            raise NotFoundError("Shift not found")
        if start_date is None:
            raise ValidationError("startDate is required")
        if end_date is not None and end_date < start_date:
            raise ValidationError("endDate must be on or after startDate")
        days = parse_days_of_week(days_of_week)

        result = AssignmentResult()
        for raw_id in employee_ids:
            employee_id = raw_id
            try:
                employee_id = require_positive_id(raw_id, "employeeId")
                assignment_id = self._assign_one(
                    employee_id=employee_id,
                    shift_id=shift.shift_id,
                    start_date=start_date,
                    end_date=end_date,
                    days=days,
                )
            except DomainError as e:
                logger.info("employee %s not assigned to shift %s: %s", employee_id, shift.shift_id, e)
                result.errors.append(AssignmentError(employee_id=employee_id, message=str(e)))
            except Exception:
                logger.exception("unexpected failure assigning shift %s to employee %s", shift.shift_id, employee_id)
                result.errors.append(AssignmentError(employee_id=employee_id, message="Internal error while assigning"))
            else:
                result.success.append(AssignmentSuccess(employee_id=employee_id, assignment_id=assignment_id))

        logger.info(
            "shift %s (%s) assigned from %s to %s: %d ok, %d rejected",
            shift.shift_id,
            shift.shift_name,
            start_date,
            end_date or "open end",
            len(result.success),
            len(result.errors),
        )
        return result

    def _assign_one(self, *, employee_id: int, shift_id: int, start_date: date, end_date: Optional[date], days) -> int:
        with self._schedules.lock_employee(employee_id) as schedules:
            overlapping = schedules.find_active_overlapping(
                employee_id=employee_id,
                start_date=start_date,
                end_date=end_date,
            )
            conflict = find_conflict(overlapping, start_date=start_date, end_date=end_date, days_of_week=days)
            if conflict:
                name = conflict.shift_name or f"shift #{conflict.shift_id}"
                raise ScheduleConflictError(
                    f"Employee already has an active schedule in that date range ({name})"
                )

            return schedules.create(
                employee_id=employee_id,
                shift_id=shift_id,
                start_date=start_date,
                end_date=end_date,
                days_of_week=days,
            )

    def get_employee_schedule(self, employee_id: int) -> Sequence[EmployeeSchedule]:
        return self._schedules.list_active_for_employee(require_positive_id(employee_id, "employeeId"))
