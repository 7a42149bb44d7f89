from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import parse_date_field
from ..common.validators import require_non_empty_list, require_positive_id
from ..common.web import admin_required, current_role, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/shifts/assign", methods=["POST"], endpoint="api_shifts_assign")
    @admin_required
    def api_shifts_assign():
        data = json_body()
        employee_ids = require_non_empty_list(data.get("employeeIds"), "employeeIds")
        if data.get("shiftId") in (None, ""):
            raise ValidationError("shiftId is required")
        start_date = parse_date_field(data.get("startDate"), "startDate")
        if start_date is None:
            raise ValidationError("startDate is required")

        result = container.schedule_assigner.assign_shift_to_employees(
            current_role=current_role(),
            employee_ids=employee_ids,
            shift_id=require_positive_id(data.get("shiftId"), "shiftId"),
            start_date=start_date,
            end_date=parse_date_field(data.get("endDate"), "endDate"),
            days_of_week=data.get("daysOfWeek"),
        )
        return ok(result.to_dict())

    @app.route("/api/shifts/employee/<int:employee_id>", methods=["GET"], endpoint="api_employee_schedule")
    @login_required
    def api_employee_schedule(employee_id: int):
        schedules = container.schedule_assigner.get_employee_schedule(employee_id)
        return ok([sc.to_dict() for sc in schedules])
