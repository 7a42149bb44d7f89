from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, current_role, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/shifts", methods=["POST"], endpoint="api_shifts_create")
    @admin_required
    def api_shifts_create():
        data = json_body()
        shift_id = container.shift_service.create_shift(
            current_role=current_role(),
            shift_name=str(data.get("name") or ""),
            start_time=str(data.get("startTime") or ""),
            end_time=str(data.get("endTime") or ""),
        )
        return ok(container.shift_service.get_shift(shift_id).to_dict(), 201)

    @app.route("/api/shifts", methods=["GET"], endpoint="api_shifts_list")
    @login_required
    def api_shifts_list():
        return ok([s.to_dict() for s in container.shift_service.list_shifts()])
