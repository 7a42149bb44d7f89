from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.web import json_body, ok
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def api_login():
        data = json_body()
        s_user = container.auth_service.authenticate(str(data.get("username") or ""), str(data.get("password") or ""))

        session.clear()
        session.permanent = bool(data.get("rememberMe"))
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        return ok({"id": s_user.user_id, "fullName": s_user.full_name, "role": s_user.role.value})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    def api_logout():
        session.clear()
        return ok(None)
