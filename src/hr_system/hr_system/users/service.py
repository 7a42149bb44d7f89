from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .repository import AccountRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    full_name: str
    role: Role


class AuthService:
    """Use case: authenticate an account (login)."""

    def __init__(self, accounts: AccountRepository):
        self._accounts = accounts

    def authenticate(self, username: str, password: str) -> SessionUser:
        account = self._accounts.get_by_username((username or "").strip())
        if not account or not account.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            valid = check_password_hash(account.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            valid = False

        if not valid:
            logger.info("rejected login for %r", account.username)
            raise AuthenticationError("Invalid username or password")

        return SessionUser(user_id=account.employee_id, full_name=account.full_name, role=account.role)
