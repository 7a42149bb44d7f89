from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Account
from .repository import AccountRepository


def _row_to_account(r: dict) -> Account:
    return Account(
        employee_id=int(r["employee_id"]),
        full_name=r["full_name"],
        username=r["username"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        is_active=bool(r["is_active"]),
    )


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value: object) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT employee_id, full_name, username, password_hash, role, is_active
                FROM employees
                WHERE {where}=%s
                """,
                (value,),
            )
            r = fetchone(cur)
            return _row_to_account(r) if r else None

    def get_by_id(self, employee_id: int) -> Optional[Account]:
        return self._get_one("employee_id", int(employee_id))

    def get_by_username(self, username: str) -> Optional[Account]:
        return self._get_one("username", username)
