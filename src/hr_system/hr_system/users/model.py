from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class Account:
    """Domain entity: the login side of an employee record.

    Note: plain data object, no DB access here.
    """

    employee_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    is_active: bool = True
