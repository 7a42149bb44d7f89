from __future__ import annotations

from typing import Optional, Protocol

from .model import Account


class AccountRepository(Protocol):
    """Repository interface for accounts.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, employee_id: int) -> Optional[Account]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Account]:
        raise NotImplementedError
