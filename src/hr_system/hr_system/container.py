from __future__ import annotations

from dataclasses import dataclass

from .database.connection import DBConfig, DatabaseConnection
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleAssigner
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository
from .shifts.service import ShiftService
from .users.mysql_account_repository import MySQLAccountRepository
from .users.repository import AccountRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    accounts_repo: AccountRepository
    shifts_repo: ShiftRepository
    schedules_repo: ScheduleRepository

    auth_service: AuthService
    shift_service: ShiftService
    schedule_assigner: ScheduleAssigner


def wire(*, accounts: AccountRepository, shifts: ShiftRepository, schedules: ScheduleRepository) -> Container:
    """Build services on top of the given repositories (MySQL or in-memory)."""
    return Container(
        accounts_repo=accounts,
        shifts_repo=shifts,
        schedules_repo=schedules,
        auth_service=AuthService(accounts),
        shift_service=ShiftService(shifts),
        schedule_assigner=ScheduleAssigner(schedules, shifts),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire(
        accounts=MySQLAccountRepository(conn),
        shifts=MySQLShiftRepository(conn),
        schedules=MySQLScheduleRepository(conn),
    )
