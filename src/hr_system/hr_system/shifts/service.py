from __future__ import annotations

import logging
from typing import Sequence

from ..common.datetime_utils import parse_clock_time
from ..common.validators import require_non_empty, require_positive_id
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Shift
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


class ShiftService:
    """Use cases: maintain the shift catalogue."""

    def __init__(self, shifts: ShiftRepository):
        self._shifts = shifts

    def create_shift(self, *, current_role: Role, shift_name: str, start_time: str, end_time: str) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You are not allowed to manage shifts")

        name = require_non_empty(shift_name, "name")
        start = parse_clock_time(start_time, "startTime")
        end = parse_clock_time(end_time, "endTime")
        if start == end:
            raise ValidationError("startTime and endTime must differ")

        shift_id = self._shifts.create(shift_name=name, start_time=start, end_time=end)
        logger.info("shift created: id=%s name=%r %s-%s", shift_id, name, start, end)
        return shift_id

    def list_shifts(self) -> Sequence[Shift]:
        return self._shifts.list_all()

    def get_shift(self, shift_id: int) -> Shift:
        shift = self._shifts.get_by_id(require_positive_id(shift_id, "shiftId"))
        if not shift:
            raise NotFoundError("Shift not found")
        return shift
