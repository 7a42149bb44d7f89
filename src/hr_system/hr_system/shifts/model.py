from __future__ import annotations

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class Shift:
    """Domain entity: a named work-time template."""

    shift_id: int
    shift_name: str
    start_time: time
    end_time: time

    @property
    def is_overnight(self) -> bool:
        return self.end_time < self.start_time

    def to_dict(self) -> dict:
        return {
            "id": self.shift_id,
            "name": self.shift_name,
            "startTime": self.start_time.strftime("%H:%M"),
            "endTime": self.end_time.strftime("%H:%M"),
        }
