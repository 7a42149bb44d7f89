"""Conflict rules between an existing schedule and a proposed one.

Date ranges are inclusive; an end of None is unbounded.
"""
from __future__ import annotations

from datetime import date
from typing import AbstractSet, Iterable, Optional

from ..core.enums import Weekday
from .model import EmployeeSchedule


def ranges_overlap(
    existing_start: date,
    existing_end: Optional[date],
    new_start: date,
    new_end: Optional[date],
) -> bool:
    starts_in_time = new_end is None or existing_start <= new_end
    still_running = existing_end is None or existing_end >= new_start
    return starts_in_time and still_running


def conflicts_with(existing: EmployeeSchedule, new_days: AbstractSet[Weekday]) -> bool:
    # Uninterpretable stored days block the assignment.
    if existing.days_of_week is None:
        return True
    return bool(existing.days_of_week & new_days)


def find_conflict(
    existing: Iterable[EmployeeSchedule],
    *,
    start_date: date,
    end_date: Optional[date],
    days_of_week: AbstractSet[Weekday],
) -> Optional[EmployeeSchedule]:
    for sc in existing:
        if not sc.is_active:
            continue
        if not ranges_overlap(sc.start_date, sc.end_date, start_date, end_date):
            continue
        if conflicts_with(sc, days_of_week):
            return sc
    return None
