"""Weekday label parsing.

Stored and returned labels are always the canonical English names from
:class:`Weekday`. Input accepts any casing, three-letter abbreviations and
the Spanish names the HR frontend sends.
"""
from __future__ import annotations

import json
from typing import Any, FrozenSet, Iterable, Optional

from ..core.constants import DEFAULT_DAYS_OF_WEEK
from ..core.enums import Weekday
from ..core.exceptions import ValidationError

_ALIASES: dict[str, Weekday] = {}
for _day in Weekday:
    _ALIASES[_day.value.lower()] = _day
    _ALIASES[_day.value[:3].lower()] = _day

_ALIASES.update(
    {
        "lunes": Weekday.MONDAY,
        "martes": Weekday.TUESDAY,
        "miércoles": Weekday.WEDNESDAY,
        "miercoles": Weekday.WEDNESDAY,
        "jueves": Weekday.THURSDAY,
        "viernes": Weekday.FRIDAY,
        "sábado": Weekday.SATURDAY,
        "sabado": Weekday.SATURDAY,
        "domingo": Weekday.SUNDAY,
    }
)

_ORDER = {day: i for i, day in enumerate(Weekday)}


def to_weekday(label: Any) -> Optional[Weekday]:
    if not isinstance(label, str):
        return None
    return _ALIASES.get(label.strip().lower())


def parse_days_of_week(labels: Optional[Iterable[Any]]) -> FrozenSet[Weekday]:
    """Parse caller-supplied labels; None falls back to Monday..Friday."""
    if labels is None:
        return frozenset(Weekday(d) for d in DEFAULT_DAYS_OF_WEEK)
    if not isinstance(labels, (list, tuple, set, frozenset)):
        raise ValidationError("daysOfWeek must be a list of weekday names")

    days = set()
    for label in labels:
        day = to_weekday(label)
        if day is None:
            raise ValidationError(f"Unknown weekday: {label!r}")
        days.add(day)

    if not days:
        raise ValidationError("daysOfWeek must not be empty")
    return frozenset(days)


def parse_stored_days(raw: Any) -> Optional[FrozenSet[Weekday]]:
    """Interpret a stored days_of_week value.

    Returns None when the value cannot be interpreted; callers treat that as
    a conflict.
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return None
    if not isinstance(raw, (list, tuple, set, frozenset)) or not raw:
        return None

    days = set()
    for label in raw:
        day = to_weekday(label)
        if day is None:
            return None
        days.add(day)
    return frozenset(days)


def sorted_labels(days: Iterable[Weekday]) -> list[str]:
    return [d.value for d in sorted(days, key=_ORDER.__getitem__)]


def dump_days(days: Iterable[Weekday]) -> str:
    return json.dumps(sorted_labels(days))
