# microblog/core/dates.py
from __future__ import annotations

from datetime import date, datetime, timezone

# (nombre, segundos) de mayor a menor; meses y años aproximados
_UNITS: tuple[tuple[str, int], ...] = (
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("week", 7 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)


# nombres fijos en inglés: %B depende del locale del proceso
_MONTHS: tuple[str, ...] = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_aware(dt: datetime) -> datetime:
    # SQLite devuelve datetimes naive: los tratamos como UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def relative_time(instant: datetime, now: datetime | None = None) -> str:
    """
    Distancia "estricta" entre instant y now: una sola unidad, la mayor
    cuyo valor entero sea >= 1, sin sufijo "ago".

        relative_time(t, t + 3h 20m) -> "3 hours"
        relative_time(t, t + 1d)     -> "1 day"
    """
    now = _as_aware(now or utcnow())
    elapsed = int((now - _as_aware(instant)).total_seconds())
    if elapsed < 0:
        elapsed = 0

    for name, size in _UNITS:
        value = elapsed // size
        if value >= 1:
            return f"{value} {name}" if value == 1 else f"{value} {name}s"
    return "0 seconds"


def format_month_year(value: date | datetime) -> str:
    """2023-03-15 → "March 2023" """
    return f"{_MONTHS[value.month - 1]} {value.year}"


def format_long_date(value: date | datetime) -> str:
    """1990-07-04 → "July 4, 1990" """
    return f"{_MONTHS[value.month - 1]} {value.day}, {value.year}"


def format_iso_date(value: date | datetime) -> str:
    """1990-07-04 → "1990-07-04" (formato de <input type="date">)"""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()
