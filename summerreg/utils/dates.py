from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from ..errors import InvalidInput


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse(value: str, field: str) -> tuple[datetime, bool]:
    value = value.strip()
    try:
        if len(value) == 10:
            return datetime.combine(date.fromisoformat(value), time.min), True
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidInput(f"{field} no es una fecha válida") from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed, False


def parse_date_range(start: str | None, end: str | None) -> tuple[datetime, datetime] | None:
    """Build an inclusive ``created_at`` window from query-string bounds.

    Both bounds are required for the filter to apply. A date-only ``end``
    covers that whole day.
    """
    if not start or not end:
        return None

    start_dt, _ = _parse(start, "startDate")
    end_dt, date_only = _parse(end, "endDate")
    if date_only:
        end_dt = end_dt + timedelta(days=1) - timedelta(microseconds=1)

    if start_dt > end_dt:
        raise InvalidInput("startDate debe ser anterior a endDate")
    return start_dt, end_dt
