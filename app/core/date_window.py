"""CleanAds Proxy — Date Window Helpers.

Resolves the day count requested upstream and filters raw report rows
into an inclusive calendar window for incremental syncs.
"""

import math
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Iterable, List, Mapping, Optional, Tuple

MIN_RANGE_DAYS = 1
MAX_RANGE_DAYS = 90
SECONDS_PER_DAY = 24 * 60 * 60

# at most 9 digits per component
_DIGITS = re.compile(r"[0-9]{1,9}")


def split_short_date(value: Any) -> Optional[Tuple[int, int, str]]:
    """Split an MM/DD/YYYY string into (month, day, year).

    The year is returned as written. Returns None unless there are exactly
    three numeric components.
    """
    if not isinstance(value, str) or not value:
        return None
    parts = [p.strip() for p in value.split("/")]
    if len(parts) != 3 or not all(_DIGITS.fullmatch(p) for p in parts):
        return None
    month, day, year = parts
    return int(month), int(day), year


def parse_short_date(value: Any) -> Optional[date]:
    """Parse an MM/DD/YYYY string into a real calendar date, else None."""
    parts = split_short_date(value)
    if parts is None:
        return None
    month, day, year = parts
    try:
        return date(int(year), month, day)
    except ValueError:
        return None


def iso_utc(moment: datetime) -> str:
    """ISO-8601 in UTC with milliseconds and a Z suffix."""
    return (
        moment.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def utc_now(now: Optional[datetime]) -> datetime:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now


def _midnight(d: date) -> datetime:
    return datetime.combine(d, time.min, tzinfo=timezone.utc)


def resolve_range_days(
    fallback: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> int:
    """Day count to request upstream.

    Without a start date the fallback passes through unchanged. Otherwise
    the span from start to end (or now) is rounded up to whole days, made
    inclusive of both ends, and clamped to [1, 90].
    """
    if start_date is None:
        return fallback

    start = _midnight(start_date)
    end = _midnight(end_date) if end_date else utc_now(now)
    diff_days = math.ceil(abs((end - start).total_seconds()) / SECONDS_PER_DAY)
    return min(MAX_RANGE_DAYS, max(MIN_RANGE_DAYS, diff_days + 1))


def window_covered(
    range_days: int,
    start_date: Optional[date],
    now: Optional[datetime] = None,
) -> bool:
    """Whether the upstream window (range_days ending today) reaches start_date."""
    if start_date is None:
        return True
    today = utc_now(now).date()
    earliest = today - timedelta(days=max(range_days, MIN_RANGE_DAYS) - 1)
    return start_date >= earliest


def filter_by_window(
    records: Iterable[Any],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> List[Any]:
    """Keep rows whose ShortDate falls inside [start_date, end_date].

    Rows without a parsable ShortDate are dropped. When no start date is
    given every row passes through.
    """
    if start_date is None:
        return list(records)

    end = end_date or utc_now(now).date()
    kept: List[Any] = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        record_date = parse_short_date(record.get("ShortDate"))
        if record_date is not None and start_date <= record_date <= end:
            kept.append(record)
    return kept
