"""
Itinerary helpers.

Activities are bucketed by the local calendar day of their timestamp in a
given time zone. Days are stepped with date arithmetic, so DST transitions
and year boundaries never skip or repeat a day.
"""
from datetime import date, datetime, timedelta, timezone
from operator import attrgetter
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DayLike = Union[date, datetime, None]


class Itinerary(NamedTuple):
    days: List[date]
    by_day: Dict[date, List[Any]]
    out_of_range: List[Any]


def resolve_timezone(name: Optional[str]) -> ZoneInfo:
    """Return the ZoneInfo for an IANA name, raising ValueError if unknown."""
    if not name:
        raise ValueError("Time zone name is required")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown time zone: {name}")


def as_utc(moment: datetime) -> datetime:
    """Aware UTC copy of `moment`; naive values are taken to be UTC already."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def local_day(moment: datetime, tz: ZoneInfo) -> date:
    return as_utc(moment).astimezone(tz).date()


def _as_day(value: DayLike, tz: ZoneInfo) -> Optional[date]:
    if value is None:
        return None
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return local_day(value, tz)
    return value


def trip_days(start: DayLike, end: DayLike, tz: ZoneInfo = ZoneInfo("UTC")) -> List[date]:
    """Every calendar day from `start` to `end`, both inclusive."""
    first = _as_day(start, tz)
    last = _as_day(end, tz)
    if first is None or last is None or last < first:
        return []
    return [first + timedelta(days=offset) for offset in range((last - first).days + 1)]


def group_by_day(
    start: DayLike,
    end: DayLike,
    activities: Iterable[Any],
    tz: ZoneInfo,
    moment: Callable[[Any], datetime] = attrgetter("starts_at"),
) -> Itinerary:
    """Group `activities` into the trip's days.

    Each day maps to the activities whose timestamp falls on it in `tz`,
    sorted by timestamp. Activities landing on no trip day are returned in
    `out_of_range`, also sorted.
    """
    days = trip_days(start, end, tz)
    by_day: Dict[date, List[Any]] = {day: [] for day in days}
    out_of_range: List[Any] = []

    for activity in sorted(activities, key=lambda a: as_utc(moment(a))):
        bucket = by_day.get(local_day(moment(activity), tz))
        if bucket is None:
            out_of_range.append(activity)
        else:
            bucket.append(activity)

    return Itinerary(days=days, by_day=by_day, out_of_range=out_of_range)
