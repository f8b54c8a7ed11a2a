"""
Recency grouping for list endpoints.

Lists are split into ``today`` / ``yesterday`` / ``older`` buckets by
calendar day (UTC) instead of offset pagination. Items in ``older`` also
get a short display date such as ``"19 Oct"``.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional


def as_utc(value: datetime) -> datetime:
    # sqlite hands back naive datetimes; they were written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_short_date(value: datetime) -> str:
    value = as_utc(value)
    return f"{value.day} {value.strftime('%b')}"


def group_by_recency(
    items: Iterable[Dict[str, Any]],
    key: Callable[[Dict[str, Any]], datetime],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Partition ``items`` into day buckets, newest first inside each bucket.

    ``key`` picks the timestamp used for both bucketing and ordering.
    """
    today = as_utc(now or datetime.now(timezone.utc)).date()
    yesterday = today - timedelta(days=1)

    ordered = sorted(items, key=lambda item: as_utc(key(item)), reverse=True)

    grouped: Dict[str, List[Dict[str, Any]]] = {"today": [], "yesterday": [], "older": []}
    for item in ordered:
        stamp = as_utc(key(item))
        day = stamp.date()
        if day == today:
            grouped["today"].append(item)
        elif day == yesterday:
            grouped["yesterday"].append(item)
        else:
            grouped["older"].append({**item, "formatted_date": format_short_date(stamp)})

    return {**grouped, "count": len(ordered)}
