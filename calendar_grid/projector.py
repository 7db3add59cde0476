"""Projection of raw events onto a Monday-anchored week grid."""
import hashlib
import logging
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Dict, List

from calendar_grid.classifier import color_for_calendar, slugify_calendar
from calendar_grid.models import CalendarBucket, GridEvent, RawEvent

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7


def week_anchor(reference: date) -> date:
    """Monday of the week containing `reference`."""
    if isinstance(reference, datetime):
        reference = reference.date()
    return reference - timedelta(days=reference.weekday())


def day_index(start: datetime, anchor: date, tz: tzinfo) -> int:
    """
    Whole days from the anchor's local midnight to `start`.

    Both instants are compared as wall-clock time in `tz`, so a day index
    always matches the local calendar day, including across DST changes.
    """
    anchor_midnight = datetime.combine(anchor, time.min)
    local_start = start.astimezone(tz).replace(tzinfo=None)
    return (local_start - anchor_midnight) // timedelta(days=1)


def minutes_since_midnight(instant: datetime, tz: tzinfo) -> int:
    local = instant.astimezone(tz)
    return local.hour * 60 + local.minute


def generate_event_id(title: str, start: datetime) -> str:
    """
    Generate an identifier from title + start instant.

    Returns:
        SHA256 hex digest of "<title>|<start ISO 8601>"
    """
    composite = f"{title}|{start.isoformat()}"
    return hashlib.sha256(composite.encode('utf-8')).hexdigest()


def project_events(
    events: List[RawEvent],
    anchor: date,
    tz: tzinfo
) -> Dict[str, CalendarBucket]:
    """
    Group events into calendar buckets positioned on the week grid.

    Args:
        events: Raw events in source order
        anchor: Any day of the week to show; normalized to its Monday
        tz: Timezone the grid is drawn in

    Returns:
        Dict of calendar slug -> CalendarBucket. Events starting outside
        the week are dropped.
    """
    monday = week_anchor(anchor)
    buckets: Dict[str, CalendarBucket] = {}
    id_counts: Dict[str, int] = {}
    dropped = 0

    for event in events:
        index = day_index(event.start, monday, tz)
        if index < 0 or index >= DAYS_PER_WEEK:
            dropped += 1
            continue

        event_id = generate_event_id(event.title, event.start)
        id_counts[event_id] = id_counts.get(event_id, 0) + 1
        if id_counts[event_id] > 1:
            event_id = f"{event_id}-{id_counts[event_id]}"

        key = slugify_calendar(event.calendar_name)
        if key not in buckets:
            buckets[key] = CalendarBucket(label=event.calendar_name)

        buckets[key].events.append(GridEvent(
            id=event_id,
            name=event.title,
            day_index=index,
            start_minutes=minutes_since_midnight(event.start, tz),
            end_minutes=minutes_since_midnight(event.end, tz),
            color=color_for_calendar(event.calendar_name),
            url=event.url
        ))

    if dropped:
        logger.info(f"Dropped {dropped} events outside the week of {monday.isoformat()}")
    return buckets
