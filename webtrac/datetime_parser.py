"""Date and time-range parsing for WebTrac schedule text."""
import logging
import re
from datetime import datetime, tzinfo
from typing import NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"\d{1,2}/\d{1,2}/\d{4}")
LOOSE_DATE_PATTERN = re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b")
TIME_RANGE_PATTERN = re.compile(
    r"(\d{1,2}:\d{2}\s*[AP]M)\s*[-–—]\s*(\d{1,2}:\d{2}\s*[AP]M)",
    re.IGNORECASE
)
TIME_PATTERN = re.compile(r"\d{1,2}:\d{2}\s*[AP]M", re.IGNORECASE)

DATETIME_FORMATS = [
    '%m/%d/%Y %I:%M %p',
    '%m/%d/%Y %I:%M%p',
]


class DateTimeMatch(NamedTuple):
    """Date and time-range tokens found in schedule text."""
    date: str
    start: str
    end: str


def _collapse(value: str) -> str:
    return re.sub(r"\s+", " ", value)


def _build_match(date_match, time_match) -> Optional[DateTimeMatch]:
    if not date_match or not time_match:
        return None
    return DateTimeMatch(
        date=date_match.group(0),
        start=_collapse(time_match.group(1)),
        end=_collapse(time_match.group(2))
    )


def parse_date_time(date_text: str, time_text: str) -> Optional[DateTimeMatch]:
    """
    Find a date in `date_text` and a time range in `time_text`.

    The date field is searched for the time range when `time_text` is empty,
    for pages that put both in one column.

    Args:
        date_text: Text of the date column
        time_text: Text of the time column

    Returns:
        DateTimeMatch or None when either token is missing
    """
    date_match = DATE_PATTERN.search(date_text or '')
    time_match = TIME_RANGE_PATTERN.search(time_text or date_text or '')
    return _build_match(date_match, time_match)


def parse_date_time_loose(text: str) -> Optional[DateTimeMatch]:
    """Find a date and a time range anywhere in one block of text."""
    date_match = LOOSE_DATE_PATTERN.search(text or '')
    time_match = TIME_RANGE_PATTERN.search(text or '')
    return _build_match(date_match, time_match)


def looks_like_time(text: str) -> bool:
    return bool(TIME_PATTERN.search(text or ''))


def to_instant(date_str: str, time_str: str, tz: tzinfo) -> Optional[datetime]:
    """
    Interpret "<date> <time>" as wall-clock time in `tz`.

    Args:
        date_str: Date such as "1/15/2024"
        time_str: Time such as "10:00 AM"
        tz: Timezone the schedule's times are written in

    Returns:
        Timezone-aware datetime, or None if the combination is invalid
    """
    combined = f"{date_str} {time_str}".strip()
    for fmt in DATETIME_FORMATS:
        try:
            return datetime.strptime(combined, fmt).replace(tzinfo=tz)
        except ValueError:
            continue
    logger.debug(f"Unparseable date/time: {combined!r}")
    return None


def resolve_instants(
    match: DateTimeMatch,
    tz: tzinfo
) -> Optional[Tuple[datetime, datetime]]:
    """Turn a DateTimeMatch into (start, end), or None if either fails."""
    start = to_instant(match.date, match.start, tz)
    end = to_instant(match.date, match.end, tz)
    if start is None or end is None:
        return None
    return start, end
