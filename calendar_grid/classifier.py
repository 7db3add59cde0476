"""Keyword classification of events into named calendars."""
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from calendar_grid.models import DEFAULT_CALENDAR, ColorTriple


PALETTE: Dict[str, ColorTriple] = {
    'blue': ColorTriple('bg-blue-100', 'text-blue-800', 'border-blue-500'),
    'orange': ColorTriple('bg-orange-100', 'text-orange-800', 'border-orange-500'),
    'pink': ColorTriple('bg-pink-100', 'text-pink-800', 'border-pink-500'),
    'gray': ColorTriple('bg-gray-200', 'text-gray-800', 'border-gray-500'),
}

DEFAULT_COLOR = 'gray'


@dataclass(frozen=True)
class CalendarRule:
    """Assigns `label` to any event whose text matches `pattern`."""
    label: str
    pattern: re.Pattern
    color: str

    def matches(self, text: str) -> bool:
        return bool(self.pattern.search(text))


def keyword_rule(label: str, keywords: List[str], color: str) -> CalendarRule:
    """Build a rule matching any of `keywords` as whole words."""
    alternation = '|'.join(re.escape(keyword) for keyword in keywords)
    return CalendarRule(
        label=label,
        pattern=re.compile(rf"\b(?:{alternation})\b"),
        color=color
    )


# Tested in order; the first matching rule wins.
CALENDAR_RULES: List[CalendarRule] = [
    keyword_rule('Aquatics', ['aqua', 'water', 'swim', 'pool'], 'blue'),
    keyword_rule(
        'Court Sports',
        ['pickleball', 'basketball', 'volleyball', 'court'],
        'orange'
    ),
    keyword_rule(
        'Community',
        ['yoga', 'coffee', 'teen', 'community', 'wellness'],
        'pink'
    ),
]


def classify_event(
    title: str,
    location: Optional[str] = None,
    rules: Optional[List[CalendarRule]] = None
) -> str:
    """
    Pick the calendar an event belongs to.

    Args:
        title: Event title
        location: Event location, if known
        rules: Ordered rules to test (default: CALENDAR_RULES)

    Returns:
        Calendar name, or DEFAULT_CALENDAR when no rule matches
    """
    text = f"{title} {location or ''}".lower()
    for rule in rules if rules is not None else CALENDAR_RULES:
        if rule.matches(text):
            return rule.label
    return DEFAULT_CALENDAR


def color_for_calendar(
    calendar_name: str,
    rules: Optional[List[CalendarRule]] = None
) -> ColorTriple:
    """Palette entry for a calendar; unknown names get the default gray."""
    for rule in rules if rules is not None else CALENDAR_RULES:
        if rule.label == calendar_name:
            return PALETTE.get(rule.color, PALETTE[DEFAULT_COLOR])
    return PALETTE[DEFAULT_COLOR]


def slugify_calendar(calendar_name: str) -> str:
    """Bucket key for a calendar name: lowercase with whitespace removed."""
    return re.sub(r"\s+", "", (calendar_name or '').lower()) or 'schedule'
