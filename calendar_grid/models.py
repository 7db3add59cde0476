"""Data models for schedule extraction and the calendar grid."""
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo


DEFAULT_CALENDAR = "Schedule"


@dataclass
class RawEvent:
    """Event extracted from a schedule page, before grid projection."""
    title: str
    start: datetime
    end: datetime
    calendar_name: str = DEFAULT_CALENDAR
    url: Optional[str] = None
    location: Optional[str] = None


@dataclass(frozen=True)
class ColorTriple:
    """Display classes for one calendar."""
    background: str
    text: str
    border: str

    def to_dict(self) -> Dict[str, str]:
        return {'bg': self.background, 'text': self.text, 'border': self.border}


@dataclass
class GridEvent:
    """Event positioned on a week grid."""
    id: str
    name: str
    day_index: int
    start_minutes: int
    end_minutes: int
    color: ColorTriple
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'dayIndex': self.day_index,
            'startMinutes': self.start_minutes,
            'endMinutes': self.end_minutes,
            'url': self.url,
            'color': self.color.to_dict()
        }


@dataclass
class CalendarBucket:
    """One calendar lane of the grid."""
    label: str
    events: List[GridEvent] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'label': self.label,
            'events': [event.to_dict() for event in self.events]
        }


@dataclass
class ParseDiagnostics:
    """What a parser saw while reading a page; used for selector tuning."""
    parser: str
    found_table: bool = False
    headers: List[str] = field(default_factory=list)
    column_indices: Dict[str, int] = field(default_factory=dict)
    rows_seen: int = 0
    rows_skipped: int = 0
    fallback_used: bool = False
    fallback_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'parser': self.parser,
            'foundTable': self.found_table,
            'headers': list(self.headers),
            'idx': dict(self.column_indices),
            'rowsSeen': self.rows_seen,
            'rowsSkipped': self.rows_skipped,
            'fallbackUsed': self.fallback_used,
            'fallbackCount': self.fallback_count
        }


@dataclass
class ParseResult:
    """Events produced by one parsing strategy."""
    events: List[RawEvent]
    diagnostics: ParseDiagnostics


@dataclass
class ExtractOptions:
    """Context for one extraction call."""
    week_anchor: date
    base_origin: str = ""
    timezone: tzinfo = field(default_factory=lambda: ZoneInfo('UTC'))


@dataclass
class ExtractionResult:
    """Calendar buckets keyed by slug, plus parser diagnostics."""
    buckets: Dict[str, CalendarBucket]
    diagnostics: ParseDiagnostics

    def to_dict(self) -> Dict[str, Any]:
        return {key: bucket.to_dict() for key, bucket in self.buckets.items()}
