"""Schedule extraction: HTML in, calendar buckets out."""
import logging
from datetime import tzinfo
from typing import List, Optional, Type

from calendar_grid.models import ExtractionResult, ExtractOptions, ParseResult
from calendar_grid.projector import project_events
from webtrac.base_parser import ScheduleParser
from webtrac.fallback_parser import FallbackScheduleParser
from webtrac.table_parser import TableScheduleParser

logger = logging.getLogger(__name__)

# Tried in order; the first strategy that yields events wins.
DEFAULT_PARSERS: List[Type[ScheduleParser]] = [
    TableScheduleParser,
    FallbackScheduleParser,
]


def run_parsers(
    html_content: str,
    base_origin: str,
    timezone: tzinfo,
    parser_classes: Optional[List[Type[ScheduleParser]]] = None
) -> ParseResult:
    """
    Run parsing strategies in order until one produces events.

    Args:
        html_content: Raw schedule page HTML
        base_origin: Origin for relative detail links
        timezone: Timezone the page's times are written in
        parser_classes: Strategies to try (default: DEFAULT_PARSERS)

    Returns:
        ParseResult of the first strategy with events. Diagnostics describe
        the first strategy's view of the page; when a later strategy is used
        they also record the fallback and its event count.
    """
    parser_classes = parser_classes if parser_classes is not None else DEFAULT_PARSERS
    if not parser_classes:
        raise ValueError("At least one parser is required")
    primary: Optional[ParseResult] = None

    for parser_class in parser_classes:
        parser = parser_class(timezone)
        result = parser.parse(html_content, base_origin)

        if primary is None:
            primary = result
            if result.events:
                return result
            continue

        logger.warning(
            f"Primary parser found no events, {parser.name} parser found "
            f"{len(result.events)}"
        )
        primary.diagnostics.fallback_used = True
        primary.diagnostics.fallback_count = len(result.events)
        primary.diagnostics.parser = parser.name
        if result.events:
            return ParseResult(events=result.events, diagnostics=primary.diagnostics)

    return ParseResult(events=[], diagnostics=primary.diagnostics)


def extract(html_content: str, options: ExtractOptions) -> ExtractionResult:
    """
    Extract a week of calendar buckets from schedule HTML.

    Args:
        html_content: Raw schedule page HTML
        options: Base origin, week anchor and schedule timezone

    Returns:
        ExtractionResult with buckets keyed by calendar slug and diagnostics
    """
    parsed = run_parsers(html_content, options.base_origin, options.timezone)
    buckets = project_events(parsed.events, options.week_anchor, options.timezone)

    logger.info(
        f"Extracted {sum(len(b.events) for b in buckets.values())} grid events "
        f"in {len(buckets)} calendars from {len(parsed.events)} raw events"
    )
    return ExtractionResult(buckets=buckets, diagnostics=parsed.diagnostics)
