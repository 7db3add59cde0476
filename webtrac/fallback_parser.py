"""Loose parser for schedule pages without a recognizable table."""
import logging
from typing import Optional

from bs4 import Tag

from calendar_grid.models import ParseDiagnostics, ParseResult, RawEvent
from webtrac.base_parser import ScheduleParser
from webtrac.datetime_parser import DATE_PATTERN, looks_like_time, parse_date_time_loose
from webtrac.text import clean_text

logger = logging.getLogger(__name__)

BLOCK_SELECTOR = 'tr, li, [class*="row"], [class*="result"], [class*="item"]'
MAX_TITLE_LENGTH = 160


class FallbackScheduleParser(ScheduleParser):
    """
    Scans row-like blocks for a date and a time range anywhere in their text.

    Noisier than TableScheduleParser; used when the page markup does not
    contain the expected schedule table.
    """

    name = 'fallback'

    def parse(self, html_content: str, base_origin: str = "") -> ParseResult:
        soup = self._make_soup(html_content)
        diagnostics = ParseDiagnostics(parser=self.name)

        dated_blocks = [
            block for block in soup.select(BLOCK_SELECTOR)
            if DATE_PATTERN.search(block.get_text())
        ]
        # Deepest blocks first; an outer block is skipped only when a nested
        # block already produced an event.
        produced_ids = set()
        found = []
        for position in range(len(dated_blocks) - 1, -1, -1):
            block = dated_blocks[position]
            if any(id(child) in produced_ids for child in block.find_all(True)):
                continue
            diagnostics.rows_seen += 1
            event = self._parse_block(block, base_origin)
            if event is None:
                diagnostics.rows_skipped += 1
                continue
            produced_ids.add(id(block))
            found.append((position, event))

        events = [event for _, event in sorted(found, key=lambda item: item[0])]

        logger.info(
            f"Fallback parsed {len(events)} events from {diagnostics.rows_seen} blocks"
        )
        return ParseResult(events=events, diagnostics=diagnostics)

    def _parse_block(self, block: Tag, base_origin: str) -> Optional[RawEvent]:
        """
        Build an event from one dated block.

        Args:
            block: Element whose text contains a date
            base_origin: Origin for relative detail links

        Returns:
            RawEvent or None when no title or time range can be found
        """
        raw_text = block.get_text()
        match = parse_date_time_loose(clean_text(raw_text))
        if match is None:
            logger.debug("Skipping block without a time range")
            return None

        title = self._first_link_text(block) or self._title_from_lines(raw_text)
        if not title:
            logger.debug(f"Skipping block without a title on {match.date}")
            return None

        url = self._first_link_href(block, base_origin)
        event = self._build_event(title, match, url, location=None)
        if event is None:
            logger.debug(f"Skipping block '{title}': invalid date/time {match}")
        return event

    def _title_from_lines(self, raw_text: str) -> str:
        """First non-empty line that is not a time, truncated."""
        for line in raw_text.splitlines():
            line = clean_text(line)
            if line and not looks_like_time(line):
                return line[:MAX_TITLE_LENGTH]
        return ''
