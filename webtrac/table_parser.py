"""Structured parser for WebTrac "Display=Detail" schedule tables."""
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from calendar_grid.models import ParseDiagnostics, ParseResult, RawEvent
from webtrac.base_parser import ScheduleParser
from webtrac.datetime_parser import parse_date_time, parse_date_time_loose
from webtrac.text import clean_text

logger = logging.getLogger(__name__)

MIN_HEADER_CELLS = 3

# Column role -> header keywords, checked by substring.
COLUMN_KEYWORDS: Dict[str, List[str]] = {
    'date': ['date'],
    'time': ['time', 'hours', 'start'],
    'activity': ['activity', 'class', 'title', 'description', 'program', 'course'],
    'location': ['location', 'room', 'facility'],
}


def find_header(headers: Sequence[str], keywords: Sequence[str]) -> int:
    """Index of the first header containing any keyword, or -1."""
    for index, header in enumerate(headers):
        if any(keyword in header for keyword in keywords):
            return index
    return -1


def resolve_columns(headers: Sequence[str]) -> Dict[str, int]:
    """
    Map column roles to header indices.

    Args:
        headers: Lowercased, whitespace-normalized header texts

    Returns:
        Dict of role -> column index (-1 when not found). The activity role
        falls back to the first column.
    """
    columns = {
        role: find_header(headers, keywords)
        for role, keywords in COLUMN_KEYWORDS.items()
    }
    if columns['activity'] < 0:
        columns['activity'] = 0
    return columns


class TableScheduleParser(ScheduleParser):
    """Reads events from the first table that looks like a schedule."""

    name = 'table'

    def parse(self, html_content: str, base_origin: str = "") -> ParseResult:
        soup = self._make_soup(html_content)
        diagnostics = ParseDiagnostics(parser=self.name)

        located = self._find_schedule_table(soup)
        if located is None:
            logger.info("No schedule table found in page")
            return ParseResult(events=[], diagnostics=diagnostics)

        header_cells, rows = located
        headers = [clean_text(cell.get_text()).lower() for cell in header_cells]
        columns = resolve_columns(headers)

        diagnostics.found_table = True
        diagnostics.headers = headers
        diagnostics.column_indices = columns
        logger.info(f"Found schedule table with headers {headers}, columns {columns}")

        events = []
        for row in rows:
            cells = row.find_all('td')
            if not cells:
                continue
            diagnostics.rows_seen += 1
            event = self._parse_row(cells, columns, base_origin)
            if event is None:
                diagnostics.rows_skipped += 1
                continue
            events.append(event)

        logger.info(
            f"Parsed {len(events)} events from {diagnostics.rows_seen} table rows"
        )
        return ParseResult(events=events, diagnostics=diagnostics)

    def _find_schedule_table(
        self,
        soup: BeautifulSoup
    ) -> Optional[Tuple[List[Tag], List[Tag]]]:
        """
        Locate the first table with a header row and data rows.

        Returns:
            (header cells, data rows) of the first qualifying table in
            document order, or None
        """
        for table in soup.find_all('table'):
            header_cells = table.select('thead th')
            if header_cells:
                rows = table.select('tbody tr') or [
                    row for row in table.find_all('tr')
                    if row.find('td') and row.find_parent('thead') is None
                ]
            else:
                # Tables without <thead>: a leading row of <th> cells.
                first_row = table.find('tr')
                header_cells = first_row.find_all('th') if first_row else []
                rows = [
                    row for row in table.find_all('tr')
                    if row is not first_row and row.find('td')
                ]

            if len(header_cells) >= MIN_HEADER_CELLS and rows:
                return header_cells, rows
        return None

    def _parse_row(
        self,
        cells: List[Tag],
        columns: Dict[str, int],
        base_origin: str
    ) -> Optional[RawEvent]:
        """
        Build an event from one table row.

        Args:
            cells: The row's <td> cells
            columns: Resolved column roles
            base_origin: Origin for relative detail links

        Returns:
            RawEvent or None when the row has no title or no usable times
        """
        def cell_at(index: int) -> Optional[Tag]:
            return cells[index] if 0 <= index < len(cells) else None

        def text_at(index: int) -> str:
            cell = cell_at(index)
            return clean_text(cell.get_text()) if cell is not None else ''

        activity_cell = cell_at(columns['activity'])
        if activity_cell is None:
            logger.debug("Skipping row without an activity cell")
            return None

        title = clean_text(activity_cell.get_text()) or self._first_link_text(activity_cell)
        if not title:
            logger.debug("Skipping row without a title")
            return None

        url = self._first_link_href(activity_cell, base_origin)
        location = text_at(columns['location']) or None

        match = (
            parse_date_time(text_at(columns['date']), text_at(columns['time']))
            or parse_date_time_loose(activity_cell.get_text())
        )
        if match is None:
            logger.debug(f"Skipping row '{title}': no date/time found")
            return None

        event = self._build_event(title, match, url, location)
        if event is None:
            logger.debug(f"Skipping row '{title}': invalid date/time {match}")
        return event
