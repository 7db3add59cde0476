"""Common interface for schedule page parsing strategies."""
from abc import ABC, abstractmethod
from datetime import tzinfo
from typing import Optional

from bs4 import BeautifulSoup, Tag

from calendar_grid.classifier import classify_event
from calendar_grid.models import ParseResult, RawEvent
from webtrac.datetime_parser import DateTimeMatch, resolve_instants
from webtrac.text import absolutize, clean_text


class ScheduleParser(ABC):
    """Turns schedule page HTML into raw events."""

    name = 'base'

    def __init__(self, timezone: tzinfo):
        """
        Initialize the parser.

        Args:
            timezone: Timezone the page's wall-clock times are written in
        """
        self.timezone = timezone

    @abstractmethod
    def parse(self, html_content: str, base_origin: str = "") -> ParseResult:
        """
        Parse events from schedule HTML.

        Args:
            html_content: Raw HTML of the schedule page
            base_origin: Origin used to absolutize relative detail links

        Returns:
            ParseResult with the events found and parser diagnostics
        """

    def _make_soup(self, html_content: str) -> BeautifulSoup:
        return BeautifulSoup(html_content or '', 'html.parser')

    def _first_link_href(self, element: Optional[Tag], base_origin: str) -> Optional[str]:
        if element is None:
            return None
        link = element.find('a', href=True)
        return absolutize(link.get('href'), base_origin) if link else None

    def _first_link_text(self, element: Optional[Tag]) -> str:
        if element is None:
            return ''
        link = element.find('a')
        return clean_text(link.get_text()) if link else ''

    def _build_event(
        self,
        title: str,
        match: DateTimeMatch,
        url: Optional[str],
        location: Optional[str]
    ) -> Optional[RawEvent]:
        """Resolve instants and classify; None when the times are invalid."""
        instants = resolve_instants(match, self.timezone)
        if instants is None:
            return None
        start, end = instants
        return RawEvent(
            title=title,
            start=start,
            end=end,
            calendar_name=classify_event(title, location),
            url=url,
            location=location
        )
