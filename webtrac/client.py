"""HTTP client for the WebTrac schedule detail view."""
import logging
from datetime import date

import requests

logger = logging.getLogger(__name__)


class WebTracClient:
    """Fetches schedule HTML from a WebTrac booking site."""

    USER_AGENT = "gm-calendar-scraper/1.0"
    DATE_FORMAT = '%m/%d/%Y'

    def __init__(self, detail_base: str, timeout: int = 30):
        """
        Initialize the client.

        Args:
            detail_base: Detail-view URL, including its fixed query string
            timeout: HTTP request timeout in seconds (default: 30)
        """
        self.detail_base = detail_base
        self.timeout = timeout

    def fetch_detail_html(self, start_date: date, end_date: date) -> str:
        """
        Fetch the detail view for a date range.

        Args:
            start_date: First day of the range
            end_date: Last day of the range

        Returns:
            HTML content as string

        Raises:
            requests.RequestException: On transport errors or non-2xx status
        """
        params = {
            'BeginDate': start_date.strftime(self.DATE_FORMAT),
            'EndDate': end_date.strftime(self.DATE_FORMAT)
        }
        headers = {
            'User-Agent': self.USER_AGENT,
            'Accept': 'text/html,application/xhtml+xml'
        }

        logger.info(
            f"Fetching schedule detail for {params['BeginDate']} - {params['EndDate']}"
        )
        try:
            response = requests.get(
                self.detail_base,
                params=params,
                headers=headers,
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Schedule fetch failed: {e}")
            raise

        logger.info(f"Fetched {len(response.text)} characters of schedule HTML")
        return response.text
