"""Text helpers shared by the schedule parsers."""
import re
from typing import Optional


ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)


def clean_text(value: Optional[str]) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    if not value:
        return ''
    return re.sub(r"\s+", " ", value).strip()


def absolutize(href: Optional[str], base_origin: str) -> Optional[str]:
    """
    Resolve a detail link against the site origin.

    Args:
        href: Link as found in the page
        base_origin: Origin such as "https://example.org" (may be empty)

    Returns:
        Absolute URL, the href unchanged when it is already absolute or no
        origin is configured, or None when there is no href
    """
    if not href:
        return None
    if ABSOLUTE_URL.match(href):
        return href
    if not base_origin:
        return href
    separator = '' if href.startswith('/') else '/'
    return f"{base_origin}{separator}{href}"
