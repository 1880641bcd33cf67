import logging
from datetime import datetime, timezone

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)


def parse_published_at(raw: str | None) -> datetime | None:
    """Parse a publication date as returned by structured extraction.

    Returns a timezone-aware datetime (naive values are taken as UTC), or None
    when the value is missing or not a recognizable calendar date.
    """
    if not raw or not raw.strip():
        return None

    try:
        parsed = date_parser.parse(raw.strip())
    except (ValueError, OverflowError):
        logger.warning("Could not parse publication date '%s'", raw)
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
