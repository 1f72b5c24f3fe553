"""Datetime utilities for timezone-aware UTC timestamps.

Usage:
    from src.utils.datetime_utils import utc_now

    timestamp = utc_now()

    # For SQLAlchemy Column defaults
    created_at = Column(DateTime, default=utc_now)
"""

from datetime import datetime, timezone, tzinfo
from typing import Optional

from .config import get_config
from .constants import NOTE_TIMESTAMP_FORMAT


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime.

    Returns:
        Current UTC datetime with timezone info
    """
    return datetime.now(timezone.utc)


def format_note_timestamp(moment: datetime, tz: Optional[tzinfo] = None) -> str:
    """Format a datetime the way note log annotations display it.

    Aware datetimes are converted to the display timezone first (the
    configured one when tz is None). Naive datetimes are taken as already
    being local display time.

    Example:
        >>> format_note_timestamp(datetime(2026, 10, 19, 12, 5, tzinfo=timezone.utc))
        '19.10.2026, 14:05'
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(tz or get_config().display_timezone)
    return moment.strftime(NOTE_TIMESTAMP_FORMAT)
