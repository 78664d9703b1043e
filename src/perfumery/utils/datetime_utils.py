"""Datetime utilities for timezone-aware UTC timestamps.

Usage:
    from perfumery.utils.datetime_utils import utc_now

    # For SQLAlchemy Column defaults
    created_at = Column(DateTime, default=utc_now)
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime.

    Returns:
        Current UTC datetime with timezone info
    """
    return datetime.now(timezone.utc)


def today_local() -> date:
    """Return the current calendar date in local time."""
    return date.today()


def epoch_millis(moment: datetime = None) -> int:
    """Milliseconds since the Unix epoch for ``moment`` (default: now)."""
    if moment is None:
        moment = utc_now()
    return int(moment.timestamp() * 1000)
