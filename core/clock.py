"""
Clock helpers - UTC timestamps in the format the web API returns.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Format a moment as ISO-8601 UTC with millisecond precision.

    Example: ``2024-05-01T09:30:00.000Z``
    """
    moment = moment or utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def days_ago(days: int) -> str:
    """ISO timestamp for ``days`` days before now."""
    return iso_timestamp(utc_now() - timedelta(days=days))
