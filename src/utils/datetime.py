# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities.

All timestamps are stored and compared as timezone-aware UTC values. SQLite
drops the offset when reading back, so values coming from the store pass
through ensure_utc() before they are compared with utc_now().

Usage:
    from src.utils.datetime import utc_now

    created_at = mapped_column(DateTime(timezone=True), default=utc_now)
"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes and convert aware ones to UTC.

    Args:
        dt: Datetime to normalise, or None.

    Returns:
        Timezone-aware UTC datetime, or None if input was None.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def minutes_from_now(minutes: int) -> datetime:
    """Get a UTC datetime the given number of minutes in the future."""
    return utc_now() + timedelta(minutes=minutes)


def is_due(moment: datetime | None) -> bool:
    """Check whether a moment has been reached.

    Args:
        moment: Point in time to check. None means nothing is scheduled.

    Returns:
        True if moment is set and not in the future.
    """
    if moment is None:
        return False
    return ensure_utc(moment) <= utc_now()
