# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""UTC epoch helpers and ISO-8601 conversions used on the worker boundary."""
from datetime import datetime, timezone

# J2000.0 reference epoch
J2000 = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Return a timezone-aware UTC datetime. Naive input is taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_time_iso(dt: datetime) -> str:
    """Format as ISO-8601 UTC with a trailing 'Z'."""
    return as_utc(dt).isoformat().replace("+00:00", "Z")


def parse_time_iso(text: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Raises:
        ValueError: If the text is not a valid ISO-8601 timestamp.
    """
    value = text.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(value))


def seconds_since(epoch: datetime, reference: datetime = J2000) -> float:
    return (as_utc(epoch) - as_utc(reference)).total_seconds()
