"""Snapshot timestamp helpers."""

from datetime import datetime
from typing import Optional

# Local time, second resolution. Also the snapshot directory name.
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def make_timestamp(now: Optional[datetime] = None) -> str:
    """Format a moment (default: now, local time) as a snapshot timestamp."""
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse a snapshot directory name. Returns None if it is not a timestamp."""
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        return None
