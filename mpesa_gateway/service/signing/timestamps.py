"""
Gateway timestamp formatting and parsing.

The gateway uses 14-digit ``YYYYMMDDHHMMSS`` values in local wall-clock
time. Request timestamps and passwords are derived from the same value,
so both must come from the same clock.
"""

from datetime import datetime
from typing import Optional, Union

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def generate_timestamp(now: Optional[datetime] = None) -> str:
    """Format ``now`` (default: local time) as ``YYYYMMDDHHMMSS``."""
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def parse_gateway_date(value: Union[str, int]) -> datetime:
    """
    Parse a gateway date such as ``20260225120000`` into a naive local datetime.

    Integers are accepted because callback metadata carries dates as numbers.
    """
    s = str(value)
    return datetime(
        year=int(s[0:4]),
        month=int(s[4:6]),
        day=int(s[6:8]),
        hour=int(s[8:10]),
        minute=int(s[10:12]),
        second=int(s[12:14]),
    )
