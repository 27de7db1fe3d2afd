"""ModSec Review - Timestamp normalization

Error logs write ``Wed Mar 04 10:15:32.123456 2020`` while access logs write
``04/Mar/2020:10:15:32 +0000``. Both are turned into naive wall-clock
datetimes so records from either stream can be ordered against each other.
"""

from datetime import datetime
from typing import Optional

from .patterns import TIMESTAMP_FORMATS


def parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    if not raw:
        return None
    raw = raw.strip()

    for fmt in TIMESTAMP_FORMATS:
        try:
            parsed = datetime.strptime(raw, fmt)
        except ValueError:
            continue
        return parsed.replace(tzinfo=None)

    try:
        return datetime.fromisoformat(raw).replace(tzinfo=None)
    except ValueError:
        return None


def format_clock(raw: str) -> str:
    """Render a record timestamp as HH:MM, or as-is when it can't be read"""
    parsed = parse_timestamp(raw)
    return parsed.strftime('%H:%M') if parsed else raw
