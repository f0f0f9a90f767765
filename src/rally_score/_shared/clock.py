# Area: Shared
"""
rally_score._shared.clock — Timestamps
======================================

Store records carry epoch-millisecond timestamps.
"""

import time
from datetime import datetime, timezone


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def iso_date(epoch_ms: int) -> str:
    """UTC calendar date (YYYY-MM-DD) of an epoch-millisecond timestamp."""
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d")
