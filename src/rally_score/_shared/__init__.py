# Area: Shared
"""
Shared utilities used across the scoring core.

This package contains:
- Logging configuration
- Timestamp helpers
"""

from .clock import now_ms, iso_date
from .logging_config import setup_logging

__all__ = [
    "now_ms",
    "iso_date",
    "setup_logging",
]
