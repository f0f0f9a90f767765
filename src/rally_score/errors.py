# Area: Core
"""
rally_score.errors — Custom exception classes
=============================================

Defines the exception hierarchy for misuse of the scoring core.

Permission and eligibility checks never raise for business-rule
violations; they return result values. These exceptions are reserved
for records that cannot be read, configuration that cannot be used,
and callers that try to apply a transition the engine has denied.
Each exception stores full context for structured logging.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import json


class RallyScoreError(Exception):
    """Base exception for all rally_score errors."""
    pass


class InvalidMatchRecordError(RallyScoreError):
    """Raised when a match record fails model validation."""

    def __init__(self, record_type: str, raw_record: Any, validation_errors: List[str]):
        self.record_type = record_type
        self.raw_record = raw_record
        self.validation_errors = validation_errors
        super().__init__(
            f"Invalid {record_type} record: {validation_errors}"
        )

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="INVALID_RECORD",
            subject=self.record_type,
            payload=self.raw_record if isinstance(self.raw_record, dict) else None,
            details=self.validation_errors,
        )


class MissingRosterError(RallyScoreError):
    """Raised when a match carries no roster data at all."""

    def __init__(self, match_id: Optional[str]):
        self.match_id = match_id
        super().__init__(
            f"Match '{match_id}' has no side rosters to resolve participants from"
        )


class ScoreTransitionError(RallyScoreError):
    """Raised when a caller applies a transition that is denied or invalid."""

    PERMISSION_DENIED = "PERMISSION_DENIED"
    SCORE_LOCKED = "SCORE_LOCKED"
    INVALID_STATE = "INVALID_STATE"
    VALIDATION_FAILED = "VALIDATION_FAILED"

    def __init__(self, message: str, code: str, match_id: Optional[str] = None):
        self.code = code
        self.match_id = match_id
        super().__init__(message)

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.code,
            subject=f"match {self.match_id}",
            payload=None,
            details=[str(self)],
        )


class SubmissionPayloadError(RallyScoreError):
    """Raised when a rating payload is requested for an ineligible match."""

    def __init__(self, match_id: Optional[str], reasons: List[str]):
        self.match_id = match_id
        self.reasons = reasons
        super().__init__(
            f"Match '{match_id}' is not eligible for rating submission: {reasons}"
        )


class ConfigError(RallyScoreError):
    """Raised when configuration values are missing or malformed."""

    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__(f"Invalid configuration: {problems}")


def _format_error_block(
    error_type: str,
    subject: str,
    payload: Optional[Dict[str, Any]],
    details: Optional[List[str]],
) -> str:
    """Format a structured error block for logs."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " SCORING ERROR",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Subject:      {subject}",
    ]

    if payload is not None:
        lines.append("")
        lines.append(" ── RECORD " + "─" * 53)
        lines.append(_indent_json(payload))

    if details:
        lines.append("")
        lines.append(" ── DETAILS " + "─" * 52)
        for detail in details:
            lines.append(f" • {detail}")

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
