# Area: Core
"""
rally_score.models — Match record models
========================================

Pydantic models for the match records handed to the scoring core by
the document store. Records are stored with camelCase keys; models
expose snake_case attributes and accept either spelling.

All models are frozen: every decision in the core is made over an
immutable snapshot of the record the caller read.

Usage:
    match = as_match({"status": "completed", "officialResult": {...}})
    match.official_result.winner_id
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .enums import (
    EventType,
    LEGACY_SCORE_STATE_ALIASES,
    MatchStatus,
    ProposalStatus,
    ScoreState,
)
from .errors import InvalidMatchRecordError

logger = logging.getLogger("rally_score.models")


class RecordModel(BaseModel):
    """Base for all store records: camelCase aliases, frozen, extra keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_record(self) -> dict:
        """Dump back to the camelCase shape the store writes."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def _lenient_enum(enum_cls: Type[Enum], value: Any, field_name: str) -> Any:
    """Map a stored value onto enum_cls, dropping values it does not know."""
    if value is None or isinstance(value, enum_cls):
        return value
    if enum_cls is ScoreState and value in LEGACY_SCORE_STATE_ALIASES:
        return LEGACY_SCORE_STATE_ALIASES[value]
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning(f"Unrecognised {field_name} value {value!r}; treating as unset")
        return None


# ══════════════════════════════════════════════════════════════
# SUB-RECORDS
# ══════════════════════════════════════════════════════════════

class GameScore(RecordModel):
    """Points per side for one game."""
    game_number: Optional[int] = None
    score_a: int = 0
    score_b: int = 0

    @field_validator("score_a", "score_b", mode="before")
    @classmethod
    def _none_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @property
    def is_tied(self) -> bool:
        return self.score_a == self.score_b


class ScoreProposal(RecordModel):
    """A player-submitted score awaiting the opposing side."""
    entered_by_user_id: str
    scores: List[GameScore] = Field(default_factory=list)
    winner_id: Optional[str] = None
    winner_name: Optional[str] = None
    entered_at: Optional[int] = None
    status: Optional[ProposalStatus] = ProposalStatus.PROPOSED
    locked: bool = False
    signed_by_user_id: Optional[str] = None
    signed_at: Optional[int] = None
    disputed_by_user_id: Optional[str] = None
    disputed_at: Optional[int] = None
    dispute_reason: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> Any:
        if value is None:
            return ProposalStatus.PROPOSED
        return _lenient_enum(ProposalStatus, value, "scoreProposal.status")

    @field_validator("locked", mode="before")
    @classmethod
    def _none_as_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("scores", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class OfficialResultVersion(RecordModel):
    """An archived, superseded official result."""
    version: int
    scores: List[GameScore] = Field(default_factory=list)
    winner_id: Optional[str] = None
    finalised_by_user_id: Optional[str] = None
    finalised_at: Optional[int] = None
    superseded_at: Optional[int] = None
    superseded_by_user_id: Optional[str] = None
    correction_reason: Optional[str] = None


class OfficialResult(RecordModel):
    """The organiser-finalised, authoritative result."""
    winner_id: Optional[str] = None
    winner_name: Optional[str] = None
    scores: List[GameScore] = Field(default_factory=list)
    finalised_by_user_id: Optional[str] = None
    finalised_at: Optional[int] = None
    version: int = 1
    previous_versions: List[OfficialResultVersion] = Field(default_factory=list)

    @field_validator("scores", "previous_versions", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class TeamSnapshot(RecordModel):
    """Side rosters frozen at schedule time."""
    side_a_player_ids: Optional[List[str]] = None
    side_b_player_ids: Optional[List[str]] = None
    snapshot_at: Optional[int] = None


class MatchSide(RecordModel):
    """Live side record (tournament format)."""
    id: Optional[str] = None
    name: Optional[str] = None
    player_ids: Optional[List[str]] = None
    dupr_ids: List[str] = Field(default_factory=list)

    @field_validator("dupr_ids", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class RatingSubmission(RecordModel):
    """Rating-authority submission tracking (stored under `dupr`)."""
    eligible: Optional[bool] = None
    submitted: Optional[bool] = None
    submitted_at: Optional[int] = None
    submission_id: Optional[str] = None
    submission_error: Optional[str] = None
    batch_id: Optional[str] = None
    needs_correction: Optional[bool] = None
    correction_submitted: Optional[bool] = None


# ══════════════════════════════════════════════════════════════
# MATCH
# ══════════════════════════════════════════════════════════════

class Match(RecordModel):
    """
    A match between two sides, as read from the store.

    Fields mirror the stored document. Legacy per-event fields
    (userAId, partnerAId, memberAId, ...) are kept so that records
    written before side records and snapshots existed still resolve.
    """
    id: Optional[str] = None
    event_type: Optional[EventType] = None
    event_id: Optional[str] = None
    event_name: Optional[str] = None

    status: Optional[MatchStatus] = None
    score_state: Optional[ScoreState] = None
    score_locked: bool = False

    score_proposal: Optional[ScoreProposal] = None
    official_result: Optional[OfficialResult] = None
    team_snapshot: Optional[TeamSnapshot] = None

    side_a: Optional[MatchSide] = None
    side_b: Optional[MatchSide] = None

    # League format
    user_a_id: Optional[str] = None
    partner_a_id: Optional[str] = None
    user_b_id: Optional[str] = None
    partner_b_id: Optional[str] = None
    member_a_id: Optional[str] = None
    member_b_id: Optional[str] = None
    member_a_name: Optional[str] = None
    member_b_name: Optional[str] = None
    user_a_name: Optional[str] = None
    user_b_name: Optional[str] = None

    # Legacy flat result
    migrated_from_legacy: bool = False
    winner_id: Optional[str] = None
    winner_name: Optional[str] = None
    scores: List[GameScore] = Field(default_factory=list)

    rating_submission: Optional[RatingSubmission] = Field(default=None, alias="dupr")
    created_at: Optional[int] = None
    play_type: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> Any:
        return _lenient_enum(MatchStatus, value, "status")

    @field_validator("score_state", mode="before")
    @classmethod
    def _coerce_score_state(cls, value: Any) -> Any:
        return _lenient_enum(ScoreState, value, "scoreState")

    @field_validator("event_type", mode="before")
    @classmethod
    def _coerce_event_type(cls, value: Any) -> Any:
        return _lenient_enum(EventType, value, "eventType")

    @field_validator("score_locked", "migrated_from_legacy", mode="before")
    @classmethod
    def _none_as_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("scores", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


MatchLike = Union[Match, Mapping[str, Any]]


class Participant(RecordModel):
    """A person who may play in a match, with their rating identifier."""
    user_id: str
    display_name: Optional[str] = None
    rating_id: Optional[str] = Field(default=None, alias="duprId")

    @property
    def label(self) -> str:
        return self.display_name or self.user_id


# ══════════════════════════════════════════════════════════════
# PARSING HELPERS
# ══════════════════════════════════════════════════════════════

def as_match(record: MatchLike) -> Match:
    """
    Return record as a Match, validating raw mappings.

    Raises
    ------
    InvalidMatchRecordError
        If the mapping cannot be read as a match.
    """
    if isinstance(record, Match):
        return record
    try:
        return Match.model_validate(record)
    except ValidationError as exc:
        raise InvalidMatchRecordError("match", record, _describe(exc)) from exc


def as_participants(
    roster: Iterable[Union[Participant, Mapping[str, Any]]],
) -> List[Participant]:
    """Return roster entries as Participant models."""
    participants = []
    for entry in roster:
        if isinstance(entry, Participant):
            participants.append(entry)
            continue
        try:
            participants.append(Participant.model_validate(entry))
        except ValidationError as exc:
            raise InvalidMatchRecordError("participant", entry, _describe(exc)) from exc
    return participants


def as_game_scores(scores: Iterable[Union[GameScore, Mapping[str, Any]]]) -> List[GameScore]:
    """Return score entries as GameScore models."""
    result = []
    for entry in scores:
        if isinstance(entry, GameScore):
            result.append(entry)
            continue
        try:
            result.append(GameScore.model_validate(entry))
        except ValidationError as exc:
            raise InvalidMatchRecordError("game score", entry, _describe(exc)) from exc
    return result


def _describe(exc: ValidationError) -> List[str]:
    """Flatten pydantic errors to 'loc: message' strings."""
    return [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
