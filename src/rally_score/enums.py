# Area: Core
"""
rally_score.enums — Match lifecycle enums
=========================================

Defines the match status, score-state and proposal-status values used
by match records, plus the rating-regulation mode of an event.

Score-state workflow (independent of match status):
NONE -> PROPOSED (participant proposes)
PROPOSED -> SIGNED (opposing participant acknowledges)
PROPOSED -> DISPUTED (opposing participant disputes)
NONE | PROPOSED | SIGNED | DISPUTED -> OFFICIAL (organizer finalises)
OFFICIAL -> SUBMITTED_TO_RATING_AUTHORITY (rating submission succeeds)
"""

from enum import Enum


class MatchStatus(Enum):
    """Scheduling/competition status of a match."""
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    PENDING_CONFIRMATION = "pending_confirmation"
    COMPLETED = "completed"
    DISPUTED = "disputed"
    CANCELLED = "cancelled"
    FORFEIT = "forfeit"
    BYE = "bye"


class ScoreState(Enum):
    """Score-specific workflow state of a match."""
    NONE = "none"
    PROPOSED = "proposed"
    SIGNED = "signed"
    DISPUTED = "disputed"
    OFFICIAL = "official"
    SUBMITTED_TO_RATING_AUTHORITY = "submitted_to_rating_authority"


# Stored values written by older clients
LEGACY_SCORE_STATE_ALIASES = {
    "submittedToDupr": ScoreState.SUBMITTED_TO_RATING_AUTHORITY,
}


class ProposalStatus(Enum):
    """Status of a player-submitted score proposal."""
    PROPOSED = "proposed"
    SIGNED = "signed"
    DISPUTED = "disputed"


class RegulationMode(Enum):
    """Rating-authority regulation mode of an event."""
    NONE = "none"
    OPTIONAL = "optional"
    REQUIRED = "required"


class Side(Enum):
    """The two sides of a match."""
    SIDE_A = "sideA"
    SIDE_B = "sideB"

    @property
    def opponent(self) -> "Side":
        return Side.SIDE_B if self is Side.SIDE_A else Side.SIDE_A


class EventType(Enum):
    """Kind of event a match belongs to."""
    TOURNAMENT = "tournament"
    LEAGUE = "league"
    MEETUP = "meetup"


class ScoreAction(Enum):
    """Actions the permission engine decides on."""
    PROPOSE = "propose"
    SIGN = "sign"
    DISPUTE = "dispute"
    FINALIZE = "finalize"
    CORRECT = "correct"
    DIRECT_FINALIZE = "directFinalize"
    REQUEST_RATING_SUBMISSION = "requestRatingSubmission"
    SET_RATING_ELIGIBILITY = "setRatingEligibility"


class DenialKind(Enum):
    """Why a permission or eligibility check said no."""
    AUTHORIZATION = "authorization"
    STATE_CONFLICT = "state_conflict"
    REGULATORY = "regulatory"
    ELIGIBILITY = "eligibility"


class PanelCategory(Enum):
    """Organiser control-panel bucket for a match."""
    NONE = "none"
    PROPOSED = "proposed"
    NEEDS_REVIEW = "needs_review"
    READY_FOR_DUPR = "ready_for_dupr"
    SUBMITTED = "submitted"
    FAILED = "failed"
    BLOCKED = "blocked"
