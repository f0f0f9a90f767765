# Area: Permissions
"""
rally_score.permissions — Score permission engine
=================================================

Decides who may move a match score through its lifecycle:

- Players can only propose scores, never finalise them
- Signers/disputers must be on the side opposing the proposer
- Organizers finalise, correct, and request rating submission
- scoreLocked blocks every player write
- In DUPR-regulated events an organizer who plays in a match may
  neither propose nor directly finalise it (anti-self-reporting);
  an organizer who does not play in it may enter the result as
  official directly

Every check is evaluated fresh from the record passed in and returns a
PermissionResult; nothing here raises for a denied action. Callers
must re-check inside the transaction that performs the write.

Organizer status is a fact supplied by the caller (is_organizer or
RegulatoryContext.is_organizer); it is never looked up here.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Union

from .enums import DenialKind, MatchStatus, RegulationMode, ScoreAction, ScoreState
from .membership import are_opposing, side_of
from .models import Match, MatchLike, as_match
from .results import is_proposal_locked, is_score_locked
from .status import get_status_label

logger = logging.getLogger("rally_score.permissions")

# Reason strings are shown to end users verbatim.
REASON_SCORE_LOCKED = "Score has been finalized by organizer"
REASON_PROPOSE_NOT_PARTICIPANT = "Only match participants can propose scores"
REASON_PROPOSAL_LOCKED = "Score proposal has been signed or disputed"
REASON_MATCH_CLOSED = "Match is already completed or cancelled"
REASON_ORGANIZER_SELF_PROPOSE = (
    "Organizers cannot propose scores for matches they play in - "
    "your opponent must propose the score"
)
REASON_NO_PROPOSAL_TO_SIGN = "No score proposal to sign"
REASON_NO_PROPOSAL_TO_DISPUTE = "No score proposal to dispute"
REASON_PROPOSAL_ALREADY_ACTED = "Score proposal has already been signed or disputed"
REASON_SIGN_OWN = "Cannot sign your own score proposal"
REASON_DISPUTE_OWN = "Cannot dispute your own score proposal"
REASON_SIGN_NOT_PARTICIPANT = "Only match participants can sign proposals"
REASON_DISPUTE_NOT_PARTICIPANT = "Only match participants can dispute proposals"
REASON_SIGNER_SAME_TEAM = "Signer must be on the opposing team"
REASON_DISPUTER_SAME_TEAM = "Disputer must be on the opposing team"
REASON_FINALIZE_NOT_ORGANIZER = "Only organizers can finalize official scores"
REASON_CORRECT_NOT_ORGANIZER = "Only organizers can correct official scores"
REASON_NO_OFFICIAL_TO_CORRECT = "No official result to correct"
REASON_DIRECT_NOT_ORGANIZER = "Only organizers can enter official results directly"
REASON_DIRECT_NOT_REGULATED = "Direct official entry is only available in DUPR-regulated events"
REASON_ORGANIZER_SELF_FINALIZE = "Organizers cannot enter official results for matches they play in"
REASON_SUBMIT_NOT_ORGANIZER = "Only organizers can submit to DUPR"
REASON_SUBMIT_NO_OFFICIAL = "Match must have an official result"
REASON_SUBMIT_NOT_COMPLETED = "Match must be completed"
REASON_SUBMIT_NOT_OFFICIAL_STATE = "Score must be officially finalized"
REASON_ALREADY_SUBMITTED = "Match has already been submitted to DUPR"
REASON_NOT_ELIGIBLE = "Match is not eligible for DUPR submission"
REASON_ELIGIBILITY_NOT_ORGANIZER = "Only organizers can set DUPR eligibility"
REASON_ELIGIBILITY_AFTER_SUBMIT = "Cannot change eligibility after DUPR submission"

_CLOSED_STATUSES = (MatchStatus.COMPLETED, MatchStatus.CANCELLED)
_SUBMITTABLE_STATES = (ScoreState.OFFICIAL, ScoreState.SUBMITTED_TO_RATING_AUTHORITY)


# ══════════════════════════════════════════════════════════════
# RESULT AND CONTEXT TYPES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PermissionResult:
    """
    Outcome of a permission check.

    Attributes:
        allowed: Whether the action may proceed
        reason: User-facing explanation when denied
        kind: Which class of denial this is (None when allowed)
    """

    allowed: bool
    reason: Optional[str] = None
    kind: Optional[DenialKind] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"allowed": self.allowed, "reason": self.reason}


ALLOWED = PermissionResult(allowed=True)


def _deny(reason: str, kind: DenialKind, match: Match) -> PermissionResult:
    logger.debug(f"Denied ({kind.value}): {reason}", extra={"match_id": match.id})
    return PermissionResult(allowed=False, reason=reason, kind=kind)


@dataclass(frozen=True)
class RegulatoryContext:
    """
    Caller-supplied facts about the acting identity and the event.

    Attributes:
        mode: The event's rating-regulation mode
        is_organizer: Whether the actor organises this event
        self_reporting_enforced_from: Matches created before this epoch-ms
            cutoff are exempt from the anti-self-reporting rule; None
            applies the rule to every match
    """

    mode: RegulationMode = RegulationMode.NONE
    is_organizer: bool = False
    self_reporting_enforced_from: Optional[int] = None

    def __post_init__(self) -> None:
        # Callers may pass the stored string value ("none", "optional", ...)
        object.__setattr__(self, "mode", RegulationMode(self.mode))

    @property
    def is_regulated(self) -> bool:
        return self.mode is not RegulationMode.NONE

    def self_reporting_rule_applies(self, match: Match) -> bool:
        if not self.is_regulated:
            return False
        if self.self_reporting_enforced_from is None or match.created_at is None:
            return True
        return match.created_at >= self.self_reporting_enforced_from


# ══════════════════════════════════════════════════════════════
# PLAYER PERMISSIONS
# ══════════════════════════════════════════════════════════════

def can_propose_score(
    match: MatchLike,
    user_id: str,
    context: Optional[RegulatoryContext] = None,
) -> PermissionResult:
    """
    Check if user can propose (or revise an unlocked proposal of) a score.

    An unsigned proposal may be replaced by a new one; once signed or
    disputed it is frozen.
    """
    match = as_match(match)

    if is_score_locked(match):
        return _deny(REASON_SCORE_LOCKED, DenialKind.STATE_CONFLICT, match)

    if side_of(match, user_id) is None:
        return _deny(REASON_PROPOSE_NOT_PARTICIPANT, DenialKind.AUTHORIZATION, match)

    if is_proposal_locked(match):
        return _deny(REASON_PROPOSAL_LOCKED, DenialKind.STATE_CONFLICT, match)

    if match.status in _CLOSED_STATUSES:
        return _deny(REASON_MATCH_CLOSED, DenialKind.STATE_CONFLICT, match)

    # Actor is a participant at this point
    if context is not None and context.is_organizer and context.self_reporting_rule_applies(match):
        return _deny(REASON_ORGANIZER_SELF_PROPOSE, DenialKind.REGULATORY, match)

    return ALLOWED


def _check_response(
    match: Match,
    user_id: str,
    no_proposal: str,
    own_proposal: str,
    not_participant: str,
    same_team: str,
) -> PermissionResult:
    """Shared checks for sign and dispute; only the wording differs."""
    if is_score_locked(match):
        return _deny(REASON_SCORE_LOCKED, DenialKind.STATE_CONFLICT, match)

    proposal = match.score_proposal
    if proposal is None:
        return _deny(no_proposal, DenialKind.STATE_CONFLICT, match)

    if is_proposal_locked(match):
        return _deny(REASON_PROPOSAL_ALREADY_ACTED, DenialKind.STATE_CONFLICT, match)

    if proposal.entered_by_user_id == user_id:
        return _deny(own_proposal, DenialKind.AUTHORIZATION, match)

    if side_of(match, user_id) is None:
        return _deny(not_participant, DenialKind.AUTHORIZATION, match)

    if not are_opposing(match, proposal.entered_by_user_id, user_id):
        return _deny(same_team, DenialKind.AUTHORIZATION, match)

    return ALLOWED


def can_sign_proposal(match: MatchLike, user_id: str) -> PermissionResult:
    """Check if user can sign (acknowledge) the pending score proposal."""
    return _check_response(
        as_match(match),
        user_id,
        no_proposal=REASON_NO_PROPOSAL_TO_SIGN,
        own_proposal=REASON_SIGN_OWN,
        not_participant=REASON_SIGN_NOT_PARTICIPANT,
        same_team=REASON_SIGNER_SAME_TEAM,
    )


def can_dispute_proposal(match: MatchLike, user_id: str) -> PermissionResult:
    """Check if user can dispute the pending score proposal."""
    return _check_response(
        as_match(match),
        user_id,
        no_proposal=REASON_NO_PROPOSAL_TO_DISPUTE,
        own_proposal=REASON_DISPUTE_OWN,
        not_participant=REASON_DISPUTE_NOT_PARTICIPANT,
        same_team=REASON_DISPUTER_SAME_TEAM,
    )


def validate_signer_is_opposing_team(
    match: MatchLike,
    proposer_user_id: str,
    signer_user_id: str,
) -> PermissionResult:
    """Check a signer against an explicit proposer, using the roster snapshot."""
    match = as_match(match)

    if proposer_user_id == signer_user_id:
        return _deny(REASON_SIGN_OWN, DenialKind.AUTHORIZATION, match)

    if not are_opposing(match, proposer_user_id, signer_user_id):
        return _deny(REASON_SIGNER_SAME_TEAM, DenialKind.AUTHORIZATION, match)

    return ALLOWED


# ══════════════════════════════════════════════════════════════
# ORGANIZER PERMISSIONS
# ══════════════════════════════════════════════════════════════

def can_finalize_result(match: MatchLike, is_organizer: bool) -> PermissionResult:
    """Organizers may always finalise, overriding any proposal."""
    match = as_match(match)
    if not is_organizer:
        return _deny(REASON_FINALIZE_NOT_ORGANIZER, DenialKind.AUTHORIZATION, match)
    return ALLOWED


def can_correct_result(match: MatchLike, is_organizer: bool) -> PermissionResult:
    """Organizers may correct an existing official result."""
    match = as_match(match)
    if not is_organizer:
        return _deny(REASON_CORRECT_NOT_ORGANIZER, DenialKind.AUTHORIZATION, match)
    if match.official_result is None:
        return _deny(REASON_NO_OFFICIAL_TO_CORRECT, DenialKind.STATE_CONFLICT, match)
    return ALLOWED


def can_organizer_direct_finalize(
    match: MatchLike,
    user_id: str,
    context: Optional[RegulatoryContext],
) -> PermissionResult:
    """
    Check if an organizer may enter the result as official directly.

    Only in regulated events, and only for organizers who do not play in
    the match, since they cannot be self-reporting.
    """
    match = as_match(match)

    if context is None or not context.is_organizer:
        return _deny(REASON_DIRECT_NOT_ORGANIZER, DenialKind.AUTHORIZATION, match)

    if not context.is_regulated:
        return _deny(REASON_DIRECT_NOT_REGULATED, DenialKind.REGULATORY, match)

    if side_of(match, user_id) is not None and context.self_reporting_rule_applies(match):
        return _deny(REASON_ORGANIZER_SELF_FINALIZE, DenialKind.REGULATORY, match)

    if is_score_locked(match):
        return _deny(REASON_SCORE_LOCKED, DenialKind.STATE_CONFLICT, match)

    if match.status in _CLOSED_STATUSES:
        return _deny(REASON_MATCH_CLOSED, DenialKind.STATE_CONFLICT, match)

    return ALLOWED


def can_request_rating_submission(match: MatchLike, is_organizer: bool) -> PermissionResult:
    """Check if an organizer may queue this match for DUPR submission."""
    match = as_match(match)

    if not is_organizer:
        return _deny(REASON_SUBMIT_NOT_ORGANIZER, DenialKind.AUTHORIZATION, match)

    if match.official_result is None:
        return _deny(REASON_SUBMIT_NO_OFFICIAL, DenialKind.STATE_CONFLICT, match)

    if match.status is not MatchStatus.COMPLETED:
        return _deny(REASON_SUBMIT_NOT_COMPLETED, DenialKind.STATE_CONFLICT, match)

    if match.score_state not in _SUBMITTABLE_STATES:
        return _deny(REASON_SUBMIT_NOT_OFFICIAL_STATE, DenialKind.STATE_CONFLICT, match)

    submission = match.rating_submission
    if submission is not None and submission.submitted and not submission.needs_correction:
        return _deny(REASON_ALREADY_SUBMITTED, DenialKind.ELIGIBILITY, match)

    if submission is not None and submission.eligible is False:
        return _deny(REASON_NOT_ELIGIBLE, DenialKind.ELIGIBILITY, match)

    return ALLOWED


def can_set_rating_eligibility(match: MatchLike, is_organizer: bool) -> PermissionResult:
    """Organizers may toggle eligibility until the match has been submitted."""
    match = as_match(match)

    if not is_organizer:
        return _deny(REASON_ELIGIBILITY_NOT_ORGANIZER, DenialKind.AUTHORIZATION, match)

    if match.rating_submission is not None and match.rating_submission.submitted:
        return _deny(REASON_ELIGIBILITY_AFTER_SUBMIT, DenialKind.STATE_CONFLICT, match)

    return ALLOWED


# ══════════════════════════════════════════════════════════════
# ACTION TABLE
# ══════════════════════════════════════════════════════════════

# {action: check(match, user_id, context)}
ACTION_CHECKS: Dict[ScoreAction, Callable[[Match, str, RegulatoryContext], PermissionResult]] = {
    ScoreAction.PROPOSE: lambda m, u, c: can_propose_score(m, u, c),
    ScoreAction.SIGN: lambda m, u, c: can_sign_proposal(m, u),
    ScoreAction.DISPUTE: lambda m, u, c: can_dispute_proposal(m, u),
    ScoreAction.FINALIZE: lambda m, u, c: can_finalize_result(m, c.is_organizer),
    ScoreAction.CORRECT: lambda m, u, c: can_correct_result(m, c.is_organizer),
    ScoreAction.DIRECT_FINALIZE: lambda m, u, c: can_organizer_direct_finalize(m, u, c),
    ScoreAction.REQUEST_RATING_SUBMISSION: lambda m, u, c: can_request_rating_submission(m, c.is_organizer),
    ScoreAction.SET_RATING_ELIGIBILITY: lambda m, u, c: can_set_rating_eligibility(m, c.is_organizer),
}


def check_action(
    action: Union[ScoreAction, str],
    match: MatchLike,
    user_id: str,
    context: Optional[RegulatoryContext] = None,
) -> PermissionResult:
    """
    Evaluate one action by name.

    Raises:
        ValueError: If action is not a known ScoreAction
    """
    action = ScoreAction(action)
    return ACTION_CHECKS[action](as_match(match), user_id, context or RegulatoryContext())


# ══════════════════════════════════════════════════════════════
# UI HELPER: AVAILABLE ACTIONS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AvailableScoreActions:
    """Booleans and labels the UI uses to show or hide score controls."""

    can_propose: bool
    can_sign: bool
    can_dispute: bool
    can_finalize: bool
    can_correct: bool
    can_direct_finalize: bool
    can_submit_to_rating: bool
    can_set_rating_eligibility: bool
    status_label: str
    propose_label: str = "Propose Score"
    sign_label: str = "Sign to Acknowledge"
    dispute_label: str = "Dispute Score"
    reasons: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "canPropose": self.can_propose,
            "canSign": self.can_sign,
            "canDispute": self.can_dispute,
            "canFinalize": self.can_finalize,
            "canCorrect": self.can_correct,
            "canDirectFinalize": self.can_direct_finalize,
            "canSubmitToDupr": self.can_submit_to_rating,
            "canSetDuprEligibility": self.can_set_rating_eligibility,
            "proposeLabel": self.propose_label,
            "signLabel": self.sign_label,
            "disputeLabel": self.dispute_label,
            "statusLabel": self.status_label,
            "reasons": dict(self.reasons),
        }


def get_available_score_actions(
    match: MatchLike,
    user_id: str,
    context: Optional[RegulatoryContext] = None,
) -> AvailableScoreActions:
    """Evaluate every action for one actor; used by the UI to show/hide controls."""
    match = as_match(match)
    context = context or RegulatoryContext()

    results = {
        action: check(match, user_id, context)
        for action, check in ACTION_CHECKS.items()
    }
    reasons = {
        action.value: result.reason
        for action, result in results.items()
        if not result.allowed and result.reason
    }

    return AvailableScoreActions(
        can_propose=results[ScoreAction.PROPOSE].allowed,
        can_sign=results[ScoreAction.SIGN].allowed,
        can_dispute=results[ScoreAction.DISPUTE].allowed,
        can_finalize=results[ScoreAction.FINALIZE].allowed,
        can_correct=results[ScoreAction.CORRECT].allowed,
        can_direct_finalize=results[ScoreAction.DIRECT_FINALIZE].allowed,
        can_submit_to_rating=results[ScoreAction.REQUEST_RATING_SUBMISSION].allowed,
        can_set_rating_eligibility=results[ScoreAction.SET_RATING_ELIGIBILITY].allowed,
        status_label=get_status_label(match),
        reasons=reasons,
    )
