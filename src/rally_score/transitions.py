# Area: Transitions
"""
rally_score.transitions — Score transition record deltas
========================================================

Builds the record delta (camelCase field -> value) for each score
transition. Call these inside the store transaction, with the match
snapshot read in that same transaction: each builder re-runs the
permission check on that snapshot before producing anything.

A denied or malformed transition raises ScoreTransitionError; the
caller asked for a write the engine does not allow.

Transition effects:
    propose   -> scoreProposal(proposed), scoreState=proposed, status=pending_confirmation
    sign      -> scoreProposal(signed, locked), scoreState=signed
    dispute   -> scoreProposal(disputed, locked), scoreState=disputed, status=disputed
    finalise  -> officialResult, scoreState=official, status=completed, scoreLocked
    correct   -> officialResult(version+1, previous archived), needsCorrection if submitted
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ._shared.clock import now_ms
from .enums import (
    DenialKind,
    EventType,
    MatchStatus,
    ProposalStatus,
    ScoreState,
    Side,
)
from .errors import ScoreTransitionError
from .membership import create_team_snapshot, side_for_winner, side_name, side_player_ids
from .models import (
    GameScore,
    Match,
    MatchLike,
    MatchSide,
    OfficialResult,
    OfficialResultVersion,
    RatingSubmission,
    ScoreProposal,
    as_game_scores,
    as_match,
)
from .permissions import (
    REASON_SCORE_LOCKED,
    PermissionResult,
    RegulatoryContext,
    can_correct_result,
    can_dispute_proposal,
    can_finalize_result,
    can_organizer_direct_finalize,
    can_propose_score,
    can_set_rating_eligibility,
    can_sign_proposal,
)

logger = logging.getLogger("rally_score.transitions")
ScoresLike = Iterable[Union[GameScore, Mapping[str, Any]]]

REASON_SCORES_REQUIRED = "Scores are required"
REASON_WINNER_NOT_A_SIDE = "Winner must be sideA or sideB"
DEFAULT_DISPUTE_REASON = "No reason provided"


# ══════════════════════════════════════════════════════════════
# HELPERS
# ══════════════════════════════════════════════════════════════

def _require(result: PermissionResult, match: Match) -> None:
    """Raise ScoreTransitionError if a permission check denied the action."""
    if result.allowed:
        return
    if result.reason == REASON_SCORE_LOCKED:
        code = ScoreTransitionError.SCORE_LOCKED
    elif result.kind is DenialKind.STATE_CONFLICT:
        code = ScoreTransitionError.INVALID_STATE
    else:
        code = ScoreTransitionError.PERMISSION_DENIED
    raise ScoreTransitionError(result.reason or "Action not allowed", code, match.id)


def _validated_result(match: Match, scores: ScoresLike, winner_id: str):
    """Validate scores and winner; return (scores, winner_name)."""
    game_scores = as_game_scores(scores)
    if not game_scores:
        raise ScoreTransitionError(
            REASON_SCORES_REQUIRED, ScoreTransitionError.VALIDATION_FAILED, match.id
        )
    side = side_for_winner(match, winner_id)
    if side is None:
        raise ScoreTransitionError(
            REASON_WINNER_NOT_A_SIDE, ScoreTransitionError.VALIDATION_FAILED, match.id
        )
    return game_scores, side_name(match, side)


def _dump_scores(scores: List[GameScore]) -> List[Dict[str, Any]]:
    return [game.to_record() for game in scores]


def _next_official_result(
    match: Match,
    scores: List[GameScore],
    winner_id: str,
    winner_name: Optional[str],
    organizer_user_id: str,
    now: int,
    correction_reason: Optional[str] = None,
) -> OfficialResult:
    """New official result; an existing one is archived as a previous version."""
    current = match.official_result
    if current is None:
        return OfficialResult(
            scores=scores,
            winner_id=winner_id,
            winner_name=winner_name,
            finalised_by_user_id=organizer_user_id,
            finalised_at=now,
            version=1,
        )

    archived = OfficialResultVersion(
        version=current.version,
        scores=current.scores,
        winner_id=current.winner_id,
        finalised_by_user_id=current.finalised_by_user_id,
        finalised_at=current.finalised_at,
        superseded_at=now,
        superseded_by_user_id=organizer_user_id,
        correction_reason=correction_reason,
    )
    return OfficialResult(
        scores=scores,
        winner_id=winner_id,
        winner_name=winner_name,
        finalised_by_user_id=organizer_user_id,
        finalised_at=now,
        version=current.version + 1,
        previous_versions=[*current.previous_versions, archived],
    )


def _flag_correction(submission: RatingSubmission) -> Dict[str, Any]:
    """Keep submission history; mark that the authority needs the correction."""
    return submission.model_copy(
        update={"needs_correction": True, "correction_submitted": False}
    ).to_record()


def _canonical_result_fields(
    match: Match,
    result: OfficialResult,
) -> Dict[str, Any]:
    """Flat fields older readers still use alongside officialResult."""
    fields = {
        "winnerId": result.winner_id,
        "winnerName": result.winner_name,
        "scores": _dump_scores(result.scores),
    }
    if match.event_type is EventType.LEAGUE:
        fields["winnerMemberId"] = result.winner_id
    return fields


# ══════════════════════════════════════════════════════════════
# PLAYER TRANSITIONS
# ══════════════════════════════════════════════════════════════

def propose_score(
    match: MatchLike,
    user_id: str,
    scores: ScoresLike,
    winner_id: str,
    context: Optional[RegulatoryContext] = None,
    now: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Delta for a participant proposing (or revising) a score.

    Freezes the team snapshot if the match has none, and fills in side
    records on league matches created before side records existed.
    """
    match = as_match(match)
    _require(can_propose_score(match, user_id, context), match)
    game_scores, winner_name = _validated_result(match, scores, winner_id)
    now = now if now is not None else now_ms()

    proposal = ScoreProposal(
        entered_by_user_id=user_id,
        scores=game_scores,
        winner_id=winner_id,
        winner_name=winner_name,
        entered_at=now,
        status=ProposalStatus.PROPOSED,
        locked=False,
    )
    snapshot = create_team_snapshot(match, now)

    delta: Dict[str, Any] = {
        "scoreProposal": proposal.to_record(),
        "scoreState": ScoreState.PROPOSED.value,
        "teamSnapshot": snapshot.to_record(),
        "status": MatchStatus.PENDING_CONFIRMATION.value,
        "submittedByUserId": user_id,
        "submittedAt": now,
        "updatedAt": now,
    }
    for side, key, existing in (
        (Side.SIDE_A, "sideA", match.side_a),
        (Side.SIDE_B, "sideB", match.side_b),
    ):
        if existing is None:
            delta[key] = MatchSide(
                id=match.member_a_id if side is Side.SIDE_A else match.member_b_id,
                name=side_name(match, side),
                player_ids=side_player_ids(match, side),
            ).to_record()

    logger.info(f"Score proposed by {user_id}", extra={"match_id": match.id})
    return delta


def sign_score(
    match: MatchLike,
    user_id: str,
    now: Optional[int] = None,
) -> Dict[str, Any]:
    """Delta for the opposing side acknowledging the proposal."""
    match = as_match(match)
    _require(can_sign_proposal(match, user_id), match)
    now = now if now is not None else now_ms()

    proposal = match.score_proposal.model_copy(update={
        "status": ProposalStatus.SIGNED,
        "signed_by_user_id": user_id,
        "signed_at": now,
        "locked": True,
    })

    logger.info(f"Proposal signed by {user_id}", extra={"match_id": match.id})
    return {
        "scoreProposal": proposal.to_record(),
        "scoreState": ScoreState.SIGNED.value,
        "updatedAt": now,
    }


def dispute_score(
    match: MatchLike,
    user_id: str,
    dispute_reason: Optional[str] = None,
    now: Optional[int] = None,
) -> Dict[str, Any]:
    """Delta for the opposing side disputing the proposal."""
    match = as_match(match)
    _require(can_dispute_proposal(match, user_id), match)
    now = now if now is not None else now_ms()

    proposal = match.score_proposal.model_copy(update={
        "status": ProposalStatus.DISPUTED,
        "disputed_by_user_id": user_id,
        "disputed_at": now,
        "dispute_reason": dispute_reason or DEFAULT_DISPUTE_REASON,
        "locked": True,
    })

    logger.info(f"Proposal disputed by {user_id}", extra={"match_id": match.id})
    return {
        "scoreProposal": proposal.to_record(),
        "scoreState": ScoreState.DISPUTED.value,
        "status": MatchStatus.DISPUTED.value,
        "updatedAt": now,
    }


# ══════════════════════════════════════════════════════════════
# ORGANIZER TRANSITIONS
# ══════════════════════════════════════════════════════════════

def finalise_result(
    match: MatchLike,
    organizer_user_id: str,
    scores: ScoresLike,
    winner_id: str,
    is_organizer: bool = True,
    context: Optional[RegulatoryContext] = None,
    direct: bool = False,
    rating_eligible: bool = True,
    now: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Delta for an organizer writing the official result.

    This is the only way a match starts counting for standings. With
    direct=True the direct-entry rules apply instead (regulated event,
    organizer not playing, match still open) and context is required.
    """
    match = as_match(match)
    if direct:
        _require(can_organizer_direct_finalize(match, organizer_user_id, context), match)
    else:
        _require(can_finalize_result(match, is_organizer), match)
    game_scores, winner_name = _validated_result(match, scores, winner_id)
    now = now if now is not None else now_ms()

    result = _next_official_result(
        match, game_scores, winner_id, winner_name, organizer_user_id, now
    )

    submission = match.rating_submission
    if submission is not None and submission.submitted:
        # Submitted stays submitted; the authority gets a correction
        rating_record = _flag_correction(submission)
    else:
        rating_record = {"eligible": rating_eligible, "submitted": False}

    delta: Dict[str, Any] = {
        "officialResult": result.to_record(),
        "scoreState": ScoreState.OFFICIAL.value,
        "status": MatchStatus.COMPLETED.value,
        "scoreLocked": True,
        "scoreLockedAt": now,
        "scoreLockedByUserId": organizer_user_id,
        "completedAt": now,
        "updatedAt": now,
        "dupr": rating_record,
    }
    delta.update(_canonical_result_fields(match, result))

    logger.info(
        f"Official result v{result.version} by {organizer_user_id}"
        f"{' (direct entry)' if direct else ''}: winner={winner_id}",
        extra={"match_id": match.id},
    )
    return delta


def correct_result(
    match: MatchLike,
    organizer_user_id: str,
    scores: ScoresLike,
    winner_id: str,
    is_organizer: bool = True,
    correction_reason: Optional[str] = None,
    now: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Delta for an organizer correcting an existing official result.

    The previous result is archived in previousVersions. If it was
    already submitted to the rating authority, the submission is
    flagged needsCorrection.
    """
    match = as_match(match)
    _require(can_correct_result(match, is_organizer), match)
    game_scores, winner_name = _validated_result(match, scores, winner_id)
    now = now if now is not None else now_ms()

    result = _next_official_result(
        match, game_scores, winner_id, winner_name, organizer_user_id, now,
        correction_reason=correction_reason,
    )

    delta: Dict[str, Any] = {
        "officialResult": result.to_record(),
        "updatedAt": now,
    }
    delta.update(_canonical_result_fields(match, result))

    submission = match.rating_submission
    if submission is not None and submission.submitted:
        delta["dupr"] = _flag_correction(submission)
        logger.warning("Corrected after DUPR submission; correction required", extra={"match_id": match.id})

    logger.info(
        f"Official result corrected to v{result.version} by {organizer_user_id}",
        extra={"match_id": match.id},
    )
    return delta


def set_rating_eligibility(
    match: MatchLike,
    eligible: bool,
    is_organizer: bool = True,
    now: Optional[int] = None,
) -> Dict[str, Any]:
    """Delta marking whether the match may be submitted to DUPR."""
    match = as_match(match)
    _require(can_set_rating_eligibility(match, is_organizer), match)
    now = now if now is not None else now_ms()

    current = match.rating_submission or RatingSubmission()
    logger.info(f"DUPR eligibility set to {eligible}", extra={"match_id": match.id})
    return {
        "dupr": current.model_copy(update={"eligible": eligible}).to_record(),
        "updatedAt": now,
    }


def ensure_team_snapshot(match: MatchLike, now: Optional[int] = None) -> Dict[str, Any]:
    """Delta adding a team snapshot to a match that lacks one; empty if present."""
    match = as_match(match)
    if match.team_snapshot is not None:
        return {}
    now = now if now is not None else now_ms()
    snapshot = create_team_snapshot(match, now)
    return {"teamSnapshot": snapshot.to_record(), "updatedAt": now}
