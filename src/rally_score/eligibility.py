# Area: Rating
"""
rally_score.eligibility — Rating-submission eligibility gate
============================================================

Validates a completed, officially resolved match against the rating
authority's structural requirements before it may be queued.

Checks, in order (the first structural failure stops the gate):
1. Match status is completed
2. An official (or migrated legacy) result with at least one game
3. Not already submitted, unless a correction is pending
4. Game count within the authority's limit
5. No tied game
6. At least one game where a side reached the minimum score
7. Both sides have players
8. Every player (both partners in doubles) has a rating id, stored on
   the side record or looked up in the roster;
   one reason per missing player

The gate only decides. Submission transport and identifiers live
outside the core.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .config import DEFAULT_CONFIG, ScoringConfig
from .enums import MatchStatus, Side
from .membership import side_name, side_player_ids
from .models import Match, MatchLike, Participant, as_match, as_participants
from .results import get_scores

logger = logging.getLogger("rally_score.eligibility")

REASON_NOT_COMPLETED = "Match must be completed"
REASON_NO_SCORES = "Match has no official scores"
REASON_ALREADY_SUBMITTED = "Match has already been submitted to DUPR"
REASON_MISSING_SIDES = "Match has TBD or missing participants"

_DEFAULT_SIDE_LABELS = {Side.SIDE_A: "Side A", Side.SIDE_B: "Side B"}


@dataclass(frozen=True)
class EligibilityResult:
    """
    Verdict of the eligibility gate.

    Attributes:
        eligible: True if the match may be queued for submission
        reasons: Every reason the match was rejected (empty when eligible)
        missing_participants: User ids without a rating id
    """

    eligible: bool
    reasons: Tuple[str, ...] = ()
    missing_participants: Tuple[str, ...] = ()

    @property
    def reason(self) -> Optional[str]:
        return self.reasons[0] if self.reasons else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "eligible": self.eligible,
            "reason": self.reason,
            "reasons": list(self.reasons),
            "missingParticipants": list(self.missing_participants),
        }


def is_doubles(match: Match) -> bool:
    """Doubles if either side has two players, or the play type says so."""
    if len(side_player_ids(match, Side.SIDE_A)) > 1 or len(side_player_ids(match, Side.SIDE_B)) > 1:
        return True
    return bool(match.play_type) and match.play_type != "singles"


def resolve_rating_ids(
    match: Match,
    side: Side,
    participants: Mapping[str, Participant],
) -> Dict[str, Optional[str]]:
    """
    Rating id per player on one side.

    Ids already stored on the side record are used when they cover every
    player (they are stored in player order); otherwise each player is
    looked up in the roster.
    """
    player_ids = side_player_ids(match, side)
    record = match.side_a if side is Side.SIDE_A else match.side_b
    stored = record.dupr_ids if record is not None else []
    if player_ids and len(stored) == len(player_ids):
        return dict(zip(player_ids, stored))

    resolved: Dict[str, Optional[str]] = {}
    for player_id in player_ids:
        participant = participants.get(player_id)
        resolved[player_id] = participant.rating_id if participant is not None else None
    return resolved


def _reject(match: Match, reasons: List[str], missing: Iterable[str] = ()) -> EligibilityResult:
    logger.warning(f"Not eligible for rating submission: {reasons}", extra={"match_id": match.id})
    return EligibilityResult(
        eligible=False,
        reasons=tuple(reasons),
        missing_participants=tuple(missing),
    )


def check_rating_eligibility(
    match: MatchLike,
    roster: Iterable[Union[Participant, Mapping[str, Any]]],
    config: Optional[ScoringConfig] = None,
    allow_correction: bool = False,
) -> EligibilityResult:
    """
    Decide whether a match may be submitted to the rating authority.

    Parameters
    ----------
    match : Match or mapping
        The match record.
    roster : iterable of Participant or mapping
        Everyone who may appear on either side, with rating ids.
    config : ScoringConfig, optional
        Thresholds; defaults to DEFAULT_CONFIG.
    allow_correction : bool
        Treat an already-submitted match as a correction resubmission.

    Returns
    -------
    EligibilityResult
    """
    match = as_match(match)
    config = config or DEFAULT_CONFIG
    participants = {p.user_id: p for p in as_participants(roster)}

    if match.status is not MatchStatus.COMPLETED:
        return _reject(match, [REASON_NOT_COMPLETED])

    scores = get_scores(match)
    if not scores:
        return _reject(match, [REASON_NO_SCORES])

    submission = match.rating_submission
    correcting = allow_correction or (submission is not None and submission.needs_correction is True)
    if submission is not None and submission.submitted and not correcting:
        return _reject(match, [REASON_ALREADY_SUBMITTED])

    if len(scores) > config.max_games:
        return _reject(match, [f"Invalid game count: {len(scores)} (must be 1-{config.max_games})"])

    for index, game in enumerate(scores, start=1):
        if game.is_tied:
            return _reject(match, [f"tie not allowed: {game.score_a}-{game.score_b} in game {index}"])

    threshold = config.min_game_score
    if not any(game.score_a >= threshold or game.score_b >= threshold for game in scores):
        return _reject(match, [f"insufficient score: no game reached {threshold} points"])

    rosters = {side: side_player_ids(match, side) for side in Side}
    if not rosters[Side.SIDE_A] or not rosters[Side.SIDE_B]:
        return _reject(match, [REASON_MISSING_SIDES])

    doubles = is_doubles(match)
    reasons: List[str] = []
    missing: List[str] = []
    for side in Side:
        player_ids = rosters[side]
        if doubles and len(player_ids) < 2:
            label = side_name(match, side) or _DEFAULT_SIDE_LABELS[side]
            reasons.append(f"{label} is missing a doubles partner")
        rating_ids = resolve_rating_ids(match, side, participants)
        for player_id in player_ids:
            if not rating_ids.get(player_id):
                participant = participants.get(player_id)
                name = participant.label if participant is not None else player_id
                reasons.append(f"{name} has no DUPR ID linked")
                missing.append(player_id)

    if reasons:
        return _reject(match, reasons, missing)

    return EligibilityResult(eligible=True)
