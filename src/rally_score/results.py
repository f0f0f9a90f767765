# Area: Results
"""
rally_score.results — Official result readers
=============================================

Reads the authoritative score and winner from a match record.

The structured officialResult always wins. Legacy flat fields
(winnerId, winnerName, scores) are only read for records flagged
migratedFromLegacy; for any other record they are ignored, so an
unfinalised match has no winner and no scores here, whatever the
proposal says.

Standings and brackets MUST read through these helpers.
"""

from __future__ import annotations
from typing import List, Optional

from .enums import ProposalStatus, ScoreState, Side
from .models import GameScore, MatchLike, as_match


# ══════════════════════════════════════════════════════════════
# OFFICIAL RESULT
# ══════════════════════════════════════════════════════════════

def get_winner(match: MatchLike) -> Optional[str]:
    """Winner id from the official result, or legacy winner for migrated matches."""
    match = as_match(match)
    if match.official_result and match.official_result.winner_id:
        return match.official_result.winner_id
    if match.migrated_from_legacy and match.winner_id:
        return match.winner_id
    return None


def get_winner_name(match: MatchLike) -> Optional[str]:
    """Winner name, same precedence as get_winner()."""
    match = as_match(match)
    if match.official_result and match.official_result.winner_name:
        return match.official_result.winner_name
    if match.migrated_from_legacy and match.winner_name:
        return match.winner_name
    return None


def get_scores(match: MatchLike) -> List[GameScore]:
    """Game scores, same precedence as get_winner(). Empty if not finalised."""
    match = as_match(match)
    if match.official_result and match.official_result.scores:
        return list(match.official_result.scores)
    if match.migrated_from_legacy and match.scores:
        return list(match.scores)
    return []


def counts_for_standings(match: MatchLike) -> bool:
    """True only for officially resolved matches (or migrated legacy winners)."""
    match = as_match(match)
    if match.official_result is not None:
        return True
    return bool(match.migrated_from_legacy and match.winner_id)


def is_officially_completed(match: MatchLike) -> bool:
    """Stricter than status == completed: must count and have a winner."""
    match = as_match(match)
    if not counts_for_standings(match):
        return False
    return get_winner(match) is not None


# ══════════════════════════════════════════════════════════════
# PROPOSAL / LOCK STATE
# ══════════════════════════════════════════════════════════════

def has_score_proposal(match: MatchLike) -> bool:
    match = as_match(match)
    return match.score_proposal is not None


def is_proposal_signed(match: MatchLike) -> bool:
    match = as_match(match)
    return match.score_proposal is not None and match.score_proposal.status is ProposalStatus.SIGNED


def is_proposal_disputed(match: MatchLike) -> bool:
    match = as_match(match)
    return match.score_proposal is not None and match.score_proposal.status is ProposalStatus.DISPUTED


def is_proposal_locked(match: MatchLike) -> bool:
    """A proposal is locked once flagged, or once it has left the proposed status."""
    match = as_match(match)
    proposal = match.score_proposal
    if proposal is None:
        return False
    return proposal.locked or proposal.status is not ProposalStatus.PROPOSED


def is_score_locked(match: MatchLike) -> bool:
    match = as_match(match)
    return match.score_locked is True


# ══════════════════════════════════════════════════════════════
# DISPLAY
# ══════════════════════════════════════════════════════════════

def get_display_scores(match: MatchLike) -> List[GameScore]:
    """
    Scores to show in the UI: official, else the proposal, else legacy.

    Display only. Never feed these into standings.
    """
    match = as_match(match)
    if match.official_result and match.official_result.scores:
        return list(match.official_result.scores)
    if match.score_proposal and match.score_proposal.scores:
        return list(match.score_proposal.scores)
    return list(match.scores)


def are_display_scores_official(match: MatchLike) -> bool:
    match = as_match(match)
    return match.official_result is not None


def format_match_score(match: MatchLike) -> str:
    """Format display scores as e.g. '11-9, 7-11, 11-8'."""
    match = as_match(match)
    return ", ".join(f"{game.score_a}-{game.score_b}" for game in get_display_scores(match))


# ══════════════════════════════════════════════════════════════
# STANDINGS ARITHMETIC (official scores only)
# ══════════════════════════════════════════════════════════════

def total_points_for(match: MatchLike, side: Side) -> int:
    match = as_match(match)
    scores = get_scores(match)
    if side is Side.SIDE_A:
        return sum(game.score_a for game in scores)
    return sum(game.score_b for game in scores)


def total_points_against(match: MatchLike, side: Side) -> int:
    match = as_match(match)
    return total_points_for(match, side.opponent)


def games_won(match: MatchLike, side: Side) -> int:
    match = as_match(match)
    scores = get_scores(match)
    if side is Side.SIDE_A:
        return sum(1 for game in scores if game.score_a > game.score_b)
    return sum(1 for game in scores if game.score_b > game.score_a)


# ══════════════════════════════════════════════════════════════
# RATING SUBMISSION STATE
# ══════════════════════════════════════════════════════════════

def is_submitted_to_rating(match: MatchLike) -> bool:
    match = as_match(match)
    submission = match.rating_submission
    if submission is not None and submission.submitted is True:
        return True
    return match.score_state is ScoreState.SUBMITTED_TO_RATING_AUTHORITY


def needs_rating_correction(match: MatchLike) -> bool:
    """Submitted result was corrected and the correction has not gone out yet."""
    match = as_match(match)
    submission = match.rating_submission
    if submission is None:
        return False
    return submission.needs_correction is True and submission.correction_submitted is not True
