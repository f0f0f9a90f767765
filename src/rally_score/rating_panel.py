# Area: Rating
"""
rally_score.rating_panel — Organiser DUPR control panel
=======================================================

Buckets matches for the organiser's DUPR panel and builds the summary
counts shown above it.

Categories are decided in this order:
    submitted      -> dupr.submitted, or scoreState submitted
    failed         -> dupr.submissionError recorded
    blocked        -> correction pending, or placeholder (TBD/BYE) sides
    ready_for_dupr -> official, completed, locked, not marked ineligible
    blocked        -> official result present but not ready
    needs_review   -> proposal signed or disputed
    proposed       -> proposal awaiting the opponent
    none           -> nothing entered yet
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .enums import MatchStatus, PanelCategory, ProposalStatus, ScoreState, Side
from .membership import side_name
from .models import Match, MatchLike, as_match

logger = logging.getLogger("rally_score.rating_panel")

PLACEHOLDER_NAMES = ("tbd", "tba", "bye", "")

REASON_PLACEHOLDER_SIDES = "Match has TBD or missing participants"
REASON_CORRECTION_PENDING = "Official result changed after DUPR submission"
REASON_DISPUTE_UNRESOLVED = "Score disputed - awaiting organizer resolution"
REASON_MISSING_OFFICIAL = "Missing official result"
REASON_NOT_LOCKED = "Score not locked"

# Keys used in the grouped and stats outputs
CATEGORY_KEYS = {
    PanelCategory.NONE: "none",
    PanelCategory.PROPOSED: "proposed",
    PanelCategory.NEEDS_REVIEW: "needsReview",
    PanelCategory.READY_FOR_DUPR: "readyForDupr",
    PanelCategory.SUBMITTED: "submitted",
    PanelCategory.FAILED: "failed",
    PanelCategory.BLOCKED: "blocked",
}


def has_valid_participants(match: MatchLike) -> bool:
    """False if either side is missing or a placeholder such as TBD or BYE."""
    match = as_match(match)
    for side in Side:
        name = (side_name(match, side) or "").strip().lower()
        if name in PLACEHOLDER_NAMES or "tbd" in name:
            return False
    return True


def categorize_match(match: MatchLike) -> PanelCategory:
    """Panel bucket for one match."""
    match = as_match(match)
    submission = match.rating_submission

    if (submission is not None and submission.submitted) or \
            match.score_state is ScoreState.SUBMITTED_TO_RATING_AUTHORITY:
        return PanelCategory.SUBMITTED

    if submission is not None and submission.submission_error:
        return PanelCategory.FAILED

    if submission is not None and submission.needs_correction:
        return PanelCategory.BLOCKED

    if not has_valid_participants(match):
        return PanelCategory.BLOCKED

    if match.official_result is not None:
        ready = (
            match.status is MatchStatus.COMPLETED
            and match.score_state is ScoreState.OFFICIAL
            and match.score_locked
            and (submission is None or submission.eligible is not False)
        )
        return PanelCategory.READY_FOR_DUPR if ready else PanelCategory.BLOCKED

    proposal = match.score_proposal
    if proposal is not None:
        if proposal.status is ProposalStatus.PROPOSED:
            return PanelCategory.PROPOSED
        return PanelCategory.NEEDS_REVIEW

    # Records with a scoreState but no proposal object
    if match.score_state in (ScoreState.SIGNED, ScoreState.DISPUTED):
        return PanelCategory.NEEDS_REVIEW
    if match.score_state is ScoreState.PROPOSED:
        return PanelCategory.PROPOSED
    if match.score_state is ScoreState.OFFICIAL:
        return PanelCategory.BLOCKED
    return PanelCategory.NONE


def get_matches_by_category(matches: Iterable[MatchLike]) -> Dict[str, List[Match]]:
    """Group matches under the panel's category keys."""
    grouped: Dict[str, List[Match]] = {key: [] for key in CATEGORY_KEYS.values()}
    for record in matches:
        match = as_match(record)
        grouped[CATEGORY_KEYS[categorize_match(match)]].append(match)
    return grouped


def get_panel_stats(matches: Iterable[MatchLike]) -> Dict[str, int]:
    """Counts per category plus the total, for the panel summary cards."""
    grouped = get_matches_by_category(matches)
    stats = {"total": sum(len(bucket) for bucket in grouped.values())}
    stats.update({key: len(bucket) for key, bucket in grouped.items()})
    logger.debug(f"Panel stats: {stats}")
    return stats


def get_block_reason(match: MatchLike) -> Optional[str]:
    """Why a match cannot move forward in the panel, or None."""
    match = as_match(match)

    if not has_valid_participants(match):
        return REASON_PLACEHOLDER_SIDES

    if match.rating_submission is not None and match.rating_submission.needs_correction:
        return REASON_CORRECTION_PENDING

    if match.score_state is ScoreState.DISPUTED and match.official_result is None:
        return REASON_DISPUTE_UNRESOLVED

    if match.status is MatchStatus.COMPLETED and match.official_result is None:
        return REASON_MISSING_OFFICIAL

    if match.official_result is not None and not match.score_locked:
        return REASON_NOT_LOCKED

    return None


@dataclass(frozen=True)
class EligibilityToggleState:
    """State of the panel's per-match DUPR eligibility switch."""

    can_toggle: bool
    is_enabled: bool
    is_locked: bool
    tooltip: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "canToggle": self.can_toggle,
            "isEnabled": self.is_enabled,
            "isLocked": self.is_locked,
            "tooltip": self.tooltip,
        }


def get_eligibility_toggle_state(match: MatchLike) -> EligibilityToggleState:
    match = as_match(match)
    submission = match.rating_submission
    enabled = submission is None or submission.eligible is not False

    if match.official_result is None or match.score_state is not ScoreState.OFFICIAL:
        return EligibilityToggleState(False, False, False, "Finalise official result first")

    if submission is not None and submission.submitted:
        return EligibilityToggleState(False, True, True, "Already submitted to DUPR")

    if submission is not None and submission.needs_correction:
        return EligibilityToggleState(False, enabled, True, "Awaiting correction workflow")

    tooltip = "Click to exclude from DUPR" if enabled else "Click to mark as DUPR eligible"
    return EligibilityToggleState(True, enabled, False, tooltip)
