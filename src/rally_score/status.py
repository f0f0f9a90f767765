# Area: Status
"""
rally_score.status — Lifecycle status labels
============================================

Maps (scoreState, status, officialResult presence) to one human-facing
label. scoreState wins whenever it is informative; otherwise the match
status decides. Always returns a label.
"""

from .enums import MatchStatus, ScoreState
from .models import MatchLike, as_match

SCORE_STATE_LABELS = {
    ScoreState.PROPOSED: "Score proposed - awaiting acknowledgement",
    ScoreState.SIGNED: "Awaiting organiser approval",
    ScoreState.DISPUTED: "Score disputed - awaiting organiser",
    ScoreState.OFFICIAL: "Official result",
    ScoreState.SUBMITTED_TO_RATING_AUTHORITY: "Submitted to DUPR",
}

MATCH_STATUS_LABELS = {
    MatchStatus.SCHEDULED: "Scheduled",
    MatchStatus.IN_PROGRESS: "In progress",
    MatchStatus.PENDING_CONFIRMATION: "Awaiting confirmation",
    MatchStatus.COMPLETED: "Completed",
    MatchStatus.DISPUTED: "Disputed",
    MatchStatus.CANCELLED: "Cancelled",
    MatchStatus.FORFEIT: "Forfeit",
    MatchStatus.BYE: "Bye",
}

# Short labels for score-state badges
SHORT_SCORE_STATE_LABELS = {
    ScoreState.NONE: "No score",
    ScoreState.PROPOSED: "Score proposed",
    ScoreState.SIGNED: "Awaiting organiser approval",
    ScoreState.DISPUTED: "Score disputed",
    ScoreState.OFFICIAL: "Official result",
    ScoreState.SUBMITTED_TO_RATING_AUTHORITY: "Submitted to DUPR",
}

UNKNOWN_LABEL = "Unknown"


def get_status_label(match: MatchLike) -> str:
    """Single display label for the match's combined score/match state."""
    match = as_match(match)
    if match.score_state in SCORE_STATE_LABELS:
        return SCORE_STATE_LABELS[match.score_state]

    if match.status is MatchStatus.COMPLETED and match.official_result is not None:
        return SCORE_STATE_LABELS[ScoreState.OFFICIAL]

    return MATCH_STATUS_LABELS.get(match.status, UNKNOWN_LABEL)


def get_score_state_label(match: MatchLike) -> str:
    """Short badge label for the score state alone."""
    match = as_match(match)
    return SHORT_SCORE_STATE_LABELS.get(match.score_state, UNKNOWN_LABEL)
