"""
rally_score — Match result lifecycle and score permissions
==========================================================

Decides who may propose, sign, dispute, finalise and correct a match
score, reads the authoritative result out of a match record, labels the
lifecycle state, and gates DUPR rating submission.

Quick Start:
    from rally_score import as_match, get_available_score_actions
    match = as_match(record)                      # camelCase dict from the store
    actions = get_available_score_actions(match, user_id)
    actions.can_propose, actions.status_label

Applying a transition (inside the store transaction):
    from rally_score import propose_score, ScoreTransitionError
    delta = propose_score(match, user_id, scores, winner_id, context)
    txn.update(match_ref, delta)

Rating submission:
    from rally_score import check_rating_eligibility, build_submission_payload
    verdict = check_rating_eligibility(match, roster)
    if verdict.eligible:
        payload = build_submission_payload(match, roster)
"""

from .config import ScoringConfig, build_context, load_config
from .eligibility import EligibilityResult, check_rating_eligibility
from .enums import (
    DenialKind,
    EventType,
    MatchStatus,
    PanelCategory,
    ProposalStatus,
    RegulationMode,
    ScoreAction,
    ScoreState,
    Side,
)
from .errors import (
    RallyScoreError,
    InvalidMatchRecordError,
    MissingRosterError,
    ScoreTransitionError,
    SubmissionPayloadError,
    ConfigError,
)
from .membership import (
    are_opposing,
    create_team_snapshot,
    is_participant,
    side_of,
    side_player_ids,
)
from .models import (
    GameScore,
    Match,
    OfficialResult,
    Participant,
    ScoreProposal,
    MatchLike,
    TeamSnapshot,
    as_match,
)
from .permissions import (
    AvailableScoreActions,
    PermissionResult,
    RegulatoryContext,
    can_correct_result,
    can_dispute_proposal,
    can_finalize_result,
    can_organizer_direct_finalize,
    can_propose_score,
    can_request_rating_submission,
    can_set_rating_eligibility,
    can_sign_proposal,
    check_action,
    get_available_score_actions,
    validate_signer_is_opposing_team,
)
from .rating_panel import categorize_match, get_panel_stats
from .results import (
    counts_for_standings,
    get_display_scores,
    get_scores,
    get_winner,
    get_winner_name,
    is_officially_completed,
)
from .status import get_score_state_label, get_status_label
from .submission import build_submission_identifier, build_submission_payload
from .transitions import (
    correct_result,
    dispute_score,
    finalise_result,
    propose_score,
    set_rating_eligibility,
    sign_score,
)

__all__ = [
    # Records
    "Match",
    "GameScore",
    "ScoreProposal",
    "OfficialResult",
    "TeamSnapshot",
    "Participant",
    "MatchLike",
    "as_match",
    # Enums
    "MatchStatus",
    "ScoreState",
    "ProposalStatus",
    "RegulationMode",
    "EventType",
    "Side",
    "ScoreAction",
    "DenialKind",
    "PanelCategory",
    # Result readers
    "get_winner",
    "get_winner_name",
    "get_scores",
    "get_display_scores",
    "counts_for_standings",
    "is_officially_completed",
    # Membership
    "side_player_ids",
    "side_of",
    "is_participant",
    "are_opposing",
    "create_team_snapshot",
    # Permissions
    "PermissionResult",
    "RegulatoryContext",
    "AvailableScoreActions",
    "can_propose_score",
    "can_sign_proposal",
    "can_dispute_proposal",
    "can_finalize_result",
    "can_correct_result",
    "can_organizer_direct_finalize",
    "can_request_rating_submission",
    "can_set_rating_eligibility",
    "validate_signer_is_opposing_team",
    "check_action",
    "get_available_score_actions",
    # Status
    "get_status_label",
    "get_score_state_label",
    # Transitions
    "propose_score",
    "sign_score",
    "dispute_score",
    "finalise_result",
    "correct_result",
    "set_rating_eligibility",
    # Rating
    "EligibilityResult",
    "check_rating_eligibility",
    "build_submission_identifier",
    "build_submission_payload",
    "categorize_match",
    "get_panel_stats",
    # Config
    "ScoringConfig",
    "load_config",
    "build_context",
    # Errors
    "RallyScoreError",
    "InvalidMatchRecordError",
    "MissingRosterError",
    "ScoreTransitionError",
    "SubmissionPayloadError",
    "ConfigError",
]

__version__ = "1.0.0"
