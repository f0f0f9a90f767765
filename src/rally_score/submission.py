# Area: Rating
"""
rally_score.submission — Rating submission payloads
===================================================

Builds the structured payload handed to the rating-submission job.
Sending it is the job's concern, not the core's.

- identifier is deterministic: {eventType}_{eventId}_{matchId}, so
  retries of the same match are idempotent at the authority
- teamA and teamB carry the same gameN keys
- matchSource is CLUB when a club id is configured (clubId sent as a
  number), PARTNER otherwise (clubId omitted entirely)
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from ._shared.clock import iso_date, now_ms
from .config import DEFAULT_CONFIG, ScoringConfig
from .eligibility import check_rating_eligibility, is_doubles, resolve_rating_ids
from .enums import Side
from .errors import SubmissionPayloadError
from .membership import side_player_ids
from .models import Match, MatchLike, Participant, as_match, as_participants
from .results import get_scores

logger = logging.getLogger("rally_score.submission")


def build_submission_identifier(
    event_type: Union[Enum, str],
    event_id: str,
    match_id: str,
) -> str:
    """Deterministic submission identifier for a match."""
    if isinstance(event_type, Enum):
        event_type = event_type.value
    return f"{event_type}_{event_id}_{match_id}"


def build_submission_payload(
    match: MatchLike,
    roster: Iterable[Union[Participant, Mapping[str, Any]]],
    config: Optional[ScoringConfig] = None,
    allow_correction: bool = False,
) -> Dict[str, Any]:
    """
    Build the rating submission payload for an eligible match.

    Raises
    ------
    SubmissionPayloadError
        If the match fails the eligibility gate or lacks event identity.
    """
    match = as_match(match)
    config = config or DEFAULT_CONFIG
    participants = as_participants(roster)

    if not (match.id and match.event_type and match.event_id):
        raise SubmissionPayloadError(match.id, ["Match is missing id, eventType or eventId"])

    verdict = check_rating_eligibility(match, participants, config, allow_correction)
    if not verdict.eligible:
        raise SubmissionPayloadError(match.id, list(verdict.reasons))

    by_user = {p.user_id: p for p in participants}
    doubles = is_doubles(match)
    teams: Dict[Side, Dict[str, Any]] = {}
    for side in Side:
        player_ids = side_player_ids(match, side)
        rating_ids = resolve_rating_ids(match, side, by_user)
        team: Dict[str, Any] = {"player1": rating_ids[player_ids[0]]}
        if doubles:
            team["player2"] = rating_ids[player_ids[1]]
        teams[side] = team

    # Same gameN keys on both teams
    for number, game in enumerate(get_scores(match), start=1):
        teams[Side.SIDE_A][f"game{number}"] = game.score_a
        teams[Side.SIDE_B][f"game{number}"] = game.score_b

    finalised_at = match.official_result.finalised_at if match.official_result else None
    identifier = build_submission_identifier(match.event_type, match.event_id, match.id)
    payload: Dict[str, Any] = {
        "identifier": identifier,
        "event": match.event_name or "",
        "format": "DOUBLES" if doubles else "SINGLES",
        "matchDate": iso_date(finalised_at if finalised_at is not None else now_ms()),
        "matchSource": "CLUB" if config.rating_club_id else "PARTNER",
        "teamA": teams[Side.SIDE_A],
        "teamB": teams[Side.SIDE_B],
    }
    if config.rating_club_id:
        payload["clubId"] = int(config.rating_club_id)

    logger.info(
        f"Built submission {identifier}: "
        f"source={payload['matchSource']} format={payload['format']} games={len(get_scores(match))}",
        extra={"match_id": match.id},
    )
    return payload
