# Area: Membership
"""
rally_score.membership — Team-membership resolver
=================================================

Works out which side of a match an identity played on.

Resolution order per side:
1. teamSnapshot.sideXPlayerIds — frozen at schedule time, authoritative
2. sideX.playerIds             — live tournament side record
   plus userXId / partnerXId   — legacy league fields

A snapshot list, when present for a side, is final for that side:
a later roster edit or substitution never changes who could act on
a historical match.
"""

from __future__ import annotations
import logging
from typing import List, Optional

from ._shared.clock import now_ms
from .enums import Side
from .errors import MissingRosterError
from .models import Match, TeamSnapshot

logger = logging.getLogger("rally_score.membership")


def side_player_ids(match: Match, side: Side) -> List[str]:
    """Player ids on one side, using the resolution order above."""
    snapshot = match.team_snapshot
    if side is Side.SIDE_A:
        frozen = snapshot.side_a_player_ids if snapshot is not None else None
        live = match.side_a.player_ids if match.side_a is not None else None
        legacy = (match.user_a_id, match.partner_a_id)
    else:
        frozen = snapshot.side_b_player_ids if snapshot is not None else None
        live = match.side_b.player_ids if match.side_b is not None else None
        legacy = (match.user_b_id, match.partner_b_id)

    if frozen is not None:
        return list(frozen)

    # No snapshot: live side record plus legacy league fields
    player_ids = list(live or [])
    for pid in legacy:
        if pid and pid not in player_ids:
            player_ids.append(pid)
    return player_ids


def side_of(match: Match, user_id: Optional[str]) -> Optional[Side]:
    """Return the side user_id played on, or None if not a participant."""
    if not user_id:
        return None
    if user_id in side_player_ids(match, Side.SIDE_A):
        return Side.SIDE_A
    if user_id in side_player_ids(match, Side.SIDE_B):
        return Side.SIDE_B
    return None


def is_participant(match: Match, user_id: Optional[str]) -> bool:
    return side_of(match, user_id) is not None


def are_opposing(match: Match, user_id_1: Optional[str], user_id_2: Optional[str]) -> bool:
    """True iff both identities resolve to a side and the sides differ."""
    side_1 = side_of(match, user_id_1)
    side_2 = side_of(match, user_id_2)
    if side_1 is None or side_2 is None:
        return False
    return side_1 is not side_2


# ══════════════════════════════════════════════════════════════
# SIDE IDENTITY (tournament sideX vs league memberX)
# ══════════════════════════════════════════════════════════════

def side_id(match: Match, side: Side) -> Optional[str]:
    if side is Side.SIDE_A:
        return (match.side_a.id if match.side_a else None) or match.member_a_id
    return (match.side_b.id if match.side_b else None) or match.member_b_id


def side_name(match: Match, side: Side) -> Optional[str]:
    if side is Side.SIDE_A:
        live = match.side_a.name if match.side_a else None
        return live or match.member_a_name or match.user_a_name
    live = match.side_b.name if match.side_b else None
    return live or match.member_b_name or match.user_b_name


def side_for_winner(match: Match, winner_id: Optional[str]) -> Optional[Side]:
    """Return the side whose id is winner_id, if any."""
    if not winner_id:
        return None
    if winner_id == side_id(match, Side.SIDE_A):
        return Side.SIDE_A
    if winner_id == side_id(match, Side.SIDE_B):
        return Side.SIDE_B
    return None


# ══════════════════════════════════════════════════════════════
# SNAPSHOTS
# ══════════════════════════════════════════════════════════════

def create_team_snapshot(match: Match, now: Optional[int] = None) -> TeamSnapshot:
    """
    Freeze the current side rosters into a TeamSnapshot.

    An existing snapshot is returned unchanged.

    Raises
    ------
    MissingRosterError
        If neither side has any identity to freeze.
    """
    if match.team_snapshot is not None:
        return match.team_snapshot

    side_a_ids = side_player_ids(match, Side.SIDE_A)
    side_b_ids = side_player_ids(match, Side.SIDE_B)
    if not side_a_ids and not side_b_ids:
        raise MissingRosterError(match.id)

    logger.debug(f"Snapshot rosters: A={side_a_ids} B={side_b_ids}", extra={"match_id": match.id})
    return TeamSnapshot(
        side_a_player_ids=side_a_ids,
        side_b_player_ids=side_b_ids,
        snapshot_at=now if now is not None else now_ms(),
    )
