# Area: Results Tests
"""Tests for official result readers."""

import pytest

from rally_score.enums import Side
from rally_score.errors import InvalidMatchRecordError
from rally_score.models import as_match
from rally_score.results import (
    are_display_scores_official,
    counts_for_standings,
    format_match_score,
    games_won,
    get_display_scores,
    get_scores,
    get_winner,
    get_winner_name,
    is_officially_completed,
    is_proposal_locked,
    is_submitted_to_rating,
    needs_rating_correction,
    total_points_against,
    total_points_for,
)

PROPOSAL = {
    "enteredByUserId": "a1",
    "scores": [{"scoreA": 11, "scoreB": 5}],
    "winnerId": "teamA",
    "status": "signed",
    "locked": True,
}

OFFICIAL = {
    "winnerId": "teamB",
    "winnerName": "Bob / Ben",
    "scores": [
        {"scoreA": 9, "scoreB": 11},
        {"scoreA": 11, "scoreB": 7},
        {"scoreA": 8, "scoreB": 11},
    ],
    "version": 1,
}


def _make_match(**overrides):
    record = {
        "id": "m1",
        "status": "completed",
        "sideA": {"id": "teamA", "name": "Alice / Amy", "playerIds": ["a1", "a2"]},
        "sideB": {"id": "teamB", "name": "Bob / Ben", "playerIds": ["b1", "b2"]},
    }
    record.update(overrides)
    return as_match(record)


class TestWinnerAndScores:
    """Tests for get_winner, get_winner_name and get_scores."""

    def test_official_result_wins(self):
        """Test that officialResult is read over legacy fields and proposal."""
        match = _make_match(
            officialResult=OFFICIAL,
            scoreProposal=PROPOSAL,
            migratedFromLegacy=True,
            winnerId="teamA",
        )
        assert get_winner(match) == "teamB"
        assert get_winner_name(match) == "Bob / Ben"
        assert [(g.score_a, g.score_b) for g in get_scores(match)] == [(9, 11), (11, 7), (8, 11)]

    def test_signed_proposal_alone_has_no_winner(self):
        """Test that a proposal never yields a winner or scores."""
        match = _make_match(scoreProposal=PROPOSAL, scoreState="signed")
        assert get_winner(match) is None
        assert get_winner_name(match) is None
        assert get_scores(match) == []

    def test_legacy_fields_ignored_unless_migrated(self):
        """Test that flat winnerId/scores need migratedFromLegacy."""
        match = _make_match(winnerId="teamA", scores=[{"scoreA": 11, "scoreB": 2}])
        assert get_winner(match) is None
        assert get_scores(match) == []

    def test_migrated_legacy_fields_read(self):
        """Test that migrated matches fall back to flat fields."""
        match = _make_match(
            migratedFromLegacy=True,
            winnerId="teamA",
            winnerName="Alice / Amy",
            scores=[{"scoreA": 11, "scoreB": 2}],
        )
        assert get_winner(match) == "teamA"
        assert get_winner_name(match) == "Alice / Amy"
        assert get_scores(match)[0].score_b == 2


class TestStandingsGate:
    """Tests for counts_for_standings and is_officially_completed."""

    def test_official_result_counts(self):
        """Test that an official result counts for standings."""
        match = _make_match(officialResult=OFFICIAL)
        assert counts_for_standings(match)
        assert is_officially_completed(match)

    def test_signed_proposal_never_counts(self):
        """Test that a signed proposal on a completed match does not count."""
        match = _make_match(scoreProposal=PROPOSAL, scoreState="signed")
        assert not counts_for_standings(match)
        assert not is_officially_completed(match)

    def test_migrated_with_winner_counts(self):
        """Test that migrated legacy matches with a winner count."""
        assert counts_for_standings(_make_match(migratedFromLegacy=True, winnerId="teamA"))

    def test_migrated_without_winner_does_not_count(self):
        """Test that a migrated match needs a legacy winner."""
        assert not counts_for_standings(_make_match(migratedFromLegacy=True))

    def test_official_result_without_winner_not_completed(self):
        """Test that is_officially_completed needs a winner id."""
        match = _make_match(officialResult={"scores": [{"scoreA": 11, "scoreB": 9}]})
        assert counts_for_standings(match)
        assert not is_officially_completed(match)


class TestProposalLock:
    """Tests for is_proposal_locked."""

    def test_no_proposal_is_unlocked(self):
        assert not is_proposal_locked(_make_match())

    def test_signed_status_locks_without_flag(self):
        """Test that leaving 'proposed' locks even if the flag was not set."""
        match = _make_match(scoreProposal={**PROPOSAL, "locked": False})
        assert is_proposal_locked(match)

    def test_open_proposal_unlocked(self):
        match = _make_match(scoreProposal={**PROPOSAL, "status": "proposed", "locked": False})
        assert not is_proposal_locked(match)


class TestDisplayScores:
    """Tests for display-only score helpers."""

    def test_display_falls_back_to_proposal(self):
        """Test that the UI can show a proposal that is not official."""
        match = _make_match(scoreProposal=PROPOSAL)
        assert format_match_score(match) == "11-5"
        assert not are_display_scores_official(match)

    def test_display_prefers_official(self):
        match = _make_match(officialResult=OFFICIAL, scoreProposal=PROPOSAL)
        assert format_match_score(match) == "9-11, 11-7, 8-11"
        assert are_display_scores_official(match)

    def test_display_empty_match(self):
        assert get_display_scores(_make_match()) == []


class TestStandingsArithmetic:
    """Tests for points and games helpers over official scores."""

    def test_points_and_games(self):
        match = _make_match(officialResult=OFFICIAL)
        assert total_points_for(match, Side.SIDE_A) == 28
        assert total_points_for(match, Side.SIDE_B) == 29
        assert total_points_against(match, Side.SIDE_A) == 29
        assert games_won(match, Side.SIDE_A) == 1
        assert games_won(match, Side.SIDE_B) == 2

    def test_proposal_points_not_counted(self):
        """Test that proposal scores never reach standings arithmetic."""
        match = _make_match(scoreProposal=PROPOSAL)
        assert total_points_for(match, Side.SIDE_A) == 0
        assert games_won(match, Side.SIDE_A) == 0


class TestRatingState:
    """Tests for rating submission readers."""

    def test_submitted_via_flag_or_state(self):
        assert is_submitted_to_rating(_make_match(dupr={"submitted": True}))
        assert is_submitted_to_rating(_make_match(scoreState="submittedToDupr"))
        assert not is_submitted_to_rating(_make_match(dupr={"eligible": True}))

    def test_needs_correction_until_sent(self):
        """Test that a sent correction clears needs_rating_correction."""
        assert needs_rating_correction(_make_match(dupr={"submitted": True, "needsCorrection": True}))
        assert not needs_rating_correction(_make_match(
            dupr={"submitted": True, "needsCorrection": True, "correctionSubmitted": True}
        ))
        assert not needs_rating_correction(_make_match())


class TestRawRecords:
    """Tests for readers called with the stored mapping instead of a Match."""

    def test_readers_accept_mapping(self):
        record = {
            "id": "m1",
            "status": "completed",
            "sideA": {"id": "teamA", "playerIds": ["a1"]},
            "sideB": {"id": "teamB", "playerIds": ["b1"]},
            "officialResult": OFFICIAL,
        }
        assert get_winner(record) == "teamB"
        assert len(get_scores(record)) == 3
        assert counts_for_standings(record) is True
        assert games_won(record, Side.SIDE_B) == 2
        assert format_match_score(record) == "9-11, 11-7, 8-11"

    def test_unreadable_mapping_raises(self):
        with pytest.raises(InvalidMatchRecordError):
            get_winner({"scoreLocked": "sometimes"})
