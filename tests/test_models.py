# Area: Core Tests
"""Tests for match record models."""

import pytest
from pydantic import ValidationError

from rally_score.enums import EventType, MatchStatus, ProposalStatus, ScoreState
from rally_score.errors import InvalidMatchRecordError
from rally_score.models import (
    GameScore,
    Match,
    Participant,
    as_game_scores,
    as_match,
    as_participants,
)


class TestMatchParsing:
    """Tests for reading camelCase store records."""

    def test_camel_case_fields_parse(self):
        """Test that stored camelCase keys map to snake_case attributes."""
        match = as_match({
            "id": "m1",
            "eventType": "league",
            "status": "pending_confirmation",
            "scoreState": "proposed",
            "scoreLocked": False,
            "userAId": "u1",
            "scoreProposal": {
                "enteredByUserId": "u1",
                "scores": [{"scoreA": 11, "scoreB": 9}],
                "status": "proposed",
            },
        })
        assert match.event_type is EventType.LEAGUE
        assert match.status is MatchStatus.PENDING_CONFIRMATION
        assert match.score_state is ScoreState.PROPOSED
        assert match.user_a_id == "u1"
        assert match.score_proposal.status is ProposalStatus.PROPOSED
        assert match.score_proposal.scores[0].score_a == 11

    def test_snake_case_fields_also_accepted(self):
        """Test that populate_by_name lets snake_case keys through."""
        match = as_match({"id": "m1", "score_locked": True})
        assert match.score_locked is True

    def test_unknown_keys_ignored(self):
        """Test that fields the core does not use are dropped."""
        match = as_match({"id": "m1", "courtNumber": 4})
        assert not hasattr(match, "court_number")

    def test_legacy_submitted_score_state_alias(self):
        """Test that the legacy submittedToDupr value is accepted."""
        match = as_match({"scoreState": "submittedToDupr"})
        assert match.score_state is ScoreState.SUBMITTED_TO_RATING_AUTHORITY

    def test_unrecognised_status_treated_as_unset(self):
        """Test that an unknown status does not fail parsing."""
        match = as_match({"status": "postponed", "scoreState": "weird"})
        assert match.status is None
        assert match.score_state is None

    def test_unrecognised_proposal_status_treated_as_unset(self):
        """Test that an unknown proposal status does not fail parsing."""
        match = as_match({"scoreProposal": {"enteredByUserId": "a1", "status": "withdrawn"}})
        assert match.score_proposal.status is None

    def test_null_proposal_status_reads_as_proposed(self):
        match = as_match({"scoreProposal": {"enteredByUserId": "a1", "status": None}})
        assert match.score_proposal.status is ProposalStatus.PROPOSED

    def test_dupr_key_maps_to_rating_submission(self):
        """Test that the stored dupr map is read as rating_submission."""
        match = as_match({"dupr": {"submitted": True, "needsCorrection": True}})
        assert match.rating_submission.submitted is True
        assert match.rating_submission.needs_correction is True

    def test_null_flags_default_false(self):
        """Test that null booleans and lists read as False / empty."""
        match = as_match({"scoreLocked": None, "migratedFromLegacy": None, "scores": None})
        assert match.score_locked is False
        assert match.migrated_from_legacy is False
        assert match.scores == []

    def test_models_are_frozen(self):
        """Test that parsed records cannot be mutated."""
        match = as_match({"id": "m1"})
        with pytest.raises(ValidationError):
            match.id = "m2"

    def test_match_instance_passes_through(self):
        """Test that as_match returns Match instances unchanged."""
        match = Match(id="m1")
        assert as_match(match) is match

    def test_invalid_record_raises(self):
        """Test that an unreadable record raises InvalidMatchRecordError."""
        with pytest.raises(InvalidMatchRecordError) as exc_info:
            as_match({"scoreProposal": {"scores": []}})
        assert exc_info.value.record_type == "match"
        assert any("enteredByUserId" in e or "entered_by_user_id" in e
                   for e in exc_info.value.validation_errors)


class TestGameScore:
    """Tests for GameScore."""

    def test_null_points_read_as_zero(self):
        """Test that a missing score reads as 0."""
        game = GameScore.model_validate({"scoreA": None, "scoreB": 7})
        assert game.score_a == 0
        assert game.score_b == 7

    def test_is_tied(self):
        """Test tie detection."""
        assert GameScore(score_a=10, score_b=10).is_tied
        assert not GameScore(score_a=11, score_b=9).is_tied

    def test_to_record_uses_camel_case(self):
        """Test that to_record writes the stored shape."""
        record = GameScore(game_number=1, score_a=11, score_b=9).to_record()
        assert record == {"gameNumber": 1, "scoreA": 11, "scoreB": 9}

    def test_as_game_scores_rejects_garbage(self):
        """Test that non-numeric points raise InvalidMatchRecordError."""
        with pytest.raises(InvalidMatchRecordError):
            as_game_scores([{"scoreA": "eleven", "scoreB": 9}])


class TestParticipant:
    """Tests for roster participants."""

    def test_dupr_id_alias(self):
        """Test that duprId maps to rating_id."""
        [participant] = as_participants([{"userId": "u1", "duprId": "ABC123"}])
        assert participant.rating_id == "ABC123"

    def test_label_falls_back_to_user_id(self):
        """Test that label uses the display name when present."""
        assert Participant(user_id="u1", display_name="Alice").label == "Alice"
        assert Participant(user_id="u1").label == "u1"

    def test_missing_user_id_raises(self):
        """Test that a roster entry without userId is rejected."""
        with pytest.raises(InvalidMatchRecordError) as exc_info:
            as_participants([{"displayName": "Alice"}])
        assert exc_info.value.record_type == "participant"
