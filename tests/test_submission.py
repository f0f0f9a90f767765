# Area: Rating Tests
"""Tests for rating submission payloads."""

import pytest

from rally_score.config import ScoringConfig
from rally_score.enums import EventType
from rally_score.errors import SubmissionPayloadError
from rally_score.submission import build_submission_identifier, build_submission_payload

# 2024-03-01T12:00:00Z
FINALISED_AT = 1709294400000

ROSTER = [
    {"userId": "a1", "displayName": "Alice", "duprId": "DA1"},
    {"userId": "a2", "displayName": "Amy", "duprId": "DA2"},
    {"userId": "b1", "displayName": "Bob", "duprId": "DB1"},
    {"userId": "b2", "displayName": "Ben", "duprId": "DB2"},
]


def _make_match(**overrides):
    record = {
        "id": "m1",
        "eventType": "league",
        "eventId": "L7",
        "eventName": "Winter League",
        "status": "completed",
        "scoreState": "official",
        "scoreLocked": True,
        "sideA": {"id": "teamA", "playerIds": ["a1", "a2"]},
        "sideB": {"id": "teamB", "playerIds": ["b1", "b2"]},
        "officialResult": {
            "winnerId": "teamA",
            "scores": [{"scoreA": 11, "scoreB": 7}, {"scoreA": 9, "scoreB": 11}, {"scoreA": 11, "scoreB": 5}],
            "finalisedAt": FINALISED_AT,
        },
    }
    record.update(overrides)
    return record


class TestSubmissionIdentifier:
    """Tests for build_submission_identifier."""

    def test_identifier_format(self):
        assert build_submission_identifier("tournament", "t1", "m9") == "tournament_t1_m9"

    def test_identifier_accepts_enum(self):
        assert build_submission_identifier(EventType.MEETUP, "e1", "m1") == "meetup_e1_m1"


class TestSubmissionPayload:
    """Tests for build_submission_payload."""

    def test_doubles_partner_payload(self):
        """Test the payload for a doubles match with no club configured."""
        payload = build_submission_payload(_make_match(), ROSTER)
        assert payload == {
            "identifier": "league_L7_m1",
            "event": "Winter League",
            "format": "DOUBLES",
            "matchDate": "2024-03-01",
            "matchSource": "PARTNER",
            "teamA": {"player1": "DA1", "player2": "DA2", "game1": 11, "game2": 9, "game3": 11},
            "teamB": {"player1": "DB1", "player2": "DB2", "game1": 7, "game2": 11, "game3": 5},
        }

    def test_club_source_sends_numeric_club_id(self):
        payload = build_submission_payload(_make_match(), ROSTER, ScoringConfig(rating_club_id="4321"))
        assert payload["matchSource"] == "CLUB"
        assert payload["clubId"] == 4321

    def test_singles_payload(self):
        match = _make_match(
            sideA={"id": "teamA", "playerIds": ["a1"]},
            sideB={"id": "teamB", "playerIds": ["b1"]},
        )
        payload = build_submission_payload(match, ROSTER)
        assert payload["format"] == "SINGLES"
        assert "player2" not in payload["teamA"]
        assert set(payload["teamA"]) == {"player1", "game1", "game2", "game3"}

    def test_rating_ids_from_side_records(self):
        """Test that rating ids stored on the sides are sent in player order."""
        match = _make_match(
            sideA={"id": "teamA", "playerIds": ["a1", "a2"], "duprIds": ["SA1", "SA2"]},
            sideB={"id": "teamB", "playerIds": ["b1", "b2"], "duprIds": ["SB1", "SB2"]},
        )
        payload = build_submission_payload(match, [])
        assert payload["teamA"]["player1"] == "SA1"
        assert payload["teamA"]["player2"] == "SA2"
        assert payload["teamB"]["player1"] == "SB1"

    def test_ineligible_match_raises(self):
        """Test that the gate's reasons are carried on the error."""
        with pytest.raises(SubmissionPayloadError) as exc_info:
            build_submission_payload(_make_match(dupr={"submitted": True}), ROSTER)
        assert exc_info.value.reasons == ["Match has already been submitted to DUPR"]
        assert exc_info.value.match_id == "m1"

    def test_correction_resubmission_allowed(self):
        payload = build_submission_payload(_make_match(dupr={"submitted": True}), ROSTER, allow_correction=True)
        assert payload["identifier"] == "league_L7_m1"

    def test_missing_event_identity_raises(self):
        with pytest.raises(SubmissionPayloadError):
            build_submission_payload(_make_match(eventId=None), ROSTER)
