# Area: Status Tests
"""Tests for lifecycle status labels."""

import pytest

from rally_score.models import as_match
from rally_score.status import (
    MATCH_STATUS_LABELS,
    UNKNOWN_LABEL,
    get_score_state_label,
    get_status_label,
)


def _make_match(**overrides):
    record = {"id": "m1", "status": "scheduled"}
    record.update(overrides)
    return as_match(record)


class TestStatusLabel:
    """Tests for get_status_label."""

    @pytest.mark.parametrize("score_state,label", [
        ("proposed", "Score proposed - awaiting acknowledgement"),
        ("signed", "Awaiting organiser approval"),
        ("disputed", "Score disputed - awaiting organiser"),
        ("official", "Official result"),
        ("submitted_to_rating_authority", "Submitted to DUPR"),
        ("submittedToDupr", "Submitted to DUPR"),
    ])
    def test_score_state_labels(self, score_state, label):
        """Test that an informative scoreState decides the label."""
        assert get_status_label(_make_match(scoreState=score_state)) == label

    def test_score_state_wins_over_status(self):
        """Test that scoreState takes precedence over match status."""
        match = _make_match(status="completed", scoreState="disputed")
        assert get_status_label(match) == "Score disputed - awaiting organiser"

    def test_completed_with_official_result(self):
        """Test that an official result on a completed match reads as official."""
        match = _make_match(status="completed", officialResult={"winnerId": "teamA"})
        assert get_status_label(match) == "Official result"

    def test_completed_without_official_result(self):
        assert get_status_label(_make_match(status="completed")) == "Completed"

    @pytest.mark.parametrize("status", list(MATCH_STATUS_LABELS))
    def test_status_fallback(self, status):
        """Test that every match status has a label when scoreState is none."""
        match = _make_match(status=status.value, scoreState="none")
        assert get_status_label(match) == MATCH_STATUS_LABELS[status]

    def test_unknown_values_still_labelled(self):
        """Test that the reporter is total over unrecognised records."""
        assert get_status_label(_make_match(status="postponed")) == UNKNOWN_LABEL
        assert get_status_label(as_match({})) == UNKNOWN_LABEL


class TestScoreStateLabel:
    """Tests for get_score_state_label."""

    def test_short_labels(self):
        assert get_score_state_label(_make_match(scoreState="none")) == "No score"
        assert get_score_state_label(_make_match(scoreState="proposed")) == "Score proposed"
        assert get_score_state_label(_make_match(scoreState="official")) == "Official result"

    def test_missing_score_state(self):
        assert get_score_state_label(_make_match()) == UNKNOWN_LABEL


class TestRawRecords:
    """Tests for labels computed from the stored mapping."""

    def test_labels_accept_mapping(self):
        record = {"id": "m1", "status": "completed", "scoreState": "signed"}
        assert get_status_label(record) == "Awaiting organiser approval"
        assert get_score_state_label(record) == "Awaiting organiser approval"
