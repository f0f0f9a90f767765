# Area: Core Tests
"""Tests for the exception hierarchy."""

from rally_score.errors import (
    ConfigError,
    InvalidMatchRecordError,
    MissingRosterError,
    RallyScoreError,
    ScoreTransitionError,
    SubmissionPayloadError,
)


class TestErrorHierarchy:
    """Tests that every error shares the package base class."""

    def test_all_subclass_base(self):
        for error in (
            InvalidMatchRecordError("match", {}, []),
            MissingRosterError("m1"),
            ScoreTransitionError("nope", ScoreTransitionError.PERMISSION_DENIED),
            SubmissionPayloadError("m1", ["reason"]),
            ConfigError(["bad"]),
        ):
            assert isinstance(error, RallyScoreError)


class TestErrorFormatting:
    """Tests for structured error log blocks."""

    def test_invalid_record_block(self):
        error = InvalidMatchRecordError("match", {"id": "m1"}, ["status: bad value"])
        block = error.format_error_log()
        assert "INVALID_RECORD" in block
        assert '"id": "m1"' in block
        assert "• status: bad value" in block

    def test_invalid_record_non_dict_payload_omitted(self):
        block = InvalidMatchRecordError("match", "not a dict", ["bad"]).format_error_log()
        assert "── RECORD" not in block

    def test_transition_block(self):
        error = ScoreTransitionError("Score has been finalized by organizer",
                                     ScoreTransitionError.SCORE_LOCKED, "m7")
        block = error.format_error_log()
        assert "SCORE_LOCKED" in block
        assert "match m7" in block
        assert "Score has been finalized by organizer" in block

    def test_messages(self):
        assert "m1" in str(MissingRosterError("m1"))
        assert "['x']" in str(SubmissionPayloadError("m1", ["x"]))
        assert ConfigError(["a", "b"]).problems == ["a", "b"]
