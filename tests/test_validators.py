"""Unit tests for validation functions."""

import pytest

from league_engine.exceptions import InvalidConfigurationError
from league_engine.models import Matchup, Period, ScoreResult
from league_engine.validators import (
    raise_for_errors,
    validate_schedule,
    validate_score_result,
    validate_slot_assignment,
)


class TestScheduleValidation:
    """Tests for schedule validation."""

    def test_valid_schedule(self):
        periods = [Period(1, (Matchup('A', 'B'), Matchup('C', 'D')))]
        assert validate_schedule(periods, ['A', 'B', 'C', 'D']) == []

    def test_team_playing_itself(self):
        errors = validate_schedule([Period(1, (Matchup('A', 'A'),))], ['A'])
        assert len(errors) == 1
        assert 'playing itself' in errors[0]

    def test_team_twice_in_period(self):
        periods = [Period(2, (Matchup('A', 'B'), Matchup('A', 'C')))]
        errors = validate_schedule(periods, ['A', 'B', 'C'])
        assert errors == ['Week 2 schedules A more than once']


class TestSlotAssignmentValidation:
    """Tests for bracket pairing validation."""

    def test_valid_pairings(self):
        assert validate_slot_assignment([('A', 'B'), ('C', None)], ['A', 'B', 'C'], 2) == []

    def test_all_problems_reported(self):
        errors = validate_slot_assignment([('A', 'A'), ('X', None), (None, None)], ['A', 'B'], 2)
        assert any('Expected 2 pairings' in e for e in errors)
        assert any('more than once: A' in e for e in errors)
        assert any('not eligible' in e and 'X' in e for e in errors)
        assert any('not placed: B' in e for e in errors)
        assert any('Pairing 2 has no teams' in e for e in errors)


class TestScoreResultValidation:
    """Tests for score sanity checks."""

    def test_consistent_result(self):
        result = ScoreResult(total=12.5, breakdown={'passing': 10.0, 'rushing': 2.5})
        assert validate_score_result('QB', result) == []

    def test_breakdown_mismatch(self):
        result = ScoreResult(total=15.0, breakdown={'passing': 10.0})
        warnings = validate_score_result('QB', result)
        assert len(warnings) == 1
        assert 'breakdown sum' in warnings[0]

    def test_non_finite(self):
        result = ScoreResult(total=float('inf'), breakdown={})
        assert validate_score_result('QB', result) == ['QB has a non-finite score']


class TestRaiseForErrors:
    """Tests for turning validator output into exceptions."""

    def test_no_errors(self):
        raise_for_errors([])

    def test_errors_raise_with_messages(self):
        with pytest.raises(InvalidConfigurationError) as exc_info:
            raise_for_errors(['bad one', 'bad two'], 'Invalid pairings')
        assert exc_info.value.errors == ['bad one', 'bad two']
        assert 'Invalid pairings' in str(exc_info.value)
        assert isinstance(exc_info.value, ValueError)
