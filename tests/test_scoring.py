"""Unit tests for scoring rule evaluation."""

import pytest

from league_engine.config import get_scoring_config
from league_engine.schemas import GolfScoringConfig
from league_engine.scoring import (
    PREVIEW_STAT_LINE,
    evaluate,
    map_nfl_stats,
    preview_points,
    score_batch,
    scoring_schema,
)


@pytest.fixture
def golf_standard():
    return get_scoring_config('golf', 'standard')


@pytest.fixture
def nfl_standard():
    return get_scoring_config('nfl', 'standard')


class TestGolfScoring:
    """Tests for golf tournament scoring."""

    def test_preview_line_standard_preset(self, golf_standard):
        """5th place, 2 eagles, 22 birdies, 8 bogeys, 1 double, one clean round."""
        result = preview_points(golf_standard)
        assert result.breakdown == {
            'position': 14.0,
            'holes': 66.0,
            'bonuses': 6.0,
            'strokesGained': 0.0,
        }
        assert result.total == 86.0

    def test_preview_matches_actual_scoring(self, golf_standard):
        """Preview and actual scoring of the same line agree."""
        assert preview_points(golf_standard) == evaluate(golf_standard, PREVIEW_STAT_LINE)

    def test_evaluate_is_idempotent(self, golf_standard):
        assert evaluate(golf_standard, PREVIEW_STAT_LINE) == evaluate(golf_standard, PREVIEW_STAT_LINE)

    def test_missed_cut(self, golf_standard):
        """Missed cut scores missedCut regardless of position."""
        result = evaluate(golf_standard, {'status': 'CUT', 'position': 80})
        assert result.breakdown['position'] == -2.0

    def test_withdrawal_counts_as_missed_cut(self, golf_standard):
        result = evaluate(golf_standard, {'status': 'wd'})
        assert result.breakdown['position'] == -2.0

    def test_top25_bucket(self, golf_standard):
        """Positions 21-25 fall back to the top25 value."""
        assert evaluate(golf_standard, {'position': 23}).breakdown['position'] == 1.5

    def test_top30_bucket(self, golf_standard):
        assert evaluate(golf_standard, {'position': 28}).breakdown['position'] == 1.0

    def test_made_cut_beyond_30(self, golf_standard):
        assert evaluate(golf_standard, {'position': 45}).breakdown['position'] == 0.5

    def test_under_70_bonus_per_stroke(self, golf_standard):
        """A 66 earns 4 strokes x 0.5."""
        result = evaluate(golf_standard, {'rounds': [{'score': 66}]})
        assert result.breakdown['bonuses'] == 2.0

    def test_strokes_gained_only_when_enabled(self, golf_standard):
        assert evaluate(golf_standard, {'sg_total': 2}).breakdown['strokesGained'] == 0.0

        enabled = get_scoring_config('golf', 'standard', {'strokes_gained': {'enabled': True}})
        assert evaluate(enabled, {'sg_total': 2}).breakdown['strokesGained'] == 10.0

    def test_empty_stat_line_scores_zero(self, golf_standard):
        result = evaluate(golf_standard, None)
        assert result.total == 0.0
        assert set(result.breakdown) == {'position', 'holes', 'bonuses', 'strokesGained'}

    def test_malformed_values_count_as_zero(self, golf_standard):
        """Non-numeric, None and NaN counters contribute nothing."""
        stats = {'birdies': 'lots', 'eagles': None, 'bogeys': float('nan'), 'pars': '4'}
        assert evaluate(golf_standard, stats).breakdown['holes'] == 0.0

    def test_draftkings_preset(self):
        config = get_scoring_config('golf', 'draftkings')
        result = evaluate(config, {'position': 1, 'pars': 10})
        assert result.breakdown['position'] == 10.0
        assert result.breakdown['holes'] == 5.0

    def test_custom_override(self):
        config = get_scoring_config('golf', 'custom', {'hole_scoring': {'birdie': 4}})
        assert evaluate(config, {'birdies': 3}).breakdown['holes'] == 12.0


class TestNflScoring:
    """Tests for NFL stat line scoring."""

    def test_quarterback_line(self, nfl_standard):
        """300 yds (12) + 2 TD (8) - 1 INT (2) + 300-yard bonus (2) + 25 rush yds (2.5)."""
        stats = {'pass_yards': 300, 'pass_tds': 2, 'interceptions': 1, 'rush_yards': 25}
        result = evaluate(nfl_standard, stats)
        assert result.breakdown['passing'] == 18.0
        assert result.breakdown['rushing'] == 2.5
        assert result.breakdown['bonuses'] == 2.0
        assert result.total == 22.5

    def test_only_highest_yardage_bonus(self, nfl_standard):
        result = evaluate(nfl_standard, {'pass_yards': 410})
        assert result.breakdown['bonuses'] == 4.0

    def test_ppr_receptions(self):
        config = get_scoring_config('nfl', 'ppr')
        result = evaluate(config, {'receptions': 5, 'rec_yards': 100})
        assert result.breakdown['receiving'] == 15.0
        assert result.breakdown['bonuses'] == 2.0
        assert result.total == 17.0

    def test_half_ppr(self):
        config = get_scoring_config('nfl', 'half_ppr')
        assert evaluate(config, {'receptions': 4}).total == 2.0

    def test_flat_kicking_without_distance_stats(self, nfl_standard):
        """2 of 3 field goals at 3 each, one miss at -1."""
        result = evaluate(nfl_standard, {'fg_made': 2, 'fg_attempts': 3})
        assert result.breakdown['kicking'] == 5.0

    def test_distance_kicking_replaces_flat_value(self, nfl_standard):
        """Bucketed stats with bucket rules score by distance, not per make."""
        stats = {'fg_made': 2, 'fg_attempts': 2, 'fg_made_40_49': 1, 'fg_made_50_plus': 1}
        assert evaluate(nfl_standard, stats).breakdown['kicking'] == 9.0

    def test_team_defense(self, nfl_standard):
        """Shutout (10) + 3 sacks (3) + 1 INT (2)."""
        stats = {'points_allowed': 0, 'sacks': 3, 'def_interceptions': 1}
        assert evaluate(nfl_standard, stats).breakdown['defense'] == 15.0

    def test_defensive_two_point_return(self, nfl_standard):
        """One 2-point return (2) + one safety (2)."""
        assert evaluate(nfl_standard, {'def_2pt_returns': 1, 'safeties': 1}).breakdown['defense'] == 4.0
        assert {'key': 'def_2pt', 'label': 'Defensive 2-Point Return', 'default': 2} in scoring_schema('nfl')['defense']

    @pytest.mark.parametrize('allowed,points', [(6, 7), (13, 4), (20, 1), (27, 0), (34, -1), (35, -4)])
    def test_points_allowed_tiers(self, nfl_standard, allowed, points):
        assert evaluate(nfl_standard, {'points_allowed': allowed}).total == points

    def test_no_points_allowed_tier_for_players(self, nfl_standard):
        assert evaluate(nfl_standard, {'rush_yards': 10}).breakdown['defense'] == 0.0

    def test_category_rounding_before_total(self, nfl_standard):
        """333 passing yards is 13.32, not a float artifact."""
        result = evaluate(nfl_standard, {'pass_yards': 333})
        assert result.breakdown['passing'] == 13.32
        assert result.total == 15.32

    def test_breakdown_covers_all_categories(self, nfl_standard):
        result = evaluate(nfl_standard, {})
        assert set(result.breakdown) == {
            'passing', 'rushing', 'receiving', 'fumbles', 'kicking',
            'defense', 'special_teams', 'bonuses', 'idp',
        }
        assert result.total == 0.0

    def test_derived_misses(self):
        mapped = map_nfl_stats({'pass_attempts': 30, 'pass_completions': 20, 'xp_attempts': 3, 'xp_made': 4})
        assert mapped['pass_inc'] == 10
        assert mapped['xpmiss'] == 0


class TestDispatch:
    """Tests for evaluate() dispatch and batch helpers."""

    def test_rejects_unknown_config(self):
        with pytest.raises(TypeError):
            evaluate({'birdie': 3}, {})

    def test_score_batch(self, golf_standard):
        results = score_batch(golf_standard, {'a': {'birdies': 1}, 'b': None})
        assert results['a'].total == 3.0
        assert results['b'].total == 0.0

    def test_scoring_schema_groups(self):
        schema = scoring_schema('nfl')
        assert {'key': 'pass_td', 'label': 'Passing TD', 'default': 4} in schema['passing']
        assert 'hole_scoring' in scoring_schema('golf')

    def test_custom_golf_config_model(self):
        """Unconfigured keys default to zero."""
        config = GolfScoringConfig(position_points={1: 50})
        assert evaluate(config, {'position': 1, 'birdies': 5}).total == 50.0
