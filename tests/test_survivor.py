"""Tests for survivor eliminations and buy-backs."""

import pytest

from league_engine.exceptions import InvalidTransitionError
from league_engine.schemas import BuyBackPolicy, SurvivorSettings
from league_engine.standings import compute_standings
from league_engine.survivor import (
    aggregate_survivor,
    buy_back,
    eliminate,
    is_terminal,
    new_survivor_state,
    process_period,
    survivor_standings,
)

SETTINGS = SurvivorSettings()


class TestEliminations:
    """Tests for weekly elimination."""

    def test_ten_teams_nine_periods(self):
        """One elimination per period leaves a single survivor."""
        teams = [f'T{i}' for i in range(1, 11)]
        scores = [{t: i * 10 for i, t in enumerate(teams, 1)} for _ in range(9)]
        rows = aggregate_survivor(teams, scores, SETTINGS)

        alive = [r for r in rows if r.status == 'alive']
        assert [r.team_id for r in alive] == ['T10']
        weeks = [r.eliminated_week for r in rows if r.status == 'eliminated']
        assert sorted(weeks) == list(range(1, 10))
        assert [r.team_id for r in rows][:3] == ['T10', 'T9', 'T8']
        assert rows[-1].team_id == 'T1' and rows[-1].eliminated_week == 1

    def test_lowest_scorer_eliminated(self):
        state = process_period(new_survivor_state(['A', 'B', 'C']), 1, {'A': 50, 'B': 40, 'C': 60}, SETTINGS)
        assert state.statuses['B'] == 'eliminated'
        assert state.eliminated_week['B'] == 1
        assert state.alive == ('A', 'C')

    def test_missing_score_counts_zero(self):
        state = process_period(new_survivor_state(['A', 'B', 'C']), 1, {'A': 50, 'B': 40}, SETTINGS)
        assert state.statuses['C'] == 'eliminated'

    def test_cutoff_tie_breaks_on_season_points(self):
        state = new_survivor_state(['A', 'B', 'C', 'D'])
        state = process_period(state, 1, {'A': 100, 'B': 90, 'C': 80, 'D': 10}, SETTINGS)
        state = process_period(state, 2, {'A': 50, 'B': 50, 'C': 90}, SETTINGS)
        assert state.statuses['B'] == 'eliminated'
        assert state.statuses['A'] == 'alive'

    def test_cutoff_tie_then_later_input_order(self):
        state = process_period(new_survivor_state(['A', 'B', 'C']), 1, {'A': 50, 'B': 50, 'C': 90}, SETTINGS)
        assert state.statuses['B'] == 'eliminated'

    def test_never_eliminates_last_team(self):
        settings = SurvivorSettings(eliminations_per_period=5)
        state = process_period(new_survivor_state(['A', 'B', 'C']), 1, {'A': 3, 'B': 2, 'C': 1}, settings)
        assert state.alive == ('A',)

    def test_terminal_state_stops_eliminations(self):
        state = process_period(new_survivor_state(['A', 'B']), 1, {'A': 10, 'B': 5}, SETTINGS)
        assert is_terminal(state, SETTINGS)
        state = process_period(state, 2, {'A': 0, 'B': 100}, SETTINGS)
        assert state.alive == ('A',)
        assert state.points['A'] == 10.0

    def test_stop_at_alive(self):
        settings = SurvivorSettings(stop_at_alive=2)
        state = new_survivor_state(['A', 'B', 'C', 'D'])
        for period in (1, 2, 3):
            state = process_period(state, period, {'A': 4, 'B': 3, 'C': 2, 'D': 1}, settings)
        assert state.alive == ('A', 'B')

    def test_period_processed_once(self):
        state = process_period(new_survivor_state(['A', 'B', 'C']), 1, {}, SETTINGS)
        with pytest.raises(InvalidTransitionError):
            process_period(state, 1, {}, SETTINGS)


class TestManualActions:
    """Tests for eliminate() and buy_back()."""

    def test_eliminate(self):
        state = eliminate(new_survivor_state(['A', 'B']), 'A', 3)
        assert state.statuses['A'] == 'eliminated'
        assert state.eliminated_week['A'] == 3

    def test_eliminate_twice_rejected(self):
        state = eliminate(new_survivor_state(['A', 'B']), 'A', 3)
        with pytest.raises(InvalidTransitionError):
            eliminate(state, 'A', 4)
        assert state.eliminated_week['A'] == 3

    def test_buy_back_returns_team(self):
        state = new_survivor_state(['A', 'B', 'C', 'D'])
        state = process_period(state, 1, {'A': 40, 'B': 30, 'C': 20, 'D': 10}, SETTINGS)
        state = buy_back(state, 'D', 2, SETTINGS)
        assert state.statuses['D'] == 'buyback'
        assert state.eliminated_week['D'] is None
        assert state.used_buybacks == frozenset({'D'})

        state = process_period(state, 2, {'A': 5, 'B': 30, 'C': 20, 'D': 100}, SETTINGS)
        assert state.statuses['D'] == 'alive'
        assert state.statuses['A'] == 'eliminated'

    def test_buy_back_requires_elimination(self):
        with pytest.raises(InvalidTransitionError):
            buy_back(new_survivor_state(['A', 'B']), 'A', 1, SETTINGS)

    def test_buy_back_limit(self):
        state = eliminate(new_survivor_state(['A', 'B', 'C']), 'C', 1)
        state = buy_back(state, 'C', 2, SETTINGS)
        state = eliminate(state, 'C', 2)
        with pytest.raises(InvalidTransitionError):
            buy_back(state, 'C', 3, SETTINGS)
        assert state.buybacks['C'] == 1

    def test_buy_back_disabled(self):
        settings = SurvivorSettings(buy_backs=BuyBackPolicy(allowed=False))
        state = eliminate(new_survivor_state(['A', 'B']), 'A', 1)
        with pytest.raises(InvalidTransitionError):
            buy_back(state, 'A', 2, settings)

    def test_inputs_not_mutated(self):
        state = new_survivor_state(['A', 'B', 'C'])
        process_period(state, 1, {'A': 1, 'B': 2, 'C': 3}, SETTINGS)
        assert state.statuses['A'] == 'alive'
        assert state.last_period == 0


class TestSurvivorStandings:
    """Tests for survivor aggregation."""

    def test_aggregate_with_buybacks(self):
        rows = aggregate_survivor(
            ['A', 'B', 'C'],
            [{'A': 10, 'B': 20, 'C': 30}, {'A': 50, 'B': 5, 'C': 30}],
            SETTINGS,
            buybacks=[('A', 2)],
        )
        by_team = {r.team_id: r for r in rows}
        assert by_team['A'].status == 'alive'
        assert by_team['A'].buybacks_used == 1
        assert by_team['B'].eliminated_week == 2

    def test_rank_order(self):
        state = new_survivor_state(['A', 'B', 'C'])
        state = process_period(state, 1, {'A': 10, 'B': 20, 'C': 30}, SETTINGS)
        rows = survivor_standings(state)
        assert [r.team_id for r in rows] == ['C', 'B', 'A']
        assert [r.rank for r in rows] == [1, 2, 3]

    def test_dispatch(self):
        rows = compute_standings('survivor', ['A', 'B'], [{'A': 1, 'B': 2}], {'stop_at_alive': 1})
        assert rows[0].team_id == 'B'
        assert rows[1].status == 'eliminated'

    def test_malformed_period_counts_zero(self):
        state = process_period(new_survivor_state(['A', 'B']), 1, ['junk'], SETTINGS)
        assert state.points == {'A': 0.0, 'B': 0.0}
        assert state.statuses['B'] == 'eliminated'

    def test_aggregate_with_malformed_periods(self):
        """A None period and a junk period both score zero for everyone."""
        rows = aggregate_survivor(['A', 'B', 'C'], [{'A': 10, 'B': 20, 'C': 30}, None, 'junk'], SETTINGS)
        assert [r.team_id for r in rows] == ['C', 'B', 'A']
        assert [r.eliminated_week for r in rows] == [None, 2, 1]

    def test_dispatch_with_buybacks_in_results(self):
        rows = compute_standings('survivor', ['A', 'B', 'C'], {
            'periods': [{'A': 10, 'B': 20, 'C': 30}, {'A': 50, 'B': 5, 'C': 30}],
            'buybacks': [['A', 2]],
        })
        by_team = {r.team_id: r for r in rows}
        assert by_team['A'].buybacks_used == 1
        assert by_team['A'].status == 'alive'
        assert by_team['B'].eliminated_week == 2
