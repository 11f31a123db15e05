"""Integration tests for end-to-end workflows through the CLI."""

import json

import pytest

from league_engine.bracket import advance_winner, bracket_from_settings
from league_engine.cli import main
from league_engine.config import resolve_format_settings
from league_engine.models import Matchup, Period
from league_engine.schedule import generate_schedule
from league_engine.standings import compute_standings


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create temporary data directory with league and results files."""
    data_dir = tmp_path / 'data'
    data_dir.mkdir()

    (data_dir / 'h2h_league.json').write_text(json.dumps({
        'name': 'Test League',
        'format': 'head-to-head',
        'sport': 'nfl',
        'scoring_preset': 'ppr',
        'format_settings': {'playoff_teams': 2, 'tiebreakers': ['total-points']},
    }))
    (data_dir / 'h2h_results.json').write_text(json.dumps({
        'teams': [
            {'team_id': 'GSA', 'name': 'Gold Star', 'division': 'North'},
            {'team_id': 'CGK', 'name': 'Cagers', 'division': 'North'},
            'RPA',
        ],
        'results': [
            {'week': 1, 'matchups': [
                {'home': 'GSA', 'away': 'CGK', 'home_score': 120.5, 'away_score': 99.0, 'completed': True},
            ]},
            {'week': 2, 'matchups': [
                {'home': 'RPA', 'away': 'GSA', 'home_score': 101.0, 'away_score': 88.0, 'completed': True},
            ]},
        ],
    }))
    (data_dir / 'survivor_league.json').write_text(json.dumps({'format': 'survivor'}))
    (data_dir / 'survivor_results.json').write_text(json.dumps({
        'teams': ['A', 'B', 'C'],
        'results': [{'A': 10, 'B': 20, 'C': 30}, {'A': 50, 'B': 5, 'C': 30}],
        'buybacks': [['A', 2]],
    }))
    (data_dir / 'stats.json').write_text(json.dumps({
        'qb': {'pass_yards': 300, 'pass_tds': 2},
        'wr': {'receptions': 5, 'rec_yards': 100},
    }))
    (data_dir / 'bracket.json').write_text(json.dumps({
        'ranked_teams': ['A', 'B', 'C', 'D', 'E', 'F', 'G', 'H'],
        'settings': {'playoff_teams': 6, 'consolation_bracket': 'toilet-bowl'},
    }))
    return data_dir


def _run(capsys, argv):
    code = main(argv)
    return code, json.loads(capsys.readouterr().out) if code == 0 else None


class TestCli:
    """Tests for the league-engine subcommands."""

    def test_schedule(self, capsys):
        code, data = _run(capsys, ['schedule', '--teams', 'A', 'B', 'C', 'D', '--weeks', '3'])
        assert code == 0
        assert len(data) == 3
        assert all(len(week['matchups']) == 2 for week in data)

    def test_schedule_from_text(self, tmp_path, capsys):
        path = tmp_path / 'schedule.txt'
        path.write_text('Week 1: GSA versus CGK\nWeek 2: CGK vs GSA\n')
        code, data = _run(capsys, ['schedule', '--from-text', str(path)])
        assert code == 0
        assert data[1]['matchups'][0]['home'] == 'CGK'

    def test_schedule_requires_teams(self):
        assert main(['schedule']) == 2

    def test_score_with_preset(self, temp_data_dir, capsys):
        code, data = _run(capsys, ['score', str(temp_data_dir / 'stats.json'), '--sport', 'nfl', '--preset', 'ppr'])
        assert code == 0
        assert data['qb']['total'] == 22.0
        assert data['wr']['total'] == 17.0

    def test_score_preview(self, capsys):
        code, data = _run(capsys, ['score', '--preview'])
        assert code == 0
        assert data['total'] == 86.0

    def test_bracket_with_consolation(self, temp_data_dir, capsys):
        code, data = _run(capsys, ['bracket', str(temp_data_dir / 'bracket.json'), '--start-week', '15'])
        assert code == 0
        assert data['num_teams'] == 6
        assert data['rounds'][0]['matchups'][0]['is_bye'] is True
        assert [p['periods'] for p in data['periods']] == [[15], [16], [17]]
        assert data['consolation']['qualified'][0]['team_id'] == 'H'

    def test_standings_head_to_head(self, temp_data_dir, capsys):
        code, data = _run(capsys, [
            'standings', str(temp_data_dir / 'h2h_league.json'), str(temp_data_dir / 'h2h_results.json'),
        ])
        assert code == 0
        assert [row['team_id'] for row in data] == ['RPA', 'GSA', 'CGK']
        assert data[1]['division'] == 'North'

    def test_standings_survivor_with_buybacks(self, temp_data_dir, capsys):
        code, data = _run(capsys, [
            'standings', str(temp_data_dir / 'survivor_league.json'), str(temp_data_dir / 'survivor_results.json'),
        ])
        assert code == 0
        by_team = {row['team_id']: row for row in data}
        assert by_team['A']['buybacks_used'] == 1
        assert by_team['B']['status'] == 'eliminated'

    def test_output_file(self, temp_data_dir):
        output = temp_data_dir / 'out' / 'schedule.json'
        assert main(['schedule', '--teams', 'A', 'B', '--weeks', '1', '-o', str(output)]) == 0
        assert json.loads(output.read_text())[0]['matchups'][0]['home'] == 'A'

    def test_missing_file(self, tmp_path):
        assert main(['bracket', str(tmp_path / 'missing.json')]) == 1

    def test_invalid_config(self, tmp_path):
        path = tmp_path / 'bracket.json'
        path.write_text(json.dumps({'ranked_teams': ['A', 'B'], 'settings': {'playoff_teams': 4}}))
        assert main(['bracket', str(path)]) == 2


class TestSeasonWorkflow:
    """Schedule, score, rank and run playoffs for a full season."""

    def test_regular_season_into_playoffs(self):
        teams = ['T1', 'T2', 'T3', 'T4', 'T5', 'T6']
        strength = {t: 100 - 10 * i for i, t in enumerate(teams)}

        periods = []
        for period in generate_schedule(teams, 5):
            matchups = tuple(
                Matchup(m.home, m.away, strength[m.home], strength[m.away], True) for m in period.matchups
            )
            periods.append(Period(period.number, matchups))

        settings = resolve_format_settings('head-to-head', {'playoff_teams': 4})
        rows = compute_standings('head-to-head', teams, periods, settings)
        assert [row.team_id for row in rows] == teams
        assert rows[0].wins == 5 and rows[-1].losses == 5

        bracket = bracket_from_settings(rows, settings)
        bracket = advance_winner(bracket, 1, 0, 'T1')
        bracket = advance_winner(bracket, 1, 1, 'T2')
        bracket = advance_winner(bracket, 2, 0, 'T1')
        assert bracket.champion == 'T1'
