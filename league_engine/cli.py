"""Command-line entry point: league-engine {schedule,bracket,score,standings}.

Every subcommand reads JSON, writes JSON to stdout (or --output) and logs to
stderr.
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .bracket import bracket_from_settings, bracket_to_json, generate_consolation_bracket, playoff_periods
from .config import get_scoring_config, load_league_config, resolve_format_settings, resolve_scoring_config
from .constants import LeagueFormat
from .exceptions import LeagueEngineError
from .logging_config import setup_logging
from .models import Matchup, Period, Team
from .schedule import generate_schedule, parse_schedule_text, schedule_to_json
from .scoring import preview_points, score_batch
from .standings import compute_standings
from .utils import load_json, save_json
from .validators import validate_schedule, validate_score_result

logger = logging.getLogger('league_engine.cli')


def _jsonable(value: Any) -> Any:
    """Convert dataclasses, tuples and sets into JSON-ready structures."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted(_jsonable(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _emit(data: Any, output: str | None) -> None:
    data = _jsonable(data)
    if output:
        save_json(output, data)
        logger.info(f'Wrote {output}')
    else:
        print(json.dumps(data, indent=2))


def _parse_teams(raw: list) -> list[Team]:
    teams = []
    for entry in raw:
        if isinstance(entry, str):
            teams.append(Team(team_id=entry))
        else:
            teams.append(
                Team(
                    team_id=entry['team_id'],
                    name=entry.get('name', ''),
                    owner_id=entry.get('owner_id', ''),
                    seed=entry.get('seed'),
                    division=entry.get('division'),
                )
            )
    return teams


def _parse_periods(raw: list) -> list[Period]:
    """Read periods in the shape schedule_to_json writes."""
    return [
        Period(
            number=int(entry['week']),
            matchups=tuple(
                Matchup(
                    home=m['home'],
                    away=m['away'],
                    home_score=m.get('home_score'),
                    away_score=m.get('away_score'),
                    completed=bool(m.get('completed', False)),
                )
                for m in entry.get('matchups', [])
            ),
        )
        for entry in raw
    ]


# =============================================================================
# Subcommands
# =============================================================================


def cmd_schedule(args: argparse.Namespace) -> int:
    if args.from_text:
        periods = parse_schedule_text(Path(args.from_text).read_text(encoding='utf-8'))
        team_ids = args.teams or sorted({t for p in periods for m in p.matchups for t in (m.home, m.away)})
    else:
        if not args.teams:
            logger.error('--teams is required unless --from-text is given')
            return 2
        team_ids = args.teams
        periods = generate_schedule(team_ids, args.weeks)

    for problem in validate_schedule(periods, team_ids):
        logger.warning(problem)
    _emit(schedule_to_json(periods), args.output)
    return 0


def cmd_bracket(args: argparse.Namespace) -> int:
    data = load_json(args.input)
    settings = resolve_format_settings(LeagueFormat.HEAD_TO_HEAD, data.get('settings'))
    ranked = data['ranked_teams']

    bracket = bracket_from_settings(ranked, settings)
    result = bracket_to_json(bracket)
    result['periods'] = playoff_periods(bracket, args.start_week or settings.regular_season_weeks + 1)

    consolation = generate_consolation_bracket(ranked, settings.playoff_teams, settings.consolation_bracket)
    if consolation is not None:
        result['consolation'] = bracket_to_json(consolation)

    _emit(result, args.output)
    return 0


def cmd_score(args: argparse.Namespace) -> int:
    if args.league:
        config = resolve_scoring_config(load_league_config(args.league))
    else:
        config = get_scoring_config(args.sport, args.preset)

    if args.preview:
        _emit(preview_points(config), args.output)
        return 0
    if not args.stats:
        logger.error('A stats file is required unless --preview is given')
        return 2

    results = score_batch(config, load_json(args.stats))
    for participant, result in results.items():
        for warning in validate_score_result(participant, result):
            logger.warning(warning)
    _emit(results, args.output)
    return 0


def cmd_standings(args: argparse.Namespace) -> int:
    league = load_league_config(args.league)
    data = load_json(args.results)
    teams = _parse_teams(data['teams'])
    settings = resolve_format_settings(league.format, league.format_settings)

    results = data.get('results')
    if league.format == LeagueFormat.HEAD_TO_HEAD:
        results = _parse_periods(results or [])
    elif league.format == LeagueFormat.SURVIVOR and data.get('buybacks'):
        results = {'periods': results or [], 'buybacks': data['buybacks']}

    rows = compute_standings(league.format, teams, results if results is not None else [], settings)
    _emit(rows, args.output)
    return 0


# =============================================================================
# Entry point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='league-engine', description='Fantasy league competition engine')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument('--log-file', action='store_true', help='Also log to logs/')
    subparsers = parser.add_subparsers(dest='command', required=True)

    schedule = subparsers.add_parser('schedule', help='Generate or parse a regular-season schedule')
    schedule.add_argument('--teams', nargs='+', help='Team ids in seeding order')
    schedule.add_argument('--weeks', '-w', type=int, default=13, help='Number of periods (default: 13)')
    schedule.add_argument('--from-text', help='Parse a commissioner schedule text file instead')
    schedule.add_argument('--output', '-o', help='Write JSON here instead of stdout')
    schedule.set_defaults(func=cmd_schedule)

    bracket = subparsers.add_parser('bracket', help='Seed a playoff bracket from ranked teams')
    bracket.add_argument('input', help='JSON with ranked_teams and optional head-to-head settings')
    bracket.add_argument('--start-week', type=int, help='First playoff period (default: week after the regular season)')
    bracket.add_argument('--output', '-o', help='Write JSON here instead of stdout')
    bracket.set_defaults(func=cmd_bracket)

    score = subparsers.add_parser('score', help='Score stat lines')
    score.add_argument('stats', nargs='?', help='JSON of participant id -> stat line')
    score.add_argument('--league', help='League config JSON (overrides --sport/--preset)')
    score.add_argument('--sport', choices=['golf', 'nfl'], default='golf')
    score.add_argument('--preset', default='standard')
    score.add_argument('--preview', action='store_true', help='Score the built-in preview golf line')
    score.add_argument('--output', '-o', help='Write JSON here instead of stdout')
    score.set_defaults(func=cmd_score)

    standings = subparsers.add_parser('standings', help='Compute standings for a league')
    standings.add_argument('league', help='League config JSON')
    standings.add_argument('results', help='JSON with teams and format-specific results')
    standings.add_argument('--output', '-o', help='Write JSON here instead of stdout')
    standings.set_defaults(func=cmd_standings)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_to_file=args.log_file)

    try:
        return args.func(args)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except (LeagueEngineError, ValueError) as e:
        logger.error(str(e))
        return 2


if __name__ == '__main__':
    sys.exit(main())
