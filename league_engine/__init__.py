from .models import (
    Team,
    Matchup,
    Period,
    ScoreResult,
    Bracket,
    BracketRound,
    BracketNode,
    SurvivorState,
    OneAndDoneState,
)
from .constants import LeagueFormat, Sport
from .exceptions import LeagueEngineError, InvalidConfigurationError, InvalidTransitionError
from .config import (
    get_scoring_config,
    load_league_config,
    resolve_format_settings,
    resolve_scoring_config,
)
from .scoring import evaluate, score_batch, preview_points, scoring_schema
from .schedule import generate_schedule, parse_schedule_text, schedule_to_json
from .bracket import (
    generate_bracket,
    generate_consolation_bracket,
    record_scores,
    advance_winner,
    assign_round,
    playoff_periods,
    bracket_to_json,
)
from .standings import (
    compute_standings,
    full_league_standings,
    head_to_head_standings,
    roto_standings,
    roto_category_totals,
    division_standings,
)
from .survivor import (
    new_survivor_state,
    process_period,
    eliminate,
    buy_back,
    survivor_standings,
    aggregate_survivor,
)
from .one_and_done import (
    new_one_and_done_state,
    lock_pick,
    score_pick,
    one_and_done_standings,
    aggregate_one_and_done,
)

__all__ = [
    # Models
    'Team',
    'Matchup',
    'Period',
    'ScoreResult',
    'Bracket',
    'BracketRound',
    'BracketNode',
    'SurvivorState',
    'OneAndDoneState',
    'LeagueFormat',
    'Sport',
    # Errors
    'LeagueEngineError',
    'InvalidConfigurationError',
    'InvalidTransitionError',
    # Configuration
    'get_scoring_config',
    'load_league_config',
    'resolve_format_settings',
    'resolve_scoring_config',
    # Scoring
    'evaluate',
    'score_batch',
    'preview_points',
    'scoring_schema',
    # Schedule
    'generate_schedule',
    'parse_schedule_text',
    'schedule_to_json',
    # Playoffs
    'generate_bracket',
    'generate_consolation_bracket',
    'record_scores',
    'advance_winner',
    'assign_round',
    'playoff_periods',
    'bracket_to_json',
    # Standings
    'compute_standings',
    'full_league_standings',
    'head_to_head_standings',
    'roto_standings',
    'roto_category_totals',
    'division_standings',
    # Survivor
    'new_survivor_state',
    'process_period',
    'eliminate',
    'buy_back',
    'survivor_standings',
    'aggregate_survivor',
    # One and done
    'new_one_and_done_state',
    'lock_pick',
    'score_pick',
    'one_and_done_standings',
    'aggregate_one_and_done',
]
