"""Constants, scoring presets and format defaults for the league engine."""

from enum import Enum


class LeagueFormat(str, Enum):
    """Competition formats supported by the standings aggregator."""

    FULL_LEAGUE = 'full-league'
    HEAD_TO_HEAD = 'head-to-head'
    ROTO = 'roto'
    SURVIVOR = 'survivor'
    ONE_AND_DONE = 'one-and-done'


class Sport(str, Enum):
    GOLF = 'golf'
    NFL = 'nfl'


# Synthetic entrant used to even out an odd team count
BYE = 'BYE'

# Golf finishing statuses that score as a missed cut
MISSED_CUT_STATUSES = {'CUT', 'WD', 'DQ'}

# =============================================================================
# Golf scoring presets
# =============================================================================

GOLF_STANDARD_PRESET = {
    'position_points': {
        '1': 30, '2': 20, '3': 18, '4': 16, '5': 14,
        '6': 12, '7': 10, '8': 9, '9': 8, '10': 7,
        '11': 6, '12': 5, '13': 5, '14': 4, '15': 4,
        '16': 3, '17': 3, '18': 3, '19': 2, '20': 2,
        'top25': 1.5, 'top30': 1, 'madeCut': 0.5, 'missedCut': -2,
    },
    'hole_scoring': {
        'holeInOne': 5,
        'eagle': 5,
        'birdie': 3,
        'par': 0,
        'bogey': -1,
        'doubleBogey': -2,
        'worseThanDouble': -3,
    },
    'bonuses': {
        'bogeyFreeRound': 3,
        'birdieStreak3': 3,
        'under70Round': 0.5,  # per stroke under 70
    },
    'strokes_gained': {
        'enabled': False,
        'multiplier': 5,
    },
}

GOLF_DRAFTKINGS_PRESET = {
    'position_points': {
        '1': 10, '2': 8, '3': 7, '4': 6, '5': 5,
        '6': 4, '7': 3, '8': 2.5, '9': 2, '10': 1.5,
        '11': 1, '12': 1, '13': 1, '14': 0.5, '15': 0.5,
        '16': 0.5, '17': 0, '18': 0, '19': 0, '20': 0,
        'top25': 0, 'top30': 0, 'madeCut': 0, 'missedCut': -1,
    },
    'hole_scoring': {
        'holeInOne': 10,
        'eagle': 8,
        'birdie': 3,
        'par': 0.5,
        'bogey': -0.5,
        'doubleBogey': -1,
        'worseThanDouble': -1.5,
    },
    'bonuses': {
        'bogeyFreeRound': 3,
        'birdieStreak3': 3,
        'under70Round': 0,
    },
    'strokes_gained': {
        'enabled': False,
        'multiplier': 5,
    },
}

# 'custom' leagues start from the standard table and override from there
GOLF_PRESETS = {
    'standard': GOLF_STANDARD_PRESET,
    'draftkings': GOLF_DRAFTKINGS_PRESET,
    'custom': GOLF_STANDARD_PRESET,
}

# Hole result key -> stat line counter
HOLE_RESULT_STATS = {
    'holeInOne': 'holes_in_one',
    'eagle': 'eagles',
    'birdie': 'birdies',
    'par': 'pars',
    'bogey': 'bogeys',
    'doubleBogey': 'double_bogeys',
    'worseThanDouble': 'worse_than_double',
}

# Bonus for rounds under this score, per stroke
UNDER_PAR_ROUND_THRESHOLD = 70
BIRDIE_STREAK_LENGTH = 3

# =============================================================================
# NFL scoring schema: key -> (default points, category, label)
# =============================================================================

NFL_SCORING_SCHEMA = {
    # Passing
    'pass_yd': (0.04, 'passing', 'Passing Yards (per yard)'),
    'pass_td': (4, 'passing', 'Passing TD'),
    'pass_2pt': (2, 'passing', 'Passing 2-Point Conversion'),
    'pass_int': (-2, 'passing', 'Interception Thrown'),
    'pass_cmp': (0, 'passing', 'Completion'),
    'pass_att': (0, 'passing', 'Pass Attempt'),
    'pass_inc': (0, 'passing', 'Incompletion'),
    'pass_sack': (0, 'passing', 'Sack Taken'),
    # Rushing
    'rush_yd': (0.1, 'rushing', 'Rushing Yards (per yard)'),
    'rush_td': (6, 'rushing', 'Rushing TD'),
    'rush_2pt': (2, 'rushing', 'Rushing 2-Point Conversion'),
    'rush_att': (0, 'rushing', 'Rush Attempt'),
    # Receiving
    'rec': (0, 'receiving', 'Reception'),
    'rec_yd': (0.1, 'receiving', 'Receiving Yards (per yard)'),
    'rec_td': (6, 'receiving', 'Receiving TD'),
    'rec_2pt': (2, 'receiving', 'Receiving 2-Point Conversion'),
    'rec_tgt': (0, 'receiving', 'Target'),
    # Fumbles
    'fum': (0, 'fumbles', 'Fumble'),
    'fum_lost': (-2, 'fumbles', 'Fumble Lost'),
    # Kicking
    'fgm': (3, 'kicking', 'FG Made (any distance)'),
    'fgm_0_19': (0, 'kicking', 'FG Made 0-19 Yards'),
    'fgm_20_29': (0, 'kicking', 'FG Made 20-29 Yards'),
    'fgm_30_39': (0, 'kicking', 'FG Made 30-39 Yards'),
    'fgm_40_49': (4, 'kicking', 'FG Made 40-49 Yards'),
    'fgm_50p': (5, 'kicking', 'FG Made 50+ Yards'),
    'fgmiss': (-1, 'kicking', 'FG Missed'),
    'xpm': (1, 'kicking', 'Extra Point Made'),
    'xpmiss': (-1, 'kicking', 'Extra Point Missed'),
    # Team defense
    'def_td': (6, 'defense', 'Defensive TD'),
    'sack': (1, 'defense', 'Sack'),
    'int': (2, 'defense', 'Interception'),
    'ff': (0, 'defense', 'Forced Fumble'),
    'def_fum_rec': (2, 'defense', 'Fumble Recovery'),
    'safe': (2, 'defense', 'Safety'),
    'blk_kick': (2, 'defense', 'Blocked Kick'),
    'def_2pt': (2, 'defense', 'Defensive 2-Point Return'),
    'pts_allow_0': (10, 'defense', '0 Points Allowed'),
    'pts_allow_1_6': (7, 'defense', '1-6 Points Allowed'),
    'pts_allow_7_13': (4, 'defense', '7-13 Points Allowed'),
    'pts_allow_14_20': (1, 'defense', '14-20 Points Allowed'),
    'pts_allow_21_27': (0, 'defense', '21-27 Points Allowed'),
    'pts_allow_28_34': (-1, 'defense', '28-34 Points Allowed'),
    'pts_allow_35p': (-4, 'defense', '35+ Points Allowed'),
    # Special teams
    'st_td': (6, 'special_teams', 'Special Teams TD'),
    'pr_yd': (0, 'special_teams', 'Punt Return Yards (per yard)'),
    'kr_yd': (0, 'special_teams', 'Kick Return Yards (per yard)'),
    # Bonuses
    'bonus_pass_yd_300': (2, 'bonuses', '300+ Passing Yard Bonus'),
    'bonus_pass_yd_400': (4, 'bonuses', '400+ Passing Yard Bonus'),
    'bonus_rush_yd_100': (2, 'bonuses', '100+ Rushing Yard Bonus'),
    'bonus_rush_yd_200': (4, 'bonuses', '200+ Rushing Yard Bonus'),
    'bonus_rec_yd_100': (2, 'bonuses', '100+ Receiving Yard Bonus'),
    'bonus_rec_yd_200': (4, 'bonuses', '200+ Receiving Yard Bonus'),
    # IDP
    'idp_tkl_solo': (0, 'idp', 'Solo Tackle'),
    'idp_tkl_ast': (0, 'idp', 'Assisted Tackle'),
    'idp_sack': (0, 'idp', 'IDP Sack'),
    'idp_int': (0, 'idp', 'IDP Interception'),
    'idp_ff': (0, 'idp', 'IDP Forced Fumble'),
    'idp_fum_rec': (0, 'idp', 'IDP Fumble Recovery'),
    'idp_def_td': (0, 'idp', 'IDP Defensive TD'),
    'idp_pass_def': (0, 'idp', 'Pass Defended'),
}

NFL_CATEGORIES = [
    'passing',
    'rushing',
    'receiving',
    'fumbles',
    'kicking',
    'defense',
    'special_teams',
    'bonuses',
    'idp',
]

NFL_STANDARD_RULES = {key: default for key, (default, _category, _label) in NFL_SCORING_SCHEMA.items()}

NFL_PRESETS = {
    'standard': NFL_STANDARD_RULES,
    'ppr': {**NFL_STANDARD_RULES, 'rec': 1},
    'half_ppr': {**NFL_STANDARD_RULES, 'rec': 0.5},
    'custom': NFL_STANDARD_RULES,
}

# Scoring key -> stat line field. Keys scored outside this table
# (pass_inc, fgmiss, xpmiss, tiers, bonuses) are derived in scoring.py.
NFL_STAT_FIELDS = {
    'pass_yd': 'pass_yards',
    'pass_td': 'pass_tds',
    'pass_2pt': 'pass_2pt',
    'pass_int': 'interceptions',
    'pass_cmp': 'pass_completions',
    'pass_att': 'pass_attempts',
    'pass_sack': 'sacked',
    'rush_yd': 'rush_yards',
    'rush_td': 'rush_tds',
    'rush_2pt': 'rush_2pt',
    'rush_att': 'rush_attempts',
    'rec': 'receptions',
    'rec_yd': 'rec_yards',
    'rec_td': 'rec_tds',
    'rec_2pt': 'rec_2pt',
    'rec_tgt': 'targets',
    'fum': 'fumbles',
    'fum_lost': 'fumbles_lost',
    'fgm': 'fg_made',
    'fgm_0_19': 'fg_made_0_19',
    'fgm_20_29': 'fg_made_20_29',
    'fgm_30_39': 'fg_made_30_39',
    'fgm_40_49': 'fg_made_40_49',
    'fgm_50p': 'fg_made_50_plus',
    'xpm': 'xp_made',
    'sack': 'sacks',
    'int': 'def_interceptions',
    'ff': 'fumbles_forced',
    'def_fum_rec': 'fumbles_recovered',
    'def_td': 'def_tds',
    'safe': 'safeties',
    'blk_kick': 'blocked_kicks',
    'def_2pt': 'def_2pt_returns',
    'st_td': 'return_tds',
    'pr_yd': 'punt_return_yards',
    'kr_yd': 'kick_return_yards',
    'idp_tkl_solo': 'tackles_solo',
    'idp_tkl_ast': 'tackles_assist',
    'idp_sack': 'idp_sacks',
    'idp_int': 'idp_interceptions',
    'idp_ff': 'idp_fumbles_forced',
    'idp_fum_rec': 'idp_fumbles_recovered',
    'idp_def_td': 'idp_def_tds',
    'idp_pass_def': 'passes_defended',
}

FG_DISTANCE_KEYS = ['fgm_0_19', 'fgm_20_29', 'fgm_30_39', 'fgm_40_49', 'fgm_50p']

# (upper bound inclusive, rule key); anything above the last bound is 35+
POINTS_ALLOWED_TIERS = [
    (0, 'pts_allow_0'),
    (6, 'pts_allow_1_6'),
    (13, 'pts_allow_7_13'),
    (20, 'pts_allow_14_20'),
    (27, 'pts_allow_21_27'),
    (34, 'pts_allow_28_34'),
]

# (yardage stat key, [(threshold, bonus key), ...] highest first)
YARDAGE_BONUSES = [
    ('pass_yd', [(400, 'bonus_pass_yd_400'), (300, 'bonus_pass_yd_300')]),
    ('rush_yd', [(200, 'bonus_rush_yd_200'), (100, 'bonus_rush_yd_100')]),
    ('rec_yd', [(200, 'bonus_rec_yd_200'), (100, 'bonus_rec_yd_100')]),
]

# =============================================================================
# Playoffs
# =============================================================================

SEEDING_POLICIES = {'fixed', 'reseed', 'commissioner'}

# Accepted aliases for the seeding policy setting
SEEDING_ALIASES = {
    'default': 'fixed',
    'fixed-bracket': 'fixed',
    'reseed-each-round': 'reseed',
    'commissioners-choice': 'commissioner',
    'manual': 'commissioner',
}

PLAYOFF_FORMATS = {'single-elimination', 'two-week'}
CONSOLATION_TYPES = {'none', 'consolation', 'toilet-bowl'}

ROUND_NAMES_BY_TEAM_COUNT = {
    2: 'Championship',
    4: 'Semifinals',
    8: 'Quarterfinals',
}

# =============================================================================
# Head-to-head tiebreakers
# =============================================================================

TIEBREAKERS = ['total-points', 'head-to-head', 'points-against', 'division-record']

# =============================================================================
# Rotisserie categories: id -> (label, higher is better)
# =============================================================================

ROTO_CATEGORIES = {
    'wins': ('Wins', True),
    'top5s': ('Top 5s', True),
    'top10s': ('Top 10s', True),
    'top25s': ('Top 25s', True),
    'cuts_made': ('Cuts Made', True),
    'birdies': ('Total Birdies', True),
    'eagles': ('Total Eagles', True),
    'scoring_avg': ('Scoring Avg', False),
    'sg_total': ('SG: Total', True),
}

ROTO_MIN_CATEGORIES = 4
ROTO_MAX_CATEGORIES = 10

# =============================================================================
# Survivor
# =============================================================================

SURVIVOR_ALIVE = 'alive'
SURVIVOR_BUYBACK = 'buyback'
SURVIVOR_ELIMINATED = 'eliminated'

# =============================================================================
# Format defaults
# =============================================================================

DEFAULT_FORMAT_SETTINGS = {
    LeagueFormat.FULL_LEAGUE: {
        'segments': 1,
        'segment_bonus': 25,
    },
    LeagueFormat.HEAD_TO_HEAD: {
        'playoff_teams': 4,
        'playoff_format': 'single-elimination',
        'playoff_weeks_per_round': 1,
        'playoff_seeding': 'fixed',
        'consolation_bracket': 'none',
        'regular_season_weeks': 12,
        'tiebreakers': ['total-points', 'head-to-head'],
    },
    LeagueFormat.ROTO: {
        'categories': ['wins', 'top10s', 'cuts_made', 'birdies', 'eagles', 'scoring_avg'],
    },
    LeagueFormat.SURVIVOR: {
        'eliminations_per_period': 1,
        'buy_backs': {'allowed': True, 'max': 1},
        'stop_at_alive': 1,
    },
    LeagueFormat.ONE_AND_DONE: {
        'tiers': [
            {'tier': 1, 'max_rank': 10, 'multiplier': 1.0},
            {'tier': 2, 'max_rank': 30, 'multiplier': 1.25},
            {'tier': 3, 'max_rank': 60, 'multiplier': 1.5},
            {'tier': 4, 'max_rank': None, 'multiplier': 2.0},
        ],
        'major_multiplier': 1.5,
    },
}
