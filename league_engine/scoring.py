"""Scoring rule evaluation for golf and NFL stat lines."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .constants import (
    BIRDIE_STREAK_LENGTH,
    FG_DISTANCE_KEYS,
    GOLF_STANDARD_PRESET,
    HOLE_RESULT_STATS,
    MISSED_CUT_STATUSES,
    NFL_CATEGORIES,
    NFL_SCORING_SCHEMA,
    NFL_STAT_FIELDS,
    POINTS_ALLOWED_TIERS,
    UNDER_PAR_ROUND_THRESHOLD,
    YARDAGE_BONUSES,
)
from .models import ScoreResult
from .schemas import GolfScoringConfig, NflScoringConfig
from .utils import round_points, stat_value, to_number

logger = logging.getLogger('league_engine.scoring')

# Hypothetical line used for live previews of a league's golf scoring
PREVIEW_STAT_LINE = {
    'position': 5,
    'status': 'ACTIVE',
    'holes_in_one': 0,
    'eagles': 2,
    'birdies': 22,
    'pars': 38,
    'bogeys': 8,
    'double_bogeys': 1,
    'worse_than_double': 0,
    'sg_total': 1.5,
    'rounds': [
        {'score': 70, 'bogey_free': True, 'consecutive_birdies': 3},
        {'score': 71, 'bogey_free': False, 'consecutive_birdies': 1},
        {'score': 72, 'bogey_free': False, 'consecutive_birdies': 2},
        {'score': 70, 'bogey_free': False, 'consecutive_birdies': 0},
    ],
}


def _finalize(breakdown: dict[str, float]) -> ScoreResult:
    """Round each category, then total the rounded categories."""
    rounded = {category: round_points(points) for category, points in breakdown.items()}
    return ScoreResult(total=round_points(sum(rounded.values())), breakdown=rounded)


# =============================================================================
# Golf
# =============================================================================


def _position_points(stats: Mapping[str, Any], position_points: Mapping[str, float]) -> float:
    """
    Finish-position points.

    Missed cut / WD / DQ use missedCut. Otherwise the exact position entry
    wins, then the top25 and top30 buckets (when non-zero), then madeCut for
    anything beyond 30th. Positions inside the table's gap score 0.
    """
    status = str(stats.get('status') or '').upper()
    if status in MISSED_CUT_STATUSES:
        return to_number(position_points.get('missedCut'))

    position = int(stat_value(stats, 'position'))
    if position <= 0:
        return 0.0

    if str(position) in position_points:
        return to_number(position_points[str(position)])

    top25 = to_number(position_points.get('top25'))
    top30 = to_number(position_points.get('top30'))
    if position <= 25 and top25:
        return top25
    if position <= 30 and top30:
        return top30
    if position > 30:
        return to_number(position_points.get('madeCut'))
    return 0.0


def _round_bonuses(rounds: Iterable[Any], bonuses: Mapping[str, float]) -> float:
    bogey_free = to_number(bonuses.get('bogeyFreeRound'))
    birdie_streak = to_number(bonuses.get('birdieStreak3'))
    under_70 = to_number(bonuses.get('under70Round'))

    points = 0.0
    for round_score in rounds or []:
        if not isinstance(round_score, Mapping):
            continue
        if round_score.get('bogey_free') and bogey_free:
            points += bogey_free
        if stat_value(round_score, 'consecutive_birdies') >= BIRDIE_STREAK_LENGTH and birdie_streak:
            points += birdie_streak
        score = stat_value(round_score, 'score')
        if score and score < UNDER_PAR_ROUND_THRESHOLD and under_70:
            points += under_70 * (UNDER_PAR_ROUND_THRESHOLD - score)
    return points


def score_golf_performance(stats: Mapping[str, Any], config: GolfScoringConfig) -> ScoreResult:
    """
    Score one golfer's tournament.

    Scoring groups:
        - position: finish position table with top25/top30/madeCut/missedCut fallbacks
        - holes: count of each hole result times its value
        - bonuses: bogey-free rounds, 3+ birdie streaks, strokes under 70 per round
        - strokesGained: sg_total * multiplier, only when enabled

    Args:
        stats: Stat line with position, status, hole counters and per-round
            dicts (score, bogey_free, consecutive_birdies)
        config: Golf scoring config

    Returns:
        ScoreResult with position/holes/bonuses/strokesGained breakdown
    """
    stats = stats or {}

    holes = sum(
        stat_value(stats, stat_key) * to_number(config.hole_scoring.get(result_key))
        for result_key, stat_key in HOLE_RESULT_STATS.items()
    )

    strokes_gained = 0.0
    if config.strokes_gained.enabled and stats.get('sg_total') is not None:
        strokes_gained = stat_value(stats, 'sg_total') * to_number(config.strokes_gained.multiplier)

    rounds = stats.get('rounds')
    return _finalize({
        'position': _position_points(stats, config.position_points),
        'holes': holes,
        'bonuses': _round_bonuses(rounds if isinstance(rounds, list) else [], config.bonuses),
        'strokesGained': strokes_gained,
    })


# =============================================================================
# NFL
# =============================================================================


def map_nfl_stats(stats: Mapping[str, Any]) -> dict[str, float]:
    """
    Map a raw NFL stat line onto scoring keys.

    Every value defaults to 0 when absent or malformed. Incompletions and
    missed kicks are derived from attempts minus makes.
    """
    mapped = {key: stat_value(stats, field) for key, field in NFL_STAT_FIELDS.items()}
    mapped['pass_inc'] = max(0.0, stat_value(stats, 'pass_attempts') - stat_value(stats, 'pass_completions'))
    mapped['fgmiss'] = max(0.0, stat_value(stats, 'fg_attempts') - stat_value(stats, 'fg_made'))
    mapped['xpmiss'] = max(0.0, stat_value(stats, 'xp_attempts') - stat_value(stats, 'xp_made'))
    return mapped


def _uses_distance_kicking(stats: Mapping[str, Any], rules: Mapping[str, float]) -> bool:
    """Distance buckets apply when configured and the stat line carries them."""
    has_bucket_rules = any(to_number(rules.get(key)) for key in FG_DISTANCE_KEYS)
    has_bucket_stats = any(stats.get(NFL_STAT_FIELDS[key]) is not None for key in FG_DISTANCE_KEYS)
    return has_bucket_rules and has_bucket_stats


def _points_allowed_key(points_allowed: float) -> str:
    for upper_bound, key in POINTS_ALLOWED_TIERS:
        if points_allowed <= upper_bound:
            return key
    return 'pts_allow_35p'


def score_nfl_performance(stats: Mapping[str, Any], config: NflScoringConfig) -> ScoreResult:
    """
    Score one NFL player game (or team defense).

    Each category is a linear combination of stat counters and per-unit
    values. Kicking uses distance buckets or the flat per-make value, never
    both. Yardage bonuses award only the highest tier reached.

    Args:
        stats: Raw stat line (pass_yards, rush_tds, fg_made_40_49, points_allowed, ...)
        config: NFL scoring config

    Returns:
        ScoreResult with one breakdown entry per NFL category
    """
    stats = stats or {}
    rules = config.rules
    mapped = map_nfl_stats(stats)
    breakdown = {category: 0.0 for category in NFL_CATEGORIES}

    distance_kicking = _uses_distance_kicking(stats, rules)
    for key, (_default, category, _label) in NFL_SCORING_SCHEMA.items():
        if key not in mapped:
            continue
        if key == 'fgm' and distance_kicking:
            continue
        if key in FG_DISTANCE_KEYS and not distance_kicking:
            continue
        breakdown[category] += mapped[key] * to_number(rules.get(key))

    # Points-allowed tier only for team defense lines
    if stats.get('points_allowed') is not None:
        tier_key = _points_allowed_key(stat_value(stats, 'points_allowed'))
        breakdown['defense'] += to_number(rules.get(tier_key))

    for yardage_key, thresholds in YARDAGE_BONUSES:
        yards = mapped[yardage_key]
        for threshold, bonus_key in thresholds:
            bonus = to_number(rules.get(bonus_key))
            if yards >= threshold and bonus:
                breakdown['bonuses'] += bonus
                break

    return _finalize(breakdown)


# =============================================================================
# Dispatch
# =============================================================================


def evaluate(config: GolfScoringConfig | NflScoringConfig, stats: Mapping[str, Any] | None) -> ScoreResult:
    """
    Evaluate a scoring config against one stat line.

    The same call serves live previews and actual scoring, so a preview for a
    stat line always equals the real score for it.

    Args:
        config: Golf or NFL scoring config
        stats: Raw stat line; None scores as an empty line

    Returns:
        ScoreResult
    """
    if isinstance(config, GolfScoringConfig):
        return score_golf_performance(stats or {}, config)
    if isinstance(config, NflScoringConfig):
        return score_nfl_performance(stats or {}, config)
    raise TypeError(f'Unsupported scoring config: {type(config).__name__}')


def score_batch(
    config: GolfScoringConfig | NflScoringConfig,
    stat_lines: Mapping[str, Mapping[str, Any] | None],
) -> dict[str, ScoreResult]:
    """Score many participants keyed by participant id."""
    results = {participant: evaluate(config, stats) for participant, stats in stat_lines.items()}
    logger.debug(f'Scored {len(results)} stat lines')
    return results


def preview_points(config: GolfScoringConfig) -> ScoreResult:
    """Score the built-in hypothetical golf line with a league's config."""
    return evaluate(config, PREVIEW_STAT_LINE)


def scoring_schema(sport: str = 'nfl') -> dict[str, list[dict[str, Any]]]:
    """
    Scoring keys grouped by category, with defaults and labels.

    Used to render settings forms; golf groups mirror the config tables.
    """
    if sport == 'golf':
        return {
            group: [{'key': key, 'default': value} for key, value in table.items()]
            for group, table in GOLF_STANDARD_PRESET.items()
        }

    categories: dict[str, list[dict[str, Any]]] = {}
    for key, (default, category, label) in NFL_SCORING_SCHEMA.items():
        categories.setdefault(category, []).append({'key': key, 'label': label, 'default': default})
    return categories
