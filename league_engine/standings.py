"""Standings aggregation for the five league formats.

Every function recomputes standings from scratch from the teams and results
it is given. Every input team gets a row, and missing or malformed results
contribute zero.

Results per format:
    full-league: one team_id -> score mapping per period, period 1 first
    head-to-head: Period objects (or bare Matchup objects)
    roto: team_id -> {category: value}
    survivor: one team_id -> score mapping per period, period 1 first, or
        {'periods': [...], 'buybacks': [[team_id, period], ...]}
    one-and-done: pick mappings (see one_and_done.aggregate_one_and_done)
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from typing import Any

from .config import resolve_format_settings
from .constants import MISSED_CUT_STATUSES, LeagueFormat
from .exceptions import InvalidConfigurationError
from .models import (
    CategoryRank,
    FullLeagueRow,
    HeadToHeadRow,
    Matchup,
    Period,
    RotoRow,
    Team,
)
from .one_and_done import aggregate_one_and_done
from .schemas import FullLeagueSettings, HeadToHeadSettings, RotoSettings
from .survivor import aggregate_survivor
from .utils import as_period_scores, round_points, stat_value, to_number

logger = logging.getLogger('league_engine.standings')


def _team_ids(teams: Sequence[Any]) -> list[str]:
    team_ids = [t if isinstance(t, str) else t.team_id for t in teams]
    if len(set(team_ids)) != len(team_ids):
        raise InvalidConfigurationError('Teams contain duplicates')
    return team_ids


# =============================================================================
# Full league
# =============================================================================


def segment_ranges(season_periods: int, segments: int) -> list[range]:
    """
    Split period indexes 0..season_periods-1 into contiguous segments.

    The remainder goes to the earliest segments, e.g. 10 periods in
    3 segments gives lengths 4, 3, 3. Empty segments are dropped.
    """
    base, extra = divmod(season_periods, segments)
    ranges = []
    start = 0
    for index in range(segments):
        length = base + (1 if index < extra else 0)
        if length:
            ranges.append(range(start, start + length))
        start += length
    return ranges


def full_league_standings(
    teams: Sequence[Any],
    period_scores: Sequence[Mapping[str, Any]],
    settings: FullLeagueSettings,
) -> list[FullLeagueRow]:
    """
    Season-long points table with segment bonuses.

    A segment's bonus goes to its leader only once every period in the
    segment has results. Leader ties break on best single-period score in
    the segment, then input order.

    Args:
        teams: Team ids or Team objects in input order
        period_scores: One team_id -> score mapping per period
        settings: Full-league settings

    Returns:
        Rows ranked by total points (season points plus bonuses), ties
        ordered by team id
    """
    team_ids = _team_ids(teams)
    periods = [as_period_scores(entry, number) for number, entry in enumerate(period_scores or [], 1)]
    played = len(periods)
    scores = {t: [to_number(period.get(t)) for period in periods] for t in team_ids}

    bonus = {t: 0.0 for t in team_ids}
    segment_wins = {t: [] for t in team_ids}
    season_periods = settings.season_periods or played
    if settings.segments > 1 and settings.segment_bonus > 0:
        for number, indexes in enumerate(segment_ranges(season_periods, settings.segments), 1):
            if indexes.stop > played:
                continue
            leader = max(
                team_ids,
                key=lambda t: (
                    round_points(sum(scores[t][i] for i in indexes)),
                    max(scores[t][i] for i in indexes),
                    -team_ids.index(t),
                ),
            )
            bonus[leader] += settings.segment_bonus
            segment_wins[leader].append(number)
            logger.debug(f'Segment {number} winner: {leader} (+{settings.segment_bonus})')

    rows = []
    for t in team_ids:
        points = round_points(sum(scores[t]))
        rows.append(
            FullLeagueRow(
                team_id=t,
                points=points,
                bonus_points=round_points(bonus[t]),
                total_points=round_points(points + bonus[t]),
                segment_wins=tuple(segment_wins[t]),
                period_points=tuple(round_points(s) for s in scores[t]),
            )
        )
    rows.sort(key=lambda row: (-row.total_points, row.team_id))
    return [replace(row, rank=rank) for rank, row in enumerate(rows, 1)]


# =============================================================================
# Head to head
# =============================================================================


def _flatten_matchups(results: Iterable[Period | Matchup]) -> list[Matchup]:
    matchups = []
    for item in results:
        items = item.matchups if isinstance(item, Period) else (item,)
        for matchup in items:
            if isinstance(matchup, Matchup):
                matchups.append(matchup)
            else:
                logger.warning(f'Skipping malformed head-to-head result: {type(matchup).__name__}')
    return matchups


def _streak(outcomes: list[str]) -> str:
    if not outcomes:
        return '-'
    last = outcomes[-1]
    count = 0
    for outcome in reversed(outcomes):
        if outcome != last:
            break
        count += 1
    return f'{last}{count}'


def _head_to_head_pct(group: list[str], matchups: list[Matchup]) -> dict[str, float]:
    """Win pct in games among the group; teams with no such games get 0.5."""
    members = set(group)
    record = {t: [0.0, 0] for t in group}
    for m in matchups:
        if m.home in members and m.away in members and m.home != m.away:
            home, away = to_number(m.home_score), to_number(m.away_score)
            record[m.home][1] += 1
            record[m.away][1] += 1
            if home > away:
                record[m.home][0] += 1
            elif away > home:
                record[m.away][0] += 1
            else:
                record[m.home][0] += 0.5
                record[m.away][0] += 0.5
    return {t: (won / games if games else 0.5) for t, (won, games) in record.items()}


def _tiebreak_values(
    tiebreaker: str,
    group: list[str],
    rows: dict[str, HeadToHeadRow],
    matchups: list[Matchup],
) -> dict[str, float]:
    """Per-team value for one tiebreaker; higher ranks first."""
    if tiebreaker == 'total-points':
        return {t: rows[t].points_for for t in group}
    if tiebreaker == 'points-against':
        return {t: -rows[t].points_against for t in group}
    if tiebreaker == 'division-record':
        return {t: rows[t].division_win_pct for t in group}
    if tiebreaker == 'head-to-head':
        return _head_to_head_pct(group, matchups)
    raise InvalidConfigurationError(f'Unknown tiebreaker: {tiebreaker}')


def _break_ties(
    group: list[str],
    tiebreakers: Sequence[str],
    rows: dict[str, HeadToHeadRow],
    matchups: list[Matchup],
) -> list[str]:
    """Order a tied group by the first tiebreaker, recursing into sub-ties."""
    if len(group) <= 1 or not tiebreakers:
        return group
    values = _tiebreak_values(tiebreakers[0], group, rows, matchups)
    ordered = []
    for value in sorted(set(values.values()), reverse=True):
        subgroup = [t for t in group if values[t] == value]
        ordered.extend(_break_ties(subgroup, tiebreakers[1:], rows, matchups))
    return ordered


def head_to_head_standings(
    teams: Sequence[Any],
    results: Iterable[Period | Matchup],
    settings: HeadToHeadSettings,
) -> list[HeadToHeadRow]:
    """
    Win-loss table from completed matchups.

    Order: win percentage (ties count half a win), then the configured
    tiebreakers applied only within groups that are still tied, then input
    order. Division records count games between teams of the same division
    and never change the overall order unless 'division-record' is a
    configured tiebreaker.

    Args:
        teams: Team ids or Team objects (Team.division feeds division records)
        results: Periods or matchups; incomplete matchups are ignored
        settings: Head-to-head settings (tiebreakers)

    Returns:
        Ranked HeadToHeadRow list
    """
    team_ids = _team_ids(teams)
    divisions = {t.team_id: t.division for t in teams if isinstance(t, Team)}
    known = set(team_ids)

    stats = {
        t: {'w': 0, 'l': 0, 't': 0, 'pf': 0.0, 'pa': 0.0, 'dw': 0, 'dl': 0, 'dt': 0, 'outcomes': []}
        for t in team_ids
    }
    matchups = [m for m in _flatten_matchups(results or []) if m.completed]
    counted = []
    for m in matchups:
        if m.home not in known or m.away not in known:
            logger.warning(f'Skipping matchup with unknown team: {m.home} vs {m.away}')
            continue
        counted.append(m)
        home_score, away_score = to_number(m.home_score), to_number(m.away_score)
        same_division = divisions.get(m.home) is not None and divisions.get(m.home) == divisions.get(m.away)
        for team, scored, allowed in ((m.home, home_score, away_score), (m.away, away_score, home_score)):
            s = stats[team]
            s['pf'] += scored
            s['pa'] += allowed
            outcome = 'W' if scored > allowed else 'L' if scored < allowed else 'T'
            s[outcome.lower()] += 1
            s['outcomes'].append(outcome)
            if same_division:
                s['d' + outcome.lower()] += 1

    rows = {
        t: HeadToHeadRow(
            team_id=t,
            wins=s['w'],
            losses=s['l'],
            ties=s['t'],
            points_for=round_points(s['pf']),
            points_against=round_points(s['pa']),
            division=divisions.get(t),
            division_wins=s['dw'],
            division_losses=s['dl'],
            division_ties=s['dt'],
            streak=_streak(s['outcomes']),
        )
        for t, s in stats.items()
    }

    ordered = []
    for pct in sorted({row.win_pct for row in rows.values()}, reverse=True):
        group = [t for t in team_ids if rows[t].win_pct == pct]
        ordered.extend(_break_ties(group, settings.tiebreakers, rows, counted))

    logger.debug(f'Head-to-head standings from {len(counted)} completed matchups')
    return [replace(rows[t], rank=rank) for rank, t in enumerate(ordered, 1)]


def division_standings(rows: Sequence[HeadToHeadRow], teams: Sequence[Any]) -> dict[str, list[HeadToHeadRow]]:
    """Group ranked rows by division, keeping overall order within each."""
    divisions = {t.team_id: t.division for t in teams if isinstance(t, Team)}
    grouped: dict[str, list[HeadToHeadRow]] = {}
    for row in sorted(rows, key=lambda r: r.rank):
        division = divisions.get(row.team_id) or row.division
        if division:
            grouped.setdefault(division, []).append(row)
    return grouped


# =============================================================================
# Rotisserie
# =============================================================================


def _rank_category(
    team_ids: list[str],
    values: Mapping[str, float | None],
    higher_is_better: bool,
) -> dict[str, CategoryRank]:
    """
    Rank one category.

    Position 1 earns n points and position n earns 1. Tied teams split the
    points of the positions they span, so the category total is always
    n(n+1)/2. Teams without a value share the last positions.
    """
    n = len(team_ids)
    present = [t for t in team_ids if values[t] is not None]
    missing = [t for t in team_ids if values[t] is None]
    present.sort(key=lambda t: -values[t] if higher_is_better else values[t])

    groups = []
    for team in present:
        if groups and values[groups[-1][0]] == values[team]:
            groups[-1].append(team)
        else:
            groups.append([team])
    if missing:
        groups.append(missing)

    ranks = {}
    position = 1
    for group in groups:
        last = position + len(group) - 1
        points = sum(n + 1 - p for p in range(position, last + 1)) / len(group)
        for team in group:
            ranks[team] = CategoryRank(value=values[team], rank=position, points=points)
        position = last + 1
    return ranks


def roto_standings(
    teams: Sequence[Any],
    category_values: Mapping[str, Mapping[str, Any]],
    settings: RotoSettings,
) -> list[RotoRow]:
    """
    Rotisserie standings.

    Args:
        teams: Team ids or Team objects in input order
        category_values: team_id -> {category: value}
        settings: Roto settings (categories and directions)

    Returns:
        Rows ranked by total category points, ties ordered by team id
    """
    team_ids = _team_ids(teams)
    per_team: dict[str, dict[str, CategoryRank]] = {t: {} for t in team_ids}
    if not isinstance(category_values, Mapping):
        logger.warning(f'Ignoring malformed roto results: {type(category_values).__name__}')
        category_values = {}
    team_values = {}
    for t in team_ids:
        entry = category_values.get(t)
        if entry is not None and not isinstance(entry, Mapping):
            logger.warning(f'Ignoring malformed roto values for {t}')
            entry = None
        team_values[t] = entry or {}

    for category in settings.categories:
        values = {}
        for t in team_ids:
            raw = team_values[t].get(category)
            values[t] = None if raw is None else to_number(raw)
        for team, category_rank in _rank_category(team_ids, values, settings.higher_is_better(category)).items():
            per_team[team][category] = category_rank

    rows = [
        RotoRow(
            team_id=t,
            categories=per_team[t],
            total_points=round_points(sum(c.points for c in per_team[t].values())),
        )
        for t in team_ids
    ]
    rows.sort(key=lambda row: (-row.total_points, row.team_id))
    return [replace(row, rank=rank) for rank, row in enumerate(rows, 1)]


def roto_category_totals(stat_lines_by_team: Mapping[str, Iterable[Mapping[str, Any]]]) -> dict[str, dict[str, float | None]]:
    """
    Derive golf roto category values from tournament stat lines.

    Args:
        stat_lines_by_team: team_id -> golf stat lines of the team's golfers
            (position, status, birdies, eagles, sg_total, rounds)

    Returns:
        team_id -> {category: value}; scoring_avg is None with no rounds played
    """
    totals = {}
    for team, lines in stat_lines_by_team.items():
        values = {k: 0.0 for k in ('wins', 'top5s', 'top10s', 'top25s', 'cuts_made', 'birdies', 'eagles', 'sg_total')}
        round_scores = []
        for stats in lines or []:
            missed_cut = str(stats.get('status') or '').upper() in MISSED_CUT_STATUSES
            position = int(stat_value(stats, 'position'))
            if not missed_cut:
                values['cuts_made'] += 1
                if position > 0:
                    values['wins'] += position == 1
                    values['top5s'] += position <= 5
                    values['top10s'] += position <= 10
                    values['top25s'] += position <= 25
            values['birdies'] += stat_value(stats, 'birdies')
            values['eagles'] += stat_value(stats, 'eagles')
            values['sg_total'] += stat_value(stats, 'sg_total')
            for round_score in stats.get('rounds') or []:
                score = stat_value(round_score, 'score') if isinstance(round_score, Mapping) else 0
                if score > 0:
                    round_scores.append(score)

        values['sg_total'] = round_points(values['sg_total'])
        values['scoring_avg'] = round_points(sum(round_scores) / len(round_scores)) if round_scores else None
        totals[team] = values
    return totals


# =============================================================================
# Dispatch
# =============================================================================

STANDINGS_BY_FORMAT = {
    LeagueFormat.FULL_LEAGUE: full_league_standings,
    LeagueFormat.HEAD_TO_HEAD: head_to_head_standings,
    LeagueFormat.ROTO: roto_standings,
    LeagueFormat.SURVIVOR: aggregate_survivor,
    LeagueFormat.ONE_AND_DONE: aggregate_one_and_done,
}


def compute_standings(
    league_format: LeagueFormat | str,
    teams: Sequence[Any],
    results: Any,
    settings: Any = None,
) -> list:
    """
    Compute standings for any league format.

    Args:
        league_format: One of the five LeagueFormat values
        teams: Team ids or Team objects in input order
        results: Format-specific results (see module docstring)
        settings: Format settings model, a mapping of overrides, or None

    Returns:
        Ranked rows of the format's row type

    Raises:
        InvalidConfigurationError: If the format or settings are invalid

    Example:
        rows = compute_standings('roto', ['A', 'B'], {'A': {...}, 'B': {...}})
    """
    try:
        league_format = LeagueFormat(league_format)
    except ValueError as e:
        raise InvalidConfigurationError(f'Unknown league format: {league_format}') from e

    settings = resolve_format_settings(league_format, settings)
    logger.debug(f'Computing {league_format.value} standings for {len(teams)} teams')
    return STANDINGS_BY_FORMAT[league_format](teams, results, settings)
