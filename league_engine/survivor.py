"""Survivor format: weekly elimination of the lowest scorers.

Each period the lowest-scoring alive teams are eliminated and stamped with
the period number. Eliminated teams may buy back in when the league allows
it; a bought-back team competes as 'buyback' and returns to 'alive' after
surviving a period.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from typing import Any

from .constants import SURVIVOR_ALIVE, SURVIVOR_BUYBACK, SURVIVOR_ELIMINATED
from .exceptions import InvalidConfigurationError, InvalidTransitionError
from .models import SurvivorRow, SurvivorState
from .schemas import SurvivorSettings
from .utils import as_period_scores, round_points, to_number

logger = logging.getLogger('league_engine.survivor')


def _team_id(entry: Any) -> str:
    return entry if isinstance(entry, str) else entry.team_id


def new_survivor_state(teams: Sequence[Any]) -> SurvivorState:
    """Start a survivor season with every team alive."""
    team_ids = tuple(_team_id(t) for t in teams)
    if len(set(team_ids)) != len(team_ids):
        raise InvalidConfigurationError('Survivor teams contain duplicates')
    return SurvivorState(
        teams=team_ids,
        statuses={t: SURVIVOR_ALIVE for t in team_ids},
        eliminated_week={t: None for t in team_ids},
        points={t: 0.0 for t in team_ids},
        buybacks={t: 0 for t in team_ids},
    )


def is_terminal(state: SurvivorState, settings: SurvivorSettings) -> bool:
    """True once the alive count is at or below stop_at_alive."""
    return len(state.alive) <= settings.stop_at_alive


def _require_team(state: SurvivorState, team_id: str) -> None:
    if team_id not in state.statuses:
        raise InvalidConfigurationError(f'Unknown team: {team_id}')


def process_period(
    state: SurvivorState,
    period: int,
    scores: Mapping[str, Any],
    settings: SurvivorSettings,
) -> SurvivorState:
    """
    Apply one period's scores.

    Season points accumulate for every team. Then, unless the season is
    already terminal, the eliminations_per_period lowest scorers among alive
    teams are eliminated, never taking the alive count below stop_at_alive.
    Ties at the cutoff go out by lower season points, then later input order.

    Args:
        state: Survivor state before this period
        period: Period number, strictly after the last processed one
        scores: team_id -> period score; missing or malformed scores, or a
            malformed mapping, count as 0
        settings: Survivor settings

    Returns:
        New SurvivorState

    Raises:
        InvalidTransitionError: If the period was already processed
    """
    if period <= state.last_period:
        raise InvalidTransitionError(f'Period {period} already processed (last was {state.last_period})')

    scores = as_period_scores(scores, period)
    period_scores = {t: to_number(scores.get(t)) for t in state.teams}
    points = {t: round_points(state.points.get(t, 0.0) + period_scores[t]) for t in state.teams}
    statuses = dict(state.statuses)
    eliminated_week = dict(state.eliminated_week)

    alive = list(state.alive)
    eliminated = []
    if len(alive) > settings.stop_at_alive:
        count = min(settings.eliminations_per_period, len(alive) - settings.stop_at_alive)
        order = {t: i for i, t in enumerate(state.teams)}
        candidates = sorted(alive, key=lambda t: (period_scores[t], points[t], -order[t]))
        eliminated = candidates[:count]
        for team in eliminated:
            statuses[team] = SURVIVOR_ELIMINATED
            eliminated_week[team] = period

    for team in alive:
        if team not in eliminated and statuses[team] == SURVIVOR_BUYBACK:
            statuses[team] = SURVIVOR_ALIVE

    if eliminated:
        logger.info(f'Period {period}: eliminated {", ".join(eliminated)}')
    return replace(
        state,
        statuses=statuses,
        eliminated_week=eliminated_week,
        points=points,
        last_period=period,
    )


def eliminate(state: SurvivorState, team_id: str, period: int) -> SurvivorState:
    """
    Eliminate one team directly (commissioner action).

    Raises:
        InvalidTransitionError: If the team is already eliminated
    """
    _require_team(state, team_id)
    if state.statuses[team_id] == SURVIVOR_ELIMINATED:
        logger.warning(f'Rejected elimination of {team_id}: already eliminated')
        raise InvalidTransitionError(f'{team_id} is already eliminated')

    return replace(
        state,
        statuses={**state.statuses, team_id: SURVIVOR_ELIMINATED},
        eliminated_week={**state.eliminated_week, team_id: period},
    )


def buy_back(
    state: SurvivorState,
    team_id: str,
    period: int,
    settings: SurvivorSettings,
) -> SurvivorState:
    """
    Return an eliminated team to competition.

    Args:
        state: Current survivor state
        team_id: Eliminated team buying back
        period: Period the team re-enters
        settings: Survivor settings (buy_backs.allowed, buy_backs.max)

    Returns:
        New SurvivorState with the team in 'buyback' status

    Raises:
        InvalidTransitionError: If buy-backs are disabled, the team is not
            eliminated or it has used all its buy-backs
    """
    _require_team(state, team_id)
    policy = settings.buy_backs
    used = state.buybacks.get(team_id, 0)

    if not policy.allowed:
        reason = 'buy-backs are not allowed in this league'
    elif state.statuses[team_id] != SURVIVOR_ELIMINATED:
        reason = f'{team_id} is not eliminated'
    elif used >= policy.max:
        reason = f'{team_id} has used {used} of {policy.max} buy-backs'
    else:
        reason = None
    if reason:
        logger.warning(f'Rejected buy-back for {team_id} in period {period}: {reason}')
        raise InvalidTransitionError(reason)

    logger.info(f'{team_id} bought back in for period {period}')
    return replace(
        state,
        statuses={**state.statuses, team_id: SURVIVOR_BUYBACK},
        eliminated_week={**state.eliminated_week, team_id: None},
        buybacks={**state.buybacks, team_id: used + 1},
    )


def survivor_standings(state: SurvivorState) -> list[SurvivorRow]:
    """
    Rank a survivor state.

    Alive teams first, then eliminated teams by most recent elimination.
    Season points break ties within each group, then input order.
    """
    order = {t: i for i, t in enumerate(state.teams)}

    def sort_key(team):
        out = state.statuses[team] == SURVIVOR_ELIMINATED
        week = state.eliminated_week.get(team) or 0
        return (out, -week, -state.points.get(team, 0.0), order[team])

    return [
        SurvivorRow(
            team_id=team,
            rank=rank,
            status=state.statuses[team],
            eliminated_week=state.eliminated_week.get(team),
            points=state.points.get(team, 0.0),
            buybacks_used=state.buybacks.get(team, 0),
        )
        for rank, team in enumerate(sorted(state.teams, key=sort_key), 1)
    ]
def aggregate_survivor(
    teams: Sequence[Any],
    period_scores: Sequence[Mapping[str, Any]] | Mapping[str, Any],
    settings: SurvivorSettings,
    buybacks: Iterable[tuple[str, int]] = (),
) -> list[SurvivorRow]:
    """
    Recompute survivor standings from the full season.

    Args:
        teams: Team ids or Team objects in input order
        period_scores: One team_id -> score mapping per period, period 1
            first, or a {'periods': [...], 'buybacks': [...]} mapping that
            carries the buy-backs alongside the scores
        settings: Survivor settings
        buybacks: (team_id, period) pairs; each is applied just before that
            period is processed

    Returns:
        Ranked SurvivorRow list
    """
    if isinstance(period_scores, Mapping):
        buybacks = [*buybacks, *(period_scores.get('buybacks') or [])]
        period_scores = period_scores.get('periods')
    periods = list(period_scores or [])

    state = new_survivor_state(teams)
    pending: dict[int, list[str]] = {}
    for team_id, period in buybacks:
        pending.setdefault(int(period), []).append(team_id)

    for period, scores in enumerate(periods, 1):
        for team_id in pending.get(period, []):
            state = buy_back(state, team_id, period, settings)
        state = process_period(state, period, scores, settings)

    logger.debug(f'Survivor after {len(periods)} periods: {len(state.alive)} alive')
    return survivor_standings(state)
