"""One-and-done format: one golfer per team per tournament, never reused.

A pick's tier comes from the golfer's world ranking when the pick is locked,
so later ranking changes do not move it. Points are the golfer's raw
tournament points times the tier multiplier, times the major multiplier for
majors.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from typing import Any

from .exceptions import InvalidConfigurationError, InvalidTransitionError
from .models import OneAndDonePick, OneAndDoneRow, OneAndDoneState
from .schemas import OneAndDoneSettings, TierDefinition
from .utils import round_points, to_number

logger = logging.getLogger('league_engine.one_and_done')


def _team_id(entry: Any) -> str:
    return entry if isinstance(entry, str) else entry.team_id


def new_one_and_done_state(teams: Sequence[Any]) -> OneAndDoneState:
    team_ids = tuple(_team_id(t) for t in teams)
    if len(set(team_ids)) != len(team_ids):
        raise InvalidConfigurationError('One-and-done teams contain duplicates')
    return OneAndDoneState(teams=team_ids)


def tier_for_rank(world_rank: int | None, settings: OneAndDoneSettings) -> TierDefinition:
    """
    Tier for a world ranking.

    Unranked golfers and anyone beyond the last cutoff fall in the last tier.
    """
    if world_rank is None:
        return settings.tiers[-1]
    for tier in settings.tiers:
        if tier.max_rank is None or world_rank <= tier.max_rank:
            return tier
    return settings.tiers[-1]


def pick_points(pick: OneAndDonePick, raw_points: Any, settings: OneAndDoneSettings) -> float:
    """Raw points x tier multiplier (x major multiplier for majors)."""
    points = to_number(raw_points) * pick.tier_multiplier
    if pick.is_major:
        points *= settings.major_multiplier
    return round_points(points)


def lock_pick(
    state: OneAndDoneState,
    team_id: str,
    period: int,
    player_id: str,
    world_rank: int | None = None,
    is_major: bool = False,
    settings: OneAndDoneSettings | None = None,
) -> OneAndDoneState:
    """
    Lock a team's golfer for a tournament.

    Args:
        state: Current one-and-done state
        team_id: Picking team
        period: Tournament (period) number
        player_id: Golfer picked
        world_rank: Golfer's world ranking at pick time (None = unranked)
        is_major: Whether the tournament is a major
        settings: Tier and major multipliers

    Returns:
        New state with the pick added

    Raises:
        InvalidConfigurationError: If the team is not in the league
        InvalidTransitionError: If the team already picked this period or
            already used this golfer; the state is left unchanged

    Example:
        state = lock_pick(state, 'T1', 3, 'scheffler', world_rank=1, is_major=True)
    """
    settings = settings or OneAndDoneSettings()
    if team_id not in state.teams:
        raise InvalidConfigurationError(f'Unknown team: {team_id}')

    if state.pick_for(team_id, period) is not None:
        logger.warning(f'Rejected pick by {team_id}: already picked for period {period}')
        raise InvalidTransitionError(f'{team_id} already has a pick for period {period}')
    if player_id in state.used_players(team_id):
        logger.warning(f'Rejected pick by {team_id}: {player_id} already used')
        raise InvalidTransitionError(f'{team_id} has already used {player_id}')

    tier = tier_for_rank(world_rank, settings)
    pick = OneAndDonePick(
        team_id=team_id,
        period=period,
        player_id=player_id,
        world_rank=world_rank,
        tier=tier.tier,
        tier_multiplier=tier.multiplier,
        is_major=is_major,
    )
    logger.debug(f'{team_id} locked {player_id} (tier {tier.tier}) for period {period}')
    return replace(state, picks=state.picks + (pick,))


def score_pick(
    state: OneAndDoneState,
    team_id: str,
    period: int,
    raw_points: Any,
    settings: OneAndDoneSettings | None = None,
) -> OneAndDoneState:
    """
    Score a locked pick from the golfer's raw tournament points.

    Rescoring replaces the previous points, so live updates can be applied
    repeatedly. Missing or malformed raw points score 0.

    Raises:
        InvalidTransitionError: If the team has no pick for the period
    """
    settings = settings or OneAndDoneSettings()
    pick = state.pick_for(team_id, period)
    if pick is None:
        raise InvalidTransitionError(f'{team_id} has no pick for period {period}')

    scored = replace(pick, raw_points=to_number(raw_points), points=pick_points(pick, raw_points, settings))
    picks = tuple(scored if p is pick else p for p in state.picks)
    return replace(state, picks=picks)


def one_and_done_standings(state: OneAndDoneState) -> list[OneAndDoneRow]:
    """Rank teams by total pick points, ties ordered by team id."""
    rows = []
    for team in state.teams:
        picks = tuple(sorted((p for p in state.picks if p.team_id == team), key=lambda p: p.period))
        rows.append(
            OneAndDoneRow(
                team_id=team,
                total_points=round_points(sum(p.points for p in picks)),
                used_players=frozenset(p.player_id for p in picks),
                picks=picks,
            )
        )
    rows.sort(key=lambda row: (-row.total_points, row.team_id))
    return [replace(row, rank=rank) for rank, row in enumerate(rows, 1)]


def _world_rank(value: Any) -> int | None:
    rank = int(to_number(value))
    return rank if rank > 0 else None


def _pick_fields(entry: Any, teams: Sequence[str]) -> tuple[str, int, str] | None:
    """(team_id, period, player_id) of a pick mapping, or None when malformed."""
    if not isinstance(entry, Mapping):
        logger.warning(f'Skipping malformed pick: {type(entry).__name__}')
        return None
    team_id, player_id = entry.get('team_id'), entry.get('player_id')
    try:
        period = int(entry.get('period'))
    except (TypeError, ValueError):
        period = None
    if team_id not in teams or period is None or not player_id:
        logger.warning(f'Skipping malformed pick: {dict(entry)}')
        return None
    return team_id, period, player_id


def aggregate_one_and_done(
    teams: Sequence[Any],
    picks: Iterable[Mapping[str, Any]],
    settings: OneAndDoneSettings,
) -> list[OneAndDoneRow]:
    """
    Replay a season of picks into standings.

    Picks that are not mappings, lack a team, period or player, or name a
    team outside the league are skipped with a warning.

    Args:
        teams: Team ids or Team objects in input order
        picks: Mappings with team_id, period, player_id and optionally
            world_rank, is_major and raw_points
        settings: One-and-done settings

    Returns:
        Ranked OneAndDoneRow list

    Raises:
        InvalidTransitionError: If the picks reuse a golfer or double up a period
    """
    state = new_one_and_done_state(teams)
    for entry in picks or []:
        fields = _pick_fields(entry, state.teams)
        if fields is None:
            continue
        team_id, period, player_id = fields
        state = lock_pick(
            state,
            team_id,
            period,
            player_id,
            world_rank=_world_rank(entry.get('world_rank')),
            is_major=bool(entry.get('is_major', False)),
            settings=settings,
        )
        if entry.get('raw_points') is not None:
            state = score_pick(state, team_id, period, entry['raw_points'], settings)

    logger.debug(f'One-and-done replayed {len(state.picks)} picks')
    return one_and_done_standings(state)
