"""Playoff bracket generation and advancement.

Seeding: seed i meets seed (slots + 1 - i) in round 1, where slots is the
next power of two at or above the qualified team count. When a seed's
opponent would not exist the node is a bye: one populated side, no score,
winner already set.

Advancement depends on the bracket's seeding policy:
    - fixed: winners move positionally. Node j of an n-node round feeds node
      min(j, n-1-j) of the next round, so 1 and 2 can only meet in the final.
    - reseed: once a round is decided the survivors are re-sorted by
      original seed and paired best against worst.
    - commissioner: later rounds stay empty until assign_round() fills them.

Every function returns a new Bracket; inputs are never modified.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import Any

from .constants import (
    PLAYOFF_FORMATS,
    ROUND_NAMES_BY_TEAM_COUNT,
    SEEDING_ALIASES,
    SEEDING_POLICIES,
)
from .exceptions import InvalidConfigurationError, InvalidTransitionError
from .models import Bracket, BracketNode, BracketRound
from .schemas import HeadToHeadSettings
from .validators import raise_for_errors, validate_slot_assignment

logger = logging.getLogger('league_engine.bracket')

WEEKS_PER_ROUND_OPTIONS = (1, 2, '2-championship')


def _team_id(entry: Any) -> str:
    """Accept plain ids, Team objects or standings rows."""
    return entry if isinstance(entry, str) else entry.team_id


def _next_power_of_two(n: int) -> int:
    size = 1
    while size < n:
        size *= 2
    return size


def round_name(teams_in_round: int, round_number: int) -> str:
    """Name a round by how many teams it starts with."""
    return ROUND_NAMES_BY_TEAM_COUNT.get(teams_in_round, f'Round {round_number}')


def _normalize_seeding(seeding: str) -> str:
    seeding = SEEDING_ALIASES.get(seeding, seeding)
    if seeding not in SEEDING_POLICIES:
        raise InvalidConfigurationError(f'Unknown seeding policy: {seeding}')
    return seeding


def _empty_rounds(slots: int) -> list[BracketRound]:
    rounds = []
    teams_in_round = slots
    number = 1
    while teams_in_round >= 2:
        rounds.append(
            BracketRound(
                number=number,
                name=round_name(teams_in_round, number),
                nodes=tuple(BracketNode() for _ in range(teams_in_round // 2)),
            )
        )
        teams_in_round //= 2
        number += 1
    return rounds


def _seeded_first_round(qualified: Sequence[str], slots: int) -> tuple[BracketNode, ...]:
    nodes = []
    for seed in range(1, slots // 2 + 1):
        opponent_seed = slots + 1 - seed
        team = qualified[seed - 1]
        if opponent_seed > len(qualified):
            nodes.append(BracketNode(seed1=seed, team1=team, winner_team_id=team, is_bye=True))
        else:
            nodes.append(
                BracketNode(
                    seed1=seed,
                    seed2=opponent_seed,
                    team1=team,
                    team2=qualified[opponent_seed - 1],
                )
            )
    return tuple(nodes)


def generate_bracket(
    ranked_teams: Sequence[Any],
    bracket_size: int,
    seeding: str = 'fixed',
    playoff_format: str = 'single-elimination',
    weeks_per_round: int | str = 1,
    loser_advances: bool = False,
) -> Bracket:
    """
    Seed a single-elimination bracket from ranked standings.

    The caller ranks the teams; this function applies no tiebreakers.

    Args:
        ranked_teams: Team ids (or objects with team_id) best first
        bracket_size: Number of teams that qualify
        seeding: 'fixed', 'reseed' or 'commissioner' (aliases accepted)
        playoff_format: 'single-elimination' or 'two-week'
        weeks_per_round: 1, 2 or '2-championship'
        loser_advances: Advance the lower scorer (toilet-bowl brackets)

    Returns:
        Bracket with round 1 seeded (left empty under commissioner's choice),
        byes already decided and later rounds as empty shells

    Raises:
        InvalidConfigurationError: If the size or options are invalid

    Example:
        bracket = generate_bracket(['A', 'B', 'C', 'D'], 4)
        # Semifinals: A v D, B v C
    """
    team_ids = [_team_id(entry) for entry in ranked_teams]
    errors = []
    if len(set(team_ids)) != len(team_ids):
        errors.append('Ranked teams contain duplicates')
    if not isinstance(bracket_size, int) or bracket_size < 2:
        errors.append(f'Bracket size must be at least 2, got {bracket_size}')
    elif bracket_size > len(team_ids):
        errors.append(f'Bracket size {bracket_size} exceeds {len(team_ids)} ranked teams')
    if playoff_format not in PLAYOFF_FORMATS:
        errors.append(f'Unknown playoff format: {playoff_format}')
    if weeks_per_round not in WEEKS_PER_ROUND_OPTIONS:
        errors.append(f'Invalid weeks per round: {weeks_per_round}')
    raise_for_errors(errors)
    seeding = _normalize_seeding(seeding)

    qualified = tuple(team_ids[:bracket_size])
    slots = _next_power_of_two(bracket_size)
    rounds = _empty_rounds(slots)

    if seeding != 'commissioner':
        rounds[0] = replace(rounds[0], nodes=_seeded_first_round(qualified, slots))

    bracket = Bracket(
        rounds=tuple(rounds),
        qualified=qualified,
        seeding=seeding,
        playoff_format=playoff_format,
        weeks_per_round=weeks_per_round,
        loser_advances=loser_advances,
    )
    logger.debug(
        f'Generated {len(rounds)}-round bracket for {bracket_size} teams '
        f'({slots - bracket_size} byes, {seeding} seeding)'
    )
    return _propagate(bracket, 1)


def bracket_from_settings(ranked_teams: Sequence[Any], settings: HeadToHeadSettings) -> Bracket:
    """Generate the playoff bracket described by head-to-head settings."""
    return generate_bracket(
        ranked_teams,
        settings.playoff_teams,
        seeding=settings.playoff_seeding,
        playoff_format=settings.playoff_format,
        weeks_per_round=settings.playoff_weeks_per_round,
    )


def generate_consolation_bracket(
    ranked_teams: Sequence[Any],
    bracket_size: int,
    consolation: str = 'consolation',
) -> Bracket | None:
    """
    Bracket for the teams that missed the playoffs.

    'consolation' seeds them by rank; 'toilet-bowl' seeds them worst first
    and advances the loser of each game, so its champion is the last-place team.

    Returns:
        Bracket, or None for 'none' or fewer than two non-playoff teams
    """
    if consolation == 'none':
        return None
    if consolation not in ('consolation', 'toilet-bowl'):
        raise InvalidConfigurationError(f'Unknown consolation bracket: {consolation}')

    remaining = [_team_id(entry) for entry in ranked_teams][bracket_size:]
    if len(remaining) < 2:
        return None
    if consolation == 'toilet-bowl':
        return generate_bracket(list(reversed(remaining)), len(remaining), loser_advances=True)
    return generate_bracket(remaining, len(remaining))


# =============================================================================
# Advancement
# =============================================================================


def _get_node(bracket: Bracket, round_number: int, node_index: int) -> BracketNode:
    if not 1 <= round_number <= len(bracket.rounds):
        raise InvalidTransitionError(f'Round {round_number} does not exist')
    nodes = bracket.rounds[round_number - 1].nodes
    if not 0 <= node_index < len(nodes):
        raise InvalidTransitionError(f'Round {round_number} has no node {node_index}')
    return nodes[node_index]


def _with_node(bracket: Bracket, round_number: int, node_index: int, node: BracketNode) -> Bracket:
    bracket_round = bracket.rounds[round_number - 1]
    nodes = list(bracket_round.nodes)
    nodes[node_index] = node
    rounds = list(bracket.rounds)
    rounds[round_number - 1] = replace(bracket_round, nodes=tuple(nodes))
    return replace(bracket, rounds=tuple(rounds))


def _with_round(bracket: Bracket, round_number: int, nodes: Sequence[BracketNode]) -> Bracket:
    rounds = list(bracket.rounds)
    rounds[round_number - 1] = replace(rounds[round_number - 1], nodes=tuple(nodes))
    return replace(bracket, rounds=tuple(rounds))


def _place(node: BracketNode, side: int, team: str, seed: int | None) -> BracketNode:
    if side == 1:
        return replace(node, team1=team, seed1=seed)
    return replace(node, team2=team, seed2=seed)


def _propagate(bracket: Bracket, round_number: int) -> Bracket:
    """Push decided results of a round into the next round (or champion slot)."""
    current = bracket.rounds[round_number - 1]

    if round_number == len(bracket.rounds):
        final = current.nodes[0]
        if final.is_decided:
            logger.info(f'Champion determined: {final.winner_team_id}')
            return replace(bracket, champion=final.winner_team_id)
        return bracket

    next_round = bracket.rounds[round_number]
    next_nodes = list(next_round.nodes)

    if bracket.seeding == 'fixed':
        n = len(current.nodes)
        for j, node in enumerate(current.nodes):
            if not node.is_decided:
                continue
            target = min(j, n - 1 - j)
            side = 1 if j < n / 2 else 2
            winner = node.winner_team_id
            next_nodes[target] = _place(next_nodes[target], side, winner, bracket.seed_of(winner))
        return _with_round(bracket, round_number + 1, next_nodes)

    if bracket.seeding == 'reseed':
        if not current.is_complete or not all(node.is_empty for node in next_nodes):
            return bracket
        survivors = sorted(
            (node.winner_team_id for node in current.nodes),
            key=lambda team: bracket.seed_of(team) or 0,
        )
        for i in range(len(next_nodes)):
            high, low = survivors[i], survivors[len(survivors) - 1 - i]
            next_nodes[i] = BracketNode(
                seed1=bracket.seed_of(high),
                seed2=bracket.seed_of(low),
                team1=high,
                team2=low,
            )
        logger.debug(f'Reseeded round {round_number + 1}: {survivors}')
        return _with_round(bracket, round_number + 1, next_nodes)

    # commissioner's choice: next round waits for assign_round()
    return bracket


def record_scores(
    bracket: Bracket,
    round_number: int,
    node_index: int,
    score1: float,
    score2: float,
    cumulative: bool = False,
) -> Bracket:
    """
    Record scores on an undecided node.

    Args:
        bracket: Current bracket
        round_number: 1-based round number
        node_index: 0-based node position within the round
        score1: Score for team1
        score2: Score for team2
        cumulative: Add to existing scores (second leg of a two-week round)

    Returns:
        New Bracket with the node's scores set

    Raises:
        InvalidTransitionError: If the node is a bye, is missing a team or is decided
    """
    node = _get_node(bracket, round_number, node_index)
    if node.is_bye:
        raise InvalidTransitionError('Bye nodes carry no score')
    if node.team1 is None or node.team2 is None:
        raise InvalidTransitionError(f'Round {round_number} node {node_index} is not populated yet')
    if node.is_decided:
        raise InvalidTransitionError(f'Round {round_number} node {node_index} is already decided')

    if cumulative:
        score1 = (node.score1 or 0) + score1
        score2 = (node.score2 or 0) + score2
    return _with_node(bracket, round_number, node_index, replace(node, score1=score1, score2=score2))


def _winner_from_scores(bracket: Bracket, node: BracketNode) -> str:
    if node.score1 is None or node.score2 is None:
        raise InvalidTransitionError('Cannot decide a node without both scores')
    if node.score1 == node.score2:
        # Ties go to the better (lower-numbered) seed
        return node.team1 if (node.seed1 or 0) <= (node.seed2 or 0) else node.team2
    team1_higher = node.score1 > node.score2
    if bracket.loser_advances:
        return node.team2 if team1_higher else node.team1
    return node.team1 if team1_higher else node.team2


def advance_winner(
    bracket: Bracket,
    round_number: int,
    node_index: int,
    winner_team_id: str | None = None,
) -> Bracket:
    """
    Decide a node and move its winner on.

    Args:
        bracket: Current bracket
        round_number: 1-based round number
        node_index: 0-based node position within the round
        winner_team_id: Explicit winner; derived from the node's scores if omitted

    Returns:
        New Bracket with the winner written and, depending on the seeding
        policy, placed into the next round or the champion slot

    Raises:
        InvalidTransitionError: If the node is already decided, not populated,
            unscored (without an explicit winner) or the winner is not in it
    """
    node = _get_node(bracket, round_number, node_index)
    if node.is_decided:
        logger.warning(f'Rejected second result for round {round_number} node {node_index}')
        raise InvalidTransitionError(f'Round {round_number} node {node_index} is already decided')
    if node.team1 is None or node.team2 is None:
        raise InvalidTransitionError(f'Round {round_number} node {node_index} is not populated yet')

    if winner_team_id is None:
        winner_team_id = _winner_from_scores(bracket, node)
    elif winner_team_id not in (node.team1, node.team2):
        raise InvalidTransitionError(f'{winner_team_id} is not playing in round {round_number} node {node_index}')

    bracket = _with_node(bracket, round_number, node_index, replace(node, winner_team_id=winner_team_id))
    logger.debug(f'Round {round_number} node {node_index}: {winner_team_id} advances')
    return _propagate(bracket, round_number)


def _has_result(node: BracketNode) -> bool:
    return (node.is_decided and not node.is_bye) or node.score1 is not None or node.score2 is not None


def _eligible_teams(bracket: Bracket, round_number: int) -> list[str]:
    if round_number == 1:
        return list(bracket.qualified)
    previous = bracket.rounds[round_number - 2]
    if not previous.is_complete:
        raise InvalidTransitionError(f'Round {round_number - 1} is not finished')
    return [node.winner_team_id for node in previous.nodes]


def assign_round(
    bracket: Bracket,
    round_number: int,
    pairings: Sequence[tuple[str | None, str | None]],
) -> Bracket:
    """
    Submit explicit team-to-slot pairings for a round (commissioner's choice).

    For round 1 every qualified team must appear exactly once; a pairing
    with None on one side is a bye. For later rounds the previous round must
    be finished and every one of its winners must appear exactly once.
    Every round after the assigned one is emptied, so bye winners placed
    there by the automatic seeding do not survive a re-assignment.

    Args:
        bracket: Current bracket
        round_number: 1-based round to fill
        pairings: One (team1, team2) tuple per node of the round

    Returns:
        New Bracket with the round filled, byes decided

    Raises:
        InvalidTransitionError: If the round already has results
        InvalidConfigurationError: If the pairings are invalid
    """
    if not 1 <= round_number <= len(bracket.rounds):
        raise InvalidTransitionError(f'Round {round_number} does not exist')
    target = bracket.rounds[round_number - 1]
    for later in bracket.rounds[round_number - 1:]:
        if any(_has_result(node) for node in later.nodes):
            raise InvalidTransitionError(f'Round {later.number} already has results')

    eligible = _eligible_teams(bracket, round_number)
    errors = validate_slot_assignment(pairings, eligible, len(target.nodes))
    raise_for_errors(errors, f'Invalid pairings for round {round_number}')

    nodes = []
    for team1, team2 in pairings:
        if team1 is None:
            team1, team2 = team2, None
        if team2 is None:
            nodes.append(
                BracketNode(
                    seed1=bracket.seed_of(team1),
                    team1=team1,
                    winner_team_id=team1,
                    is_bye=True,
                )
            )
        else:
            nodes.append(
                BracketNode(
                    seed1=bracket.seed_of(team1),
                    seed2=bracket.seed_of(team2),
                    team1=team1,
                    team2=team2,
                )
            )

    bracket = _with_round(bracket, round_number, nodes)
    for later in bracket.rounds[round_number:]:
        bracket = _with_round(bracket, later.number, [BracketNode() for _ in later.nodes])
    bracket = replace(bracket, champion=None)
    logger.debug(f'Assigned {len(nodes)} slots in round {round_number}')
    return _propagate(bracket, round_number)


# =============================================================================
# Scheduling and output
# =============================================================================


def playoff_periods(bracket: Bracket, start_period: int) -> list[dict]:
    """
    Map bracket rounds onto scoring periods.

    A round spans two periods when the bracket is two-week, when
    weeks_per_round is 2, or for the final only under '2-championship'.

    Args:
        bracket: Bracket to schedule
        start_period: First playoff period number

    Returns:
        List of {'round', 'name', 'periods'} dicts
    """
    schedule = []
    period = start_period
    for index, bracket_round in enumerate(bracket.rounds):
        is_final = index == len(bracket.rounds) - 1
        two_periods = (
            bracket.playoff_format == 'two-week'
            or bracket.weeks_per_round == 2
            or (bracket.weeks_per_round == '2-championship' and is_final)
        )
        length = 2 if two_periods else 1
        schedule.append({
            'round': bracket_round.number,
            'name': bracket_round.name,
            'periods': list(range(period, period + length)),
        })
        period += length
    return schedule


def bracket_to_json(bracket: Bracket) -> dict:
    """Render a bracket as plain dicts."""
    return {
        'seeding': bracket.seeding,
        'playoff_format': bracket.playoff_format,
        'weeks_per_round': bracket.weeks_per_round,
        'num_teams': len(bracket.qualified),
        'qualified': [
            {'seed': seed, 'team_id': team} for seed, team in enumerate(bracket.qualified, 1)
        ],
        'rounds': [
            {
                'round': r.number,
                'name': r.name,
                'matchups': [
                    {
                        'seed1': node.seed1,
                        'seed2': node.seed2,
                        'team1': node.team1,
                        'team2': node.team2,
                        'score1': node.score1,
                        'score2': node.score2,
                        'winner': node.winner_team_id,
                        'is_bye': node.is_bye,
                    }
                    for node in r.nodes
                ],
            }
            for r in bracket.rounds
        ],
        'champion': bracket.champion,
    }
