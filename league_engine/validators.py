"""Validation functions for schedules, bracket pairings and score results."""

import logging
import math
from collections.abc import Iterable, Sequence

from .exceptions import InvalidConfigurationError
from .models import Period, ScoreResult

logger = logging.getLogger('league_engine.validators')


def raise_for_errors(errors: list[str], message: str = 'Invalid configuration') -> None:
    """
    Raise InvalidConfigurationError when a validator reported problems.

    Args:
        errors: Messages returned by a validate_* function
        message: Summary prefix for the exception text

    Raises:
        InvalidConfigurationError: If errors is non-empty
    """
    if errors:
        logger.warning(f'{message}: {"; ".join(errors)}')
        raise InvalidConfigurationError(f'{message}: {"; ".join(errors)}', errors)


def validate_schedule(periods: Sequence[Period], team_ids: Iterable[str]) -> list[str]:
    """
    Validate a generated or commissioner-entered schedule.

    Checks:
    - Every team named in a matchup is a league team
    - No team plays itself
    - No team appears in more than one matchup per period

    Args:
        periods: Schedule periods
        team_ids: League team ids

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    known = set(team_ids)

    for period in periods:
        seen = set()
        duplicates = set()
        for matchup in period.matchups:
            for team in (matchup.home, matchup.away):
                if team not in known:
                    errors.append(f'Week {period.number} has unknown team {team}')
            if matchup.home == matchup.away:
                errors.append(f'Week {period.number} has {matchup.home} playing itself')
                continue
            for team in (matchup.home, matchup.away):
                if team in seen:
                    duplicates.add(team)
                seen.add(team)

        if duplicates:
            errors.append(
                f'Week {period.number} schedules {", ".join(sorted(duplicates))} more than once'
            )

    return errors


def validate_slot_assignment(
    pairings: Sequence[tuple[str | None, str | None]],
    eligible: Sequence[str],
    slot_count: int,
) -> list[str]:
    """
    Validate commissioner pairings for one bracket round.

    Checks:
    - One pairing per slot
    - Each eligible team appears exactly once
    - No team outside the eligible set
    - No empty pairings

    Args:
        pairings: (team1, team2) tuples; None on one side marks a bye
        eligible: Teams that must be placed this round
        slot_count: Number of nodes in the round

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    if len(pairings) != slot_count:
        errors.append(f'Expected {slot_count} pairings, got {len(pairings)}')

    placed = []
    for index, pairing in enumerate(pairings):
        teams = [team for team in pairing if team is not None]
        if not teams:
            errors.append(f'Pairing {index} has no teams')
        placed.extend(teams)

    seen = set()
    duplicates = set()
    for team in placed:
        if team in seen:
            duplicates.add(team)
        seen.add(team)
    if duplicates:
        errors.append(f'Teams placed more than once: {", ".join(sorted(duplicates))}')

    unknown = seen - set(eligible)
    if unknown:
        errors.append(f'Teams not eligible for this round: {", ".join(sorted(unknown))}')

    missing = [team for team in eligible if team not in seen]
    if missing:
        errors.append(f'Eligible teams not placed: {", ".join(missing)}')

    return errors


def validate_score_result(name: str, result: ScoreResult) -> list[str]:
    """
    Check that a score is finite and its breakdown adds up.

    Sanity checks:
    - Total and every category are finite numbers
    - Breakdown totals match the final score (within rounding)

    Args:
        name: Participant label for messages
        result: ScoreResult to check

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    values = [result.total, *result.breakdown.values()]
    if any(not isinstance(v, (int, float)) or math.isnan(v) or math.isinf(v) for v in values):
        warnings.append(f'{name} has a non-finite score')
        return warnings

    if result.breakdown:
        breakdown_sum = sum(result.breakdown.values())
        diff = abs(breakdown_sum - result.total)
        if diff > 0.01:
            warnings.append(
                f'{name} breakdown sum ({breakdown_sum:.2f}) != total ({result.total:.2f}) - difference: {diff:.2f}'
            )

    return warnings
