"""Round-robin schedule generation and schedule text parsing.

Regular seasons use the circle method: the first team stays fixed and the
rest rotate one seat per period. Odd team counts get a synthetic BYE entrant
whose pairings are dropped, so that team simply sits the period out.

Seasons longer than one rotation (n - 1 periods) wrap and repeat the same
pairings in the same order.
"""

import logging
import re
from collections.abc import Sequence

from .constants import BYE
from .models import Matchup, Period

logger = logging.getLogger('league_engine.schedule')


def _pair(home: str, away: str) -> Matchup | None:
    if home == BYE or away == BYE:
        return None
    return Matchup(home=home, away=away)


def generate_schedule(team_ids: Sequence[str], periods: int) -> list[Period]:
    """Generate a round-robin schedule using the circle method.

    Home/away alternation:
        - The fixed team is home on even rotation indexes, away on odd ones.
        - Pairing i (i >= 1) matches rotating[i] with rotating[n-1-i];
          rotating[i] is home when i is even.

    Args:
        team_ids: Team identifiers in seeding order (first one stays fixed)
        periods: Number of periods to generate

    Returns:
        List of Period objects numbered from 1. Empty for fewer than 2 teams
        or a non-positive period count.
    """
    entrants = list(team_ids)
    if len(entrants) < 2 or periods <= 0:
        return []

    if len(entrants) % 2:
        entrants.append(BYE)
    num_teams = len(entrants)

    fixed_team = entrants[0]
    rotating = entrants[1:]
    rotation_length = num_teams - 1

    schedule = []
    for period_index in range(periods):
        round_index = period_index % rotation_length
        matchups = []

        first_opponent = rotating[0]
        if round_index % 2 == 0:
            first = _pair(fixed_team, first_opponent)
        else:
            first = _pair(first_opponent, fixed_team)
        if first:
            matchups.append(first)

        for i in range(1, num_teams // 2):
            team1 = rotating[i]
            team2 = rotating[num_teams - 1 - i]
            matchup = _pair(team1, team2) if i % 2 == 0 else _pair(team2, team1)
            if matchup:
                matchups.append(matchup)

        schedule.append(Period(number=period_index + 1, matchups=tuple(matchups)))

        # Keep the first team fixed, rotate the rest one seat
        rotating = [rotating[-1]] + rotating[:-1]

    if periods > rotation_length:
        logger.debug(
            f'{periods} periods exceed one rotation of {rotation_length}; pairings repeat'
        )
    logger.debug(f'Generated {len(schedule)} periods for {len(team_ids)} teams')
    return schedule


def parse_schedule_text(text: str) -> list[Period]:
    """Parse a commissioner-entered schedule.

    Supports format:
        Week 1: GSA versus S/T, RPA versus CWR, CGK vs AYP
        Rivalry Week 5: GSA versus RPA

    The first team named in each pairing is home. Blank lines and lines
    starting with '#' are ignored; weeks that are skipped come back empty.

    Args:
        text: Schedule text

    Returns:
        List of Period objects, one per week up to the highest week number
    """
    weeks: dict[int, list[Matchup]] = {}

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#'):
            continue

        week_match = re.match(r'^(?:Rivalry\s+)?Week\s+(\d+)\s*:\s*(.*)$', line, re.IGNORECASE)
        if not week_match:
            logger.warning(f'Skipping unrecognized schedule line: {line}')
            continue

        week_num = int(week_match.group(1))
        matchups = weeks.setdefault(week_num, [])
        for pairing in week_match.group(2).split(','):
            pairing = pairing.strip()
            if not pairing:
                continue
            teams_match = re.match(r'^(\S+)\s+(?:versus|vs\.?)\s+(\S+)$', pairing, re.IGNORECASE)
            if teams_match:
                matchups.append(Matchup(home=teams_match.group(1), away=teams_match.group(2)))
            else:
                logger.warning(f'Skipping unrecognized pairing in week {week_num}: {pairing}')

    if not weeks:
        return []
    return [Period(number=n, matchups=tuple(weeks.get(n, []))) for n in range(1, max(weeks) + 1)]


def schedule_to_json(periods: Sequence[Period]) -> list[dict]:
    """Render a schedule as plain dicts.

    Args:
        periods: Schedule periods

    Returns:
        List of {'week', 'matchups': [{'home', 'away', 'home_score', 'away_score', 'completed'}]}
    """
    return [
        {
            'week': period.number,
            'matchups': [
                {
                    'home': m.home,
                    'away': m.away,
                    'home_score': m.home_score,
                    'away_score': m.away_score,
                    'completed': m.completed,
                }
                for m in period.matchups
            ],
        }
        for period in periods
    ]
