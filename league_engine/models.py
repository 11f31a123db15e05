"""Data models for the league engine."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class Team:
    """A league team; team_id is stable for the whole season."""
    team_id: str
    name: str = ''
    owner_id: str = ''
    seed: Optional[int] = None
    division: Optional[str] = None


@dataclass(frozen=True)
class Matchup:
    """One head-to-head pairing. Scores are filled in by score ingestion."""
    home: str
    away: str
    home_score: Optional[float] = None
    away_score: Optional[float] = None
    completed: bool = False

    def involves(self, team_id: str) -> bool:
        return team_id in (self.home, self.away)


@dataclass(frozen=True)
class Period:
    """A scoring period (week/tournament) and its matchups."""
    number: int
    matchups: Tuple[Matchup, ...] = ()


@dataclass(frozen=True)
class ScoreResult:
    """Container for a participant's score and per-category breakdown."""
    total: float = 0.0
    breakdown: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class BracketNode:
    """One bracket slot pair. A bye node has team2 empty and team1 as winner."""
    seed1: Optional[int] = None
    seed2: Optional[int] = None
    team1: Optional[str] = None
    team2: Optional[str] = None
    score1: Optional[float] = None
    score2: Optional[float] = None
    winner_team_id: Optional[str] = None
    is_bye: bool = False

    @property
    def is_decided(self) -> bool:
        return self.winner_team_id is not None

    @property
    def is_empty(self) -> bool:
        return self.team1 is None and self.team2 is None

    @property
    def loser_team_id(self) -> Optional[str]:
        if self.winner_team_id is None or self.is_bye:
            return None
        return self.team2 if self.winner_team_id == self.team1 else self.team1


@dataclass(frozen=True)
class BracketRound:
    number: int
    name: str
    nodes: Tuple[BracketNode, ...] = ()

    @property
    def is_complete(self) -> bool:
        return bool(self.nodes) and all(node.is_decided for node in self.nodes)


@dataclass(frozen=True)
class Bracket:
    """
    Playoff bracket: ordered rounds plus a terminal champion slot.

    qualified holds the seeded teams in seed order (seed 1 first).
    """
    rounds: Tuple[BracketRound, ...]
    qualified: Tuple[str, ...]
    seeding: str = 'fixed'
    playoff_format: str = 'single-elimination'
    weeks_per_round: object = 1
    champion: Optional[str] = None
    loser_advances: bool = False

    def seed_of(self, team_id: str) -> Optional[int]:
        try:
            return self.qualified.index(team_id) + 1
        except ValueError:
            return None


# =============================================================================
# Standings rows
# =============================================================================


@dataclass(frozen=True)
class FullLeagueRow:
    team_id: str
    rank: int = 0
    points: float = 0.0
    bonus_points: float = 0.0
    total_points: float = 0.0
    segment_wins: Tuple[int, ...] = ()
    period_points: Tuple[float, ...] = ()


@dataclass(frozen=True)
class HeadToHeadRow:
    team_id: str
    rank: int = 0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0
    division: Optional[str] = None
    division_wins: int = 0
    division_losses: int = 0
    division_ties: int = 0
    streak: str = '-'

    @property
    def games(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def win_pct(self) -> float:
        if not self.games:
            return 0.0
        return (self.wins + 0.5 * self.ties) / self.games

    @property
    def division_win_pct(self) -> float:
        games = self.division_wins + self.division_losses + self.division_ties
        if not games:
            return 0.0
        return (self.division_wins + 0.5 * self.division_ties) / games


@dataclass(frozen=True)
class CategoryRank:
    value: Optional[float]
    rank: int
    points: float


@dataclass(frozen=True)
class RotoRow:
    team_id: str
    rank: int = 0
    categories: Dict[str, CategoryRank] = field(default_factory=dict)
    total_points: float = 0.0


@dataclass(frozen=True)
class SurvivorRow:
    team_id: str
    rank: int = 0
    status: str = 'alive'
    eliminated_week: Optional[int] = None
    points: float = 0.0
    buybacks_used: int = 0


@dataclass(frozen=True)
class OneAndDonePick:
    """A locked pick. Tier and multiplier are fixed at lock time."""
    team_id: str
    period: int
    player_id: str
    world_rank: Optional[int]
    tier: int
    tier_multiplier: float
    is_major: bool = False
    raw_points: Optional[float] = None
    points: float = 0.0


@dataclass(frozen=True)
class OneAndDoneRow:
    team_id: str
    rank: int = 0
    total_points: float = 0.0
    used_players: frozenset = frozenset()
    picks: Tuple[OneAndDonePick, ...] = ()


# =============================================================================
# Season state
# =============================================================================


@dataclass(frozen=True)
class SurvivorState:
    """
    Survivor season so far. Update functions in league_engine.survivor
    return new states; dict fields are never modified in place.

    buybacks counts buy-backs per team; used_buybacks is derived from it.
    """
    teams: Tuple[str, ...]
    statuses: Dict[str, str]
    eliminated_week: Dict[str, Optional[int]] = field(default_factory=dict)
    points: Dict[str, float] = field(default_factory=dict)
    buybacks: Dict[str, int] = field(default_factory=dict)
    last_period: int = 0

    @property
    def alive(self) -> Tuple[str, ...]:
        """Teams still competing, buy-back entrants included, in input order."""
        return tuple(t for t in self.teams if self.statuses[t] in ('alive', 'buyback'))

    @property
    def used_buybacks(self) -> frozenset:
        return frozenset(t for t, count in self.buybacks.items() if count > 0)


@dataclass(frozen=True)
class OneAndDoneState:
    teams: Tuple[str, ...]
    picks: Tuple[OneAndDonePick, ...] = ()

    def used_players(self, team_id: str) -> frozenset:
        return frozenset(p.player_id for p in self.picks if p.team_id == team_id)

    def pick_for(self, team_id: str, period: int) -> Optional[OneAndDonePick]:
        for pick in self.picks:
            if pick.team_id == team_id and pick.period == period:
                return pick
        return None
