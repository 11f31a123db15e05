"""Pydantic schemas for scoring and league configuration."""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import (
    CONSOLATION_TYPES,
    HOLE_RESULT_STATS,
    NFL_SCORING_SCHEMA,
    PLAYOFF_FORMATS,
    ROTO_CATEGORIES,
    ROTO_MAX_CATEGORIES,
    ROTO_MIN_CATEGORIES,
    SEEDING_ALIASES,
    SEEDING_POLICIES,
    TIEBREAKERS,
    LeagueFormat,
    Sport,
)

POSITION_FALLBACK_KEYS = ('top25', 'top30', 'madeCut', 'missedCut')
BONUS_KEYS = ('bogeyFreeRound', 'birdieStreak3', 'under70Round')


class StrokesGainedConfig(BaseModel):
    """Optional strokes-gained scoring."""

    enabled: bool = False
    multiplier: float = 5

    model_config = ConfigDict(extra='forbid')


class GolfScoringConfig(BaseModel):
    """Golf scoring rules: position table, per-hole values, bonuses."""

    preset: str = 'custom'
    position_points: dict[str, float] = Field(default_factory=dict)
    hole_scoring: dict[str, float] = Field(default_factory=dict)
    bonuses: dict[str, float] = Field(default_factory=dict)
    strokes_gained: StrokesGainedConfig = Field(default_factory=StrokesGainedConfig)

    model_config = ConfigDict(extra='forbid', frozen=True)

    @field_validator('position_points', mode='before')
    @classmethod
    def validate_position_keys(cls, v):
        """Finish positions are positive integers or one of the fallback buckets."""
        normalized = {}
        for key, value in (v or {}).items():
            key = str(key)
            if key not in POSITION_FALLBACK_KEYS and not (key.isdigit() and int(key) >= 1):
                raise ValueError(f'Invalid position key: {key}')
            normalized[key] = value
        return normalized

    @field_validator('hole_scoring')
    @classmethod
    def validate_hole_keys(cls, v):
        for key in v:
            if key not in HOLE_RESULT_STATS:
                raise ValueError(f'Invalid hole result: {key}')
        return v

    @field_validator('bonuses')
    @classmethod
    def validate_bonus_keys(cls, v):
        for key in v:
            if key not in BONUS_KEYS:
                raise ValueError(f'Invalid bonus: {key}')
        return v

    @model_validator(mode='after')
    def fill_known_keys(self):
        """Every known key gets a value, zero when not configured."""
        for key in POSITION_FALLBACK_KEYS:
            self.position_points.setdefault(key, 0)
        for key in HOLE_RESULT_STATS:
            self.hole_scoring.setdefault(key, 0)
        for key in BONUS_KEYS:
            self.bonuses.setdefault(key, 0)
        return self


class NflScoringConfig(BaseModel):
    """Flat NFL scoring rules: stat key -> points per unit."""

    preset: str = 'custom'
    rules: dict[str, float] = Field(default_factory=dict)

    model_config = ConfigDict(extra='forbid', frozen=True)

    @field_validator('rules')
    @classmethod
    def validate_rule_keys(cls, v):
        unknown = sorted(key for key in v if key not in NFL_SCORING_SCHEMA)
        if unknown:
            raise ValueError(f'Unknown scoring keys: {", ".join(unknown)}')
        return v

    @model_validator(mode='after')
    def fill_known_keys(self):
        for key in NFL_SCORING_SCHEMA:
            self.rules.setdefault(key, 0)
        return self


ScoringConfig = GolfScoringConfig | NflScoringConfig


class FullLeagueSettings(BaseModel):
    """Season-long points with optional segment bonuses."""

    segments: int = Field(default=1, ge=1, le=52)
    segment_bonus: float = Field(default=25, ge=0)
    season_periods: int | None = Field(default=None, ge=1)

    model_config = ConfigDict(extra='forbid', frozen=True)


class HeadToHeadSettings(BaseModel):
    """Matchup format settings, including playoffs."""

    playoff_teams: int = Field(default=4, ge=2)
    playoff_format: str = 'single-elimination'
    playoff_weeks_per_round: int | str = 1
    playoff_seeding: str = 'fixed'
    consolation_bracket: str = 'none'
    regular_season_weeks: int = Field(default=12, ge=1)
    tiebreakers: list[str] = Field(default_factory=lambda: ['total-points', 'head-to-head'])

    model_config = ConfigDict(extra='forbid', frozen=True)

    @field_validator('playoff_format')
    @classmethod
    def validate_playoff_format(cls, v):
        if v not in PLAYOFF_FORMATS:
            raise ValueError(f'Invalid playoff format: {v}')
        return v

    @field_validator('playoff_weeks_per_round')
    @classmethod
    def validate_weeks_per_round(cls, v):
        if v not in (1, 2, '2-championship'):
            raise ValueError(f'Invalid weeks per round: {v}')
        return v

    @field_validator('playoff_seeding')
    @classmethod
    def normalize_seeding(cls, v):
        v = SEEDING_ALIASES.get(v, v)
        if v not in SEEDING_POLICIES:
            raise ValueError(f'Invalid seeding policy: {v}')
        return v

    @field_validator('consolation_bracket')
    @classmethod
    def validate_consolation(cls, v):
        if v not in CONSOLATION_TYPES:
            raise ValueError(f'Invalid consolation bracket: {v}')
        return v

    @field_validator('tiebreakers')
    @classmethod
    def validate_tiebreakers(cls, v):
        for tiebreaker in v:
            if tiebreaker not in TIEBREAKERS:
                raise ValueError(f'Invalid tiebreaker: {tiebreaker}')
        if len(set(v)) != len(v):
            raise ValueError('Tiebreakers must not repeat')
        return v


class RotoSettings(BaseModel):
    """Rotisserie category list, 4-10 entries."""

    categories: list[str] = Field(
        default_factory=lambda: ['wins', 'top10s', 'cuts_made', 'birdies', 'eagles', 'scoring_avg']
    )
    # Direction for categories outside the built-in golf table: id -> higher is better
    category_directions: dict[str, bool] = Field(default_factory=dict)

    model_config = ConfigDict(extra='forbid', frozen=True)

    @model_validator(mode='after')
    def validate_categories(self):
        count = len(self.categories)
        if not (ROTO_MIN_CATEGORIES <= count <= ROTO_MAX_CATEGORIES):
            raise ValueError(
                f'Roto leagues need {ROTO_MIN_CATEGORIES}-{ROTO_MAX_CATEGORIES} categories, got {count}'
            )
        if len(set(self.categories)) != count:
            raise ValueError('Roto categories must not repeat')
        for category in self.categories:
            if category not in ROTO_CATEGORIES and category not in self.category_directions:
                raise ValueError(f'Unknown roto category: {category}')
        return self

    def higher_is_better(self, category: str) -> bool:
        if category in self.category_directions:
            return self.category_directions[category]
        return ROTO_CATEGORIES[category][1]


class BuyBackPolicy(BaseModel):
    allowed: bool = True
    max: int = Field(default=1, ge=0)

    model_config = ConfigDict(extra='forbid', frozen=True)


class SurvivorSettings(BaseModel):
    """Weekly elimination settings."""

    eliminations_per_period: int = Field(default=1, ge=1)
    buy_backs: BuyBackPolicy = Field(default_factory=BuyBackPolicy)
    stop_at_alive: int = Field(default=1, ge=1)

    model_config = ConfigDict(extra='forbid', frozen=True)


class TierDefinition(BaseModel):
    """World-rank bucket; max_rank None means everyone beyond the previous tier."""

    tier: int = Field(..., ge=1)
    max_rank: int | None = Field(default=None, ge=1)
    multiplier: float = Field(..., gt=0)

    model_config = ConfigDict(extra='forbid', frozen=True)


class OneAndDoneSettings(BaseModel):
    """Tier multipliers and the major-championship multiplier."""

    tiers: list[TierDefinition] = Field(
        default_factory=lambda: [
            TierDefinition(tier=1, max_rank=10, multiplier=1.0),
            TierDefinition(tier=2, max_rank=30, multiplier=1.25),
            TierDefinition(tier=3, max_rank=60, multiplier=1.5),
            TierDefinition(tier=4, max_rank=None, multiplier=2.0),
        ]
    )
    major_multiplier: float = Field(default=1.5, gt=0)

    model_config = ConfigDict(extra='forbid', frozen=True)

    @field_validator('tiers')
    @classmethod
    def validate_tiers(cls, v):
        """Tiers must be non-empty with strictly increasing rank cutoffs."""
        if not v:
            raise ValueError('At least one tier is required')
        previous = 0
        for index, tier in enumerate(v):
            if tier.max_rank is None:
                if index != len(v) - 1:
                    raise ValueError('Only the last tier may be open-ended')
                continue
            if tier.max_rank <= previous:
                raise ValueError(f'Tier {tier.tier} max_rank must exceed {previous}')
            previous = tier.max_rank
        return v


FORMAT_SETTINGS_MODELS = {
    LeagueFormat.FULL_LEAGUE: FullLeagueSettings,
    LeagueFormat.HEAD_TO_HEAD: HeadToHeadSettings,
    LeagueFormat.ROTO: RotoSettings,
    LeagueFormat.SURVIVOR: SurvivorSettings,
    LeagueFormat.ONE_AND_DONE: OneAndDoneSettings,
}


class LeagueConfig(BaseModel):
    """League configuration as handed to the engine."""

    name: str = ''
    format: LeagueFormat
    sport: Sport = Sport.GOLF
    scoring_preset: str = 'standard'
    scoring: dict | None = None
    format_settings: dict = Field(default_factory=dict)

    model_config = ConfigDict(extra='forbid')
