"""League configuration loading and resolution into engine inputs."""

import copy
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .constants import DEFAULT_FORMAT_SETTINGS, GOLF_PRESETS, NFL_PRESETS, LeagueFormat, Sport
from .exceptions import InvalidConfigurationError
from .schemas import FORMAT_SETTINGS_MODELS, GolfScoringConfig, LeagueConfig, NflScoringConfig
from .utils import load_json

M = TypeVar('M', bound=BaseModel)
logger = logging.getLogger('league_engine.config')


def _validation_messages(error: ValidationError) -> list[str]:
    messages = []
    for item in error.errors():
        location = '.'.join(str(part) for part in item.get('loc', ()))
        messages.append(f'{location}: {item["msg"]}' if location else item['msg'])
    return messages


def validate_model(model_cls: type[M], data: Any) -> M:
    """
    Validate raw data against a config model.

    Args:
        model_cls: Pydantic model class
        data: A model instance, a mapping, or None for all defaults

    Returns:
        Validated model instance

    Raises:
        InvalidConfigurationError: If validation fails
    """
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(dict(data or {}))
    except ValidationError as e:
        messages = _validation_messages(e)
        logger.warning(f'Rejected {model_cls.__name__}: {"; ".join(messages)}')
        raise InvalidConfigurationError(
            f'Invalid {model_cls.__name__}: {"; ".join(messages)}', messages
        ) from e


def _merge(base: dict, overrides: Mapping) -> dict:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def get_scoring_config(
    sport: Sport | str = Sport.GOLF,
    preset: str = 'standard',
    overrides: Mapping | None = None,
) -> GolfScoringConfig | NflScoringConfig:
    """
    Build a scoring config from a named preset plus optional overrides.

    Unknown preset names fall back to 'standard'. Overrides are merged on
    top of the preset (nested for golf tables, flat for NFL rules).

    Args:
        sport: 'golf' or 'nfl'
        preset: Preset name (golf: standard/draftkings/custom,
            nfl: standard/ppr/half_ppr/custom)
        overrides: Custom values; for NFL either {'rules': {...}} or a flat map

    Returns:
        Validated GolfScoringConfig or NflScoringConfig

    Raises:
        InvalidConfigurationError: If an override names an unknown key

    Example:
        config = get_scoring_config('nfl', 'ppr', {'pass_td': 6})
    """
    sport = Sport(sport)
    overrides = dict(overrides or {})

    if sport == Sport.GOLF:
        base = GOLF_PRESETS.get(preset)
        if base is None:
            logger.warning(f'Unknown golf preset {preset!r}, using standard')
            base, preset = GOLF_PRESETS['standard'], 'standard'
        data = _merge(base, overrides)
        data['preset'] = preset
        return validate_model(GolfScoringConfig, data)

    rules = NFL_PRESETS.get(preset)
    if rules is None:
        logger.warning(f'Unknown NFL preset {preset!r}, using standard')
        rules, preset = NFL_PRESETS['standard'], 'standard'
    custom_rules = overrides.get('rules', overrides)
    return validate_model(NflScoringConfig, {'preset': preset, 'rules': {**rules, **custom_rules}})


def resolve_format_settings(league_format: LeagueFormat | str, settings: Any = None) -> BaseModel:
    """
    Validate format-specific settings, filling defaults for missing fields.

    Args:
        league_format: One of the five league formats
        settings: Settings model, mapping of overrides, or None

    Returns:
        The format's settings model
    """
    league_format = LeagueFormat(league_format)
    model_cls = FORMAT_SETTINGS_MODELS[league_format]
    if isinstance(settings, model_cls):
        return settings
    data = _merge(DEFAULT_FORMAT_SETTINGS[league_format], settings or {})
    return validate_model(model_cls, data)


def resolve_scoring_config(league: LeagueConfig) -> GolfScoringConfig | NflScoringConfig:
    """Scoring config for a league: preset plus the league's custom values."""
    return get_scoring_config(league.sport, league.scoring_preset, league.scoring)


def load_league_config(path: Path | str) -> LeagueConfig:
    """
    Load a league configuration file.

    Args:
        path: Path to a league JSON file

    Returns:
        Validated LeagueConfig

    Raises:
        FileNotFoundError: If the file doesn't exist
        InvalidConfigurationError: If the file or its format settings are invalid

    Example:
        from league_engine.config import load_league_config
        league = load_league_config('data/league.json')
        print(league.format)
    """
    try:
        league = load_json(path, schema=LeagueConfig)
    except ValueError as e:
        raise InvalidConfigurationError(str(e)) from e

    # Fail fast on bad format settings rather than at standings time
    resolve_format_settings(league.format, league.format_settings)
    logger.debug(f'Loaded {league.format.value} league config from {path}')
    return league
