"""Numeric coercion, rounding and JSON file helpers."""

import json
import logging
import math
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('league_engine.utils')


def to_number(value: Any) -> float:
    """
    Coerce a raw stat or config value to a float.

    None, booleans, non-numeric strings, NaN and infinity all become 0.
    Numeric strings ('12', '3.5') are parsed.

    Args:
        value: Raw value from a stat line or scoring config

    Returns:
        Float value, 0.0 when the value is absent or malformed
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def stat_value(stats: Mapping[str, Any] | None, key: str) -> float:
    """
    Read one counter from a stat line, defaulting to zero.

    Every stat lookup in the evaluator goes through here: a missing key,
    a None value or a malformed value all read as 0.
    """
    if not stats:
        return 0.0
    return to_number(stats.get(key))


def as_period_scores(entry: Any, period: int) -> Mapping[str, Any]:
    """
    One period's team_id -> score mapping.

    None reads as an empty period. Anything else that is not a mapping is
    logged and also read as empty, so every team scores 0 for the period.
    """
    if entry is None:
        return {}
    if not isinstance(entry, Mapping):
        logger.warning(f'Ignoring malformed results for period {period}: {type(entry).__name__}')
        return {}
    return entry


def round_points(value: float) -> float:
    """Round to 2 decimal places, halves away from zero."""
    return float(Decimal(repr(float(value))).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def load_json(path: Path | str, schema: type[T] | None = None) -> Any | T:
    """
    Read a JSON file, optionally validating it into a pydantic model.

    Raises:
        FileNotFoundError: If the file is missing
        ValueError: If the file is not valid JSON or does not match the schema
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f'File not found: {path}')

    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        raise ValueError(f'{path} is not valid JSON (line {e.lineno}, column {e.colno}): {e.msg}') from e
    logger.debug(f'Read {path}')

    if schema is None:
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise ValueError(f'{path} does not match {schema.__name__}:\n{e}') from e


def save_json(path: Path | str, data: Any) -> None:
    """Write data (or a pydantic model) as indented UTF-8 JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(data, BaseModel):
        data = data.model_dump(mode='json')
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + '\n', encoding='utf-8')
    logger.debug(f'Wrote {path}')
