from __future__ import annotations

"""
Configuration Validation Service.

Ensures the configuration dictionary conforms to the expected schema before
it drives the indexer. Handles type coercion, default value injection and
rejection of unusable tag syntax.
"""

import logging
from typing import Any, Dict, List, Tuple

from nestedtags.domain.config import get_default_config

logger = logging.getLogger(__name__)

_STRING_FIELDS = ["workspace_path", "log_level", "log_file"]
_SYNTAX_FIELDS = ["tag_marker", "tag_terminator", "tag_separator", "hierarchy_delimiter"]
_BOOL_FIELDS = ["respect_gitignore"]
_LIST_FIELDS = ["include_patterns", "exclude_patterns"]
_FLOAT_FIELDS = ["debounce_seconds", "poll_interval"]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise on invalid values instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.

    Raises:
        TypeError: In strict mode, on a type mismatch.
        ValueError: In strict mode, on an unusable value.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    for field in _STRING_FIELDS:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in _SYNTAX_FIELDS:
        merged[field] = _as_syntax(merged.get(field), defaults[field], field, warnings, strict)

    for field in _BOOL_FIELDS:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    for field in _LIST_FIELDS:
        merged[field] = _as_list_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in _FLOAT_FIELDS:
        merged[field] = _as_positive_float(merged.get(field), defaults[field], field, warnings, strict)

    return merged, warnings

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _reject(msg: str, exc: type, fallback: Any, warnings: List[str], strict: bool) -> Any:
    if strict:
        raise exc(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        return value.strip()
    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    return _reject(msg, TypeError, fallback, warnings, strict)


def _as_syntax(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Tag syntax tokens must be non-empty; surrounding whitespace is kept."""
    if value is None:
        return fallback
    if not isinstance(value, str):
        msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
        return _reject(msg, TypeError, fallback, warnings, strict)
    if not value.strip():
        msg = f"Invalid field '{field}': must not be empty."
        return _reject(msg, ValueError, fallback, warnings, strict)
    return value


_BOOL_WORDS: Dict[str, bool] = {
    "true": True, "yes": True, "y": True, "on": True, "1": True,
    "false": False, "no": False, "n": False, "off": False, "0": False,
}


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Native bools pass; outside strict mode 0/1 and on/off style words are accepted."""
    if value is None or isinstance(value, bool):
        return fallback if value is None else value

    if not strict and isinstance(value, (str, int)):
        word = value.strip().lower() if isinstance(value, str) else str(value)
        if word in _BOOL_WORDS:
            warnings.append(f"Field '{field}' converted from {value!r} to {_BOOL_WORDS[word]}.")
            return _BOOL_WORDS[word]

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    return _reject(msg, TypeError, fallback, warnings, strict)


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """
    Normalize a pattern list.

    Outside strict mode a comma-separated string is split. Blank items are
    dropped, non-string items are reported, and an empty result falls back.
    """
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        warnings.append(f"Field '{field}' converted from CSV string to list.")
        value = value.split(",")
    elif not isinstance(value, (list, tuple)):
        msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
        return _reject(msg, TypeError, list(fallback), warnings, strict)

    cleaned: List[str] = []
    for i, item in enumerate(value):
        if not isinstance(item, str):
            _reject(f"Invalid item in '{field}[{i}]': expected str.", TypeError, None, warnings, strict)
            continue
        if item.strip():
            cleaned.append(item.strip())
    return cleaned or list(fallback)


def _as_positive_float(value: Any, fallback: float, field: str, warnings: List[str], strict: bool) -> float:
    """Accept non-negative numbers (and numeric strings outside strict mode)."""
    if value is None:
        return fallback
    if isinstance(value, bool):
        msg = f"Invalid field '{field}': expected number, received bool."
        return _reject(msg, TypeError, fallback, warnings, strict)

    number: float
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and not strict:
        try:
            number = float(value.strip())
        except ValueError:
            msg = f"Invalid field '{field}': '{value}' is not a number."
            return _reject(msg, ValueError, fallback, warnings, strict)
        warnings.append(f"Field '{field}' converted from '{value}' to {number}.")
    else:
        msg = f"Invalid field '{field}': expected number, received {type(value).__name__}."
        return _reject(msg, TypeError, fallback, warnings, strict)

    if number < 0:
        msg = f"Invalid field '{field}': must not be negative."
        return _reject(msg, ValueError, fallback, warnings, strict)
    return number
