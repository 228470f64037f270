from __future__ import annotations

"""
Unit tests for the Configuration Validator.

Verifies type coercion, fallback injection and strict mode behaviour.
"""

import pytest

from nestedtags.core.services.validator import validate_config
from nestedtags.domain.config import get_default_config


def test_defaults_pass_without_warnings() -> None:
    config, warnings = validate_config(get_default_config())

    assert warnings == []
    assert config["tag_marker"] == "@nested-tags:"
    assert config["respect_gitignore"] is True


def test_non_dict_falls_back_to_defaults() -> None:
    config, warnings = validate_config(["not", "a", "dict"])

    assert config["hierarchy_delimiter"] == "/"
    assert "Invalid config type" in warnings[0]

    with pytest.raises(TypeError):
        validate_config("nope", strict=True)


def test_coercions_outside_strict_mode() -> None:
    config, warnings = validate_config({
        "respect_gitignore": "no",
        "include_patterns": r"\.md$, \.markdown$",
        "debounce_seconds": "0.25",
        "workspace_path": "  /ws  ",
    })

    assert config["respect_gitignore"] is False
    assert config["include_patterns"] == [r"\.md$", r"\.markdown$"]
    assert config["debounce_seconds"] == 0.25
    assert config["workspace_path"] == "/ws"
    assert len(warnings) == 3


def test_invalid_values_use_fallbacks() -> None:
    config, warnings = validate_config({
        "hierarchy_delimiter": "   ",
        "poll_interval": -1,
        "exclude_patterns": [1, "keep"],
        "log_level": 10,
    })

    defaults = get_default_config()
    assert config["hierarchy_delimiter"] == defaults["hierarchy_delimiter"]
    assert config["poll_interval"] == defaults["poll_interval"]
    assert config["exclude_patterns"] == ["keep"]
    assert config["log_level"] == "INFO"
    assert len(warnings) == 4


def test_syntax_tokens_keep_whitespace() -> None:
    config, _ = validate_config({"tag_separator": " | "})

    assert config["tag_separator"] == " | "


@pytest.mark.parametrize("override, exc", [
    ({"tag_marker": ""}, ValueError),
    ({"respect_gitignore": "yes"}, TypeError),
    ({"debounce_seconds": True}, TypeError),
    ({"poll_interval": -0.5}, ValueError),
    ({"include_patterns": "a,b"}, TypeError),
])
def test_strict_mode_raises(override, exc) -> None:
    with pytest.raises(exc):
        validate_config(override, strict=True)


def test_bool_and_pattern_coercions() -> None:
    config, warnings = validate_config({
        "respect_gitignore": 1,
        "include_patterns": (r"\.md$", "  "),
    })

    assert config["respect_gitignore"] is True
    assert config["include_patterns"] == [r"\.md$"]
    assert len(warnings) == 1

    config, warnings = validate_config({"respect_gitignore": 2, "exclude_patterns": " , "})

    assert config["respect_gitignore"] is True
    assert config["exclude_patterns"] == get_default_config()["exclude_patterns"]
    assert len(warnings) == 2
