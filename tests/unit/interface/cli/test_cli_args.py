from __future__ import annotations

"""
Unit tests for CLI argument parsing and override mapping.
"""

import pytest

from nestedtags.interface.cli.args import _split_csv, args_to_overrides, build_parser


def test_no_arguments_produce_no_overrides() -> None:
    args = build_parser().parse_args([])

    assert args_to_overrides(args) == {}
    assert args.watch is False
    assert args.json_output is False


def test_full_mapping() -> None:
    args = build_parser().parse_args([
        "-i", "/ws",
        "--include", r"\.md$, \.txt$",
        "--exclude", "build,,dist",
        "--no-gitignore",
        "--marker", "tags:",
        "--delimiter", ".",
        "--interval", "2.5",
        "--log-file", "/tmp/nt.log",
        "--debug",
    ])

    assert args_to_overrides(args) == {
        "workspace_path": "/ws",
        "include_patterns": [r"\.md$", r"\.txt$"],
        "exclude_patterns": ["build", "dist"],
        "respect_gitignore": False,
        "tag_marker": "tags:",
        "hierarchy_delimiter": ".",
        "poll_interval": 2.5,
        "log_file": "/tmp/nt.log",
        "log_level": "DEBUG",
    }


def test_query_flags_are_not_config() -> None:
    args = build_parser().parse_args(["--tags-for", "a.md", "--node", "x/y", "--check", "--json"])

    assert args.tags_for == "a.md"
    assert args.node_path == "x/y"
    assert args.check is True
    assert args_to_overrides(args) == {}


def test_interval_must_be_numeric() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--interval", "soon"])


def test_split_csv() -> None:
    assert _split_csv(None) is None
    assert _split_csv(" a , ,b ") == ["a", "b"]
