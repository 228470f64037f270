from __future__ import annotations

"""
Unit tests for the Workspace Discovery Service and filters.

Verifies directory pruning, inclusion rules, .gitignore integration and the
tolerance to malformed patterns.
"""

import os
import re
from pathlib import Path
from unittest.mock import patch

from nestedtags.core.services.filters import compile_patterns, load_gitignore_patterns
from nestedtags.core.services.scanner import (
    is_candidate,
    prepare_filtering_rules,
    yield_workspace_files,
)


def _rel(root: Path, paths) -> list:
    return [os.path.relpath(p, root).replace(os.sep, "/") for p in paths]


def test_yield_workspace_files_defaults(sample_workspace: Path) -> None:
    inc, exc = prepare_filtering_rules(str(sample_workspace), None, None, respect_gitignore=False)

    files = list(yield_workspace_files(str(sample_workspace), inc, exc))

    assert _rel(sample_workspace, files) == ["notes.md", "docs/a.md", "docs/plain.md"]
    assert all(os.path.isabs(f) for f in files)


def test_prepare_filtering_rules_merges_gitignore(sample_workspace: Path) -> None:
    with patch("nestedtags.core.services.scanner.load_gitignore_patterns") as mock_git:
        mock_git.return_value = [r"custom_ignore"]

        inc, exc = prepare_filtering_rules(
            str(sample_workspace),
            include_patterns=[r".*"],
            exclude_patterns=[r"tmp_.*"],
            respect_gitignore=True,
        )

    assert any(rx.pattern == r"custom_ignore" for rx in exc)
    assert any(rx.pattern == r"tmp_.*" for rx in exc)
    assert isinstance(inc[0], re.Pattern)


def test_gitignore_excludes_directories(sample_workspace: Path) -> None:
    (sample_workspace / ".gitignore").write_text("# comment\ndocs/\n!keep.md\n", encoding="utf-8")

    assert load_gitignore_patterns(str(sample_workspace)) != []

    inc, exc = prepare_filtering_rules(str(sample_workspace), None, None, respect_gitignore=True)
    files = _rel(sample_workspace, yield_workspace_files(str(sample_workspace), inc, exc))

    assert files == ["notes.md"]


def test_invalid_patterns_are_discarded() -> None:
    compiled = compile_patterns([r"(unclosed", r"\.md$"])

    assert [rx.pattern for rx in compiled] == [r"\.md$"]


def test_is_candidate_matches_file_name_only() -> None:
    inc = compile_patterns([r"\.md$"])
    exc = compile_patterns([r"^\."])

    assert is_candidate("/a/.hidden/notes.md", inc, exc)
    assert not is_candidate("/a/.notes.md", inc, exc)
    assert not is_candidate("/a/notes.txt", inc, exc)
