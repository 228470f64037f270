from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates path normalization, data directory resolution, canonical file
identities and tolerant document reading.
"""

import os
from pathlib import Path
from unittest.mock import patch

from nestedtags.infra.fs import (
    canonical_identity,
    get_mtime,
    get_user_data_dir,
    normalize_path,
    read_text_file,
)

# -----------------------------------------------------------------------------
# PATH RESOLUTION TESTS
# -----------------------------------------------------------------------------

def test_get_user_data_dir_unix() -> None:
    """Resolution of ~/.nestedtags on Unix-like systems."""
    mock_home = "/home/testuser"
    with patch("os.name", "posix"):
        with patch("os.path.expanduser", return_value=mock_home):
            with patch("os.makedirs"):
                path = get_user_data_dir()
                assert path.replace("\\", "/").endswith("/home/testuser/.nestedtags")


def test_normalize_path_expansion() -> None:
    with patch.dict(os.environ, {"TEST_VAR": "my_folder"}):
        path = normalize_path("$TEST_VAR/sub", fallback=".")
        assert path.lower().endswith(os.path.join("my_folder", "sub").lower())

    assert normalize_path("   ", fallback="/fallback") == os.path.abspath("/fallback")


def test_canonical_identity_collapses_equivalent_paths(tmp_path: Path) -> None:
    a = canonical_identity(str(tmp_path / "docs" / ".." / "notes.md"))
    b = canonical_identity(str(tmp_path / "notes.md"))

    assert a == b
    assert os.path.isabs(a)

# -----------------------------------------------------------------------------
# DOCUMENT I/O TESTS
# -----------------------------------------------------------------------------

def test_read_text_file_replaces_undecodable_bytes(tmp_path: Path) -> None:
    doc = tmp_path / "latin.md"
    doc.write_bytes(b"caf\xe9 @nested-tags: ok -->")

    text = read_text_file(str(doc))

    assert "@nested-tags: ok -->" in text
    assert "�" in text


def test_get_mtime(tmp_path: Path) -> None:
    doc = tmp_path / "a.md"
    doc.write_text("x", encoding="utf-8")
    os.utime(doc, (1_000_000, 1_000_000))

    assert get_mtime(str(doc)) == 1_000_000
    assert get_mtime(str(tmp_path / "missing.md")) is None
