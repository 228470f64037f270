from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for tag trees and sample workspaces.
3. A root logger reset for tests that configure logging.
"""

import logging
import os
import sys
from logging.handlers import QueueListener
from pathlib import Path
from typing import Iterator

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from nestedtags.core.index.tag_tree import TagTree  # noqa: E402
from nestedtags.infra.logging import _CONFIGURED_FLAG_ATTR, _QUEUE_LISTENER_ATTR  # noqa: E402
from nestedtags.infra.logging.core import _safe_stop_listener  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def tree() -> TagTree:
    """An empty tag tree using the default '/' delimiter."""
    return TagTree()


@pytest.fixture
def sample_workspace(tmp_path: Path) -> Path:
    """
    Create a small workspace of annotated Markdown documents.

    Structure:
    /workspace
      notes.md          -> todo, project/frontend
      /docs
        a.md            -> todo, todo/urgent
        plain.md        -> (no tags)
      /node_modules
        vendor.md       -> vendor (excluded directory)
      script.py         -> ignored extension
    """
    root = tmp_path / "workspace"
    root.mkdir()

    (root / "notes.md").write_text(
        "# Notes\n<!-- @nested-tags: todo, project/frontend -->\nBody text\n",
        encoding="utf-8",
    )

    docs = root / "docs"
    docs.mkdir()
    (docs / "a.md").write_text(
        "<!-- @nested-tags:todo,todo/urgent -->\n# A\n",
        encoding="utf-8",
    )
    (docs / "plain.md").write_text("# Nothing to see here\n", encoding="utf-8")

    vendor = root / "node_modules"
    vendor.mkdir()
    (vendor / "vendor.md").write_text("<!-- @nested-tags: vendor -->\n", encoding="utf-8")

    (root / "script.py").write_text("# @nested-tags: python -->\n", encoding="utf-8")

    return root


@pytest.fixture
def reset_logging() -> Iterator[None]:
    """Detach every root handler and listener before and after a test."""
    _clear_root_logger()
    yield
    _clear_root_logger()


def _clear_root_logger() -> None:
    root = logging.getLogger()

    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if listener and isinstance(listener, QueueListener):
        _safe_stop_listener(listener)
        setattr(root, _QUEUE_LISTENER_ATTR, None)

    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    if hasattr(root, _CONFIGURED_FLAG_ATTR):
        delattr(root, _CONFIGURED_FLAG_ATTR)
