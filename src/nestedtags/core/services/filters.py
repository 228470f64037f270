from __future__ import annotations

"""
Workspace File Filtering Engine.

Implements regex-based inclusion/exclusion logic used to decide which
workspace documents are scanned for tag annotations. Supports integration
with .gitignore glob patterns.
"""

import fnmatch
import logging
import os
import re
from typing import List

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# CONFIGURATION DEFAULTS
# -----------------------------------------------------------------------------

def default_include_patterns() -> List[str]:
    """
    Get the default inclusion regex list.

    Returns:
        List[str]: Patterns matching Markdown documents.
    """
    return [r"\.md$"]


def default_exclude_patterns() -> List[str]:
    """
    Get the system-level exclusion patterns.

    Skips version control metadata, editor folders, dependency trees and
    hidden entries.

    Returns:
        List[str]: List of regex patterns for common exclusions.
    """
    return [
        r"^(\.git|\.hg|\.svn|\.idea|\.vscode|node_modules|__pycache__)$",
        r"^\.",
    ]

# -----------------------------------------------------------------------------
# PATTERN COMPILATION AND MATCHING
# -----------------------------------------------------------------------------

def compile_patterns(patterns: List[str]) -> List[re.Pattern]:
    """
    Transform raw regex strings into compiled Pattern objects.

    Malformed expressions are logged and discarded so that a single bad
    pattern does not prevent the workspace from being indexed.

    Args:
        patterns: List of raw regex strings.

    Returns:
        List[re.Pattern]: Compiled regex objects.
    """
    compiled: List[re.Pattern] = []
    for p in patterns:
        try:
            compiled.append(re.compile(p))
        except re.error as e:
            logger.warning(f"Discarding invalid pattern {p!r}: {e}")
    return compiled


def matches_any(name: str, compiled_patterns: List[re.Pattern]) -> bool:
    """True if `name` matches at least one compiled pattern."""
    return any(rx.search(name) for rx in compiled_patterns)


def matches_include(name: str, include_patterns: List[re.Pattern]) -> bool:
    """
    Verify if a string satisfies the inclusion whitelist.

    Returns:
        bool: True if matched, False if the list is empty or no match occurs.
    """
    if not include_patterns:
        return False
    return any(rx.search(name) for rx in include_patterns)

# -----------------------------------------------------------------------------
# GITIGNORE INTEGRATION
# -----------------------------------------------------------------------------

def load_gitignore_patterns(root_path: str) -> List[str]:
    """
    Parse a .gitignore file and translate its glob rules into Python regexes.

    Negations ('!pattern') are not supported and are skipped.

    Args:
        root_path: Directory containing the .gitignore file.

    Returns:
        List[str]: List of equivalent regex strings.
    """
    gitignore_path = os.path.join(root_path, ".gitignore")
    if not os.path.exists(gitignore_path):
        return []

    regex_patterns: List[str] = []
    try:
        with open(gitignore_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#") or line.startswith("!"):
                    continue
                regex_patterns.append(_gitignore_to_regex(line))
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Unable to read '{gitignore_path}': {e}")

    return regex_patterns


def _gitignore_to_regex(glob_pattern: str) -> str:
    """Translate a gitignore/shell glob to a Python regex string."""
    return fnmatch.translate(glob_pattern.strip("/"))
