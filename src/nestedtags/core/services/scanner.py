from __future__ import annotations

"""
Workspace Discovery Service.

Enumerates the candidate documents of a workspace for the bootstrap scan,
applying include/exclude regexes and optional .gitignore rules. Excluded
directories are pruned before they are descended into.
"""

import logging
import os
import re
from typing import Iterator, List, Optional, Tuple

from nestedtags.core.services.filters import (
    compile_patterns,
    default_exclude_patterns,
    default_include_patterns,
    load_gitignore_patterns,
    matches_any,
    matches_include,
)

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def yield_workspace_files(
        workspace_path: str,
        include_rx: List[re.Pattern],
        exclude_rx: List[re.Pattern],
) -> Iterator[str]:
    """
    Traverse the workspace and yield absolute paths of candidate documents.

    Directories and files are visited in sorted order so that the scan is
    deterministic.

    Args:
        workspace_path: Root of the workspace.
        include_rx: Compiled inclusion patterns, matched against file names.
        exclude_rx: Compiled exclusion patterns, matched against directory
                    and file names.

    Yields:
        str: Absolute path of every matching file.
    """
    root_abs = os.path.abspath(workspace_path)

    for root, dirs, files in os.walk(root_abs):
        dirs[:] = [d for d in dirs if not matches_any(d, exclude_rx)]
        dirs.sort()
        files.sort()

        for file_name in files:
            if matches_any(file_name, exclude_rx):
                continue
            if not matches_include(file_name, include_rx):
                continue
            yield os.path.join(root, file_name)


def prepare_filtering_rules(
        workspace_path: str,
        include_patterns: Optional[List[str]],
        exclude_patterns: Optional[List[str]],
        respect_gitignore: bool,
) -> Tuple[List[re.Pattern], List[re.Pattern]]:
    """
    Compile and aggregate all patterns into actionable regex objects.

    Args:
        workspace_path: Root of the workspace.
        include_patterns: Raw inclusion regexes, defaults when None.
        exclude_patterns: Raw exclusion regexes, defaults when None.
        respect_gitignore: Whether to merge the workspace .gitignore rules.

    Returns:
        Tuple[List[re.Pattern], List[re.Pattern]]: (Include, Exclude).
    """
    final_includes = include_patterns if include_patterns is not None else default_include_patterns()
    final_exclusions = list(exclude_patterns) if exclude_patterns is not None else default_exclude_patterns()

    if respect_gitignore:
        git_patterns = load_gitignore_patterns(os.path.abspath(workspace_path))
        if git_patterns:
            logger.debug(f"Loaded {len(git_patterns)} patterns from .gitignore")
            final_exclusions.extend(git_patterns)

    return compile_patterns(final_includes), compile_patterns(final_exclusions)


def is_candidate(
        file_path: str,
        include_rx: List[re.Pattern],
        exclude_rx: List[re.Pattern],
) -> bool:
    """Apply the scan filters to a single file name."""
    name = os.path.basename(file_path)
    return not matches_any(name, exclude_rx) and matches_include(name, include_rx)
