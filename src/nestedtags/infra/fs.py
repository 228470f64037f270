from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path resolution and document reading utilities.
Acts as an abstraction over the 'os' module so the rest of the package
never touches the filesystem directly.
"""

import os
from typing import Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "NestedTags"
UNIX_APP_DIR_NAME = ".nestedtags"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/NestedTags
    - Linux/Mac: ~/.nestedtags

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        # writes into the directory fail later and are logged there
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def canonical_identity(path: str) -> str:
    """Canonical file identity used as key in the tag index."""
    return os.path.normpath(os.path.abspath(path))

# -----------------------------------------------------------------------------
# DOCUMENT I/O
# -----------------------------------------------------------------------------

def read_text_file(path: str, encoding: str = "utf-8") -> str:
    """
    Read a whole document as text.

    Undecodable bytes are replaced so that a single bad character does not
    hide the tags of an otherwise valid document.

    Raises:
        OSError: If the file cannot be opened.
    """
    with open(path, "r", encoding=encoding, errors="replace") as f:
        return f.read()


def get_mtime(path: str) -> Optional[float]:
    """Modification time of a file, or None if it vanished."""
    try:
        return os.stat(path).st_mtime
    except OSError:
        return None
