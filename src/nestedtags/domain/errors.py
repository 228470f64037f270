from __future__ import annotations

"""
Tag Index Error Hierarchy.

Defines the exceptions raised by the tag index. Parsing errors are recovered
locally by the tree, structural violations propagate to the caller.
"""

from typing import Iterable, Sequence, Tuple

# -----------------------------------------------------------------------------
# BASE CLASS
# -----------------------------------------------------------------------------

class TagTreeError(Exception):
    """Base class for every error raised by the tag index."""


# -----------------------------------------------------------------------------
# PARSING ERRORS
# -----------------------------------------------------------------------------

class InvalidTagError(TagTreeError, ValueError):
    """
    A raw tag string could not be parsed into a non-empty path.

    Attributes:
        raw: The offending raw value.
    """

    def __init__(self, raw: object) -> None:
        self.raw = raw
        super().__init__(f"Invalid tag: {raw!r}")


class EmptyTagSetError(TagTreeError, ValueError):
    """
    A file carries no usable tag after parsing.

    Attributes:
        file_identity: File that was rejected.
        rejected: Raw tags that failed to parse (may be empty).
    """

    def __init__(self, file_identity: str, rejected: Iterable[object] = ()) -> None:
        self.file_identity = file_identity
        self.rejected: Tuple[object, ...] = tuple(rejected)
        detail = f" (rejected: {list(self.rejected)})" if self.rejected else ""
        super().__init__(f"No usable tags for '{file_identity}'{detail}")


# -----------------------------------------------------------------------------
# STRUCTURAL ERRORS
# -----------------------------------------------------------------------------

class DuplicateEntryError(TagTreeError):
    """
    Attempted double insertion of a file without an intervening deletion.

    Attributes:
        file_identity: File inserted twice.
        path: Segments of the tag path where the collision was detected.
    """

    def __init__(self, file_identity: str, path: Sequence[str] = ()) -> None:
        self.file_identity = file_identity
        self.path: Tuple[str, ...] = tuple(path)
        where = "/".join(self.path) if self.path else "the index"
        super().__init__(f"File '{file_identity}' is already present in {where}")


class NodeNotFoundError(TagTreeError, LookupError):
    """
    A path did not resolve to a tag node or file entry.

    Attributes:
        path: The requested path.
        missing: The first segment that could not be resolved.
    """

    def __init__(self, path: Sequence[str], missing: str = "") -> None:
        self.path: Tuple[str, ...] = tuple(path)
        self.missing = missing
        super().__init__(f"No node at {list(self.path)} (missing segment {missing!r})")
