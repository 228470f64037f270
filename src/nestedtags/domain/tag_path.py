from __future__ import annotations

"""
Tag Path Value Object.

Parses raw tag strings such as "project/frontend" into ordered segment
sequences and renders them back. Pure functions, no hidden state.
"""

from dataclasses import dataclass
from typing import Iterator, Tuple

from nestedtags.domain.errors import InvalidTagError

DEFAULT_DELIMITER = "/"


@dataclass(frozen=True, order=True)
class TagPath:
    """
    Ordered sequence of non-empty segments from the root to a tag node.

    An empty sequence denotes the tree root.

    Attributes:
        segments: Trimmed, non-empty segment strings.
    """
    segments: Tuple[str, ...] = ()

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def name(self) -> str:
        """Last segment, or an empty string for the root."""
        return self.segments[-1] if self.segments else ""

    @property
    def parent(self) -> TagPath:
        if not self.segments:
            return self
        return TagPath(self.segments[:-1])

    def child(self, segment: str) -> TagPath:
        return TagPath(self.segments + (segment,))

    def prefixes(self) -> Iterator[TagPath]:
        """Yield every non-root prefix, shortest first (ends with self)."""
        for i in range(1, len(self.segments) + 1):
            yield TagPath(self.segments[:i])

    def render(self, delimiter: str = DEFAULT_DELIMITER) -> str:
        return delimiter.join(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return self.render()


ROOT_PATH = TagPath()


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def parse_tag(raw: object, delimiter: str = DEFAULT_DELIMITER) -> TagPath:
    """
    Split a raw tag on the hierarchy delimiter into a TagPath.

    Segments are whitespace-trimmed and empty segments are discarded, so
    " a // b " parses to ("a", "b").

    Args:
        raw: Raw tag as found in the document.
        delimiter: Hierarchy separator.

    Returns:
        TagPath: The parsed, non-empty path.

    Raises:
        InvalidTagError: If the input is not a string or yields no segment.
    """
    if not isinstance(raw, str) or not delimiter:
        raise InvalidTagError(raw)

    segments = tuple(s.strip() for s in raw.split(delimiter))
    segments = tuple(s for s in segments if s)
    if not segments:
        raise InvalidTagError(raw)
    return TagPath(segments)


def segments_equal(a: TagPath, b: TagPath) -> bool:
    """Exact, case-sensitive, ordered comparison of two paths."""
    return a.segments == b.segments
