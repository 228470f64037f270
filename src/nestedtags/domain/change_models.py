from __future__ import annotations

"""
Tree Change Messages.

Mutations of the tag tree return a TreeChange describing which parts of the
tree a presentation layer must refresh. Consumers may use the per-path
information or coalesce it to a single root-level invalidation.
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from nestedtags.domain.tag_path import ROOT_PATH, TagPath


@dataclass(frozen=True)
class TreeChange:
    """
    Immutable description of a structural change.

    Attributes:
        affected_paths: Outermost tag paths whose listing changed. A path
                        nested below another affected path is dropped.
    """
    affected_paths: Tuple[TagPath, ...] = ()

    @classmethod
    def of(cls, paths: Iterable[TagPath]) -> TreeChange:
        """Build a change keeping only the outermost of the given paths."""
        unique = sorted(set(paths), key=lambda p: (len(p), p.segments))
        kept: List[TagPath] = []
        for candidate in unique:
            if any(candidate.segments[:len(k)] == k.segments for k in kept):
                continue
            kept.append(candidate)
        return cls(tuple(kept))

    @property
    def changed(self) -> bool:
        return bool(self.affected_paths)

    @property
    def is_root(self) -> bool:
        return ROOT_PATH in self.affected_paths

    def coalesce(self) -> TreeChange:
        """Collapse to a coarse root-level invalidation (no-op if unchanged)."""
        if not self.changed:
            return self
        return TreeChange((ROOT_PATH,))

    def merge(self, other: TreeChange) -> TreeChange:
        return TreeChange.of(self.affected_paths + other.affected_paths)

    def __bool__(self) -> bool:
        return self.changed


NO_CHANGE = TreeChange()
