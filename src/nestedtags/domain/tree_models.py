from __future__ import annotations

"""
Tag Tree Structural Models.

Defines the two node kinds of the tag index: TagNode (internal node owning
child tags and directly tagged files) and FileEntry (one file attached at one
tag node). Both expose a shared capability (kind, display name and the path
used to re-resolve them) so callers never need run-time type inspection.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from nestedtags.domain.errors import DuplicateEntryError
from nestedtags.domain.tag_path import ROOT_PATH, TagPath

logger = logging.getLogger(__name__)

ROOT_DISPLAY_NAME = "<root>"

# -----------------------------------------------------------------------------
# NODE KINDS
# -----------------------------------------------------------------------------

class NodeKind(str, Enum):
    TAG = "tag"
    FILE = "file"


@dataclass(frozen=True)
class FileEntry:
    """
    Represents one file's attachment at one tag node.

    Entries are never mutated in place; a tag change is modeled as a removal
    followed by an insertion.

    Attributes:
        file_identity: Canonical file path, unique across the whole tree.
        display_name: Human-readable label (defaults to the identity).
        owning_path: Path of the TagNode holding this entry.
    """
    file_identity: str
    display_name: str = ""
    owning_path: TagPath = field(default=ROOT_PATH)

    def __post_init__(self) -> None:
        if not self.display_name:
            object.__setattr__(self, "display_name", self.file_identity)

    @property
    def kind(self) -> NodeKind:
        return NodeKind.FILE

    @property
    def path_to_node(self) -> Tuple[str, ...]:
        """Owning tag segments followed by the file identity."""
        return self.owning_path.segments + (self.file_identity,)

    @property
    def sort_key(self) -> Tuple[str, str]:
        return self.display_name.casefold(), self.file_identity


class TagNode:
    """
    Internal node of the tag tree, one per distinct tag path prefix.

    A node is exclusively owned by its parent. Its lifetime ends when it has
    neither children nor files; the tree prunes it at that point.
    """

    __slots__ = ("path", "children", "files")

    def __init__(self, path: TagPath = ROOT_PATH) -> None:
        self.path: TagPath = path
        self.children: Dict[str, TagNode] = {}
        self.files: Dict[str, FileEntry] = {}

    def __repr__(self) -> str:
        return (
            f"TagNode(path={self.path.render()!r}, "
            f"children={len(self.children)}, files={len(self.files)})"
        )

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    @property
    def kind(self) -> NodeKind:
        return NodeKind.TAG

    @property
    def display_name(self) -> str:
        return self.path.name if not self.path.is_root else ROOT_DISPLAY_NAME

    @property
    def path_to_node(self) -> Tuple[str, ...]:
        return self.path.segments

    @property
    def sort_key(self) -> Tuple[str, str]:
        return self.display_name.casefold(), self.path.name

    @property
    def is_empty(self) -> bool:
        return not self.children and not self.files

    # -------------------------------------------------------------------------
    # Structural mutation
    # -------------------------------------------------------------------------

    def get_child(self, segment: str) -> Optional[TagNode]:
        return self.children.get(segment)

    def resolve_or_create_child(self, segment: str) -> TagNode:
        """Return the child for `segment`, attaching a new empty one if absent."""
        child = self.children.get(segment)
        if child is None:
            child = TagNode(self.path.child(segment))
            self.children[segment] = child
            logger.debug(f"Created tag node '{child.path.render()}'")
        return child

    def remove_child_if_empty(self, segment: str) -> bool:
        """
        Detach the named child iff it has no children and no files.

        Returns:
            bool: True if the child was detached.
        """
        child = self.children.get(segment)
        if child is None or not child.is_empty:
            return False
        del self.children[segment]
        logger.debug(f"Pruned tag node '{child.path.render()}'")
        return True

    def add_file_entry(self, entry: FileEntry) -> None:
        """
        Attach a file entry at this exact node.

        Raises:
            DuplicateEntryError: If this node already holds the identity.
        """
        if entry.file_identity in self.files:
            raise DuplicateEntryError(entry.file_identity, self.path.segments)
        self.files[entry.file_identity] = entry

    def remove_file_entry(self, file_identity: str) -> bool:
        return self.files.pop(file_identity, None) is not None

    # -------------------------------------------------------------------------
    # Presentation ordering
    # -------------------------------------------------------------------------

    def sorted_children(self) -> List[Union[TagNode, FileEntry]]:
        """
        Children in presentation order: tag nodes first, then file entries.

        Each group is sorted by display name (case-insensitive), ties broken
        by the raw segment or file identity.
        """
        tags: List[Union[TagNode, FileEntry]] = sorted(
            self.children.values(), key=lambda n: n.sort_key
        )
        files: List[Union[TagNode, FileEntry]] = sorted(
            self.files.values(), key=lambda f: f.sort_key
        )
        return tags + files


TreeElement = Union[TagNode, FileEntry]
