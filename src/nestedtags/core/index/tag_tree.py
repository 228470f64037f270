from __future__ import annotations

"""
Tag Tree Index.

Aggregate root of the tag index. Owns the root TagNode and a file-to-tags
index kept in lock-step with the node structure, so that deleting a file
touches only the branches it lives in and never scans the whole tree.

The tree is single-writer: callers must serialize calls and must delete a
file before adding it again.
"""

import logging
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Set

from nestedtags.domain.change_models import NO_CHANGE, TreeChange
from nestedtags.domain.errors import (
    DuplicateEntryError,
    EmptyTagSetError,
    InvalidTagError,
    NodeNotFoundError,
)
from nestedtags.domain.tag_path import DEFAULT_DELIMITER, ROOT_PATH, TagPath, parse_tag
from nestedtags.domain.tree_models import FileEntry, TagNode, TreeElement

logger = logging.getLogger(__name__)

_EMPTY: FrozenSet[TagPath] = frozenset()


class TagTree:
    """
    Hierarchical index from tag paths to the files declaring them.

    Attributes:
        root: The unique root node (empty path).
        delimiter: Hierarchy delimiter used to parse raw tags.
    """

    def __init__(self, delimiter: str = DEFAULT_DELIMITER) -> None:
        self.root = TagNode(ROOT_PATH)
        self.delimiter = delimiter
        self._file_tag_index: Dict[str, FrozenSet[TagPath]] = {}

    def __contains__(self, file_identity: object) -> bool:
        return file_identity in self._file_tag_index

    def __len__(self) -> int:
        return len(self._file_tag_index)

    def __repr__(self) -> str:
        return f"TagTree(files={len(self)}, top_level_tags={len(self.root.children)})"

    # =========================================================================
    # MUTATION API
    # =========================================================================

    def add_file(
            self,
            file_identity: str,
            tags: Iterable[object],
            display_name: Optional[str] = None,
    ) -> TreeChange:
        """
        Insert a file under every distinct tag it declares.

        Malformed tags are skipped; duplicates (raw strings resolving to the
        same path) collapse into a single entry.

        Args:
            file_identity: Canonical path of the file.
            tags: Raw tag strings.
            display_name: Optional label, defaults to the identity.

        Returns:
            TreeChange: The outermost paths whose listing changed.

        Raises:
            DuplicateEntryError: If the file is already indexed.
            EmptyTagSetError: If no tag survives parsing.
        """
        if file_identity in self._file_tag_index:
            raise DuplicateEntryError(file_identity)

        paths = self._parse_tags(file_identity, tags)

        affected: List[TagPath] = []
        for path in paths:
            affected.append(self._insert(file_identity, display_name or file_identity, path))

        self._file_tag_index[file_identity] = frozenset(paths)
        logger.debug(f"Indexed '{file_identity}' under {len(paths)} tag(s)")
        return TreeChange.of(affected)

    def delete_file(self, file_identity: str) -> TreeChange:
        """
        Remove every entry of a file and prune branches left empty.

        Idempotent: unknown files are a no-op.

        Returns:
            TreeChange: The outermost paths whose listing changed, or
                        NO_CHANGE if the file was not indexed.
        """
        paths = self._file_tag_index.pop(file_identity, None)
        if paths is None:
            return NO_CHANGE

        affected = [self._remove(file_identity, path) for path in paths]
        logger.debug(f"Removed '{file_identity}' from {len(paths)} tag(s)")
        return TreeChange.of(affected)

    # =========================================================================
    # QUERY API
    # =========================================================================

    def get_tags_for_file(self, file_identity: str) -> FrozenSet[TagPath]:
        """Cached tag set of a file, empty if the file is not indexed."""
        return self._file_tag_index.get(file_identity, _EMPTY)

    def get_node(self, path: Sequence[str]) -> TreeElement:
        """
        Resolve a path of segments to a TagNode or FileEntry.

        The final segment may name either a child tag (checked first) or a
        file identity held directly by the node reached so far. An empty
        path resolves to the root.

        Raises:
            NodeNotFoundError: If any segment is missing.
        """
        segments = tuple(path)
        node = self.root
        for i, segment in enumerate(segments):
            child = node.get_child(segment)
            if child is not None:
                node = child
                continue
            if i == len(segments) - 1 and segment in node.files:
                return node.files[segment]
            raise NodeNotFoundError(segments, segment)
        return node

    def indexed_files(self) -> List[str]:
        return sorted(self._file_tag_index)

    def iter_tag_nodes(self) -> Iterator[TagNode]:
        """Depth-first walk of tag nodes in presentation order, root excluded."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node is not self.root:
                yield node
            children = [c for c in node.sorted_children() if isinstance(c, TagNode)]
            stack.extend(reversed(children))

    def verify_integrity(self) -> List[str]:
        """
        Check the global invariants of the index.

        Returns:
            List[str]: Human-readable violations, empty when consistent.
        """
        problems: List[str] = []
        seen: Dict[str, Set[TagPath]] = {}

        def walk(node: TagNode) -> None:
            for segment, child in node.children.items():
                if child.path != node.path.child(segment):
                    problems.append(
                        f"Node '{child.path.render()}' is attached under "
                        f"'{node.path.render()}' as '{segment}'"
                    )
                if child.is_empty:
                    problems.append(f"Empty node '{child.path.render()}' was not pruned")
                walk(child)
            for identity, entry in node.files.items():
                if entry.file_identity != identity:
                    problems.append(f"Entry '{entry.file_identity}' is keyed as '{identity}'")
                if entry.owning_path != node.path:
                    problems.append(
                        f"Entry '{identity}' claims '{entry.owning_path.render()}' "
                        f"but lives at '{node.path.render()}'"
                    )
                seen.setdefault(identity, set()).add(node.path)

        walk(self.root)

        for identity, paths in self._file_tag_index.items():
            actual = seen.pop(identity, set())
            if set(paths) != actual:
                problems.append(f"Index for '{identity}' does not match its entries")
        for identity in seen:
            problems.append(f"Entry '{identity}' is missing from the file index")

        return problems

    # =========================================================================
    # PRIVATE HELPERS
    # =========================================================================

    def _parse_tags(self, file_identity: str, tags: Iterable[object]) -> List[TagPath]:
        """Parse, skip malformed tags and deduplicate keeping first occurrence."""
        paths: List[TagPath] = []
        rejected: List[object] = []
        for raw in tags:
            try:
                path = parse_tag(raw, self.delimiter)
            except InvalidTagError:
                logger.debug(f"Skipping malformed tag {raw!r} in '{file_identity}'")
                rejected.append(raw)
                continue
            if path not in paths:
                paths.append(path)

        if not paths:
            raise EmptyTagSetError(file_identity, rejected)
        return paths

    def _insert(self, file_identity: str, display_name: str, path: TagPath) -> TagPath:
        """Attach one entry, returning the outermost path whose listing changed."""
        node = self.root
        affected: Optional[TagPath] = None
        for segment in path.segments:
            if affected is None and node.get_child(segment) is None:
                affected = node.path
            node = node.resolve_or_create_child(segment)

        node.add_file_entry(FileEntry(file_identity, display_name, path))
        return affected if affected is not None else path

    def _remove(self, file_identity: str, path: TagPath) -> TagPath:
        """Detach one entry and prune upward, returning the outermost changed path."""
        chain = [self.root]
        for segment in path.segments:
            child = chain[-1].get_child(segment)
            if child is None:
                break
            chain.append(child)

        terminal = chain[-1]
        if terminal.path != path or not terminal.remove_file_entry(file_identity):
            logger.warning(f"Index out of sync: '{file_identity}' not found at '{path.render()}'")

        affected = terminal.path
        for depth in range(len(chain) - 1, 0, -1):
            parent, node = chain[depth - 1], chain[depth]
            if not parent.remove_child_if_empty(node.path.name):
                break
            affected = parent.path
        return affected
