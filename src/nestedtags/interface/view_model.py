from __future__ import annotations

"""
Tag Tree View Model.

Translates the tag index into plain items a presentation layer iterates
over. Items carry path identities only; every query re-resolves them
through the tree because pruning may have invalidated earlier nodes.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from nestedtags.core.index.tag_tree import TagTree
from nestedtags.domain.tree_models import FileEntry, NodeKind, TagNode, TreeElement

# -----------------------------------------------------------------------------
# ITEM MODEL
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ViewItem:
    """
    Presentation record for one tag node or file entry.

    Attributes:
        label: Text shown to the user.
        path: Path identity, resolvable with `TagTree.get_node`.
        kind: Tag or file.
        collapsible: Whether the item can have children.
    """
    label: str
    path: Tuple[str, ...]
    kind: NodeKind
    collapsible: bool


def _to_item(element: TreeElement) -> ViewItem:
    return ViewItem(
        label=element.display_name,
        path=element.path_to_node,
        kind=element.kind,
        collapsible=element.kind is NodeKind.TAG,
    )


class TagTreeViewModel:
    """Read-only adapter between a TagTree and a tree-shaped view."""

    def __init__(self, tree: TagTree) -> None:
        self.tree = tree

    def get_children(self, path: Optional[Sequence[str]] = None) -> List[ViewItem]:
        """
        Children of the element at `path` (the root when None).

        Raises:
            NodeNotFoundError: If `path` no longer resolves.
        """
        element = self.tree.get_node(path or ())
        if isinstance(element, FileEntry):
            return []
        return [_to_item(child) for child in element.sorted_children()]

    def get_tree_item(self, path: Sequence[str]) -> ViewItem:
        return _to_item(self.tree.get_node(path))

    # -------------------------------------------------------------------------
    # Renderers
    # -------------------------------------------------------------------------

    def render_lines(self) -> List[str]:
        """ASCII rendering of the whole tree using ├── / └── connectors."""
        lines: List[str] = []
        _render_node(self.tree.root, lines, prefix="")
        return lines

    def to_dict(self) -> Dict[str, Any]:
        """Nested, JSON-ready rendering of the whole tree."""
        return _node_to_dict(self.tree.root)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _render_node(node: TagNode, lines: List[str], prefix: str) -> None:
    entries = node.sorted_children()
    total = len(entries)

    for i, entry in enumerate(entries):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "

        if isinstance(entry, TagNode):
            lines.append(f"{prefix}{connector}#{entry.display_name}")
            _render_node(entry, lines, prefix + ("    " if is_last else "│   "))
        else:
            lines.append(f"{prefix}{connector}{entry.display_name}")


def _node_to_dict(node: TagNode) -> Dict[str, Any]:
    return {
        "name": node.display_name,
        "path": list(node.path_to_node),
        "tags": [_node_to_dict(c) for c in node.sorted_children() if isinstance(c, TagNode)],
        "files": [
            {"name": f.display_name, "file": f.file_identity}
            for f in node.sorted_children() if isinstance(f, FileEntry)
        ],
    }
