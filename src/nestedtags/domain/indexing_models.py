from __future__ import annotations

"""
Indexing Domain Data Models.

Defines the Data Transfer Objects used to report the outcome of workspace
indexing between the indexer service and interface layers (CLI).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

# -----------------------------------------------------------------------------
# ERROR TRACKING MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class IndexingError:
    """
    Encapsulates a failure while indexing one document.

    Attributes:
        file_path: Identity of the document.
        error: Descriptive exception or error message.
    """
    file_path: str
    error: str

# -----------------------------------------------------------------------------
# REPORT MODELS
# -----------------------------------------------------------------------------

@dataclass
class BootstrapReport:
    """
    Summary of a bootstrap scan.

    Attributes:
        workspace_path: Scanned root.
        scanned: Number of candidate documents visited.
        indexed: Documents inserted in the tree.
        untagged: Documents without any usable tag.
        errors: Per-document failures (the scan continues past them).
    """
    workspace_path: str
    scanned: int = 0
    indexed: List[str] = field(default_factory=list)
    untagged: List[str] = field(default_factory=list)
    errors: List[IndexingError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "workspace_path": self.workspace_path,
            "scanned": self.scanned,
            "indexed": len(self.indexed),
            "untagged": len(self.untagged),
            "errors": [{"file_path": e.file_path, "error": e.error} for e in self.errors],
        }
