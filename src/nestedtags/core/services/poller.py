from __future__ import annotations

"""
Workspace Polling Watcher.

Headless source of change notifications: periodically rescans the workspace,
compares modification times with the previous pass and forwards created,
modified and deleted documents to the indexer.
"""

import logging
import threading
from typing import Callable, Dict, Iterable, Optional

from nestedtags.core.services.debounce import Debouncer
from nestedtags.core.services.indexer import WorkspaceIndexer
from nestedtags.domain.change_models import NO_CHANGE, TreeChange
from nestedtags.infra.fs import canonical_identity, get_mtime

logger = logging.getLogger(__name__)


class WorkspacePoller:
    """
    Detects document changes between successive scans.

    Modifications go through a per-document debouncer when
    `debounce_seconds` is positive; deletions are always applied at once.

    Attributes:
        interval: Seconds between two polls in `run`.
    """

    def __init__(
            self,
            indexer: WorkspaceIndexer,
            enumerate_files: Callable[[], Iterable[str]],
            interval: float = 1.0,
            debounce_seconds: float = 0.0,
    ) -> None:
        self.indexer = indexer
        self.interval = interval
        self._enumerate_files = enumerate_files
        self._mtimes: Dict[str, float] = {}
        self._debouncer: Optional[Debouncer] = (
            indexer.debounced(debounce_seconds) if debounce_seconds > 0 else None
        )

    def prime(self) -> None:
        """Record the current state without emitting changes (after bootstrap)."""
        self._mtimes = self._snapshot()

    def poll_once(self) -> TreeChange:
        """
        Run a single comparison pass.

        Returns:
            TreeChange: Merged change of every document updated in this pass
                        (debounced updates are delivered later).
        """
        current = self._snapshot()
        change = NO_CHANGE

        for identity, mtime in current.items():
            if self._mtimes.get(identity) == mtime:
                continue
            try:
                text = self.indexer.read(identity)
            except OSError as e:
                logger.warning(f"Unable to read '{identity}': {e}")
                continue
            if self._debouncer is not None:
                self._debouncer(identity, identity, text)
                continue
            change = change.merge(self.indexer.on_document_changed(identity, text))

        for identity in set(self._mtimes) - set(current):
            if self._debouncer is not None:
                self._debouncer.discard(identity)
            change = change.merge(self.indexer.remove_document(identity))

        self._mtimes = current
        return change

    def run(self, stop_event: Optional[threading.Event] = None) -> None:
        """Poll until `stop_event` is set."""
        stop_event = stop_event or threading.Event()
        logger.info(f"Watching workspace every {self.interval}s")
        try:
            while not stop_event.wait(self.interval):
                self.poll_once()
        finally:
            if self._debouncer is not None:
                self._debouncer.cancel()

    def _snapshot(self) -> Dict[str, float]:
        snapshot: Dict[str, float] = {}
        for file_path in self._enumerate_files():
            mtime = get_mtime(file_path)
            if mtime is not None:
                snapshot[canonical_identity(file_path)] = mtime
        return snapshot
