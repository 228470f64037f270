from __future__ import annotations

"""
Workspace Indexer Service.

The external caller of the tag tree. Translates bootstrap scans, document
change notifications and will-save notifications into delete/add pairs on
the tree, serializes them, and fans the resulting TreeChange messages out to
subscribers. Per-document failures never abort the indexing of the rest of
the workspace.
"""

import logging
import threading
from typing import Callable, FrozenSet, Iterable, List, Optional, Set

from nestedtags.core.analysis.tag_extractor import (
    DEFAULT_MARKER,
    DEFAULT_SEPARATOR,
    DEFAULT_TERMINATOR,
    extract_tags,
)
from nestedtags.core.index.tag_tree import TagTree
from nestedtags.core.services.debounce import Debouncer
from nestedtags.domain.change_models import NO_CHANGE, TreeChange
from nestedtags.domain.errors import EmptyTagSetError, InvalidTagError, TagTreeError
from nestedtags.domain.indexing_models import BootstrapReport, IndexingError
from nestedtags.domain.tag_path import TagPath, parse_tag
from nestedtags.infra.fs import canonical_identity, read_text_file

logger = logging.getLogger(__name__)

ChangeListener = Callable[[TreeChange], None]
Reader = Callable[[str], str]


class WorkspaceIndexer:
    """
    Keeps a TagTree synchronized with the documents of a workspace.

    Every tree call goes through an internal lock: notifications may arrive
    from debouncer or poller threads while the tree itself is single-writer.
    """

    def __init__(
            self,
            tree: Optional[TagTree] = None,
            *,
            marker: str = DEFAULT_MARKER,
            terminator: str = DEFAULT_TERMINATOR,
            separator: str = DEFAULT_SEPARATOR,
            reader: Reader = read_text_file,
            is_candidate: Optional[Callable[[str], bool]] = None,
    ) -> None:
        self.tree = tree if tree is not None else TagTree()
        self.marker = marker
        self.terminator = terminator
        self.separator = separator
        self._reader = reader
        self._is_candidate = is_candidate
        self._lock = threading.RLock()
        self._listeners: List[ChangeListener] = []

    # =========================================================================
    # SUBSCRIPTIONS
    # =========================================================================

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Register a change listener.

        Listeners run while the indexer lock is held, so they see a tree no
        other thread is mutating. They must not wait on threads that feed
        this indexer.

        Returns:
            Callable[[], None]: Function removing the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, change: TreeChange) -> None:
        if not change:
            return
        with self._lock:
            for listener in list(self._listeners):
                try:
                    listener(change)
                except Exception:
                    logger.exception("Change listener failed")

    # =========================================================================
    # TAG EXTRACTION
    # =========================================================================

    def read(self, file_path: str) -> str:
        return self._reader(file_path)

    def extract(self, text: str) -> Set[str]:
        return extract_tags(text, self.marker, self.terminator, self.separator)

    def parse(self, raw_tags: Iterable[str]) -> FrozenSet[TagPath]:
        """Parsed, deduplicated tag paths of raw tags, malformed ones skipped."""
        paths: Set[TagPath] = set()
        for raw in raw_tags:
            try:
                paths.add(parse_tag(raw, self.tree.delimiter))
            except InvalidTagError:
                continue
        return frozenset(paths)

    # =========================================================================
    # BOOTSTRAP
    # =========================================================================

    def bootstrap(self, workspace_path: str, files: Iterable[str]) -> BootstrapReport:
        """
        Index every candidate document of a workspace.

        Failures are recorded in the report and the scan moves on. A single
        coarse change is emitted at the end.

        Args:
            workspace_path: Root being scanned (for reporting).
            files: Candidate document paths.

        Returns:
            BootstrapReport: Counters and per-file errors.
        """
        report = BootstrapReport(workspace_path=workspace_path)
        changed = NO_CHANGE

        for file_path in files:
            report.scanned += 1
            identity = canonical_identity(file_path)
            try:
                text = self._reader(file_path)
                with self._lock:
                    changed = changed.merge(self.tree.delete_file(identity))
                    changed = changed.merge(
                        self.tree.add_file(identity, self.extract(text), identity)
                    )
                report.indexed.append(identity)
            except EmptyTagSetError:
                report.untagged.append(identity)
            except (OSError, TagTreeError) as e:
                logger.warning(f"Failed to index '{identity}': {e}")
                report.errors.append(IndexingError(file_path=identity, error=str(e)))

        logger.info(
            f"Bootstrap of '{workspace_path}' complete: {len(report.indexed)} indexed, "
            f"{len(report.untagged)} untagged, {len(report.errors)} failed"
        )
        self._emit(changed.coalesce())
        return report

    # =========================================================================
    # CHANGE NOTIFICATIONS
    # =========================================================================

    def on_document_changed(self, file_path: str, text: str) -> TreeChange:
        """
        Re-index a document from its current (possibly unsaved) text.

        Nothing happens when the parsed tag set equals the indexed one.
        """
        if not self._accepts(file_path):
            return NO_CHANGE
        return self.update_file(file_path, self.extract(text))

    def on_will_save(self, file_path: str, is_dirty: bool = True) -> TreeChange:
        """
        Re-index a dirty document from disk right before it is persisted.
        """
        if not is_dirty or not self._accepts(file_path):
            return NO_CHANGE
        try:
            text = self._reader(file_path)
        except OSError as e:
            logger.warning(f"Unable to read '{file_path}' before save: {e}")
            return NO_CHANGE
        return self.update_file(file_path, self.extract(text))

    def remove_document(self, file_path: str) -> TreeChange:
        """Drop a document (deleted or moved away) from the index."""
        with self._lock:
            change = self.tree.delete_file(canonical_identity(file_path))
        self._emit(change)
        return change

    def update_file(self, file_path: str, raw_tags: Iterable[str]) -> TreeChange:
        """
        Bring a single file in line with `raw_tags` by delete-then-add.

        Returns:
            TreeChange: What changed, NO_CHANGE when the tag set is unchanged.
        """
        identity = canonical_identity(file_path)
        raw = list(raw_tags)
        wanted = self.parse(raw)

        with self._lock:
            if wanted == self.tree.get_tags_for_file(identity):
                return NO_CHANGE
            change = self.tree.delete_file(identity)
            if wanted:
                change = change.merge(self.tree.add_file(identity, raw, identity))

        logger.debug(f"Tags of '{identity}' updated to {sorted(p.render() for p in wanted)}")
        self._emit(change)
        return change

    def debounced(self, wait_seconds: float = 0.5) -> Debouncer:
        """
        Build a debouncer delivering coalesced change notifications here.

        Usage: `notify = indexer.debounced(); notify(path, path, text)`.
        """
        return Debouncer(self._safe_document_changed, wait_seconds)

    # =========================================================================
    # PRIVATE HELPERS
    # =========================================================================

    def _safe_document_changed(self, file_path: str, text: str) -> None:
        try:
            self.on_document_changed(file_path, text)
        except TagTreeError:
            logger.exception(f"Failed to re-index '{file_path}'")

    def _accepts(self, file_path: str) -> bool:
        return self._is_candidate is None or self._is_candidate(file_path)
