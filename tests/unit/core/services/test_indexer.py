from __future__ import annotations

"""
Unit tests for the Workspace Indexer Service.

Covers bootstrap reporting, per-document failure isolation, change
notifications and listener fan-out.
"""

import threading
from pathlib import Path
from typing import List

import pytest

from nestedtags.core.index.tag_tree import TagTree
from nestedtags.core.services.indexer import WorkspaceIndexer
from nestedtags.core.services.scanner import prepare_filtering_rules, yield_workspace_files
from nestedtags.domain.change_models import NO_CHANGE, TreeChange
from nestedtags.domain.tag_path import ROOT_PATH, TagPath
from nestedtags.infra.fs import canonical_identity


def P(*segments: str) -> TagPath:
    return TagPath(tuple(segments))


def _files(root: Path) -> List[str]:
    inc, exc = prepare_filtering_rules(str(root), None, None, respect_gitignore=False)
    return list(yield_workspace_files(str(root), inc, exc))


@pytest.fixture
def indexer() -> WorkspaceIndexer:
    return WorkspaceIndexer(TagTree())


# -----------------------------------------------------------------------------
# Bootstrap
# -----------------------------------------------------------------------------

def test_bootstrap_indexes_sample_workspace(indexer: WorkspaceIndexer, sample_workspace: Path) -> None:
    events: List[TreeChange] = []
    indexer.subscribe(events.append)

    report = indexer.bootstrap(str(sample_workspace), _files(sample_workspace))

    notes = canonical_identity(str(sample_workspace / "notes.md"))
    a_doc = canonical_identity(str(sample_workspace / "docs" / "a.md"))
    plain = canonical_identity(str(sample_workspace / "docs" / "plain.md"))

    assert report.ok
    assert report.scanned == 3
    assert sorted(report.indexed) == sorted([notes, a_doc])
    assert report.untagged == [plain]

    tree = indexer.tree
    assert tree.get_tags_for_file(notes) == {P("todo"), P("project", "frontend")}
    assert tree.get_tags_for_file(a_doc) == {P("todo"), P("todo", "urgent")}
    assert set(tree.get_node(["todo"]).files) == {notes, a_doc}
    assert plain not in tree

    assert events == [TreeChange((ROOT_PATH,))]


def test_bootstrap_continues_past_unreadable_files(indexer: WorkspaceIndexer, tmp_path: Path) -> None:
    good = tmp_path / "good.md"
    good.write_text("<!-- @nested-tags: ok -->", encoding="utf-8")
    missing = tmp_path / "missing.md"

    report = indexer.bootstrap(str(tmp_path), [str(missing), str(good)])

    assert not report.ok
    assert report.errors[0].file_path == canonical_identity(str(missing))
    assert report.indexed == [canonical_identity(str(good))]
    assert report.to_dict()["errors"][0]["file_path"] == canonical_identity(str(missing))


def test_bootstrap_is_repeatable(indexer: WorkspaceIndexer, sample_workspace: Path) -> None:
    files = _files(sample_workspace)
    indexer.bootstrap(str(sample_workspace), files)
    first = [n.path for n in indexer.tree.iter_tag_nodes()]

    report = indexer.bootstrap(str(sample_workspace), files)

    assert report.ok
    assert [n.path for n in indexer.tree.iter_tag_nodes()] == first
    assert indexer.tree.verify_integrity() == []


def test_bootstrap_uses_injected_reader() -> None:
    contents = {"/ws/x.md": "@nested-tags: from/reader -->"}
    indexer = WorkspaceIndexer(reader=contents.__getitem__)

    indexer.bootstrap("/ws", ["/ws/x.md"])

    assert indexer.tree.get_tags_for_file(canonical_identity("/ws/x.md")) == {P("from", "reader")}


# -----------------------------------------------------------------------------
# Change notifications
# -----------------------------------------------------------------------------

def test_document_change_updates_tags(indexer: WorkspaceIndexer) -> None:
    doc = canonical_identity("/ws/doc.md")
    indexer.on_document_changed(canonical_identity("/ws/other.md"), "@nested-tags: a/keep -->")

    first = indexer.on_document_changed(doc, "@nested-tags: a/b -->")
    second = indexer.on_document_changed(doc, "@nested-tags: a/c -->")

    assert first.affected_paths == (P("a"),)
    assert second.affected_paths == (P("a"),)
    assert indexer.tree.get_tags_for_file(doc) == {P("a", "c")}
    assert "b" not in indexer.tree.get_node(["a"]).children


def test_unchanged_tag_set_is_a_no_op(indexer: WorkspaceIndexer) -> None:
    events: List[TreeChange] = []
    indexer.subscribe(events.append)
    doc = canonical_identity("/ws/doc.md")

    indexer.on_document_changed(doc, "@nested-tags: a, b -->")
    change = indexer.on_document_changed(doc, "edited body\n@nested-tags:b,a,  a -->")

    assert change is NO_CHANGE
    assert len(events) == 1


def test_removing_every_tag_drops_the_document(indexer: WorkspaceIndexer) -> None:
    doc = canonical_identity("/ws/doc.md")
    indexer.on_document_changed(doc, "@nested-tags: a -->")

    change = indexer.on_document_changed(doc, "no more tags")

    assert doc not in indexer.tree
    assert change.affected_paths == (ROOT_PATH,)
    assert indexer.tree.root.is_empty


def test_will_save_reads_from_disk(tmp_path: Path) -> None:
    doc = tmp_path / "doc.md"
    doc.write_text("@nested-tags: saved -->", encoding="utf-8")
    indexer = WorkspaceIndexer()

    assert indexer.on_will_save(str(doc), is_dirty=False) is NO_CHANGE
    assert indexer.on_will_save(str(doc)).changed
    assert indexer.tree.get_tags_for_file(canonical_identity(str(doc))) == {P("saved")}
    assert indexer.on_will_save(str(tmp_path / "gone.md")) is NO_CHANGE


def test_candidate_filter_ignores_other_documents() -> None:
    indexer = WorkspaceIndexer(is_candidate=lambda p: p.endswith(".md"))

    assert indexer.on_document_changed("/ws/script.py", "@nested-tags: py -->") is NO_CHANGE
    assert len(indexer.tree) == 0


def test_remove_document(indexer: WorkspaceIndexer) -> None:
    doc = canonical_identity("/ws/doc.md")
    indexer.on_document_changed(doc, "@nested-tags: x/y -->")

    assert indexer.remove_document(doc).affected_paths == (ROOT_PATH,)
    assert indexer.remove_document(doc) is NO_CHANGE


# -----------------------------------------------------------------------------
# Listeners
# -----------------------------------------------------------------------------

def test_listener_errors_do_not_break_fan_out(indexer: WorkspaceIndexer) -> None:
    received: List[TreeChange] = []

    def broken(_: TreeChange) -> None:
        raise RuntimeError("listener failure")

    indexer.subscribe(broken)
    unsubscribe = indexer.subscribe(received.append)

    indexer.on_document_changed("/ws/a.md", "@nested-tags: a -->")
    unsubscribe()
    indexer.on_document_changed("/ws/b.md", "@nested-tags: b -->")

    assert len(received) == 1


def test_debounced_notifications_reach_the_tree(indexer: WorkspaceIndexer) -> None:
    notify = indexer.debounced(wait_seconds=60)
    doc = canonical_identity("/ws/doc.md")

    notify(doc, doc, "@nested-tags: draft -->")
    notify(doc, doc, "@nested-tags: final -->")
    assert len(indexer.tree) == 0

    notify.flush()

    assert indexer.tree.get_tags_for_file(doc) == {P("final")}


def test_listeners_run_under_the_indexer_lock(indexer: WorkspaceIndexer) -> None:
    other_thread_acquired: List[bool] = []

    def listener(_: TreeChange) -> None:
        def try_lock() -> None:
            got = indexer._lock.acquire(blocking=False)
            if got:
                indexer._lock.release()
            other_thread_acquired.append(got)

        contender = threading.Thread(target=try_lock)
        contender.start()
        contender.join(timeout=2.0)

    indexer.subscribe(listener)
    indexer.on_document_changed("/ws/a.md", "@nested-tags: a -->")
    indexer.remove_document("/ws/a.md")

    assert other_thread_acquired == [False, False]
