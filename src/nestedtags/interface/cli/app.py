from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration resolution
(defaults, persisted state, command-line overrides), the workspace scan, and
rendering of the resulting tag index. Optionally keeps watching the
workspace and re-indexes documents as they change.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from nestedtags.core.index.tag_tree import TagTree
from nestedtags.core.services.indexer import WorkspaceIndexer
from nestedtags.core.services.poller import WorkspacePoller
from nestedtags.core.services.scanner import (
    is_candidate,
    prepare_filtering_rules,
    yield_workspace_files,
)
from nestedtags.core.services.validator import validate_config
from nestedtags.domain.change_models import TreeChange
from nestedtags.domain.config import get_default_config, load_config
from nestedtags.domain.errors import NodeNotFoundError
from nestedtags.domain.indexing_models import BootstrapReport
from nestedtags.domain.tag_path import parse_tag
from nestedtags.infra.fs import canonical_identity, normalize_path
from nestedtags.infra.logging import LoggingConfig, configure_logging, get_logger
from nestedtags.interface.cli import args as cli_args
from nestedtags.interface.view_model import TagTreeViewModel

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 failure, 2 bad workspace,
             130 interrupted).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 1. Configuration hierarchy: defaults or persisted state, then overrides
    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    conf, warnings = validate_config(raw_conf, strict=False)

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    configure_logging(LoggingConfig(
        level=conf["log_level"],
        console=True,
        log_file=conf["log_file"] or None,
    ))
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(conf, ensure_ascii=False, indent=2))
        return 0

    # 3. Pre-flight workspace verification
    workspace = normalize_path(conf["workspace_path"], os.getcwd())
    if not os.path.isdir(workspace):
        msg = f"Workspace directory does not exist: {workspace}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return 2

    # 4. Index construction
    include_rx, exclude_rx = prepare_filtering_rules(
        workspace,
        conf["include_patterns"],
        conf["exclude_patterns"],
        conf["respect_gitignore"],
    )
    tree = TagTree(delimiter=conf["hierarchy_delimiter"])
    indexer = WorkspaceIndexer(
        tree,
        marker=conf["tag_marker"],
        terminator=conf["tag_terminator"],
        separator=conf["tag_separator"],
        is_candidate=lambda p: is_candidate(p, include_rx, exclude_rx),
    )

    try:
        report = indexer.bootstrap(
            workspace, yield_workspace_files(workspace, include_rx, exclude_rx)
        )
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130

    # 5. Output rendering phase
    view = TagTreeViewModel(tree)
    status = _render(args, conf, tree, view, report)

    if args.check:
        problems = tree.verify_integrity()
        for problem in problems:
            print(f"INTEGRITY: {problem}", file=sys.stderr)
        if problems:
            status = 1

    if args.watch:
        return _watch(
            indexer, view, workspace, include_rx, exclude_rx,
            conf["poll_interval"], conf["debounce_seconds"], status,
        )

    return status

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge of known override keys into the base configuration."""
    out = dict(base)
    for k, v in overrides.items():
        if k in out and v is not None:
            out[k] = v
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _render(
        args: Any,
        conf: Dict[str, Any],
        tree: TagTree,
        view: TagTreeViewModel,
        report: BootstrapReport,
) -> int:
    """Print the requested view of the index and return the exit status."""
    status = 0 if report.ok else 1
    delimiter = conf["hierarchy_delimiter"]

    if args.tags_for:
        identity = canonical_identity(args.tags_for)
        tags = sorted(p.render(delimiter) for p in tree.get_tags_for_file(identity))
        if args.json_output:
            print(json.dumps({"file": identity, "tags": tags}, ensure_ascii=False, indent=2))
        else:
            for tag in tags:
                print(tag)
        return status

    if args.node_path:
        try:
            segments = parse_tag(args.node_path, delimiter).segments
            children = view.get_children(segments)
        except (NodeNotFoundError, ValueError):
            print(f"ERROR: No tag node '{args.node_path}'", file=sys.stderr)
            return 1
        if args.json_output:
            payload = [
                {"label": c.label, "kind": c.kind.value, "path": list(c.path)}
                for c in children
            ]
            print(json.dumps(payload, ensure_ascii=False, indent=2))
        else:
            for c in children:
                print(f"#{c.label}" if c.collapsible else c.label)
        return status

    if args.json_output:
        print(json.dumps(
            {"report": report.to_dict(), "tree": view.to_dict()},
            ensure_ascii=False,
            indent=2,
        ))
        return status

    _print_human_summary(view, report)
    return status


def _print_human_summary(view: TagTreeViewModel, report: BootstrapReport) -> None:
    lines = view.render_lines()
    if lines:
        print("\n".join(lines))
    else:
        print("(no tags found)")

    print("")
    print(f"Files scanned: {report.scanned}")
    print(f"Files indexed: {len(report.indexed)}")
    print(f"Untagged files: {len(report.untagged)}")
    if report.errors:
        print(f"Failed files: {len(report.errors)}")
        for err in report.errors:
            print(f"  - {err.file_path}: {err.error}")

# -----------------------------------------------------------------------------
# WATCH MODE
# -----------------------------------------------------------------------------

def _watch(
        indexer: WorkspaceIndexer,
        view: TagTreeViewModel,
        workspace: str,
        include_rx: List[Any],
        exclude_rx: List[Any],
        interval: float,
        debounce_seconds: float,
        status: int,
) -> int:
    """
    Poll the workspace until interrupted, reprinting the tree on change.

    Returns:
        int: `status` when the initial scan or integrity check failed,
             otherwise 130 once interrupted.
    """

    def on_change(change: TreeChange) -> None:
        delimiter = indexer.tree.delimiter
        paths = ", ".join(p.render(delimiter) or "<root>" for p in change.affected_paths)
        logger.info(f"Tag index changed at: {paths}")
        print("\n".join(view.render_lines()) or "(no tags found)")

    indexer.subscribe(on_change)
    poller = WorkspacePoller(
        indexer,
        lambda: yield_workspace_files(workspace, include_rx, exclude_rx),
        interval=interval or 1.0,
        debounce_seconds=debounce_seconds,
    )
    poller.prime()
    try:
        poller.run()
    except KeyboardInterrupt:
        logger.info("Watch mode stopped.")
        return status or 130
    return status


if __name__ == "__main__":
    sys.exit(main())
