from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates parsed argparse namespaces
into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the nestedtags CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="nestedtags",
        description="Index the nested tags declared in workspace documents.",
    )

    # --- Workspace ---
    p.add_argument(
        "-i", "--workspace",
        dest="workspace_path",
        default=None,
        help="Workspace directory to index (default: current directory).",
    )

    # --- Discovery filters ---
    p.add_argument(
        "--include",
        dest="include_patterns",
        default=None,
        help="Comma-separated regexes a file name must match (default: \\.md$).",
    )
    p.add_argument(
        "--exclude",
        dest="exclude_patterns",
        default=None,
        help="Comma-separated regexes of directory or file names to skip.",
    )
    p.add_argument(
        "--no-gitignore",
        action="store_true",
        help="Ignore the workspace .gitignore rules.",
    )

    # --- Tag syntax ---
    p.add_argument(
        "--marker",
        dest="tag_marker",
        default=None,
        help="Annotation marker opening a tag list (default: @nested-tags:).",
    )
    p.add_argument(
        "--delimiter",
        dest="hierarchy_delimiter",
        default=None,
        help="Separator between nested tag levels (default: /).",
    )

    # --- Queries ---
    p.add_argument(
        "--tags-for",
        dest="tags_for",
        default=None,
        metavar="FILE",
        help="Print the tags indexed for FILE instead of the whole tree.",
    )
    p.add_argument(
        "--node",
        dest="node_path",
        default=None,
        metavar="TAG",
        help="Print the children of the tag node TAG (e.g. project/frontend).",
    )
    p.add_argument(
        "--check",
        action="store_true",
        help="Verify index integrity and fail on any violation.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Emit machine-readable JSON.",
    )

    # --- Watch mode ---
    p.add_argument(
        "--watch",
        action="store_true",
        help="Keep running and re-index documents as they change.",
    )
    p.add_argument(
        "--interval",
        dest="poll_interval",
        type=float,
        default=None,
        help="Seconds between two polls in watch mode.",
    )

    # --- Configuration and diagnostics ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the persisted configuration.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this file (rotated).",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Returns:
        Dict[str, Any]: Configuration keys set on the command line.
    """
    overrides: Dict[str, Any] = {
        "workspace_path": args.workspace_path,
        "tag_marker": args.tag_marker,
        "hierarchy_delimiter": args.hierarchy_delimiter,
        "poll_interval": args.poll_interval,
        "log_file": args.log_file,
    }

    if args.include_patterns:
        overrides["include_patterns"] = _split_csv(args.include_patterns)
    if args.exclude_patterns:
        overrides["exclude_patterns"] = _split_csv(args.exclude_patterns)
    if args.no_gitignore:
        overrides["respect_gitignore"] = False
    if args.debug:
        overrides["log_level"] = "DEBUG"

    return {k: v for k, v in overrides.items() if v is not None}

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """Convert a comma-separated string into a list of trimmed strings."""
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
