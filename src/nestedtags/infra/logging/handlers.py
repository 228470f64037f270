from __future__ import annotations

"""
Logging Handler Factory.

Builds the sink handlers drained by the queue listener and marks every
handler this package installs, so reconfiguration removes ours and leaves
handlers added by pytest or host applications alone.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List

from nestedtags.infra.logging.config import CONSOLE_FORMAT, FILE_FORMAT, LoggingConfig

_HANDLER_TAG_ATTR: str = "_nestedtags_handler"


def _tag_handler(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG_ATTR, True)
    return handler


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def build_sink_handlers(cfg: LoggingConfig) -> List[logging.Handler]:
    """
    Create the console and file handlers requested by `cfg`.

    A log file that cannot be opened is reported on stderr and skipped;
    the console handler is still returned.

    Returns:
        List[logging.Handler]: Tagged handlers, possibly empty.
    """
    level = cfg.level_number
    sinks: List[logging.Handler] = []

    if cfg.console:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        sinks.append(console)

    if cfg.log_file:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(cfg.log_file)), exist_ok=True)
            rotating = RotatingFileHandler(
                cfg.log_file,
                maxBytes=cfg.max_bytes,
                backupCount=cfg.backup_count,
                encoding="utf-8",
            )
        except OSError as e:
            sys.stderr.write(f"WARNING: Unable to open log file '{cfg.log_file}': {e}\n")
        else:
            rotating.setFormatter(logging.Formatter(FILE_FORMAT))
            sinks.append(rotating)

    for handler in sinks:
        handler.setLevel(level)
        _tag_handler(handler)
    return sinks
