from __future__ import annotations

"""
Logging Core Orchestrator.

Maintains the idempotent lifecycle of the logging subsystem. Records are
routed through a Queue so that file I/O never runs on the thread delivering
change notifications to the tag index.
"""

import atexit
import logging
import os
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import Optional

from nestedtags.infra.fs import get_user_data_dir
from nestedtags.infra.logging.config import LoggingConfig
from nestedtags.infra.logging.handlers import _is_our_handler, _tag_handler, build_sink_handlers

_CONFIGURED_FLAG_ATTR: str = "_nestedtags_configured"
_QUEUE_LISTENER_ATTR: str = "_nestedtags_queue_listener"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def get_default_log_path(file_name: str = "nestedtags.log") -> str:
    """Standard log path within the user data directory."""
    return os.path.join(get_user_data_dir(), "logs", file_name)


def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Configure the root logger idempotently using non-blocking I/O.

    A single tagged QueueHandler is attached to the root logger; a
    QueueListener drains it into the console and/or rotating file handlers.

    Args:
        cfg: Structural configuration for the logging system.
        force: If True, tear down and re-initialize existing handlers.

    Returns:
        logging.Logger: The initialized root logger instance.
    """
    root = logging.getLogger()

    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    try:
        return _install_handlers(root, cfg)
    except (OSError, ValueError, RuntimeError):
        # emergency console so diagnostics are never lost entirely
        _remove_our_handlers(root)
        _stop_existing_listener(root)
        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(logging.Formatter("CRITICAL FALLBACK | %(levelname)s | %(message)s"))
        _tag_handler(sh)
        root.addHandler(sh)
        root.setLevel(logging.INFO)
        root.warning("Logging infrastructure failed. Switched to emergency console.", exc_info=True)
        return root


def get_logger(name: str) -> logging.Logger:
    """Acquire a named logger instance (usually `__name__`)."""
    return logging.getLogger(name)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _install_handlers(root: logging.Logger, cfg: LoggingConfig) -> logging.Logger:
    root.setLevel(cfg.level_number)

    _remove_our_handlers(root)
    _stop_existing_listener(root)

    sinks = build_sink_handlers(cfg)
    if not sinks:
        return root

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    listener = QueueListener(log_queue, *sinks, respect_handler_level=True)
    listener.start()
    atexit.register(_safe_stop_listener, listener)

    root.addHandler(_tag_handler(QueueHandler(log_queue)))
    setattr(root, _QUEUE_LISTENER_ATTR, listener)
    setattr(root, _CONFIGURED_FLAG_ATTR, True)
    return root


def _remove_our_handlers(root: logging.Logger) -> None:
    """Detach and close every handler installed by this package."""
    for h in list(root.handlers):
        if _is_our_handler(h):
            root.removeHandler(h)
            h.close()


def _stop_existing_listener(root: logging.Logger) -> None:
    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if listener:
        _safe_stop_listener(listener)
        for sink in listener.handlers:
            sink.close()
        setattr(root, _QUEUE_LISTENER_ATTR, None)


def _safe_stop_listener(listener: Optional[QueueListener]) -> None:
    """Stop a QueueListener, tolerating listeners that were already stopped."""
    if listener is None:
        return
    if getattr(listener, "_thread", None) is not None:
        listener.stop()
