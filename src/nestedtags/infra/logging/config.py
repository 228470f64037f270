from __future__ import annotations

"""
Logging Configuration Model.

A single frozen record describing where log records go (stderr, a rotated
file or both) and at which severity.
"""

import logging
from dataclasses import dataclass
from typing import Optional

CONSOLE_FORMAT = "%(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings consumed by `configure_logging`.

    Attributes:
        level: Severity name ("DEBUG", "info", "WARN", ...). Unknown names
               fall back to INFO.
        console: Whether records are echoed on stderr.
        log_file: Path of the rotated log file, None to disable it.
        max_bytes: Size at which the log file rolls over.
        backup_count: Rolled-over files kept next to the active one.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None
    max_bytes: int = 1024 * 1024
    backup_count: int = 3

    @property
    def level_number(self) -> int:
        value = logging.getLevelName(str(self.level or "").strip().upper())
        return value if isinstance(value, int) else logging.INFO
