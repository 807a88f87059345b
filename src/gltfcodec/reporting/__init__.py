"""Pluggable progress/status reporting (plain, rich, silent)."""

from .base import (
    Reporter,
    TaskStatus,
    format_stats,
    get_reporter,
    get_verbosity,
    set_reporter,
    set_verbosity,
    task,
)
from .plain import PlainReporter
from .rich_reporter import RichReporter
from .silent import SilentReporter

__all__ = [
    "Reporter",
    "TaskStatus",
    "format_stats",
    "get_reporter",
    "get_verbosity",
    "set_reporter",
    "set_verbosity",
    "task",
    "PlainReporter",
    "RichReporter",
    "SilentReporter",
]
