"""
Amalgamation context for cross-cutting options.

This module defines the AmalgamContext dataclass which holds options that
affect several stages of an amalgamation run (mostly logging).
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Hierarchical logging levels for the amalgamator."""
    SILENT = 0      # No logging
    ERROR = 3       # Error messages only
    WARNING = 6     # Warning messages (default)
    INFO = 10       # Round-by-round progress (-v)
    DEBUG = 30      # Every resolved import (-vvv)


@dataclass
class AmalgamContext:
    """
    Holds cross-cutting options shared by the resolver, the CLI and the tools.

    Attributes:
        log_rich_format:    If True, emit logs in rich format: timestamps and level prefixes.
        log_level:          Current logging level.
    """
    log_rich_format: bool = False
    log_level: LogLevel = LogLevel.WARNING

    @staticmethod
    def default() -> 'AmalgamContext':
        """Create an AmalgamContext with default settings."""
        return AmalgamContext(log_level=LogLevel.WARNING)
