"""
Logging utilities for the amalgamator.

This module provides logging functions that respect the AmalgamContext
flags (log level and rich format).
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

import sys
import time
from typing import Optional

from am_context import AmalgamContext, LogLevel


_PREFIXES = {
    LogLevel.ERROR: "[ERROR] ",
    LogLevel.WARNING: "[WARNING] ",
    LogLevel.INFO: "[INFO] ",
    LogLevel.DEBUG: "[DEBUG] ",
}


def log(context: Optional[AmalgamContext], log_level: LogLevel, message: str) -> None:
    """
    Print a message to stderr if the context's level admits it.

    Args:
        context:    The context holding the current logging level. When None,
                    the message is printed unconditionally.
        log_level:  The level of the message to log.
        message:    The message to log.
    """
    if context is None:
        print(f"{message}", file=sys.stderr)
        return
    if context.log_level < log_level:
        return
    prefix = ""
    if context.log_rich_format:
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        prefix = f"{timestamp} {_PREFIXES.get(log_level, '')}"
    print(f"{prefix}{message}", file=sys.stderr)


def log_error(context: Optional[AmalgamContext], message: str) -> None:
    log(context, LogLevel.ERROR, message)


def log_warning(context: Optional[AmalgamContext], message: str) -> None:
    log(context, LogLevel.WARNING, message)


def log_info(context: Optional[AmalgamContext], message: str) -> None:
    log(context, LogLevel.INFO, message)


def log_debug(context: Optional[AmalgamContext], message: str) -> None:
    log(context, LogLevel.DEBUG, message)


def log_stage(context: Optional[AmalgamContext], stage: str, unit: Optional[str] = None) -> None:
    """
    Log the start of a stage.

    Args:
        context: The context holding logging flags.
        stage: The name of the stage (e.g., "Inlining", "Resolving round 2").
        unit: Optional unit name being processed.
    """
    if unit:
        log(context, LogLevel.INFO, f"{stage} unit '{unit}'")
    else:
        log(context, LogLevel.INFO, f"{stage}...")
