"""
Logging setup for the relfetch CLI.

``main.cli`` calls ``setup_logging`` once, before anything is resolved.
Modules log through ``logging.getLogger(__name__)`` and never touch
handlers themselves.

Console level precedence:  --debug > --verbose > --quiet > $RELFETCH_LOG_LEVEL > WARNING

A second, more detailed copy can go to $RELFETCH_LOG_FILE at
$RELFETCH_LOG_FILE_LEVEL (defaults to the console level).
"""

from __future__ import annotations

import logging
import sys

DEFAULT_LEVEL = "WARNING"

_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

# (max level, format, datefmt); first row whose level >= the console level wins
_CONSOLE_FORMATS: list[tuple[int, str, str | None]] = [
    (logging.DEBUG, _DETAILED, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(message)s", None),
]


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env_level: str | None = None,
) -> str:
    """Console level name for the given flags and env value."""
    for flag, name in ((debug, "DEBUG"), (verbose, "INFO"), (quiet, "ERROR")):
        if flag:
            return name
    return env_level or DEFAULT_LEVEL


def setup_logging(
    level: str = DEFAULT_LEVEL,
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with relfetch's.

    Args:
        level: Console level name; unknown names mean WARNING.
        log_file: Also write records to this file. An unopenable file is
            reported as a warning and skipped.
        log_file_level: Level for ``log_file``; defaults to ``level``.
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level)]
    file_error: OSError | None = None

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        try:
            handlers.append(_file_handler(log_file, file_level))
        except OSError as e:
            file_error = e

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))

    if file_error is not None:
        logging.getLogger(__name__).warning(
            "Cannot open log file %s (%s); logging to the console only", log_file, file_error,
        )


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = next((f, d) for cap, f, d in _CONSOLE_FORMATS if level <= cap)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_DETAILED, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _parse_level(level: str | None) -> int:
    numeric = getattr(logging, (level or DEFAULT_LEVEL).upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
