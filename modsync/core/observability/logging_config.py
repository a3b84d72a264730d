"""
Logging for the modsync CLI.

``setup_logging`` runs once from the root command. Log records always go
to stderr, so ``--json`` output on stdout stays parseable; every console
line carries a ``modsync <level>:`` tag so it is never mistaken for
command output.

Console level: ``--debug`` / ``--verbose`` / ``--quiet``, else
``MODSYNC_LOG_LEVEL``, else WARNING. ``MODSYNC_LOG_FILE`` adds a file log
at ``MODSYNC_LOG_FILE_LEVEL`` (defaults to the console level).
"""

from __future__ import annotations

import logging
import sys

# pwsh runs can take minutes, so INFO and below carry a clock.
_CONSOLE_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s modsync %(levelname)s [%(name)s:%(lineno)d]: %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s modsync %(levelname)s: %(message)s", "%H:%M:%S"),
}
_CONSOLE_DEFAULT = ("modsync %(levelname)s: %(message)s", None)

_FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _LowerLevelFormatter(logging.Formatter):
    """Render the level name in lower case (``modsync warning: ...``)."""

    def formatMessage(self, record: logging.LogRecord) -> str:
        original = record.levelname
        record.levelname = original.lower()
        try:
            return super().formatMessage(record)
        finally:
            record.levelname = original


def _console_format(level: int) -> tuple[str, str | None]:
    for threshold in sorted(_CONSOLE_FORMATS):
        if level <= threshold:
            return _CONSOLE_FORMATS[threshold]
    return _CONSOLE_DEFAULT


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with modsync's console (and file) handlers.

    Args:
        level: Console level name.
        log_file: Optional path of a log file, appended to.
        log_file_level: Level for the file. Defaults to ``level``.
    """
    console_level = _parse_level(level)
    fmt, datefmt = _console_format(console_level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_LowerLevelFormatter(fmt, datefmt=datefmt))

    handlers: list[logging.Handler] = [console]
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        handlers.append(fh)
        root_level = min(root_level, file_level)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(root_level)


def _parse_level(level: str | None) -> int:
    """Level name to number; unknown or empty names mean WARNING."""
    numeric = logging.getLevelName(level.upper()) if level else None
    return numeric if isinstance(numeric, int) else logging.WARNING
