"""Package logging for ``statement_ingest``.

Normalization runs inside whatever process imports it (a web request, a
worker, the ``statement-ingest`` CLI), so the modules stay silent by default:
each one asks :func:`get_logger` for ``statement_ingest.<module>`` and never
installs handlers of its own.

An entrypoint opts in by calling :func:`configure_logging` once. Level and
format can come from the arguments or from the environment:

- ``STATEMENT_INGEST_LOG_LEVEL``: level name (``debug``, ``WARNING``) or number
- ``STATEMENT_INGEST_LOG_FORMAT``: ``logging.Formatter`` format string

What gets logged: debug lines for per-module counts (mappings suggested,
accounts grouped, pairs detected, unparsable cells), an info line per
prepared import and per staged batch with errors, and a warning when a
confirmed mapping fails validation. Cell values other than the offending
amount text are not logged.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "statement_ingest"
LEVEL_ENV_VAR = "STATEMENT_INGEST_LOG_LEVEL"
FORMAT_ENV_VAR = "STATEMENT_INGEST_LOG_FORMAT"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_handler: logging.Handler | None = None


def _parse_level(value: int | str | None) -> int:
    """Resolve a level from an int, a name, a numeric string or the env var."""

    if value is None:
        value = os.getenv(LEVEL_ENV_VAR) or logging.INFO
    if isinstance(value, int):
        return value
    text = value.strip()
    if text.isdigit():
        return int(text)
    # Unknown names fall back to INFO rather than failing an import.
    return logging.getLevelNamesMapping().get(text.upper(), logging.INFO)


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Send package log records to ``stream`` (``sys.stderr`` by default).

    Only the first call has an effect; later calls return without touching
    the installed handler. The package logger stops propagating to the root
    logger so a host that also configures root logging sees each record once.
    """

    global _handler
    if _handler is not None:
        return

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or os.getenv(FORMAT_ENV_VAR) or DEFAULT_FORMAT))

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    for existing in [h for h in pkg_logger.handlers if isinstance(h, logging.NullHandler)]:
        pkg_logger.removeHandler(existing)
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(resolved)
    pkg_logger.propagate = False
    _handler = handler


def reset_logging() -> None:
    """Return the package logger to its unconfigured state (used by tests)."""

    global _handler
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    for existing in list(pkg_logger.handlers):
        pkg_logger.removeHandler(existing)
    pkg_logger.setLevel(logging.NOTSET)
    pkg_logger.propagate = True
    _handler = None


def get_logger(name: str) -> logging.Logger:
    # Until configured, a NullHandler keeps library use quiet.
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if _handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = [
    "LEVEL_ENV_VAR",
    "FORMAT_ENV_VAR",
    "DEFAULT_FORMAT",
    "configure_logging",
    "get_logger",
    "reset_logging",
]
