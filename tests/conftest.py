"""Pytest configuration for test isolation.

Tests import ``statement_ingest`` straight from the workspace ``packages/``
directory, so an editable install is not required to run them.

The package logger is process-global: once the CLI calls
``configure_logging()`` every later test would see its handler. An autouse
fixture resets that state and clears the logging environment overrides so
each test starts from the unconfigured library defaults.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
if str(_PKG_DIR) not in sys.path:
    sys.path.insert(0, str(_PKG_DIR))

from statement_ingest.logging_setup import reset_logging  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("STATEMENT_INGEST_LOG_LEVEL", raising=False)
    monkeypatch.delenv("STATEMENT_INGEST_LOG_FORMAT", raising=False)
    reset_logging()
    yield
    reset_logging()
