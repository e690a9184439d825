"""Pytest configuration for test isolation.

- Puts the workspace ``packages/`` dir and the repo root on ``sys.path`` so
  ``statement_scanner`` and ``tests.helpers`` import without installation.
- Clears environment overrides that would change the model name or log level
  seen by the code under test, and provides a dummy ``OPENAI_API_KEY`` so the
  CLI's environment check passes (the OpenAI client is always stubbed).
- Restores the package logger after each test, since the CLI callback
  attaches a rich handler to it.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("STATEMENT_SCANNER_MODEL", raising=False)
    monkeypatch.delenv("STATEMENT_SCANNER_LOG_LEVEL", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")


@pytest.fixture(autouse=True)
def _reset_package_logger():
    logger = logging.getLogger("statement_scanner")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]
