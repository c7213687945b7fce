"""Shared pytest fixtures for the jsontmx test-suite."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from jsontmx.config import ENV_SEGMENT, ENV_SOURCE_LANG
from jsontmx.logging_setup import DEBUG_ENV_VAR, set_debug_logging
from jsontmx.types import JsonDocument


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    for name in (DEBUG_ENV_VAR, ENV_SOURCE_LANG, ENV_SEGMENT):
        monkeypatch.delenv(name, raising=False)
    set_debug_logging(False)
    yield
    set_debug_logging(False)


@pytest.fixture
def make_doc():
    def _make(path: str, content) -> JsonDocument:
        return JsonDocument(name=Path(path).name, content=content, path=path)

    return _make
