"""Pytest configuration helpers for deprecation gate tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def _clean_gate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DEPRECATION_GATE_TODAY", "DEPRECATION_GATE_CONFIG", "DEPRECATION_GATE_DEBUG"):
        monkeypatch.delenv(name, raising=False)
