"""Test setup for cardnav."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def travel_text() -> str:
    """Sample document with three linked top-level sections."""
    return (FIXTURES / "travel.txt").read_text(encoding="utf-8")
