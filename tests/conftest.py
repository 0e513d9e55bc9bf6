"""Pytest configuration for the swfloat test suite."""

import sys
from pathlib import Path

import pytest

# Add the repository root to the path so the package imports uninstalled
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils import Lfsr  # noqa: E402


@pytest.fixture
def lfsr():
    """A fresh deterministic random stream for each test."""
    return Lfsr()
