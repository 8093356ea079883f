"""Shared fixtures for tourbook tests."""

from datetime import datetime
from pathlib import Path

import pytest

from tourbook.domain.currency import build_rate_table
from tourbook.domain.models import RateTable

FIXED_TIME = datetime(2024, 5, 1, 12, 0, 0)


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG data and config directories at a temporary location."""
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    return tmp_path


@pytest.fixture
def rates() -> RateTable:
    """Rate table with round numbers: 1 USD = 31.5 TWD, 1 JPY = 0.2 TWD."""
    return build_rate_table({"USD": 31.5, "JPY": 0.2}, FIXED_TIME)
