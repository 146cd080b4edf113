from __future__ import annotations

from datetime import datetime

import pytest


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2026, 2, 2, 10, 0, 0)


@pytest.fixture
def sunday_now() -> datetime:
    return datetime(2026, 2, 1, 10, 0, 0)
