"""Pytest configuration and fixtures."""
import logging
import sys
from datetime import date, timedelta
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from calsched.models.comparison import Comparison
from calsched.models.constraints import BinaryDateConstraint, SolverConfig, UnaryDateConstraint


@pytest.fixture
def days():
    """Three consecutive days D1, D2, D3 (Mon 2 March 2026 onwards)."""
    d1 = date(2026, 3, 2)
    return [d1, d1 + timedelta(days=1), d1 + timedelta(days=2)]


@pytest.fixture
def week():
    """Monday to Friday of one working week."""
    monday = date(2026, 3, 2)
    return [monday + timedelta(days=i) for i in range(5)]


@pytest.fixture
def ordered_constraints(week):
    """m0 < m1 < m2, m2 on or before Wednesday."""
    return [
        BinaryDateConstraint(0, Comparison.LT, 1),
        BinaryDateConstraint(1, Comparison.LT, 2),
        UnaryDateConstraint(2, Comparison.LE, week[2]),
    ]


@pytest.fixture
def default_config():
    return SolverConfig()


@pytest.fixture(autouse=True)
def reset_calsched_logger():
    """Drop handlers installed by ``setup_logging`` so tests stay independent."""
    yield
    logger = logging.getLogger("calsched")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
