"""
Abstract Base Solver
====================
Interface shared by the backtracking solver and the CP-SAT reference
backend, plus the result object both return.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

import pandas as pd

from calsched.solver.stats import SearchStats


class SolverStatus(Enum):
    """Outcome of a solve call."""
    SOLVED = "solved"
    NO_SOLUTION = "no_solution"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


@dataclass
class SolveResult:
    """Schedule (or the lack of one) plus bookkeeping."""
    dates: Optional[List[date]]
    status: SolverStatus
    solve_time_seconds: float = 0.0
    backend: str = "backtracking"
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def is_success(self) -> bool:
        return self.status == SolverStatus.SOLVED and self.dates is not None

    def to_dataframe(self) -> pd.DataFrame:
        """One row per meeting: index, date and weekday name."""
        if not self.dates:
            return pd.DataFrame(columns=["meeting", "date", "weekday"])
        return pd.DataFrame(
            [
                {"meeting": i, "date": d, "weekday": d.strftime("%A")}
                for i, d in enumerate(self.dates)
            ]
        )

    def summary(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "backend": self.backend,
            "meetings": len(self.dates) if self.dates is not None else None,
            "solve_time": round(self.solve_time_seconds, 4),
            "stats": self.stats.to_dict(),
        }


class BaseSolver(ABC):
    """A solver configured for one query; ``solve`` may be called once."""

    @abstractmethod
    def solve(self) -> SolveResult:
        """Run the solver and return its result."""
        pass

    @abstractmethod
    def get_status(self) -> SolverStatus:
        """Status of the last run (UNKNOWN before ``solve``)."""
        pass

    @abstractmethod
    def get_solve_time(self) -> float:
        """Wall-clock seconds spent in the last run."""
        pass
