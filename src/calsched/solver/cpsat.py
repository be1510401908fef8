"""
OR-Tools CP-SAT reference backend.

Each meeting becomes an integer variable holding its day offset from the
start of the window; every date constraint is a linear (in)equality between
offsets. Independent of the consistency/backtracking pipeline, which makes it
useful as a cross-check.
"""
import logging
import time
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from ortools.sat.python import cp_model

from calsched.models.comparison import Comparison
from calsched.models.constraints import Backend, DateConstraint, SolverConfig
from calsched.solver.base import BaseSolver, SolveResult, SolverStatus
from calsched.solver.engine import validate_query
from calsched.solver.stats import SearchStats
from calsched.utils.structured_logging import get_structured_logger

logger = logging.getLogger("calsched.solver.cpsat")
events = get_structured_logger("calsched.solver.events")


def add_comparison(model: cp_model.CpModel, op: Comparison, lhs, rhs) -> None:
    """Post ``lhs <op> rhs`` on the model."""
    if op is Comparison.EQ:
        model.Add(lhs == rhs)
    elif op is Comparison.NE:
        model.Add(lhs != rhs)
    elif op is Comparison.LT:
        model.Add(lhs < rhs)
    elif op is Comparison.LE:
        model.Add(lhs <= rhs)
    elif op is Comparison.GT:
        model.Add(lhs > rhs)
    elif op is Comparison.GE:
        model.Add(lhs >= rhs)
    else:
        raise ValueError(f"Unhandled comparison: {op!r}")


class CpSatSolver(BaseSolver):
    """Same query interface as ``BacktrackingSolver``, solved by CP-SAT."""

    def __init__(
        self,
        n_meetings: int,
        range_start: date,
        range_end: date,
        constraints: Iterable[DateConstraint],
        config: Optional[SolverConfig] = None,
    ):
        self.config = config or SolverConfig(backend=Backend.CPSAT)
        self.constraints = validate_query(n_meetings, range_start, range_end, constraints)
        self.n_meetings = n_meetings
        self.range_start = range_start
        self.range_end = range_end
        self._status = SolverStatus.UNKNOWN
        self._solve_time = 0.0

    def build_model(self):
        """Return ``(model, offset_vars)`` for the query."""
        model = cp_model.CpModel()
        horizon = (self.range_end - self.range_start).days

        offsets: Dict[int, cp_model.IntVar] = {
            i: model.NewIntVar(0, horizon, f"meeting_{i}")
            for i in range(self.n_meetings)
        }

        for c in self.constraints:
            if c.arity == 1:
                ref = (c.reference - self.range_start).days
                add_comparison(model, c.op, offsets[c.var], ref)
            else:
                add_comparison(model, c.op, offsets[c.left], offsets[c.right] + c.offset_days)

        return model, offsets

    def solve(self) -> SolveResult:
        start_time = time.perf_counter()
        events.info(
            "solve_started",
            backend=Backend.CPSAT.value,
            meetings=self.n_meetings,
            constraints=len(self.constraints),
        )

        model, offsets = self.build_model()
        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = float(self.config.time_limit_seconds)
        solver.parameters.num_workers = self.config.num_workers

        status = solver.Solve(model)
        self._solve_time = time.perf_counter() - start_time

        dates: Optional[List[date]] = None
        if status in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            self._status = SolverStatus.SOLVED
            dates = [
                self.range_start + timedelta(days=solver.Value(offsets[i]))
                for i in range(self.n_meetings)
            ]
        elif status == cp_model.INFEASIBLE:
            self._status = SolverStatus.NO_SOLUTION
        elif status == cp_model.UNKNOWN:
            self._status = SolverStatus.TIMEOUT
            logger.warning(f"CP-SAT stopped after {self._solve_time:.2f}s without a verdict")
        else:
            self._status = SolverStatus.UNKNOWN
            logger.error(f"CP-SAT returned status {solver.StatusName(status)}")

        stats = SearchStats(nodes_visited=int(solver.NumBranches()))
        events.info(
            "solve_finished",
            backend=Backend.CPSAT.value,
            status=self._status.value,
            seconds=round(self._solve_time, 4),
        )
        return SolveResult(
            dates=dates,
            status=self._status,
            solve_time_seconds=self._solve_time,
            backend=Backend.CPSAT.value,
            stats=stats,
        )

    def get_status(self) -> SolverStatus:
        return self._status

    def get_solve_time(self) -> float:
        return self._solve_time
