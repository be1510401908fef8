"""Calendar CSP solver: node consistency, AC-3, then backtracking search."""
import logging
import time
from datetime import date
from typing import Iterable, List, Optional

from calsched.errors import ContractViolation, InvariantViolation
from calsched.models.constraints import Backend, DateConstraint, SolverConfig
from calsched.models.domain import MeetingDomain, build_domains, date_range
from calsched.solver.base import BaseSolver, SolveResult, SolverStatus
from calsched.solver.consistency import arc_consistency, check_arity, node_consistency
from calsched.solver.search import backtrack
from calsched.solver.stats import SearchStats
from calsched.utils.logging_setup import SolverLogger
from calsched.utils.structured_logging import get_structured_logger

logger = logging.getLogger("calsched.solver")
slog = SolverLogger("calsched.solver")
events = get_structured_logger("calsched.solver.events")

# Days of the window used to cross-check each binary constraint against its reverse
REVERSE_CHECK_DAYS = 31


def summarize_sizes(sizes: List[int]) -> str:
    """One-line summary of domain sizes, independent of the meeting count."""
    if not sizes:
        return "no meetings"
    empty = sum(1 for size in sizes if size == 0)
    return f"{len(sizes)} meetings, min {min(sizes)}, max {max(sizes)}, empty {empty}"


def validate_query(
    n_meetings: int,
    range_start: date,
    range_end: date,
    constraints: Iterable[DateConstraint],
) -> List[DateConstraint]:
    """
    Reject malformed queries before any domain is built.

    Returns:
        The constraints as a de-duplicated list (first occurrence order)

    Raises:
        ContractViolation: bad meeting count, window or meeting index
        InvariantViolation: constraint with an arity other than 1 or 2
    """
    if isinstance(n_meetings, bool) or not isinstance(n_meetings, int):
        raise ContractViolation(f"n_meetings must be an integer, got {n_meetings!r}")
    if n_meetings < 0:
        raise ContractViolation(f"n_meetings must be >= 0, got {n_meetings}")
    if not isinstance(range_start, date) or not isinstance(range_end, date):
        raise ContractViolation("range_start and range_end must be dates")
    if range_start > range_end:
        raise ContractViolation(f"Empty date window: {range_start} > {range_end}")

    checked = list(dict.fromkeys(constraints))
    for c in checked:
        arity = check_arity(c)
        for idx in c.variables:
            if isinstance(idx, bool) or not isinstance(idx, int) or not 0 <= idx < n_meetings:
                raise ContractViolation(
                    f"Constraint {c} references meeting {idx!r} outside [0, {n_meetings})"
                )
        if arity == 1 and not isinstance(c.reference, date):
            raise ContractViolation(f"Constraint {c!r} needs a date reference")
    return checked


def check_reverse_consistency(
    constraints: Iterable[DateConstraint],
    range_start: date,
    range_end: date,
) -> None:
    """
    Verify ``c(a, b) == c.reverse()(b, a)`` for every binary constraint.

    Checked over the first ``REVERSE_CHECK_DAYS`` days of the window.

    Raises:
        InvariantViolation: on the first disagreement
    """
    days = date_range(range_start, range_end)[:REVERSE_CHECK_DAYS]
    for c in constraints:
        if c.arity != 2:
            continue
        rev = c.reverse()
        if rev.variables != (c.right, c.left):
            raise InvariantViolation(f"reverse() of {c} does not swap its meetings: {rev}")
        for a in days:
            for b in days:
                if c.is_satisfied_by(a, b) != rev.is_satisfied_by(b, a):
                    raise InvariantViolation(
                        f"reverse() of {c} disagrees on ({a}, {b}): {rev}"
                    )


class BacktrackingSolver(BaseSolver):
    """Domains → node consistency → arc consistency → backtracking."""

    def __init__(
        self,
        n_meetings: int,
        range_start: date,
        range_end: date,
        constraints: Iterable[DateConstraint],
        config: Optional[SolverConfig] = None,
    ):
        self.config = config or SolverConfig()
        self.constraints = validate_query(n_meetings, range_start, range_end, constraints)
        self.n_meetings = n_meetings
        self.range_start = range_start
        self.range_end = range_end
        self.domains: List[MeetingDomain] = []
        self.stats = SearchStats()
        self._status = SolverStatus.UNKNOWN
        self._solve_time = 0.0

    def solve(self) -> SolveResult:
        start_time = time.perf_counter()
        window = (self.range_end - self.range_start).days + 1
        events.info(
            "solve_started",
            backend=Backend.BACKTRACKING.value,
            meetings=self.n_meetings,
            window_days=window,
            constraints=len(self.constraints),
        )

        if self.config.check_reverse:
            check_reverse_consistency(self.constraints, self.range_start, self.range_end)

        slog.phase("Domains")
        self.domains = build_domains(self.n_meetings, self.range_start, self.range_end)
        slog.detail("window", f"{self.range_start}..{self.range_end} ({window} days)")

        slog.phase("Node consistency")
        self.stats.values_removed_node = node_consistency(self.domains, self.constraints)
        self.stats.domain_sizes_after_node = [len(d) for d in self.domains]
        slog.detail("domain sizes", summarize_sizes(self.stats.domain_sizes_after_node))

        slog.phase("Arc consistency")
        revisions, removed = arc_consistency(self.domains, self.constraints)
        self.stats.revisions = revisions
        self.stats.values_removed_arc = removed
        self.stats.domain_sizes_after_arc = [len(d) for d in self.domains]
        slog.detail("revisions", revisions)
        slog.detail("domain sizes", summarize_sizes(self.stats.domain_sizes_after_arc))
        if self.stats.has_empty_domain:
            logger.warning("A domain is empty after arc consistency; search will fail")

        slog.phase("Backtracking")
        schedule = backtrack([], self.domains, self.n_meetings, self.constraints, self.stats)

        self._status = SolverStatus.SOLVED if schedule is not None else SolverStatus.NO_SOLUTION
        self._solve_time = time.perf_counter() - start_time
        slog.step(
            f"{self._status.value}: {self.stats.nodes_visited} nodes, "
            f"{self.stats.backtracks} backtracks in {self._solve_time:.4f}s"
        )
        events.info(
            "solve_finished",
            backend=Backend.BACKTRACKING.value,
            status=self._status.value,
            nodes=self.stats.nodes_visited,
            seconds=round(self._solve_time, 4),
        )
        return SolveResult(
            dates=list(schedule) if schedule is not None else None,
            status=self._status,
            solve_time_seconds=self._solve_time,
            backend=Backend.BACKTRACKING.value,
            stats=self.stats,
        )

    def get_status(self) -> SolverStatus:
        return self._status

    def get_solve_time(self) -> float:
        return self._solve_time


def solve(
    n_meetings: int,
    range_start: date,
    range_end: date,
    constraints: Iterable[DateConstraint],
    config: Optional[SolverConfig] = None,
) -> Optional[List[date]]:
    """
    Schedule ``n_meetings`` meetings inside ``[range_start, range_end]``.

    Args:
        n_meetings: Number of meetings, indexed 0..n_meetings-1
        range_start: First allowed day (inclusive)
        range_end: Last allowed day (inclusive)
        constraints: Unary and binary date constraints
        config: Optional solver configuration

    Returns:
        Dates indexed by meeting, or None when no schedule exists
    """
    return BacktrackingSolver(n_meetings, range_start, range_end, constraints, config).solve().dates


def solve_with(
    n_meetings: int,
    range_start: date,
    range_end: date,
    constraints: Iterable[DateConstraint],
    config: Optional[SolverConfig] = None,
) -> SolveResult:
    """Solve with the backend named in ``config`` and return the full result."""
    config = config or SolverConfig()
    if config.backend == Backend.CPSAT:
        from calsched.solver.cpsat import CpSatSolver
        solver: BaseSolver = CpSatSolver(n_meetings, range_start, range_end, constraints, config)
    else:
        solver = BacktrackingSolver(n_meetings, range_start, range_end, constraints, config)
    return solver.solve()
