"""
Schedule Validation
===================
Check a schedule directly against the unfiltered problem, and enumerate
solutions exhaustively for small queries (an oracle for the solver).
"""
import itertools
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Iterator, List, Optional, Sequence

from calsched.models.constraints import DateConstraint
from calsched.models.domain import date_range
from calsched.utils.logging_setup import get_logger, log_function_call

logger = get_logger("calsched.solver.validation")


@dataclass
class Violation:
    """Single problem found in a schedule."""
    type: str  # "length", "out_of_window", "constraint"
    message: str
    meeting: Optional[int] = None
    constraint: Optional[DateConstraint] = None


@dataclass
class ValidationResult:
    """All violations of one schedule."""
    violations: List[Violation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def add_violation(self, v: Violation):
        self.violations.append(v)

    def by_type(self, kind: str) -> List[Violation]:
        return [v for v in self.violations if v.type == kind]


def constraint_holds(c: DateConstraint, schedule: Sequence[date]) -> bool:
    """Evaluate one constraint against a full schedule."""
    if c.arity == 1:
        return c.is_satisfied_by(schedule[c.var], c.reference)
    return c.is_satisfied_by(schedule[c.left], schedule[c.right])


@log_function_call
def validate_schedule(
    schedule: Sequence[date],
    n_meetings: int,
    range_start: date,
    range_end: date,
    constraints: Iterable[DateConstraint],
) -> ValidationResult:
    """
    Validate a schedule without using any filtered domain.

    Args:
        schedule: Dates indexed by meeting
        n_meetings: Expected schedule length
        range_start: First allowed day
        range_end: Last allowed day
        constraints: Constraints the schedule must satisfy

    Returns:
        ValidationResult listing every violation (empty when valid)
    """
    result = ValidationResult()

    if len(schedule) != n_meetings:
        result.add_violation(Violation(
            type="length",
            message=f"Expected {n_meetings} dates, got {len(schedule)}",
        ))
        return result

    for i, d in enumerate(schedule):
        if not range_start <= d <= range_end:
            result.add_violation(Violation(
                type="out_of_window",
                message=f"Meeting {i} on {d} is outside {range_start}..{range_end}",
                meeting=i,
            ))

    for c in constraints:
        if not constraint_holds(c, schedule):
            result.add_violation(Violation(
                type="constraint",
                message=f"Constraint {c} is not satisfied",
                constraint=c,
            ))

    if result.violations:
        logger.warning(f"Schedule has {len(result.violations)} violation(s)")
    return result


def enumerate_solutions(
    n_meetings: int,
    range_start: date,
    range_end: date,
    constraints: Iterable[DateConstraint],
) -> Iterator[List[date]]:
    """
    Yield every satisfying schedule, trying all ``days ** n_meetings`` combinations.

    Exponential: only meant for tiny queries.
    """
    constraints = list(constraints)
    days = date_range(range_start, range_end)
    for combo in itertools.product(days, repeat=n_meetings):
        if all(constraint_holds(c, combo) for c in constraints):
            yield list(combo)


def brute_force_solve(
    n_meetings: int,
    range_start: date,
    range_end: date,
    constraints: Iterable[DateConstraint],
) -> Optional[List[date]]:
    """First schedule found by exhaustive enumeration, or None."""
    return next(enumerate_solutions(n_meetings, range_start, range_end, constraints), None)
