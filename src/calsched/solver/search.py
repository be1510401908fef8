"""Chronological backtracking over the filtered domains."""
from datetime import date
from typing import Iterator, List, Optional, Sequence

from calsched.models.constraints import DateConstraint
from calsched.models.domain import MeetingDomain
from calsched.solver.stats import SearchStats
from calsched.utils.logging_setup import SolverLogger

slog = SolverLogger("calsched.solver.search")


def is_consistent(current: int, assignment: Sequence[date], constraints: Sequence[DateConstraint]) -> bool:
    """
    Check the constraints that just became fully evaluable.

    Only constraints involving meeting ``current`` whose every meeting index
    is already assigned are checked; earlier ones were checked when their
    last meeting was placed.
    """
    assigned = len(assignment)
    for c in constraints:
        if c.arity == 1:
            if c.var == current and not c.is_satisfied_by(assignment[current], c.reference):
                return False
        elif c.arity == 2:
            if current not in (c.left, c.right):
                continue
            if c.left >= assigned or c.right >= assigned:
                continue
            if not c.is_satisfied_by(assignment[c.left], assignment[c.right]):
                return False
    return True


def backtrack(
    assignment: List[date],
    domains: Sequence[MeetingDomain],
    n_meetings: int,
    constraints: Sequence[DateConstraint],
    stats: Optional[SearchStats] = None,
) -> Optional[List[date]]:
    """
    Extend ``assignment`` to a full schedule, or return None.

    Depth-first over meetings ``len(assignment)..n_meetings-1`` with an
    explicit stack of candidate iterators, one per open level, so the number
    of meetings is not bounded by the interpreter's recursion limit.

    ``assignment`` is used as a stack: each level pushes one date for its
    meeting and pops exactly that date when the branch fails, so after a
    failed call the list has the length it had on entry.
    """
    if len(assignment) == n_meetings:
        return assignment

    # candidates[-1] yields dates for meeting len(assignment)
    candidates: List[Iterator[date]] = [iter(domains[len(assignment)].sorted())]

    while candidates:
        current = len(assignment)
        candidate = next(candidates[-1], None)

        if candidate is None:
            slog.trace(f"meeting {current}: domain exhausted ({len(domains[current])} dates)")
            candidates.pop()
            if candidates:
                # retract the date the level below pushed
                assignment.pop()
                if stats is not None:
                    stats.backtracks += 1
            continue

        assignment.append(candidate)
        if stats is not None:
            stats.nodes_visited += 1
            stats.max_depth = max(stats.max_depth, len(assignment))

        if not is_consistent(current, assignment, constraints):
            assignment.pop()
            if stats is not None:
                stats.backtracks += 1
            continue

        if len(assignment) == n_meetings:
            return assignment
        candidates.append(iter(domains[len(assignment)].sorted()))

    return None
