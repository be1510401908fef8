"""
Consistency Filtering
=====================
Shrinks meeting domains before search.

- Node consistency applies unary constraints (meeting vs. fixed date).
- Arc consistency applies binary constraints with an AC-3 worklist until a
  fixed point is reached.

Both only ever remove dates. An empty domain is left in place; the search
phase reports it as "no solution".
"""
from dataclasses import dataclass
from typing import Iterable, List, Set, Tuple

from calsched.errors import InvariantViolation
from calsched.models.constraints import BinaryDateConstraint, DateConstraint, UnaryDateConstraint
from calsched.models.domain import MeetingDomain
from calsched.utils.logging_setup import SolverLogger

slog = SolverLogger("calsched.solver.consistency")


@dataclass(frozen=True)
class Arc:
    """Directed edge: revise ``tail``'s domain using ``head``'s domain as support."""
    tail: int
    head: int
    constraint: BinaryDateConstraint

    def __str__(self) -> str:
        return f"({self.tail} -> {self.head}: {self.constraint})"


def check_arity(constraint: DateConstraint) -> int:
    """Return the constraint's arity, rejecting anything but unary/binary."""
    arity = constraint.arity
    if arity == 1 and isinstance(constraint, UnaryDateConstraint):
        return 1
    if arity == 2 and isinstance(constraint, BinaryDateConstraint):
        return 2
    raise InvariantViolation(f"Constraint {constraint!r} reports unsupported arity {arity}")


def node_consistency(domains: List[MeetingDomain], constraints: Iterable[DateConstraint]) -> int:
    """
    Filter domains in place with every unary constraint.

    Several unary constraints on one meeting intersect, so their order does
    not matter. Binary constraints are skipped.

    Returns:
        Number of dates removed across all domains
    """
    removed = 0
    for c in constraints:
        if check_arity(c) != 1:
            continue
        dropped = domains[c.var].retain(lambda d, c=c: c.is_satisfied_by(d, c.reference))
        removed += dropped
        slog.constraint(str(c), len(domains[c.var]) > 0, f"removed {dropped}, left {len(domains[c.var])}")
    return removed


def make_arcs(constraints: Iterable[DateConstraint]) -> List[Arc]:
    """Two arcs per binary constraint; the reverse direction carries ``reverse()``."""
    arcs = []
    for c in constraints:
        if check_arity(c) != 2:
            continue
        arcs.append(Arc(c.left, c.right, c))
        arcs.append(Arc(c.right, c.left, c.reverse()))
    return arcs


def revise(arc: Arc, domains: List[MeetingDomain]) -> int:
    """
    Remove every tail date with no supporting head date.

    Returns:
        Number of dates removed from the tail domain
    """
    tail = domains[arc.tail]
    head_values = list(domains[arc.head])
    constraint = arc.constraint
    return tail.retain(lambda d: any(constraint.is_satisfied_by(d, e) for e in head_values))


def arc_consistency(domains: List[MeetingDomain], constraints: Iterable[DateConstraint]) -> Tuple[int, int]:
    """
    AC-3 over all binary constraints, mutating ``domains`` in place.

    Whenever a revision shrinks a tail domain, every arc pointing at that
    tail is queued again. The worklist is a set, so an arc is never queued
    twice at once.

    Returns:
        (revisions performed, dates removed)
    """
    arcs = make_arcs(constraints)
    arcs_by_head = {}
    for arc in arcs:
        arcs_by_head.setdefault(arc.head, []).append(arc)

    queue: Set[Arc] = set(arcs)
    revisions = 0
    removed = 0

    while queue:
        arc = queue.pop()
        revisions += 1
        dropped = revise(arc, domains)
        if dropped:
            removed += dropped
            slog.trace(f"revise {arc}: removed {dropped}, tail left {len(domains[arc.tail])}")
            queue.update(arcs_by_head.get(arc.tail, ()))

    return revisions, removed
