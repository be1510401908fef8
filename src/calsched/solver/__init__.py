# calsched/solver - Consistency filtering, backtracking search and backends
from .base import BaseSolver, SolveResult, SolverStatus
from .consistency import Arc, arc_consistency, make_arcs, node_consistency, revise
from .engine import BacktrackingSolver, solve, solve_with, validate_query
from .search import backtrack, is_consistent
from .stats import SearchStats
from .validation import (
    ValidationResult,
    Violation,
    brute_force_solve,
    enumerate_solutions,
    validate_schedule,
)

__all__ = [
    "solve",
    "solve_with",
    "validate_query",
    "BacktrackingSolver",
    "BaseSolver",
    "SolveResult",
    "SolverStatus",
    "SearchStats",
    "Arc",
    "make_arcs",
    "revise",
    "node_consistency",
    "arc_consistency",
    "backtrack",
    "is_consistent",
    "validate_schedule",
    "enumerate_solutions",
    "brute_force_solve",
    "ValidationResult",
    "Violation",
]
