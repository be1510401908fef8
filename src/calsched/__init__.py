"""
calsched: calendar constraint satisfaction.

Schedules meetings on calendar days under unary (meeting vs. date) and
binary (meeting vs. meeting) constraints using node consistency, AC-3 arc
consistency and backtracking search.

Modules:
- models: comparison operators, date constraints, domains, configuration
- solver: consistency filtering, backtracking search, CP-SAT backend, validation
- io: constraint CSV files
- utils: logging
- cli: command-line interface
"""
from calsched.errors import CalschedError, ContractViolation, InvariantViolation
from calsched.models import (
    BinaryDateConstraint,
    Comparison,
    SolverConfig,
    UnaryDateConstraint,
    parse_constraint,
)
from calsched.solver import SolveResult, SolverStatus, solve, solve_with

__version__ = "0.1.0"

__all__ = [
    "solve",
    "solve_with",
    "SolveResult",
    "SolverStatus",
    "SolverConfig",
    "Comparison",
    "UnaryDateConstraint",
    "BinaryDateConstraint",
    "parse_constraint",
    "CalschedError",
    "ContractViolation",
    "InvariantViolation",
]
