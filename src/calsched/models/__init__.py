# calsched/models - Date constraints, domains and configuration
from .comparison import Comparison
from .constraints import (
    Backend,
    BinaryDateConstraint,
    DateConstraint,
    SolverConfig,
    UnaryDateConstraint,
    parse_constraint,
)
from .domain import MeetingDomain, build_domains, date_range

__all__ = [
    "Comparison",
    "UnaryDateConstraint", "BinaryDateConstraint", "DateConstraint", "parse_constraint",
    "MeetingDomain", "build_domains", "date_range",
    "SolverConfig", "Backend",
]
