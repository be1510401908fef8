"""Comparison operators between calendar dates."""
from datetime import date
from enum import Enum


class Comparison(str, Enum):
    """Closed set of operators a date constraint can apply."""
    EQ = "=="
    NE = "!="
    LT = "<"    # before
    LE = "<="   # on or before
    GT = ">"    # after
    GE = ">="   # on or after

    def evaluate(self, left: date, right: date) -> bool:
        """Apply the operator as ``left <op> right``."""
        if self is Comparison.EQ:
            return left == right
        if self is Comparison.NE:
            return left != right
        if self is Comparison.LT:
            return left < right
        if self is Comparison.LE:
            return left <= right
        if self is Comparison.GT:
            return left > right
        if self is Comparison.GE:
            return left >= right
        raise ValueError(f"Unhandled comparison: {self!r}")

    @property
    def reverse(self) -> "Comparison":
        """Operator obtained when the operands are swapped."""
        return {
            Comparison.EQ: Comparison.EQ,
            Comparison.NE: Comparison.NE,
            Comparison.LT: Comparison.GT,
            Comparison.LE: Comparison.GE,
            Comparison.GT: Comparison.LT,
            Comparison.GE: Comparison.LE,
        }[self]

    @classmethod
    def from_string(cls, s: str) -> "Comparison":
        """Parse an operator from its symbol or a word alias."""
        key = str(s).strip().lower().replace("_", "-").replace(" ", "-")
        if key in OPERATOR_ALIASES:
            return OPERATOR_ALIASES[key]
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"Unknown comparison operator: {s!r}")


OPERATOR_ALIASES = {
    "=": Comparison.EQ, "eq": Comparison.EQ, "equals": Comparison.EQ, "same-day": Comparison.EQ,
    "<>": Comparison.NE, "ne": Comparison.NE, "not-equals": Comparison.NE, "different-day": Comparison.NE,
    "lt": Comparison.LT, "before": Comparison.LT,
    "le": Comparison.LE, "on-or-before": Comparison.LE,
    "gt": Comparison.GT, "after": Comparison.GT,
    "ge": Comparison.GE, "on-or-after": Comparison.GE,
}
