"""Date constraint definitions and solver configuration."""
import re
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Dict, Tuple, Union

from .comparison import Comparison


@dataclass(frozen=True)
class UnaryDateConstraint:
    """Meeting ``var`` compared against a fixed reference date."""
    var: int
    op: Comparison
    reference: date

    def __post_init__(self):
        if isinstance(self.op, str) and not isinstance(self.op, Comparison):
            object.__setattr__(self, "op", Comparison.from_string(self.op))

    @property
    def arity(self) -> int:
        return 1

    @property
    def variables(self) -> Tuple[int, ...]:
        return (self.var,)

    def is_satisfied_by(self, date_a: date, date_b: date) -> bool:
        """``date_b`` is the reference date when called by the solver."""
        return self.op.evaluate(date_a, date_b)

    def __str__(self) -> str:
        return f"m{self.var} {self.op.value} {self.reference.isoformat()}"


@dataclass(frozen=True)
class BinaryDateConstraint:
    """
    Meeting ``left`` compared against meeting ``right``.

    Satisfied when ``left <op> right + offset_days``, so a non-zero offset
    expresses day gaps (``m1 == m0 + 7`` is "exactly one week after").
    """
    left: int
    op: Comparison
    right: int
    offset_days: int = 0

    def __post_init__(self):
        if isinstance(self.op, str) and not isinstance(self.op, Comparison):
            object.__setattr__(self, "op", Comparison.from_string(self.op))

    @property
    def arity(self) -> int:
        return 2

    @property
    def variables(self) -> Tuple[int, ...]:
        return (self.left, self.right)

    def is_satisfied_by(self, date_a: date, date_b: date) -> bool:
        if self.offset_days:
            date_b = date_b + timedelta(days=self.offset_days)
        return self.op.evaluate(date_a, date_b)

    def reverse(self) -> "BinaryDateConstraint":
        """Equivalent constraint with operands swapped: ``right <op'> left - offset_days``."""
        return BinaryDateConstraint(
            left=self.right,
            op=self.op.reverse,
            right=self.left,
            offset_days=-self.offset_days,
        )

    def __str__(self) -> str:
        text = f"m{self.left} {self.op.value} m{self.right}"
        if self.offset_days > 0:
            text += f" + {self.offset_days}"
        elif self.offset_days < 0:
            text += f" - {-self.offset_days}"
        return text


DateConstraint = Union[UnaryDateConstraint, BinaryDateConstraint]


_CONSTRAINT_RE = re.compile(
    r"^\s*m?(?P<left>\d+)\s*(?P<op>==|!=|<=|>=|<|>|=)\s*(?P<rhs>.+?)\s*$",
    re.IGNORECASE,
)
_MEETING_RHS_RE = re.compile(
    r"^m?(?P<right>\d+)(?:\s*(?P<sign>[+-])\s*(?P<days>\d+))?$",
    re.IGNORECASE,
)


def parse_constraint(text: str) -> DateConstraint:
    """
    Parse a constraint expression.

    Accepted forms::

        "0 == 2026-03-02"   unary, meeting 0 on a fixed day
        "0 < 1"             binary, meeting 0 before meeting 1
        "m1 == m0 + 7"      binary with a day gap
    """
    m = _CONSTRAINT_RE.match(str(text))
    if not m:
        raise ValueError(f"Cannot parse constraint: {text!r}")

    left = int(m.group("left"))
    op = Comparison.from_string(m.group("op"))
    rhs = m.group("rhs")

    rhs_meeting = _MEETING_RHS_RE.match(rhs)
    if rhs_meeting:
        offset = int(rhs_meeting.group("days") or 0)
        if rhs_meeting.group("sign") == "-":
            offset = -offset
        return BinaryDateConstraint(left, op, int(rhs_meeting.group("right")), offset)

    try:
        reference = date.fromisoformat(rhs)
    except ValueError:
        raise ValueError(f"Right-hand side is neither a meeting nor a date: {rhs!r}") from None
    return UnaryDateConstraint(left, op, reference)


class Backend(str, Enum):
    """Solving strategies available behind ``solve_with``."""
    BACKTRACKING = "backtracking"
    CPSAT = "cpsat"


@dataclass
class SolverConfig:
    """Configuration shared by every solver backend."""

    backend: Backend = Backend.BACKTRACKING

    # Verify c(a, b) == c.reverse()(b, a) over the date window before propagating
    check_reverse: bool = True

    # CP-SAT only
    time_limit_seconds: int = 30
    num_workers: int = 4

    def to_dict(self) -> Dict:
        """Serialize to dictionary."""
        return {
            "backend": self.backend.value,
            "check_reverse": self.check_reverse,
            "time_limit_seconds": self.time_limit_seconds,
            "num_workers": self.num_workers,
        }

    @classmethod
    def from_dict(cls, d: Dict) -> "SolverConfig":
        """Create from dictionary, ignoring unknown keys."""
        cfg = cls()
        for key, value in d.items():
            if hasattr(cfg, key):
                if key == "backend":
                    value = Backend(value) if value else Backend.BACKTRACKING
                setattr(cfg, key, value)
        return cfg
