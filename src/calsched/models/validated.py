"""
Pydantic Validated Models
=========================
Request validation at the CLI/API boundary. The solver itself works on the
plain dataclasses; these models check raw input and convert to them.

Usage:
    from calsched.models.validated import SolveRequest

    request = SolveRequest(
        n_meetings=2,
        range_start="2026-03-02",
        range_end="2026-03-06",
        constraints=["0 < 1", "m1 == m0 + 2"],
    )
    result = solve_with(*request.to_query(), config=request.config.to_dataclass())
"""
from datetime import date
from typing import List, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constraints import (
    Backend,
    BinaryDateConstraint,
    DateConstraint,
    SolverConfig,
    UnaryDateConstraint,
    parse_constraint,
)


class ValidatedSolverConfig(BaseModel):
    """Pydantic mirror of ``SolverConfig``."""
    model_config = ConfigDict(validate_assignment=True)

    backend: Backend = Field(default=Backend.BACKTRACKING)
    check_reverse: bool = Field(default=True)
    time_limit_seconds: int = Field(default=30, ge=1, le=3600, description="CP-SAT time budget")
    num_workers: int = Field(default=4, ge=1, le=64)

    def to_dataclass(self) -> SolverConfig:
        return SolverConfig(
            backend=self.backend,
            check_reverse=self.check_reverse,
            time_limit_seconds=self.time_limit_seconds,
            num_workers=self.num_workers,
        )

    @classmethod
    def from_dataclass(cls, config: SolverConfig) -> "ValidatedSolverConfig":
        return cls(**config.to_dict())


class SolveRequest(BaseModel):
    """One solve query: meeting count, inclusive window and constraint expressions."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    n_meetings: int = Field(ge=0, le=10_000)
    range_start: date
    range_end: date
    constraints: List[Union[UnaryDateConstraint, BinaryDateConstraint]] = Field(default_factory=list)
    config: ValidatedSolverConfig = Field(default_factory=ValidatedSolverConfig)

    @field_validator("constraints", mode="before")
    @classmethod
    def parse_expressions(cls, v):
        """Accept constraint objects or text expressions such as ``"0 < 1"``."""
        if v is None:
            return []
        return [parse_constraint(item) if isinstance(item, str) else item for item in v]

    @model_validator(mode="after")
    def validate_query(self):
        if self.range_start > self.range_end:
            raise ValueError("range_start must not be after range_end")
        for c in self.constraints:
            for idx in c.variables:
                if not 0 <= idx < self.n_meetings:
                    raise ValueError(f"constraint {c} references meeting {idx} outside [0, {self.n_meetings})")
        return self

    def to_query(self) -> Tuple[int, date, date, List[DateConstraint]]:
        """Positional arguments for ``solve`` / ``solve_with``."""
        return self.n_meetings, self.range_start, self.range_end, list(self.constraints)
