"""Exception types raised by the solver."""


class CalschedError(Exception):
    """Base class for all calsched errors."""

    pass


class ContractViolation(CalschedError, ValueError):
    """Raised when a solve query breaks its preconditions (bad counts, ranges or indices)."""

    pass


class InvariantViolation(CalschedError, RuntimeError):
    """Raised when a constraint object is internally inconsistent (bad arity, bad reverse)."""

    pass
