"""
calsched: Logging Infrastructure
================================
Console and rotating-file logging for the solver phases.

Levels:
    TRACE (5): Arc revisions, individual assignments
    DEBUG (10): Domain sizes, per-constraint checks
    INFO (20): Phase boundaries, solve outcome
    WARNING (30): Empty domains, unsatisfied constraints
    ERROR (40): Contract and invariant violations
"""
import functools
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Optional

ROOT_LOGGER = "calsched"

# Custom TRACE level (below DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class ColoredFormatter(logging.Formatter):
    """ANSI-colored formatter, only colors when stderr is a terminal."""

    COLORS = {
        TRACE: "\033[90m",
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record):
        color = self.COLORS.get(record.levelno, "")
        message = super().format(record)
        if color and sys.stderr.isatty():
            return f"{color}{message}{self.RESET}"
        return message


def _parse_level(level: str) -> int:
    if str(level).upper() == "TRACE":
        return TRACE
    return getattr(logging, str(level).upper(), logging.INFO)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    console_level: Optional[str] = None,
    max_bytes: int = 2 * 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    """
    Configure the ``calsched`` logger.

    Args:
        level: Minimum level written to the log file
        log_file: Path to a log file (None = console only)
        console_level: Console level (defaults to ``level``)
        max_bytes: File size that triggers rotation
        backup_count: Rotated files to keep

    Returns:
        The configured ``calsched`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(TRACE)  # handlers do the filtering
    logger.handlers.clear()

    file_level = _parse_level(level)
    cons_level = _parse_level(console_level or level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(cons_level)
    console_handler.setFormatter(ColoredFormatter(
        "[%(asctime)s] %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    ))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)

    logger.debug(
        "Logging initialized: console=%s, file=%s",
        logging.getLevelName(cons_level),
        logging.getLevelName(file_level) if log_file else "disabled",
    )
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, e.g. ``get_logger("calsched.solver.search")``."""
    return logging.getLogger(name)


def log_function_call(func: Callable) -> Callable:
    """Decorator logging entry, exit and exceptions of ``func`` at TRACE level."""
    module = func.__module__
    if not module.startswith(ROOT_LOGGER):
        module = f"{ROOT_LOGGER}.{module}"
    logger = logging.getLogger(module)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        name = func.__name__
        shown = [repr(a)[:50] for a in args[:3]]
        shown += [f"{k}={repr(v)[:30]}" for k, v in list(kwargs.items())[:3]]
        logger.log(TRACE, "→ %s(%s)", name, ", ".join(shown))
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error("✖ %s raised: %s: %s", name, type(e).__name__, e)
            raise
        logger.log(TRACE, "← %s returned: %s", name, repr(result)[:100])
        return result

    return wrapper


def log_constraint(
    logger: logging.Logger,
    name: str,
    satisfied: bool,
    details: str = "",
    level: int = logging.DEBUG,
):
    """Log one constraint check; failures go out as warnings."""
    msg = f"[{'✓' if satisfied else '✗'}] {name}"
    if details:
        msg += f" ({details})"
    if satisfied:
        logger.log(level, msg)
    else:
        logger.warning(msg)


class SolverLogger:
    """Phase/step logger used by the solver pipeline."""

    def __init__(self, name: str = "calsched.solver"):
        self.logger = logging.getLogger(name)

    def phase(self, name: str):
        self.logger.info(f"{'=' * 12} {name} {'=' * 12}")

    def step(self, description: str):
        self.logger.info(f"▸ {description}")

    def detail(self, key: str, value: Any):
        self.logger.debug(f"  {key}: {value}")

    def trace(self, message: str):
        self.logger.log(TRACE, message)

    def constraint(self, name: str, satisfied: bool, details: str = ""):
        log_constraint(self.logger, name, satisfied, details)


def init_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Entry-point helper used by the CLI."""
    return setup_logging(level=level, log_file=log_file)
