"""CSV loading and saving for constraint sets."""
from datetime import date
from pathlib import Path
from typing import Iterable, List, Union

import pandas as pd

from calsched.models.comparison import Comparison
from calsched.models.constraints import BinaryDateConstraint, DateConstraint, UnaryDateConstraint
from calsched.utils.logging_setup import get_logger, log_function_call

logger = get_logger("calsched.io.csv_loader")

REQUIRED_COLUMNS = ("left", "op", "right")
COLUMNS = ["left", "op", "right", "offset_days"]


def _whole_number(text: str) -> int:
    """Parse ``"3"``, ``"-2"`` or ``"3.0"``; anything else raises ValueError."""
    number = float(text)
    if not number.is_integer():
        raise ValueError(text)
    return int(number)


def _meeting_index(value, row: int, column: str) -> int:
    text = str(value).strip()
    if text.lower().startswith("m"):
        text = text[1:]
    try:
        return _whole_number(text)
    except ValueError:
        raise ValueError(f"Row {row}: column '{column}' must be a meeting index, got {value!r}") from None


def _offset_days(value, row: int) -> int:
    """Day gap of a row; blank means no gap."""
    text = str(value).strip()
    if not text:
        return 0
    try:
        return _whole_number(text)
    except ValueError:
        raise ValueError(f"Row {row}: column 'offset_days' must be a whole number of days, got {value!r}") from None


@log_function_call
def load_constraints(source: Union[str, Path, pd.DataFrame]) -> List[DateConstraint]:
    """
    Load constraints from a CSV file or DataFrame.

    Columns: ``left``, ``op``, ``right`` and optional ``offset_days``.
    ``right`` is a meeting index (binary constraint) or an ISO date
    (unary constraint). Rows with an empty ``left`` are skipped.

    Args:
        source: Path to a CSV file or a pandas DataFrame

    Returns:
        List of constraints in file order
    """
    if isinstance(source, pd.DataFrame):
        df = source.copy()
    else:
        df = pd.read_csv(source, dtype=str, skipinitialspace=True)

    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Constraint CSV is missing column(s): {', '.join(missing)}")

    df = df.fillna("")

    constraints: List[DateConstraint] = []
    for idx, row in df.iterrows():
        left_raw = str(row["left"]).strip()
        if not left_raw:
            continue

        left = _meeting_index(left_raw, idx, "left")
        op = Comparison.from_string(str(row["op"]))
        right_raw = str(row["right"]).strip()

        try:
            reference = date.fromisoformat(right_raw)
        except ValueError:
            reference = None

        offset = _offset_days(row.get("offset_days", ""), idx)
        if reference is not None:
            if offset:
                raise ValueError(f"Row {idx}: offset_days only applies between two meetings, got {offset}")
            constraints.append(UnaryDateConstraint(left, op, reference))
        else:
            right = _meeting_index(right_raw, idx, "right")
            constraints.append(BinaryDateConstraint(left, op, right, offset))

    logger.debug(f"Loaded {len(constraints)} constraints")
    return constraints


def constraints_to_dataframe(constraints: Iterable[DateConstraint]) -> pd.DataFrame:
    """Tabular form of a constraint set (one row per constraint)."""
    rows = []
    for c in constraints:
        if c.arity == 1:
            rows.append({"left": c.var, "op": c.op.value, "right": c.reference.isoformat(), "offset_days": 0})
        else:
            rows.append({"left": c.left, "op": c.op.value, "right": c.right, "offset_days": c.offset_days})
    return pd.DataFrame(rows, columns=COLUMNS)


def save_constraints(constraints: Iterable[DateConstraint], path: Union[str, Path]) -> None:
    """Write constraints in the format ``load_constraints`` reads."""
    constraints_to_dataframe(constraints).to_csv(path, index=False)
