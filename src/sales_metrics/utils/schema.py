# schema.py
"""
Column checks shared by the query modules.
- Unknown column names are caller mistakes -> InvalidParameterError.
- Known columns absent from the frame -> SchemaMismatchError.
"""

import numbers
from typing import Iterable, List

import pandas as pd

from sales_metrics.errors import InvalidParameterError, SchemaMismatchError
from sales_metrics.utils.constants import KNOWN_COLUMNS


def as_list(cols) -> List[str]:
    if cols is None:
        return []
    if isinstance(cols, str):
        return [cols]
    return list(cols)


def check_known(cols: Iterable[str], extra: Iterable[str] = ()) -> None:
    """Reject column names outside the SalesRecord schema (plus any `extra` derived names)."""
    allowed = set(KNOWN_COLUMNS) | set(extra)
    unknown = [c for c in cols if c not in allowed]
    if unknown:
        raise InvalidParameterError(f"Unknown column(s): {unknown}")


def require_columns(df: pd.DataFrame, cols: Iterable[str], operation: str | None = None) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise SchemaMismatchError(missing, operation)


def check_positive_int(value, name: str) -> int:
    """Counts (top-N, row limits) must be real positive integers; 2.5 or True is a caller mistake."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
        raise InvalidParameterError(f"{name} must be a positive integer, got {value!r}.")
    return int(value)
