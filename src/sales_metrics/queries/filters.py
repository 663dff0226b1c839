# filters.py
"""
Filter/select operations over SalesRecord frames.

A predicate is any callable `df -> boolean Series` aligned on df.index. The
builders below cover thresholds, equality, calendar or ISO year and text-prefix
matching on numeric fields. Results are always sorted explicitly; the record
key (store, dept, date) is appended as a tie-break so the order is stable.
"""

import logging
import operator
from typing import Callable, List, Optional, Sequence

import pandas as pd

from sales_metrics.errors import InvalidParameterError
from sales_metrics.utils.constants import DATE_COL, KEY_COLS
from sales_metrics.utils.math_utils import decimal_text
from sales_metrics.utils.schema import as_list, check_known, check_positive_int, require_columns

logger = logging.getLogger(__name__)

Predicate = Callable[[pd.DataFrame], pd.Series]

_OPS = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
}


# ---------- Predicate builders ----------
def threshold(column: str, op: str, value) -> Predicate:
    check_known([column])
    if op not in _OPS:
        raise InvalidParameterError(f"Unknown operator '{op}'. Use one of {sorted(_OPS)}.")
    fn = _OPS[op]

    def _pred(df: pd.DataFrame) -> pd.Series:
        require_columns(df, [column], f"threshold {column} {op} {value}")
        return fn(df[column], value).fillna(False).astype(bool)

    return _pred


def equals(column: str, value) -> Predicate:
    return threshold(column, "==", value)


def year_equals(year: int) -> Predicate:
    """Rows whose date falls in the given calendar year (uses `date`, not the stored `year`)."""
    def _pred(df: pd.DataFrame) -> pd.Series:
        require_columns(df, [DATE_COL], "year filter")
        return (pd.to_datetime(df[DATE_COL]).dt.year == int(year)).fillna(False).astype(bool)

    return _pred


def iso_year_equals(year: int) -> Predicate:
    """Rows whose ISO week belongs to the given ISO year; 2022-01-01 is in 2021 (week 52)."""
    def _pred(df: pd.DataFrame) -> pd.Series:
        require_columns(df, [DATE_COL], "ISO year filter")
        iso_year = pd.to_datetime(df[DATE_COL]).dt.isocalendar()["year"]
        return (iso_year == int(year)).fillna(False).astype(bool)

    return _pred


def prefix_match(column: str, prefix: str, decimals: Optional[int] = None, extra_columns: Sequence[str] = ()) -> Predicate:
    """
    LIKE 'prefix%' against a numeric column, after converting each value with
    decimal_text(value, decimals). Nulls never match.
    """
    check_known([column], extra=extra_columns)
    if decimals is not None and int(decimals) < 0:
        raise InvalidParameterError("decimals must be >= 0 or None.")

    def _pred(df: pd.DataFrame) -> pd.Series:
        require_columns(df, [column], f"prefix match on {column}")
        txt = df[column].map(lambda v: decimal_text(v, decimals))
        return txt.map(lambda t: t is not None and t.startswith(prefix)).astype(bool)

    return _pred


# ---------- Operations ----------
def filter_records(
    df: pd.DataFrame,
    predicate: Optional[Predicate] = None,
    order_by: Sequence[str] | str | None = None,
    ascending: bool | List[bool] = True,
    limit: Optional[int] = None,
) -> pd.DataFrame:
    """
    Return rows where `predicate` holds, sorted by `order_by` then by the record key.
    `limit` caps the row count after sorting. Re-applying the same call to the result
    returns the same rows in the same order.
    """
    if limit is not None:
        limit = check_positive_int(limit, "limit")

    order = as_list(order_by)
    require_columns(df, order, "filter_records")

    out = df[predicate(df)] if predicate is not None else df
    asc = [ascending] * len(order) if isinstance(ascending, bool) else list(ascending)
    if len(asc) != len(order):
        raise InvalidParameterError("ascending must be a bool or match order_by in length.")

    tiebreak = [c for c in KEY_COLS if c in out.columns and c not in order]
    keys = order + tiebreak
    if keys:
        out = out.sort_values(keys, ascending=asc + [True] * len(tiebreak), kind="mergesort")
    if limit is not None:
        out = out.head(limit)

    logger.debug("filter_records kept %d of %d rows", len(out), len(df))
    return out.reset_index(drop=True)


def join_on_keys(
    left: pd.DataFrame,
    right: pd.DataFrame,
    keys: Sequence[str],
    suffixes: tuple[str, str] = ("_left", "_right"),
) -> pd.DataFrame:
    """Inner join-equivalent on a multi-field key; rows ordered by the key."""
    keys = as_list(keys)
    if not keys:
        raise InvalidParameterError("join_on_keys needs at least one key column.")
    check_known(keys)
    require_columns(left, keys, "join_on_keys (left)")
    require_columns(right, keys, "join_on_keys (right)")

    out = left.merge(right, on=keys, how="inner", suffixes=suffixes)
    return out.sort_values(keys, kind="mergesort").reset_index(drop=True)
