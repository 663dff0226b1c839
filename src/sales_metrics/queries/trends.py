# trends.py
"""
Per-partition window computations in chronological order.
Each partition is sorted by `order_by` (record key as tie-break) and folded
with group-wise cumsum / shift(1); the input frame is never modified.
"""

import logging
from typing import Optional, Sequence

import pandas as pd

from sales_metrics.errors import InvalidParameterError
from sales_metrics.utils.constants import DATE_COL, KEY_COLS, SALES_COL
from sales_metrics.utils.math_utils import safe_pct_change
from sales_metrics.utils.schema import as_list, check_known, require_columns

logger = logging.getLogger(__name__)


def _ordered(df: pd.DataFrame, parts: list, order: list) -> pd.DataFrame:
    tiebreak = [c for c in KEY_COLS if c in df.columns and c not in parts + order]
    return df.sort_values(parts + order + tiebreak, kind="mergesort").reset_index(drop=True)


def _check(df, parts, order, value, extra_columns, operation):
    if not order:
        raise InvalidParameterError(f"{operation} needs an order_by column.")
    check_known(parts + order, extra=extra_columns)
    check_known([value], extra=extra_columns)
    require_columns(df, parts + order + [value], operation)


def add_month(df: pd.DataFrame, date_col: str = DATE_COL) -> pd.DataFrame:
    """Add a `month` column (first day of the month) for store+month partitions."""
    require_columns(df, [date_col], "add_month")
    return df.assign(month=pd.to_datetime(df[date_col]).dt.to_period("M").dt.to_timestamp())


def running_total(
    df: pd.DataFrame,
    partition_by: Sequence[str] | str,
    order_by: Sequence[str] | str = DATE_COL,
    value: str = SALES_COL,
    out: Optional[str] = None,
    extra_columns: Sequence[str] = (),
) -> pd.DataFrame:
    """
    Cumulative sum of `value` from the first row of each partition through the current row.
    Nulls are skipped; rows before the partition's first non-null value get a null total.
    """
    parts, order = as_list(partition_by), as_list(order_by)
    _check(df, parts, order, value, extra_columns, "running_total")
    out = out or "running_total"

    res = _ordered(df, parts, order)
    vals = pd.to_numeric(res[value], errors="coerce").astype("float64")
    if parts:
        keys = [res[c] for c in parts]
        totals = vals.fillna(0.0).groupby(keys, sort=False, dropna=False).cumsum()
        seen = vals.notna().astype(int).groupby(keys, sort=False, dropna=False).cumsum()
    else:
        totals = vals.fillna(0.0).cumsum()
        seen = vals.notna().astype(int).cumsum()

    res[out] = totals.astype("Float64").mask(seen == 0)
    logger.debug("running_total over %d row(s) partitioned by %s", len(res), parts)
    return res


def period_change(
    df: pd.DataFrame,
    partition_by: Sequence[str] | str,
    order_by: Sequence[str] | str = DATE_COL,
    value: str = SALES_COL,
    precision: int = 2,
    extra_columns: Sequence[str] = (),
) -> pd.DataFrame:
    """
    Lag-1 comparison inside each partition. Adds:
      previous_<value>  value of the preceding row (NA on the first row)
      change            current - previous
      pct_change        (current - previous) * 100 / previous, rounded to `precision`
    change/pct_change are NA when the baseline is absent; pct_change also when it is zero.
    """
    if precision is None or int(precision) < 0:
        raise InvalidParameterError(f"precision must be >= 0, got {precision}.")
    parts, order = as_list(partition_by), as_list(order_by)
    _check(df, parts, order, value, extra_columns, "period_change")

    res = _ordered(df, parts, order)
    cur = pd.to_numeric(res[value], errors="coerce").astype("Float64")
    if parts:
        prev = cur.groupby([res[c] for c in parts], sort=False, dropna=False).shift(1)
    else:
        prev = cur.shift(1)

    prev_col = f"previous_{value}"
    res[prev_col] = prev
    res["change"] = (cur - prev).round(int(precision))
    res["pct_change"] = safe_pct_change(cur, prev, int(precision))
    return res
