# aggregates.py
"""
Group-by aggregation with SQL semantics.
- Nulls are skipped by every aggregate except `size` and `null_count`.
- `sum` of a group whose values are all null is null, not 0.
- `having` runs on the grouped frame, after aggregation.
"""

import logging
from typing import Callable, Dict, Optional, Sequence, Tuple

import pandas as pd

from sales_metrics.errors import InvalidParameterError
from sales_metrics.utils.schema import as_list, check_known, require_columns

logger = logging.getLogger(__name__)

_AGGS: Dict[str, Callable[[pd.Series], object]] = {
    "sum": lambda s: s.sum(min_count=1),
    "mean": lambda s: s.mean(),
    "count": lambda s: s.count(),
    "size": lambda s: len(s),
    "min": lambda s: s.min(),
    "max": lambda s: s.max(),
    "null_count": lambda s: int(s.isna().sum()),
}

Metric = Tuple[str, str]  # (source column, aggregation name)


def aggregate(
    df: pd.DataFrame,
    by: Sequence[str] | str,
    metrics: Dict[str, Metric],
    having: Optional[Callable[[pd.DataFrame], pd.Series]] = None,
    order_by: Sequence[str] | str | None = None,
    ascending: bool = True,
) -> pd.DataFrame:
    """
    Group `df` by `by` and compute `metrics` = {out_col: (column, agg)}.
    Output columns: the group keys followed by the metric columns in the given order.
    Without `order_by` the rows follow the group keys ascending.
    """
    keys = as_list(by)
    if not keys:
        raise InvalidParameterError("aggregate needs at least one group key.")
    if not metrics:
        raise InvalidParameterError("aggregate needs at least one metric.")
    check_known(keys)

    sources = []
    for out_col, (col, agg) in metrics.items():
        if agg not in _AGGS:
            raise InvalidParameterError(f"Unknown aggregation '{agg}' for '{out_col}'. Use one of {sorted(_AGGS)}.")
        check_known([col])
        sources.append(col)
    require_columns(df, keys + sources, "aggregate")

    grouped = df.groupby(keys, sort=True, dropna=False)
    out = pd.DataFrame({
        out_col: grouped[col].agg(_AGGS[agg])
        for out_col, (col, agg) in metrics.items()
    }).reset_index()

    if having is not None:
        out = out[having(out).fillna(False).astype(bool)]

    order = as_list(order_by)
    if order:
        require_columns(out, order, "aggregate order_by")
        out = out.sort_values(order + keys, ascending=[ascending] * len(order) + [True] * len(keys), kind="mergesort")

    logger.debug("aggregate by %s -> %d group(s)", keys, len(out))
    return out.reset_index(drop=True)


def count_nulls(df: pd.DataFrame, columns: Sequence[str]) -> pd.DataFrame:
    """One row per column: how many rows hold a null in it."""
    cols = as_list(columns)
    check_known(cols)
    require_columns(df, cols, "count_nulls")
    return pd.DataFrame({
        "column": cols,
        "null_count": [int(df[c].isna().sum()) for c in cols],
        "row_count": [len(df)] * len(cols),
    })
