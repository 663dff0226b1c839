# ranking.py
"""
Ranking operations.
- above_average: keys whose group mean beats the collection-wide mean.
- top_n_per_partition: row-number ranking inside each partition, metric descending,
  ties broken by the tie-breaker columns ascending. Tied metrics get different ranks,
  so a partition never yields more than n rows.
- percentile_bands: continuous percentiles (linear interpolation) and a three-way band.
"""

import logging
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from sales_metrics.errors import InvalidParameterError
from sales_metrics.utils.constants import BAND_COL, BAND_MIDDLE, SALES_COL
from sales_metrics.utils.math_utils import linear_percentile
from sales_metrics.utils.schema import as_list, check_known, check_positive_int, require_columns

logger = logging.getLogger(__name__)


def above_average(df: pd.DataFrame, key: Sequence[str] | str, value: str = SALES_COL) -> pd.DataFrame:
    """
    Baseline = mean of `value` over every row of `df`. Returns the distinct `key`
    groups whose mean of `value` is strictly above it, ordered by group mean descending.
    Columns: key..., avg_<value>, baseline.
    """
    keys = as_list(key)
    if not keys:
        raise InvalidParameterError("above_average needs a key column.")
    check_known(keys + [value])
    require_columns(df, keys + [value], "above_average")

    baseline = df[value].mean()
    avg_col = f"avg_{value}"
    groups = df.groupby(keys, sort=True)[value].mean().rename(avg_col).reset_index()
    if pd.isna(baseline):
        out = groups.iloc[0:0]
    else:
        out = groups[groups[avg_col] > baseline]
    out = out.assign(baseline=baseline)
    out = out.sort_values([avg_col] + keys, ascending=[False] + [True] * len(keys), kind="mergesort")
    return out.reset_index(drop=True)


def top_n_per_partition(
    df: pd.DataFrame,
    partition_by: Sequence[str] | str,
    order_by: str,
    n: int,
    tie_breaker: Sequence[str] | str | None = None,
    extra_columns: Sequence[str] = (),
) -> pd.DataFrame:
    """
    Keep the first `n` rows of each partition when ordered by `order_by` descending.
    Rows with a null metric sort last. Adds an Int64 `rank` column (1 = best).
    `extra_columns` names derived metric columns (e.g. total_sales) allowed as order_by.
    """
    n = check_positive_int(n, "top-N")
    parts = as_list(partition_by)
    ties = [c for c in as_list(tie_breaker) if c not in parts]
    check_known(parts + ties, extra=extra_columns)
    check_known([order_by], extra=extra_columns)
    require_columns(df, parts + [order_by] + ties, "top_n_per_partition")

    ordered = df.sort_values(
        parts + [order_by] + ties,
        ascending=[True] * len(parts) + [False] + [True] * len(ties),
        na_position="last",
        kind="mergesort",
    )
    if parts:
        rank = ordered.groupby(parts, sort=False, dropna=False).cumcount() + 1
    else:
        rank = pd.Series(np.arange(1, len(ordered) + 1), index=ordered.index)
    ordered = ordered.assign(rank=rank.astype("Int64"))
    out = ordered[ordered["rank"] <= n]

    logger.debug("top_n_per_partition n=%d kept %d of %d rows", n, len(out), len(df))
    return out.reset_index(drop=True)


def _band_label(kind: str, point: float) -> str:
    pct = (1.0 - point) * 100.0 if kind == "Top" else point * 100.0
    return f"{kind} {round(pct, 6):g}%"


def percentile_bands(
    df: pd.DataFrame,
    value: str = SALES_COL,
    lower: float = 0.1,
    upper: float = 0.9,
    band_col: Optional[str] = None,
) -> pd.DataFrame:
    """
    Classify each row against p_lower / p_upper of `value` over the whole frame:
    value >= p_upper -> "Top x%", else value <= p_lower -> "Bottom y%", else "Middle".
    Top is checked first, so a value equal to both thresholds is Top. Null values get a null band.
    Adds p_lower / p_upper and the band column; row order is unchanged.
    """
    for p in (lower, upper):
        if p is None or not (0.0 <= float(p) <= 1.0):
            raise InvalidParameterError(f"Percentile points must lie in [0, 1], got {p}.")
    if float(lower) >= float(upper):
        raise InvalidParameterError(f"Lower percentile point {lower} must be below upper {upper}.")
    check_known([value])
    require_columns(df, [value], "percentile_bands")

    band_col = band_col or BAND_COL
    p_lo = linear_percentile(df[value], float(lower))
    p_hi = linear_percentile(df[value], float(upper))

    vals = pd.to_numeric(df[value], errors="coerce")
    band = pd.Series(BAND_MIDDLE, index=df.index, dtype="string")
    band[vals <= p_lo] = _band_label("Bottom", float(lower))
    band[vals >= p_hi] = _band_label("Top", float(upper))
    band[vals.isna()] = pd.NA

    return df.assign(p_lower=p_lo, p_upper=p_hi, **{band_col: band}).reset_index(drop=True)
