# correlation.py
import pandas as pd

from sales_metrics.errors import InvalidParameterError
from sales_metrics.utils.constants import SALES_COL
from sales_metrics.utils.schema import check_known, require_columns


def pearson_correlation(df: pd.DataFrame, x: str, y: str = SALES_COL, precision: int = 4) -> pd.DataFrame:
    """
    Pearson r between two numeric columns over rows where both are non-null.
    NA when fewer than two complete pairs or either column has zero variance.
    Returns one row: x, y, pairs, correlation.
    """
    if precision is None or int(precision) < 0:
        raise InvalidParameterError(f"precision must be >= 0, got {precision}.")
    check_known([x, y])
    require_columns(df, [x, y], "pearson_correlation")

    pair = pd.DataFrame({
        "x": pd.to_numeric(df[x], errors="coerce"),
        "y": pd.to_numeric(df[y], errors="coerce"),
    }).dropna()

    r = pair["x"].corr(pair["y"]) if len(pair) >= 2 else float("nan")
    corr = pd.Series([r], dtype="Float64").round(int(precision))

    return pd.DataFrame({
        "x": [x],
        "y": [y],
        "pairs": pd.Series([len(pair)], dtype="Int64"),
        "correlation": corr,
    })
