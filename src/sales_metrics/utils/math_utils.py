from decimal import ROUND_HALF_UP, Decimal

import numpy as np
import pandas as pd


def decimal_text(value, decimals: int | None = None) -> str | None:
    """
    Canonical text form of a number, used for prefix matching.
    decimals=None -> shortest round-trip digits, trailing zeros and point dropped ("8.10" -> "8.1").
    decimals=k    -> half-up rounded to exactly k places, zeros kept ("8.1", k=2 -> "8.10").
    Never uses exponent notation. Returns None for nulls.
    """
    if value is None or pd.isna(value):
        return None
    # repr() of a float is its shortest round-trip decimal
    d = Decimal(repr(float(value)))
    if decimals is None:
        text = format(d.normalize(), "f")
    else:
        text = format(d.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP), "f")
    if text.startswith("-") and Decimal(text) == 0:
        text = text[1:]
    return text


def linear_percentile(values, point: float) -> float:
    """Continuous percentile (linear interpolation between closest ranks) over non-null values."""
    arr = pd.to_numeric(pd.Series(values), errors="coerce").dropna().to_numpy(dtype=float)
    if arr.size == 0:
        return np.nan
    return float(np.percentile(arr, point * 100.0, method="linear"))


def safe_pct_change(current: pd.Series, previous: pd.Series, precision: int = 2) -> pd.Series:
    """(current - previous) * 100 / previous; NA where previous is null/zero or current is null."""
    cur = pd.to_numeric(current, errors="coerce").astype("Float64")
    prev = pd.to_numeric(previous, errors="coerce").astype("Float64")
    valid = (cur.notna() & prev.notna() & (prev != 0)).fillna(False).astype(bool)
    out = pd.Series(pd.NA, index=cur.index, dtype="Float64")
    out[valid] = ((cur[valid] - prev[valid]) * 100 / prev[valid]).round(precision)
    return out
