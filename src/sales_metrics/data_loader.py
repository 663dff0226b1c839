"""
data_loader.py
Loaders for the WeeklySales relation, from a CSV file or a relational table.
- Renames the public Walmart headers (Store, Weekly_Sales, MarkDown1, ...) to snake_case.
- Ensures required columns exist (from utils.constants).
- Enforces dtypes:
    * date -> datetime64
    * store, dept, week, year -> Int64 (store/dept non-null, whole numbers)
    * is_holiday -> boolean (non-null)
    * weekly_sales, covariates, markdowns -> float64 (allow NA)
- Derives week (ISO) and year from date when absent.
- Drops invalid rows; raises DataLoaderError with a concise summary if any were dropped.
- Rejects duplicate (store, dept, date) keys.
- Returns a deduplicated, typed DataFrame sorted by store, dept, date.
"""

import logging

import pandas as pd
from sqlalchemy import text

from sales_metrics.errors import DataLoaderError
from sales_metrics.utils.constants import (
    COLUMN_ALIASES, DATE_COL, DERIVED_INT_COLS, FALSE_VALUES, FLOAT_COLS,
    HOLIDAY_COL, INT_COLS, KEY_COLS, NA_VALUES, REQUIRED_COLUMNS, TRUE_VALUES,
)
from sales_metrics.utils.io_utils import get_engine, load_settings
from sales_metrics.utils.schema import require_columns

logger = logging.getLogger(__name__)


def _parse_bool(s: pd.Series) -> pd.Series:
    if pd.api.types.is_bool_dtype(s):
        return s.astype("boolean")
    txt = s.astype("string").str.strip().str.lower()
    out = pd.Series(pd.NA, index=s.index, dtype="boolean")
    out[txt.isin(TRUE_VALUES | {"1.0"})] = True
    out[txt.isin(FALSE_VALUES | {"0.0"})] = False
    return out


def _whole_numbers(s: pd.Series) -> tuple[pd.Series, pd.Series]:
    """Coerce to numeric; return (values, bad_mask) where bad = NA or fractional."""
    num = pd.to_numeric(s, errors="coerce")
    bad = num.isna() | (num % 1 != 0)
    return num.where(~bad), bad


def prepare_frame(raw: pd.DataFrame, source: str = "<frame>") -> pd.DataFrame:
    """
    Validate and type a raw SalesRecord frame.
    If any rows are removed during validation, raises DataLoaderError (after constructing the cleaned df).
    """
    df = raw.rename(columns=COLUMN_ALIASES).copy()
    require_columns(df, REQUIRED_COLUMNS, operation=f"load {source}")
    original_len = len(df)

    # ---------- Coercions & validation ----------
    df[DATE_COL] = pd.to_datetime(df[DATE_COL], errors="coerce")
    invalid_mask = df[DATE_COL].isna()

    for c in INT_COLS:
        df[c], bad = _whole_numbers(df[c])
        invalid_mask |= bad

    # week/year may be supplied; blanks are derived from date below, fractions are invalid
    for c in DERIVED_INT_COLS:
        if c in df.columns:
            given = pd.to_numeric(df[c], errors="coerce")
            frac = (given.notna() & (given % 1 != 0)).fillna(False).astype(bool)
            invalid_mask |= frac
            df[c] = given.where(~frac)

    df[HOLIDAY_COL] = _parse_bool(df[HOLIDAY_COL])
    invalid_mask |= df[HOLIDAY_COL].isna().astype(bool)

    # floats: allow NA; just coerce
    for c in FLOAT_COLS:
        if c in df.columns:
            df[c] = pd.to_numeric(df[c], errors="coerce").astype("float64")

    bad_rows = df[invalid_mask]
    if invalid_mask.any():
        df = df[~invalid_mask].copy()

    # ---------- Final tidy types ----------
    for c in INT_COLS:
        df[c] = df[c].astype("Int64")

    iso = df[DATE_COL].dt.isocalendar()
    derived = {"week": iso["week"], "year": df[DATE_COL].dt.year}
    for c in DERIVED_INT_COLS:
        if c in df.columns:
            df[c] = df[c].fillna(derived[c]).astype("Int64")
        else:
            df[c] = derived[c].astype("Int64")

    df = df.drop_duplicates(ignore_index=True)

    dup_keys = df.duplicated(KEY_COLS, keep=False)
    if dup_keys.any():
        sample = df.loc[dup_keys, KEY_COLS].head(5).to_dict("records")
        raise DataLoaderError(
            f"Duplicate (store, dept, date) keys in {source}: "
            f"{int(dup_keys.sum())} row(s), e.g. {sample}."
        )

    df = df.sort_values(KEY_COLS, kind="mergesort").reset_index(drop=True)

    # ---------- Raise if anything was dropped ----------
    n_dupes = original_len - len(bad_rows) - len(df)
    if len(bad_rows) > 0:
        example_idx = list(bad_rows.index[:5])
        raise DataLoaderError(
            f"Validation failed for {len(bad_rows)} row(s) in {source}. "
            f"Dropped rows indices (first 5): {example_idx}. "
            f"Returned DataFrame contains {len(df)} valid row(s).",
            frame=df,
        )

    logger.info("Loaded %d rows from %s (%d exact duplicate(s) removed)", len(df), source, n_dupes)
    return df


def load_data(path: str | None = None, settings_path: str | None = None) -> pd.DataFrame:
    """Read a SalesRecord CSV and return a validated, typed DataFrame."""
    if path is None:
        path = load_settings(settings_path).get("dataset_path")
        if not path:
            raise ValueError("No dataset path given and settings.dataset_path is not set.")

    raw = pd.read_csv(
        path,
        dtype="string",
        keep_default_na=True,
        na_values=NA_VALUES,
    )
    return prepare_frame(raw, source=str(path))


def load_from_database(
    table: str = "weekly_sales",
    engine=None,
    schema: str | None = None,
    query: str | None = None,
    params: dict | None = None,
) -> pd.DataFrame:
    """
    Read SalesRecord rows from a relational table (or an explicit SELECT) and validate them.
    The engine defaults to one built from DATABASE_URL.
    """
    engine = engine or get_engine()
    with engine.connect() as conn:
        if query is not None:
            raw = pd.read_sql(text(query), conn, params=params or {})
            source = "query"
        else:
            raw = pd.read_sql_table(table, conn, schema=schema)
            source = f"{schema}.{table}" if schema else table

    return prepare_frame(raw, source=source)
