# catalog.py
"""
The sixteen weekly-sales business questions, each expressed with the query
families in sales_metrics.queries.

Every entry of QUESTIONS has:
- name: short identifier, also used for export file names
- business_question: what the result answers
- family: filter | aggregate | ranking | trend | correlation
- func: (records, settings) -> DataFrame
"""

from typing import Callable, Dict

import pandas as pd

from sales_metrics.errors import InvalidParameterError
from sales_metrics.queries import (
    above_average, add_month, aggregate, count_nulls, equals, filter_records,
    iso_year_equals, join_on_keys, pearson_correlation, percentile_bands, period_change,
    prefix_match, running_total, threshold, top_n_per_partition, year_equals,
)
from sales_metrics.utils.constants import (
    BAND_COL, DATE_COL, HOLIDAY_COL, MARKDOWN_COLS, SALES_COL,
)
from sales_metrics.utils.math_utils import decimal_text, safe_pct_change
from sales_metrics.utils.schema import require_columns

RECORD_COLS = ["store", "dept", DATE_COL, SALES_COL]


def _params(settings: dict, name: str) -> dict:
    return (settings.get("questions") or {}).get(name) or {}


def _store_weekly(df: pd.DataFrame) -> pd.DataFrame:
    """Store-level weekly totals: one row per (store, date)."""
    return aggregate(df, ["store", DATE_COL], {"store_sales": (SALES_COL, "sum")})


# ---------- Filter / select ----------
def high_sales_weeks(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    thr = float(_params(settings, "high_sales_weeks").get("threshold", 100000))
    out = filter_records(df, threshold(SALES_COL, ">", thr), order_by=["store", SALES_COL], ascending=[False, False])
    return out[RECORD_COLS]


def holiday_week_sales(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    out = filter_records(df, equals(HOLIDAY_COL, True), order_by=["store", DATE_COL], ascending=[False, True])
    return out[RECORD_COLS + [HOLIDAY_COL]]


def sales_for_year(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    year = int(_params(settings, "sales_for_year").get("year", 2011))
    out = filter_records(df, year_equals(year), order_by=[DATE_COL, "store", "dept"])
    return out[RECORD_COLS]


def unemployment_prefix_stores(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    prefix = str(_params(settings, "unemployment_prefix_stores").get("prefix", "8"))
    decimals = (settings.get("text_match") or {}).get("decimals")

    per_store = aggregate(df, "store", {"avg_unemployment": ("unemployment", "mean")})
    match = prefix_match("avg_unemployment", prefix, decimals, extra_columns=["avg_unemployment"])
    out = per_store[match(per_store)].copy()
    out["avg_unemployment_text"] = out["avg_unemployment"].map(lambda v: decimal_text(v, decimals))
    return out.reset_index(drop=True)


def top_sales_weeks(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    limit = _params(settings, "top_sales_weeks").get("limit", 10)
    out = filter_records(df, order_by=SALES_COL, ascending=False, limit=limit)
    return out[RECORD_COLS]


def year_over_year_same_week(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    """
    Same store/dept/ISO week in two ISO years. Both sides are selected by ISO year
    so a week near New Year lands on exactly one side.
    """
    p = _params(settings, "year_over_year_same_week")
    base_year, compare_year = int(p.get("base_year", 2011)), int(p.get("compare_year", 2012))
    if base_year == compare_year:
        raise InvalidParameterError(f"base_year and compare_year must differ, both are {base_year}.")
    precision = int((settings.get("rounding") or {}).get("pct_change", 2))
    cols = ["store", "dept", "week", SALES_COL]
    require_columns(df, ["store", "dept", SALES_COL, DATE_COL], "year_over_year_same_week")

    def _side(year: int) -> pd.DataFrame:
        part = filter_records(df, iso_year_equals(year))
        week = pd.to_datetime(part[DATE_COL]).dt.isocalendar()["week"].astype("Int64")
        return part.assign(week=week)[cols]

    out = join_on_keys(
        _side(base_year), _side(compare_year), ["store", "dept", "week"],
        suffixes=(f"_{base_year}", f"_{compare_year}"),
    )
    out["pct_change"] = safe_pct_change(
        out[f"{SALES_COL}_{compare_year}"], out[f"{SALES_COL}_{base_year}"], precision
    )
    return out


# ---------- Aggregate ----------
def total_sales_by_store(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    return aggregate(
        df, "store",
        {"total_sales": (SALES_COL, "sum"), "avg_weekly_sales": (SALES_COL, "mean"), "row_count": (SALES_COL, "size")},
        order_by="total_sales", ascending=False,
    )


def markdown_null_counts(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    return count_nulls(df, MARKDOWN_COLS)


def high_volume_departments(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    thr = float(_params(settings, "high_volume_departments").get("threshold", 10_000_000))
    return aggregate(
        df, "dept", {"total_sales": (SALES_COL, "sum")},
        having=lambda g: g["total_sales"] > thr,
        order_by="total_sales", ascending=False,
    )


# ---------- Ranking ----------
def stores_above_average(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    return above_average(df, "store", SALES_COL)


def top_stores_per_department(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    ranking = settings.get("ranking") or {}
    per_dept = aggregate(df, ["dept", "store"], {"total_sales": (SALES_COL, "sum")})
    return top_n_per_partition(
        per_dept, "dept", "total_sales",
        n=ranking.get("top_n", 3),
        tie_breaker=ranking.get("tie_breaker") or ["store"],
        extra_columns=["total_sales"],
    )


def sales_percentile_bands(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    points = settings.get("percentile_points") or {}
    out = percentile_bands(df, SALES_COL, lower=points.get("lower", 0.1), upper=points.get("upper", 0.9))
    return out[RECORD_COLS + ["p_lower", "p_upper", BAND_COL]]


# ---------- Trend / window ----------
def running_sales_by_store(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    return running_total(
        _store_weekly(df), "store", DATE_COL, value="store_sales",
        out="running_sales", extra_columns=["store_sales"],
    )


def week_over_week_change(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    precision = int((settings.get("rounding") or {}).get("pct_change", 2))
    return period_change(
        _store_weekly(df), "store", DATE_COL, value="store_sales",
        precision=precision, extra_columns=["store_sales"],
    )


def month_to_date_sales(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    weekly = add_month(_store_weekly(df))
    return running_total(
        weekly, ["store", "month"], DATE_COL, value="store_sales",
        out="month_to_date_sales", extra_columns=["store_sales"],
    )


# ---------- Correlation ----------
def temperature_sales_correlation(df: pd.DataFrame, settings: dict) -> pd.DataFrame:
    p = _params(settings, "temperature_sales_correlation")
    precision = int((settings.get("rounding") or {}).get("correlation", 4))
    return pearson_correlation(df, p.get("x", "temperature"), p.get("y", SALES_COL), precision)


def _q(name: str, family: str, business_question: str, func: Callable) -> dict:
    return {"name": name, "family": family, "business_question": business_question, "func": func}


QUESTIONS: Dict[str, dict] = {
    "Q1": _q("high_sales_weeks", "filter",
             "Which store-department weeks sold more than the threshold?", high_sales_weeks),
    "Q2": _q("total_sales_by_store", "aggregate",
             "What are the total and average weekly sales of each store?", total_sales_by_store),
    "Q3": _q("holiday_week_sales", "filter",
             "What did each store-department sell in holiday weeks?", holiday_week_sales),
    "Q4": _q("sales_for_year", "filter",
             "What were the weekly sales in the configured year?", sales_for_year),
    "Q5": _q("markdown_null_counts", "aggregate",
             "How many rows carry no markdown event, per markdown column?", markdown_null_counts),
    "Q6": _q("unemployment_prefix_stores", "filter",
             "Which stores have an average unemployment rate starting with the given digits?",
             unemployment_prefix_stores),
    "Q7": _q("stores_above_average", "ranking",
             "Which stores average more weekly sales than the overall mean?", stores_above_average),
    "Q8": _q("top_sales_weeks", "filter",
             "What are the highest-selling store-department weeks?", top_sales_weeks),
    "Q9": _q("year_over_year_same_week", "filter",
             "How did each store-department week compare with the same week a year earlier?",
             year_over_year_same_week),
    "Q10": _q("running_sales_by_store", "trend",
              "What is each store's cumulative sales over time?", running_sales_by_store),
    "Q11": _q("high_volume_departments", "aggregate",
              "Which departments sold more than the threshold in total?", high_volume_departments),
    "Q12": _q("top_stores_per_department", "ranking",
              "Which stores sell the most in each department?", top_stores_per_department),
    "Q13": _q("temperature_sales_correlation", "correlation",
              "How strongly does temperature move with weekly sales?", temperature_sales_correlation),
    "Q14": _q("week_over_week_change", "trend",
              "How did each store's sales change from the previous week?", week_over_week_change),
    "Q15": _q("month_to_date_sales", "trend",
              "What are each store's month-to-date sales?", month_to_date_sales),
    "Q16": _q("sales_percentile_bands", "ranking",
              "Which weeks fall in the top or bottom decile of sales?", sales_percentile_bands),
}
