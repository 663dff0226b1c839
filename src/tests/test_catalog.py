# tests/test_catalog.py
import copy

import pandas as pd
import pytest

from sales_metrics import SalesMetricsEngine
from sales_metrics.catalog import QUESTIONS, year_over_year_same_week
from sales_metrics.errors import InvalidParameterError, SchemaMismatchError
from sales_metrics.pipeline import run_catalog


@pytest.fixture
def engine(toy_df, settings):
    s = copy.deepcopy(settings)
    s["questions"]["high_sales_weeks"]["threshold"] = 2000
    s["questions"]["high_volume_departments"]["threshold"] = 13000
    s["ranking"]["top_n"] = 1
    return SalesMetricsEngine(toy_df, s)


def test_catalog_lists_sixteen_questions():
    listing = SalesMetricsEngine.questions()
    assert listing["id"].tolist() == [f"Q{i}" for i in range(1, 17)]
    assert set(listing["family"]) == {"filter", "aggregate", "ranking", "trend", "correlation"}


def test_every_question_answers_on_toy_data(engine):
    results = engine.run()
    assert list(results) == list(QUESTIONS)
    for qid, frame in results.items():
        assert isinstance(frame, pd.DataFrame), qid


def test_questions_resolve_by_id_or_name(engine):
    by_id = engine.ask("q12")
    by_name = engine.ask("top_stores_per_department")
    pd.testing.assert_frame_equal(by_id, by_name)
    with pytest.raises(InvalidParameterError):
        engine.ask("Q99")


def test_filter_questions(engine):
    q1 = engine.ask("Q1")
    assert len(q1) == 8 and (q1["store"] == 2).all()
    assert q1["weekly_sales"].iloc[0] == 2230.0

    q3 = engine.ask("Q3")
    assert q3["is_holiday"].all()
    assert q3["store"].iloc[0] == 2

    q4 = engine.ask("Q4")
    assert (q4["date"].dt.year == 2011).all()

    q8 = engine.ask("Q8")
    assert len(q8) == 10
    assert q8["weekly_sales"].is_monotonic_decreasing


def test_unemployment_prefix_question(engine):
    q6 = engine.ask("Q6")
    assert q6["store"].tolist() == [1]
    assert q6["avg_unemployment_text"].iloc[0].startswith("8")


def test_year_over_year_question(engine):
    q9 = engine.ask("Q9")
    assert len(q9) == 8
    first = q9.iloc[0]
    # 1100 -> 1120
    assert first["pct_change"] == 1.82


def test_year_over_year_uses_iso_years_at_new_year():
    """2022-01-01 is ISO week 52 of 2021, so 2022 week 52 is only 2022-12-31."""
    df = pd.DataFrame({
        "store": [1] * 5,
        "dept": [1] * 5,
        "date": pd.to_datetime(["2022-01-01", "2022-12-24", "2022-12-31", "2023-12-23", "2023-12-30"]),
        "weekly_sales": [100.0, 200.0, 300.0, 400.0, 450.0],
    })
    settings = {"questions": {"year_over_year_same_week": {"base_year": 2022, "compare_year": 2023}}}
    out = year_over_year_same_week(df, settings)

    assert out["week"].tolist() == [51, 52]
    assert not out.duplicated(["store", "dept", "week"]).any()
    wk52 = out[out["week"] == 52].iloc[0]
    assert wk52["weekly_sales_2022"] == 300.0
    assert wk52["weekly_sales_2023"] == 450.0
    assert wk52["pct_change"] == 50.0


def test_year_over_year_rejects_equal_years(toy_df, settings):
    s = copy.deepcopy(settings)
    s["questions"]["year_over_year_same_week"].update(base_year=2011, compare_year=2011)
    with pytest.raises(InvalidParameterError):
        SalesMetricsEngine(toy_df, s).ask("Q9")


def test_aggregate_questions(engine):
    q2 = engine.ask("Q2")
    assert q2["store"].tolist() == [2, 1]
    assert q2["row_count"].tolist() == [8, 8]

    q5 = engine.ask("Q5")
    assert q5.set_index("column")["null_count"].to_dict() == {
        "markdown_1": 8, "markdown_2": 16, "markdown_3": 0, "markdown_4": 8, "markdown_5": 0,
    }

    # dept totals: 1 -> 12920, 2 -> 13720; only dept 2 clears 13000
    q11 = engine.ask("Q11")
    assert q11["dept"].tolist() == [2]
    assert q11["total_sales"].iloc[0] == 13720.0


def test_ranking_questions(engine):
    assert engine.ask("Q7")["store"].tolist() == [2]

    q12 = engine.ask("Q12")
    assert q12.groupby("dept").size().max() == 1
    assert (q12["store"] == 2).all()

    q16 = engine.ask("Q16")
    assert set(q16["sales_band"].dropna()) <= {"Top 10%", "Bottom 10%", "Middle"}
    assert q16.loc[q16["weekly_sales"].idxmax(), "sales_band"] == "Top 10%"
    assert q16.loc[q16["weekly_sales"].idxmin(), "sales_band"] == "Bottom 10%"


def test_trend_questions(engine):
    q10 = engine.ask("Q10")
    s1 = q10[q10["store"] == 1]
    assert s1["running_sales"].iloc[-1] == s1["store_sales"].sum()

    q14 = engine.ask("Q14")
    first_weeks = q14.groupby("store").head(1)
    assert first_weeks["pct_change"].isna().all()
    # store 1: 2300 -> 2320
    assert q14[q14["store"] == 1]["pct_change"].iloc[1] == 0.87

    q15 = engine.ask("Q15")
    # the month-to-date restarts in Feb 2012
    s1 = q15[q15["store"] == 1]
    assert s1["month_to_date_sales"].tolist() == [2300.0, 4620.0, 2340.0, 4700.0]


def test_correlation_question(engine):
    q13 = engine.ask("Q13")
    assert q13["x"].iloc[0] == "temperature"
    assert -1.0 <= q13["correlation"].iloc[0] <= 1.0


def test_engine_requires_record_columns():
    with pytest.raises(SchemaMismatchError):
        SalesMetricsEngine(pd.DataFrame({"store": [1]}), settings={})


def test_missing_optional_column_fails_the_question(toy_df, settings):
    engine = SalesMetricsEngine(toy_df.drop(columns=["markdown_5"]), settings)
    with pytest.raises(SchemaMismatchError):
        engine.ask("Q5")


def test_run_catalog_exports_csv(tmp_csv, tmp_path):
    out_dir = tmp_path / "results"
    results = run_catalog(str(tmp_csv), questions=["Q2", "Q14"], out_dir=str(out_dir))

    assert list(results) == ["Q2", "Q14"]
    exported = sorted(p.name for p in out_dir.iterdir())
    assert exported == ["Q14_week_over_week_change.csv", "Q2_total_sales_by_store.csv"]
    back = pd.read_csv(out_dir / "Q2_total_sales_by_store.csv")
    assert list(back.columns) == ["store", "total_sales", "avg_weekly_sales", "row_count"]
