import numpy as np
import pandas as pd
import pytest

from sales_metrics.errors import InvalidParameterError, SchemaMismatchError
from sales_metrics.queries.correlation import pearson_correlation


def test_perfect_linear_relationship():
    df = pd.DataFrame({"temperature": [1.0, 2.0, 3.0, 4.0], "weekly_sales": [10.0, 20.0, 30.0, 40.0]})
    out = pearson_correlation(df, "temperature", "weekly_sales")
    assert list(out.columns) == ["x", "y", "pairs", "correlation"]
    assert out["correlation"].iloc[0] == 1.0
    assert out["pairs"].iloc[0] == 4


def test_rounded_to_four_places():
    df = pd.DataFrame({"temperature": [1.0, 2.0, 3.0, 4.0], "weekly_sales": [1.0, 3.0, 2.0, 5.0]})
    out = pearson_correlation(df, "temperature")
    expected = round(float(np.corrcoef(df["temperature"], df["weekly_sales"])[0, 1]), 4)
    assert out["correlation"].iloc[0] == pytest.approx(expected, abs=1e-12)


def test_incomplete_pairs_are_skipped():
    df = pd.DataFrame({"cpi": [1.0, np.nan, 3.0, 4.0], "weekly_sales": [2.0, 5.0, np.nan, 8.0]})
    out = pearson_correlation(df, "cpi")
    assert out["pairs"].iloc[0] == 2
    assert out["correlation"].iloc[0] == 1.0


def test_undefined_when_not_enough_data():
    one = pd.DataFrame({"fuel_price": [3.0], "weekly_sales": [10.0]})
    assert pd.isna(pearson_correlation(one, "fuel_price")["correlation"].iloc[0])

    flat = pd.DataFrame({"fuel_price": [3.0, 3.0, 3.0], "weekly_sales": [1.0, 2.0, 3.0]})
    assert pd.isna(pearson_correlation(flat, "fuel_price")["correlation"].iloc[0])


def test_bad_arguments():
    df = pd.DataFrame({"weekly_sales": [1.0, 2.0]})
    with pytest.raises(SchemaMismatchError):
        pearson_correlation(df, "temperature")
    with pytest.raises(InvalidParameterError):
        pearson_correlation(df, "humidity")
    with pytest.raises(InvalidParameterError):
        pearson_correlation(df, "weekly_sales", precision=-2)
