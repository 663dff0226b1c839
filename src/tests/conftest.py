# src/tests/conftest.py
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

# Add the parent directory of this tests folder (i.e., src/) to sys.path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sales_metrics.data_loader import prepare_frame  # noqa: E402
from sales_metrics.utils.io_utils import load_settings  # noqa: E402

# Two weeks in Feb 2011 and the same ISO weeks in Feb 2012; the second of each is a holiday week
TOY_DATES = ["2011-02-04", "2011-02-11", "2012-02-03", "2012-02-10"]
TOY_HOLIDAYS = [False, True, False, True]


def _raw_walmart_rows() -> pd.DataFrame:
    """Raw frame with the public dataset headers, 2 stores x 2 depts x 4 weeks."""
    rows = []
    for store in (1, 2):
        for dept in (1, 2):
            for i, (d, hol) in enumerate(zip(TOY_DATES, TOY_HOLIDAYS)):
                rows.append({
                    "Store": store,
                    "Dept": dept,
                    "Date": d,
                    "Weekly_Sales": store * 1000 + dept * 100 + i * 10,
                    "IsHoliday": "TRUE" if hol else "FALSE",
                    "Temperature": 30.0 + i,
                    "Fuel_Price": 3.0,
                    "MarkDown1": 50.0 if i >= 2 else np.nan,
                    "MarkDown2": np.nan,
                    "MarkDown3": 5.0,
                    "MarkDown4": np.nan if store == 1 else 1.0,
                    "MarkDown5": 2.0,
                    "CPI": 211.0,
                    "Unemployment": 8.1 if store == 1 else 7.9,
                })
    return pd.DataFrame(rows)


@pytest.fixture
def raw_df() -> pd.DataFrame:
    return _raw_walmart_rows()


@pytest.fixture
def toy_df(raw_df) -> pd.DataFrame:
    return prepare_frame(raw_df, source="toy")


@pytest.fixture
def tmp_csv(tmp_path, raw_df):
    p = tmp_path / "weekly_sales.csv"
    raw_df.to_csv(p, index=False)
    return p


@pytest.fixture
def settings() -> dict:
    return load_settings()
