# utils/constants.py

# Schema constants used by data_loader and the query modules
DATE_COL = "date"
SALES_COL = "weekly_sales"
HOLIDAY_COL = "is_holiday"
KEY_COLS = ["store", "dept", DATE_COL]
INT_COLS = ["store", "dept"]
DERIVED_INT_COLS = ["week", "year"]
COVARIATE_COLS = ["temperature", "fuel_price", "cpi", "unemployment"]
MARKDOWN_COLS = [f"markdown_{i}" for i in range(1, 6)]
FLOAT_COLS = [SALES_COL] + COVARIATE_COLS + MARKDOWN_COLS

REQUIRED_COLUMNS = ["store", "dept", DATE_COL, SALES_COL, HOLIDAY_COL]

# Every column a caller may reference as a key, metric or partition
KNOWN_COLUMNS = (
    INT_COLS + [DATE_COL, SALES_COL, HOLIDAY_COL] + DERIVED_INT_COLS
    + COVARIATE_COLS + MARKDOWN_COLS + ["month"]
)

# Public Walmart dataset headers -> canonical names
COLUMN_ALIASES = {
    "Store": "store",
    "Dept": "dept",
    "Date": DATE_COL,
    "Weekly_Sales": SALES_COL,
    "IsHoliday": HOLIDAY_COL,
    "Temperature": "temperature",
    "Fuel_Price": "fuel_price",
    "CPI": "cpi",
    "Unemployment": "unemployment",
    "MarkDown1": "markdown_1",
    "MarkDown2": "markdown_2",
    "MarkDown3": "markdown_3",
    "MarkDown4": "markdown_4",
    "MarkDown5": "markdown_5",
}

NA_VALUES = ["", "NA", "N/A", "na", "n/a", "NULL", "null", "-", "--"]
TRUE_VALUES = {"true", "t", "1", "yes", "y"}
FALSE_VALUES = {"false", "f", "0", "no", "n"}

# Percentile banding
BAND_MIDDLE = "Middle"
BAND_COL = "sales_band"

DATABASE_URL_ENV = "DATABASE_URL"
