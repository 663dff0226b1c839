from sales_metrics.queries.aggregates import aggregate, count_nulls
from sales_metrics.queries.correlation import pearson_correlation
from sales_metrics.queries.filters import (
    equals, filter_records, iso_year_equals, join_on_keys, prefix_match, threshold, year_equals,
)
from sales_metrics.queries.ranking import above_average, percentile_bands, top_n_per_partition
from sales_metrics.queries.trends import add_month, period_change, running_total

__all__ = [
    "aggregate",
    "count_nulls",
    "pearson_correlation",
    "equals",
    "filter_records",
    "iso_year_equals",
    "join_on_keys",
    "prefix_match",
    "threshold",
    "year_equals",
    "above_average",
    "percentile_bands",
    "top_n_per_partition",
    "add_month",
    "period_change",
    "running_total",
]
