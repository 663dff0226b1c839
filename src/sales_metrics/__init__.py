"""Sales-metrics query layer over weekly store/department sales."""

from sales_metrics.data_loader import load_data, load_from_database, prepare_frame
from sales_metrics.engine import SalesMetricsEngine
from sales_metrics.errors import (
    DataLoaderError, InvalidParameterError, SalesMetricsError, SchemaMismatchError,
)

__version__ = "0.1.0"

__all__ = [
    "SalesMetricsEngine",
    "load_data",
    "load_from_database",
    "prepare_frame",
    "DataLoaderError",
    "InvalidParameterError",
    "SalesMetricsError",
    "SchemaMismatchError",
]
