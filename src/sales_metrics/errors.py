"""
Exceptions raised by the sales-metrics layer.

Missing baselines (zero or absent denominators) are not errors: they surface
as NA values in the result frame.
"""


class SalesMetricsError(Exception):
    """Base exception for all sales-metrics errors."""


class InvalidParameterError(SalesMetricsError, ValueError):
    """Raised when a caller parameter is out of range or unknown, before evaluation."""


class SchemaMismatchError(SalesMetricsError, KeyError):
    """Raised when the input frame lacks columns an operation needs."""

    def __init__(self, missing: list[str], operation: str | None = None):
        self.missing = list(missing)
        self.operation = operation
        where = f" for '{operation}'" if operation else ""
        super().__init__(f"Missing required columns{where}: {self.missing}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class DataLoaderError(SalesMetricsError):
    """
    Raised when rows are dropped or keys collide during loading.
    `frame` holds the cleaned rows when the loader got that far.
    """

    def __init__(self, message: str, frame=None):
        self.frame = frame
        super().__init__(message)
