"""Typed errors raised by the statistics engine.

The engine raises these to its immediate caller and never logs or formats
them. All of them subclass ValueError so callers that already handle
invalid input keep working.
"""


class StatisticsError(ValueError):
    """Base class for statistics engine errors."""


class EmptySeriesError(StatisticsError):
    """Statistics were requested over zero data points."""

    def __init__(self, message: str = "Cannot compute statistics over an empty series"):
        super().__init__(message)


class InvalidArgumentError(StatisticsError):
    """An argument is outside its valid domain (e.g. a non-positive bin count)."""


class UndefinedRatioError(StatisticsError, ZeroDivisionError):
    """Coefficient of variation requested for a series whose mean is zero."""

    def __init__(self, message: str = "Coefficient of variation is undefined when the mean is zero"):
        super().__init__(message)


class DegenerateSeriesError(StatisticsError):
    """All values are identical where a non-degenerate spread is required."""

    def __init__(self, value: float):
        self.value = value
        super().__init__(f"All values equal {value}; the series has no spread to bin")
