"""Pydantic models for statistics engine results.

Results carry raw numbers only. Rounding, units and labels belong to
whoever renders them.
"""

from typing import Optional

from pydantic import BaseModel, Field, computed_field

from calibration_stats.exceptions import UndefinedRatioError
from calibration_stats.models.calibration import PipetteStatus


class SeriesStatistics(BaseModel):
    """Descriptive statistics of a measurement series.

    Attributes:
        count: Number of values
        mean: Arithmetic mean
        std_dev: Population standard deviation (divisor N)
        cv: Coefficient of variation (%), None when the mean is zero
        min: Smallest value
        max: Largest value
        range: max - min
    """

    count: int = Field(..., ge=1, description="Number of values")
    mean: float = Field(..., description="Arithmetic mean")
    std_dev: float = Field(..., ge=0, description="Population standard deviation")
    cv: Optional[float] = Field(
        default=None,
        description="Coefficient of variation (%); None when the mean is zero",
    )
    min: float = Field(..., description="Minimum value")
    max: float = Field(..., description="Maximum value")
    range: float = Field(..., ge=0, description="Maximum minus minimum")

    @property
    def cv_defined(self) -> bool:
        return self.cv is not None

    def require_cv(self) -> float:
        """Return the coefficient of variation.

        Raises:
            UndefinedRatioError: If the mean is zero
        """
        if self.cv is None:
            raise UndefinedRatioError()
        return self.cv


class ControlLimits(BaseModel):
    """Statistical process control limits: mean ± k·σ."""

    mean: float = Field(..., description="Center line")
    std_dev: float = Field(..., ge=0, description="Population standard deviation")
    ucl: float = Field(..., description="Upper control limit")
    lcl: float = Field(..., description="Lower control limit")
    sigma_multiplier: float = Field(default=3.0, gt=0, description="k in mean ± k·σ")


class ControlChart(BaseModel):
    """Control chart data for one series.

    Attributes:
        data_points: Values in acquisition order
        limits: Control limits of the series
        out_of_control_indices: Indices of points outside [LCL, UCL]
    """

    data_points: list[float] = Field(..., description="Values in acquisition order")
    limits: ControlLimits = Field(..., description="Control limits")
    out_of_control_indices: list[int] = Field(
        default_factory=list,
        description="Indices of points strictly outside the control limits",
    )


class HistogramBin(BaseModel):
    """One histogram bin. All bins are [start, end) except the last, which is closed."""

    range_start: float
    range_end: float
    count: int = Field(..., ge=0)

    @property
    def width(self) -> float:
        return self.range_end - self.range_start


class StatusCounts(BaseModel):
    """Pass/fail/pending tally over a set of records.

    Records with a status outside the known vocabulary are not counted in
    any bucket; they are tallied in ``excluded`` so callers can see them.
    Percentages use the counted total, not the number of records.
    """

    passed: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    pending: int = Field(default=0, ge=0)
    excluded: int = Field(default=0, ge=0)

    @computed_field
    @property
    def total(self) -> int:
        return self.passed + self.failed + self.pending

    def as_mapping(self) -> dict[str, int]:
        return {
            PipetteStatus.PASS.value: self.passed,
            PipetteStatus.FAIL.value: self.failed,
            PipetteStatus.PENDING.value: self.pending,
        }

    def percentage(self, status: str) -> Optional[float]:
        """Share of the counted total with the given status, in percent.

        Returns None when nothing was counted.
        """
        key = status.value if isinstance(status, PipetteStatus) else status
        counts = self.as_mapping()
        if key not in counts:
            raise KeyError(f"Unknown status '{status}'")
        if self.total == 0:
            return None
        return 100.0 * counts[key] / self.total


class InstrumentAccuracyStatistics(BaseModel):
    """Accuracy statistics for one instrument, tagged by its identity.

    Attributes:
        position: Index of the instrument in the input sequence
        serial_number: Serial number of the instrument, if recorded
        model: Model of the instrument, if recorded
    """

    position: int = Field(..., ge=0)
    serial_number: Optional[str] = None
    model: Optional[str] = None
    count: int = Field(..., ge=1)
    mean: float
    std_dev: float = Field(..., ge=0)
    min: float
    max: float
