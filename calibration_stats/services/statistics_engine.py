"""Statistics Engine for pipette calibration data.

Computes descriptive statistics, control limits, histograms and status
tallies from measurement series. This is the single source of truth for
these numbers: charts, workbooks and certificates all go through it so
they agree bit-for-bit.

The engine is pure. It reads only its arguments, never mutates them, keeps
no state between calls, and reports edge cases by raising the typed errors
in ``calibration_stats.exceptions``.
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import numpy as np

from calibration_stats.exceptions import (
    DegenerateSeriesError,
    EmptySeriesError,
    InvalidArgumentError,
)
from calibration_stats.models.calibration import PipetteRecord, PipetteStatus
from calibration_stats.models.statistics import (
    ControlChart,
    ControlLimits,
    HistogramBin,
    InstrumentAccuracyStatistics,
    SeriesStatistics,
    StatusCounts,
)

# Conventional SPC bound: mean ± 3σ
DEFAULT_SIGMA_MULTIPLIER = 3.0

# Relative tolerance, per value, below which a mean is treated as zero
ZERO_MEAN_TOLERANCE = float(np.finfo(float).eps)

_KNOWN_STATUSES = {status.value for status in PipetteStatus}


class StatisticsEngine:
    """Calculator for calibration series statistics.

    All standard deviations use the population formula (divisor N).
    """

    def __init__(self, sigma_multiplier: float = DEFAULT_SIGMA_MULTIPLIER):
        if not math.isfinite(sigma_multiplier) or sigma_multiplier <= 0:
            raise InvalidArgumentError(
                f"sigma_multiplier must be a positive finite number, got {sigma_multiplier}"
            )
        self.sigma_multiplier = float(sigma_multiplier)

    def compute_series_statistics(self, values: Iterable[float]) -> SeriesStatistics:
        """Compute mean, population standard deviation, CV, min, max and range.

        Args:
            values: Measurement values in any order

        Returns:
            SeriesStatistics; ``cv`` is None when the mean is zero (within
            rounding of the series magnitude)

        Raises:
            EmptySeriesError: If ``values`` is empty
            InvalidArgumentError: If any value is not finite, or the
                statistics overflow the float range
        """
        series = self._as_array(values)

        lo = float(series.min())
        hi = float(series.max())

        if lo == hi:
            # Constant series: exact results, no rounding residue
            mean = lo
            std_dev = 0.0
        else:
            with np.errstate(over="ignore", invalid="ignore"):
                mean = float(series.mean())
                std_dev = float(series.std())  # ddof=0 -> population
            # Summation rounding must not push the mean outside [min, max]
            mean = min(max(mean, lo), hi)
            # Cancellation in a mixed-sign series leaves residue of order eps·N·max|x|
            if lo < 0 < hi and abs(mean) <= ZERO_MEAN_TOLERANCE * series.size * max(-lo, hi):
                mean = 0.0

        value_range = hi - lo
        cv = 100.0 * std_dev / mean if mean != 0 else None

        self._require_finite(mean=mean, std_dev=std_dev, range=value_range, cv=cv)

        return SeriesStatistics(
            count=int(series.size),
            mean=mean,
            std_dev=std_dev,
            cv=cv,
            min=lo,
            max=hi,
            range=value_range,
        )

    def compute_control_limits(self, values: Iterable[float]) -> ControlLimits:
        """Compute control limits mean ± k·σ from the series statistics.

        Raises:
            EmptySeriesError: If ``values`` is empty
            InvalidArgumentError: If the limits overflow the float range
        """
        summary = self.compute_series_statistics(values)
        spread = self.sigma_multiplier * summary.std_dev
        self._require_finite(ucl=summary.mean + spread, lcl=summary.mean - spread)

        return ControlLimits(
            mean=summary.mean,
            std_dev=summary.std_dev,
            ucl=summary.mean + spread,
            lcl=summary.mean - spread,
            sigma_multiplier=self.sigma_multiplier,
        )

    def build_control_chart(self, values: Iterable[float]) -> ControlChart:
        """Build control chart data: points in order, limits and out-of-control indices."""
        points = [float(v) for v in values]
        limits = self.compute_control_limits(points)

        out_of_control = [
            i for i, v in enumerate(points) if v > limits.ucl or v < limits.lcl
        ]

        return ControlChart(
            data_points=points,
            limits=limits,
            out_of_control_indices=out_of_control,
        )

    def build_histogram(self, values: Iterable[float], bin_count: int) -> list[HistogramBin]:
        """Bin a series into ``bin_count`` contiguous bins spanning [min, max].

        Bin i covers [min + i·w, min + (i+1)·w) with w = (max - min) / bin_count.
        The last bin is closed and ends exactly at max, so the maximum is
        always counted and the counts sum to the number of values.

        Raises:
            InvalidArgumentError: If ``bin_count`` is not a positive integer
            EmptySeriesError: If ``values`` is empty
            DegenerateSeriesError: If every value is identical
        """
        if isinstance(bin_count, bool) or not isinstance(bin_count, (int, np.integer)):
            raise InvalidArgumentError(f"bin_count must be an integer, got {bin_count!r}")
        if bin_count <= 0:
            raise InvalidArgumentError(f"bin_count must be positive, got {bin_count}")

        series = self._as_array(values)
        lo = float(series.min())
        hi = float(series.max())
        if lo == hi:
            raise DegenerateSeriesError(lo)

        bin_width = (hi - lo) / bin_count
        self._require_finite(bin_width=bin_width)

        edges = lo + np.arange(bin_count + 1) * bin_width
        edges[0] = lo
        edges[-1] = hi
        if not np.all(np.isfinite(edges)):
            raise InvalidArgumentError("Histogram bin edges overflow the float range")

        # np.histogram with explicit edges: [e_i, e_i+1) for all but the last bin, which is closed
        counts, _ = np.histogram(series, bins=edges)

        return [
            HistogramBin(
                range_start=float(edges[i]),
                range_end=float(edges[i + 1]),
                count=int(counts[i]),
            )
            for i in range(bin_count)
        ]

    def aggregate_status(self, records: Iterable[Any]) -> StatusCounts:
        """Tally PASS / FAIL / PENDING over records.

        A record is any object with a ``status`` attribute or a mapping with a
        ``"status"`` key. Missing or falsy status counts as PENDING. Any other
        status string is left out of every bucket and only tallied as
        excluded; this leniency is intentional.
        """
        tally = {status: 0 for status in _KNOWN_STATUSES}
        excluded = 0

        for record in records:
            status = self._status_of(record)
            if not status:
                status = PipetteStatus.PENDING.value
            elif isinstance(status, PipetteStatus):
                status = status.value

            if status in tally:
                tally[status] += 1
            else:
                excluded += 1

        return StatusCounts(
            passed=tally[PipetteStatus.PASS.value],
            failed=tally[PipetteStatus.FAIL.value],
            pending=tally[PipetteStatus.PENDING.value],
            excluded=excluded,
        )

    def compute_accuracy_statistics_across_instruments(
        self, instruments: Sequence[PipetteRecord]
    ) -> list[InstrumentAccuracyStatistics]:
        """Compute accuracy statistics per instrument.

        Instruments without any accuracy values produce no entry. Every entry
        carries the instrument's position and serial number, so a skipped
        instrument never shifts the identity of the ones after it.
        """
        results = []

        for position, instrument in enumerate(instruments):
            accuracies = instrument.accuracies()
            if not accuracies:
                continue

            summary = self.compute_series_statistics(accuracies)
            results.append(
                InstrumentAccuracyStatistics(
                    position=position,
                    serial_number=instrument.serial_number,
                    model=instrument.model,
                    count=summary.count,
                    mean=summary.mean,
                    std_dev=summary.std_dev,
                    min=summary.min,
                    max=summary.max,
                )
            )

        return results

    def _as_array(self, values: Iterable[float]) -> np.ndarray:
        """Convert values to a 1-D float array, rejecting empty or non-finite input."""
        if isinstance(values, np.ndarray):
            series = values.astype(float).ravel()
        else:
            series = np.array(list(values), dtype=float)

        if series.size == 0:
            raise EmptySeriesError()
        if not np.all(np.isfinite(series)):
            raise InvalidArgumentError("Series contains non-finite values (NaN or infinity)")

        return series

    @staticmethod
    def _status_of(record: Any) -> Any:
        if isinstance(record, Mapping):
            return record.get("status")
        return getattr(record, "status", None)

    @staticmethod
    def _require_finite(**results: float) -> None:
        """Raise InvalidArgumentError if any computed result left the float range."""
        for name, value in results.items():
            if value is not None and not math.isfinite(value):
                raise InvalidArgumentError(
                    f"{name} overflows the float range; the series magnitude is too large"
                )
