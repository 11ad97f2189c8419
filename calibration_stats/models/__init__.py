"""Pydantic models for calibration input data, engine results and report payloads.

Models:
- calibration.py - Measurements, pipette records, session info
- statistics.py - Statistics engine results
- reports.py - Chart, workbook and certificate payloads
"""

from calibration_stats.models.calibration import (
    Measurement,
    PipetteRecord,
    PipetteStatus,
    SessionInfo,
)
from calibration_stats.models.statistics import (
    ControlChart,
    ControlLimits,
    HistogramBin,
    InstrumentAccuracyStatistics,
    SeriesStatistics,
    StatusCounts,
)

__all__ = [
    "Measurement",
    "PipetteRecord",
    "PipetteStatus",
    "SessionInfo",
    "ControlChart",
    "ControlLimits",
    "HistogramBin",
    "InstrumentAccuracyStatistics",
    "SeriesStatistics",
    "StatusCounts",
]
