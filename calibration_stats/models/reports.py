"""Pydantic models for report payloads.

Payloads for the chart, workbook, CSV and certificate renderers. They hold data
only; drawing, serialization and downloads happen elsewhere.
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field

from calibration_stats.models.statistics import ControlChart, HistogramBin, StatusCounts

Cell = Union[str, int, float, None]


# -----------------------------------------------------------------------------
# Chart Models
# -----------------------------------------------------------------------------


class AccuracyComparison(BaseModel):
    """Bar chart data comparing cached accuracy and precision per pipette."""

    labels: list[str] = Field(..., description="One label per pipette")
    accuracy: list[Optional[float]] = Field(..., description="Average accuracy (%) per pipette")
    precision: list[Optional[float]] = Field(..., description="Average precision (%) per pipette")


class StatusDistribution(BaseModel):
    """Doughnut chart data for calibration results."""

    counts: StatusCounts
    percentages: dict[str, Optional[float]] = Field(
        ...,
        description="Share of the counted total per status; None when nothing was counted",
    )


class PipetteChartSeries(BaseModel):
    """Control chart and histogram for one pipette.

    Either may be None when the pipette has no readings, or, for the
    histogram, when every reading is identical.
    """

    position: int = Field(..., ge=0)
    serial_number: Optional[str] = None
    title: str
    control_chart: Optional[ControlChart] = None
    histogram: Optional[list[HistogramBin]] = None


class ChartData(BaseModel):
    accuracy_comparison: AccuracyComparison
    status_distribution: StatusDistribution
    pipettes: list[PipetteChartSeries]


# -----------------------------------------------------------------------------
# Workbook Models
# -----------------------------------------------------------------------------


class Sheet(BaseModel):
    """One worksheet as ordered rows of cells."""

    name: str = Field(..., max_length=31)
    rows: list[list[Cell]]


class WorkbookData(BaseModel):
    file_name: str
    sheets: list[Sheet]

    def sheet(self, name: str) -> Sheet:
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        raise KeyError(f"No sheet named '{name}'")


class CsvData(BaseModel):
    """Flat export: one table of rows, blank rows separating the sections."""

    file_name: str
    rows: list[list[Cell]]


# -----------------------------------------------------------------------------
# Certificate Models
# -----------------------------------------------------------------------------


class CertificateField(BaseModel):
    label: str
    value: str


class CertificateRow(BaseModel):
    model: str
    serial_number: str
    volume: str
    result: str
    accuracy: str


class PipetteDetail(BaseModel):
    """Per-pipette page of the detailed certificate.

    Attributes:
        position: Index of the pipette in the input sequence
        heading: "Pipette <n>: <model>" title line
        measurement_rows: One row per measurement, matching ``measurement_header``
    """

    position: int = Field(..., ge=0)
    heading: str
    serial_number: str
    nominal_volume: str
    status: str
    measurement_header: list[str] = Field(
        default_factory=lambda: ["#", "Mass (g)", "Volume (µL)", "Accuracy (%)", "Precision (%)"]
    )
    measurement_rows: list[list[str]] = Field(default_factory=list)


class CertificateData(BaseModel):
    """Everything printed on a calibration certificate."""

    certificate_number: str
    issued_at: datetime
    file_name: str
    lab_name: str
    lab_tagline: str
    title: str = "PIPETTE CALIBRATION CERTIFICATE"
    subtitle: str = "ISO 8655 Compliance Report"
    service_fields: list[CertificateField]
    environmental_fields: list[CertificateField]
    summary_rows: list[CertificateRow]
    pipette_details: list[PipetteDetail] = Field(default_factory=list)
    statement: list[str]
    footer_note: str


# -----------------------------------------------------------------------------
# Export Bundle
# -----------------------------------------------------------------------------


class ExportBundle(BaseModel):
    charts: ChartData
    workbook: WorkbookData
    csv: CsvData
    certificate: CertificateData
