"""Report payload builders for charts, workbooks, CSV exports and certificates.

Turns pipette records into the data each renderer needs. All numbers come
from the StatisticsEngine; this layer decides what to show when the engine
reports an edge case (the configured "N/A" label, or an absent chart).
"""

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from calibration_stats.config import Settings
from calibration_stats.exceptions import (
    DegenerateSeriesError,
    EmptySeriesError,
    UndefinedRatioError,
)
from calibration_stats.models.calibration import Measurement, PipetteRecord, PipetteStatus, SessionInfo
from calibration_stats.models.reports import (
    AccuracyComparison,
    Cell,
    CertificateData,
    CertificateField,
    CertificateRow,
    ChartData,
    CsvData,
    PipetteChartSeries,
    PipetteDetail,
    Sheet,
    StatusDistribution,
    WorkbookData,
)
from calibration_stats.models.statistics import HistogramBin
from calibration_stats.services.compliance import ComplianceChecker
from calibration_stats.services.statistics_engine import StatisticsEngine

logger = logging.getLogger(__name__)

# Excel limits sheet names to 31 characters
MAX_SHEET_NAME_LENGTH = 31

CERTIFICATION_STATEMENT = [
    "This certificate documents the calibration of the above-listed pipettes in accordance",
    "with ISO 8655 standards. All measurements were performed using calibrated equipment",
    "traceable to national standards. The results indicate compliance with manufacturer",
    "specifications and ISO 8655 requirements for accuracy and precision.",
]

CERTIFICATE_FOOTER = "This is a computer-generated certificate. No signature required for validity."


class ReportBuilder:
    """Builds chart, workbook, CSV and certificate payloads from pipette records."""

    def __init__(
        self,
        engine: StatisticsEngine,
        checker: ComplianceChecker,
        settings: Settings,
    ):
        self.engine = engine
        self.checker = checker
        self.settings = settings

    # =========================================================================
    # Chart Data
    # =========================================================================

    def build_chart_data(self, pipettes: Sequence[PipetteRecord]) -> ChartData:
        """Build data for the comparison, status, control and distribution charts."""
        logger.info(f"Building chart data for {len(pipettes)} pipettes")

        comparison = AccuracyComparison(
            labels=[self._pipette_label(p, i) for i, p in enumerate(pipettes)],
            accuracy=[p.average_accuracy for p in pipettes],
            precision=[p.average_precision for p in pipettes],
        )

        counts = self.engine.aggregate_status(pipettes)
        if counts.excluded:
            logger.warning(
                f"{counts.excluded} pipette(s) have an unrecognized status and are left out of the status chart"
            )
        distribution = StatusDistribution(
            counts=counts,
            percentages={status.value: counts.percentage(status) for status in PipetteStatus},
        )

        series = [self._build_pipette_series(p, i) for i, p in enumerate(pipettes)]

        return ChartData(
            accuracy_comparison=comparison,
            status_distribution=distribution,
            pipettes=series,
        )

    def _build_pipette_series(self, pipette: PipetteRecord, position: int) -> PipetteChartSeries:
        title = f"{pipette.model or 'Pipette'} (S/N: {pipette.serial_number or self.settings.not_available_label})"
        volumes = pipette.volumes()

        if not volumes:
            logger.warning(f"Pipette {position + 1} has no measurements; skipping its charts")
            return PipetteChartSeries(
                position=position,
                serial_number=pipette.serial_number,
                title=title,
            )

        return PipetteChartSeries(
            position=position,
            serial_number=pipette.serial_number,
            title=title,
            control_chart=self.engine.build_control_chart(volumes),
            histogram=self._histogram_or_none(volumes, position),
        )

    def _histogram_or_none(self, volumes: list[float], position: int) -> Optional[list[HistogramBin]]:
        try:
            return self.engine.build_histogram(volumes, self.settings.histogram_bin_count)
        except DegenerateSeriesError as e:
            logger.warning(f"Pipette {position + 1} histogram skipped: {e}")
            return None

    # =========================================================================
    # Workbook Data
    # =========================================================================

    def build_workbook_data(
        self,
        pipettes: Sequence[PipetteRecord],
        session: SessionInfo,
        today: date,
    ) -> WorkbookData:
        """Build the multi-sheet workbook: summary, environment, one sheet per pipette, statistics."""
        logger.info(f"Building workbook data for {len(pipettes)} pipettes")

        sheets = [
            Sheet(name="Summary", rows=self._summary_rows(pipettes, session, today)),
            Sheet(name="Environmental", rows=self._environmental_rows(session, today)),
        ]
        for index, pipette in enumerate(pipettes):
            name = f"Pipette_{index + 1}"[:MAX_SHEET_NAME_LENGTH]
            sheets.append(Sheet(name=name, rows=self._pipette_rows(pipette, index)))
        sheets.append(Sheet(name="Statistics", rows=self._statistics_rows(pipettes)))

        location = session.location or "Lab"
        return WorkbookData(
            file_name=f"Calibration_Data_{location}_{today.isoformat()}.xlsx",
            sheets=sheets,
        )

    def _summary_rows(
        self,
        pipettes: Sequence[PipetteRecord],
        session: SessionInfo,
        today: date,
    ) -> list[list[Cell]]:
        na = self.settings.not_available_label
        calibration_date = session.calibration_date or today

        rows: list[list[Cell]] = [
            ["PIPETTE CALIBRATION SUMMARY"],
            [""],
            ["Session Information"],
            ["Service Provider:", session.service_provider or na],
            ["Technician:", session.technician or na],
            ["Location:", session.location or na],
            ["Date:", calibration_date.isoformat()],
            [""],
            ["Pipette Summary"],
            ["#", "Model", "Serial Number", "Nominal Volume", "Accuracy %", "Precision %", "Status"],
        ]

        for i, p in enumerate(pipettes):
            rows.append([
                i + 1,
                p.model or na,
                p.serial_number or na,
                self._volume_label(p.nominal_volume),
                self._fmt(p.average_accuracy, self.settings.percent_decimals),
                self._fmt(p.average_precision, self.settings.percent_decimals),
                p.effective_status,
            ])

        counts = self.engine.aggregate_status(pipettes)
        rows.extend([
            [""],
            ["Overall Statistics"],
            ["Total Pipettes:", len(pipettes)],
            ["Passed:", counts.passed],
            ["Failed:", counts.failed],
            ["Pending:", counts.pending],
        ])
        if counts.excluded:
            rows.append(["Unrecognized Status:", counts.excluded])

        return rows

    def _environmental_rows(self, session: SessionInfo, today: date) -> list[list[Cell]]:
        na = self.settings.not_available_label
        compliance = self.checker.evaluate(session, today)

        def reading(value: Optional[float]) -> Cell:
            return value if value is not None else na

        def verdict(result: Optional[bool]) -> str:
            if result is None:
                return na
            return "YES" if result else "NO"

        def span(bounds: tuple[float, float]) -> str:
            return f"{bounds[0]:g}-{bounds[1]:g}"

        return [
            ["ENVIRONMENTAL CONDITIONS"],
            [""],
            ["Parameter", "Value", "Unit", "ISO 8655 Range", "Compliant"],
            ["Temperature", reading(session.temperature), "°C",
             span(self.settings.temperature_range), verdict(compliance.temperature_compliant)],
            ["Humidity", reading(session.humidity), "%",
             span(self.settings.humidity_range), verdict(compliance.humidity_compliant)],
            ["Pressure", reading(session.pressure), "kPa",
             span(self.settings.pressure_range), verdict(compliance.pressure_compliant)],
            [""],
            ["Balance Information"],
            ["Serial Number", session.balance_serial or na],
            ["Calibration Date", self._date_label(session.balance_cal_date)],
            ["Due Date", self._date_label(session.balance_due_date)],
            ["Status", compliance.balance_status.value if compliance.balance_status else na],
        ]

    def _pipette_rows(self, pipette: PipetteRecord, index: int) -> list[list[Cell]]:
        na = self.settings.not_available_label
        pct = self.settings.percent_decimals
        vol = self.settings.volume_decimals

        rows: list[list[Cell]] = [
            [f"PIPETTE {index + 1} CALIBRATION DATA"],
            [""],
            ["Pipette Information"],
            ["Model:", pipette.model or na],
            ["Manufacturer:", pipette.manufacturer or na],
            ["Serial Number:", pipette.serial_number or na],
            ["Nominal Volume:", self._volume_label(pipette.nominal_volume)],
            ["Test Volume:", self._volume_label(pipette.test_volume)],
            [""],
            ["Calibration Results"],
            ["Average Accuracy:", self._percent_label(pipette.average_accuracy)],
            ["Average Precision:", self._percent_label(pipette.average_precision)],
            ["Status:", pipette.effective_status],
            [""],
            ["Measurement Data"],
            ["#", "Mass (g)", "Volume (µL)", "Accuracy (%)", "Precision (%)", "Pass/Fail"],
        ]

        for i, m in enumerate(pipette.measurements):
            rows.append([
                i + 1,
                *self._measurement_cells(m),
                PipetteStatus.PASS.value if m.passed else PipetteStatus.FAIL.value,
            ])

        try:
            summary = self.engine.compute_series_statistics(pipette.volumes())
        except EmptySeriesError:
            logger.warning(f"Pipette {index + 1} has no measurements; statistical summary omitted")
            return rows

        try:
            cv = self._fmt(summary.require_cv(), pct)
        except UndefinedRatioError as e:
            logger.warning(f"Pipette {index + 1} CV reported as {na}: {e}")
            cv = na

        rows.extend([
            [""],
            ["Statistical Summary"],
            ["Mean Volume:", self._fmt(summary.mean, vol), "µL"],
            ["Std Deviation:", self._fmt(summary.std_dev, vol), "µL"],
            ["CV%:", cv, "%"],
            ["Min Volume:", self._fmt(summary.min, vol), "µL"],
            ["Max Volume:", self._fmt(summary.max, vol), "µL"],
            ["Range:", self._fmt(summary.range, vol), "µL"],
        ])
        return rows

    def _statistics_rows(self, pipettes: Sequence[PipetteRecord]) -> list[list[Cell]]:
        na = self.settings.not_available_label
        pct = self.settings.percent_decimals

        counts = self.engine.aggregate_status(pipettes)
        pass_rate = counts.percentage(PipetteStatus.PASS)

        rows: list[list[Cell]] = [
            ["STATISTICAL ANALYSIS"],
            [""],
            ["Overall Calibration Statistics"],
            ["Metric", "Value"],
            ["Total Pipettes Calibrated", len(pipettes)],
            ["Pass Rate", f"{pass_rate:.1f}%" if pass_rate is not None else na],
            [""],
            ["Accuracy Statistics"],
            ["Pipette", "Serial Number", "Mean Accuracy %", "Std Dev", "Min", "Max"],
        ]

        for entry in self.engine.compute_accuracy_statistics_across_instruments(pipettes):
            rows.append([
                f"Pipette {entry.position + 1}",
                entry.serial_number or na,
                self._fmt(entry.mean, pct),
                self._fmt(entry.std_dev, pct),
                self._fmt(entry.min, pct),
                self._fmt(entry.max, pct),
            ])

        return rows

    # =========================================================================
    # CSV Data
    # =========================================================================

    def build_csv_data(
        self,
        pipettes: Sequence[PipetteRecord],
        session: SessionInfo,
        generated_at: datetime,
    ) -> CsvData:
        """Build the flat CSV export: session header, environment, results, measurements.

        Args:
            pipettes: Pipette records in display order
            session: Session information; missing fields show as N/A
            generated_at: Timestamp printed in the header and used for the file name

        Returns:
            CsvData whose rows a writer can emit one line per row
        """
        logger.info(f"Building CSV data for {len(pipettes)} pipettes")
        na = self.settings.not_available_label
        pct = self.settings.percent_decimals

        def reading(value: Optional[float]) -> Cell:
            return value if value is not None else na

        rows: list[list[Cell]] = [
            ["PIPETTE CALIBRATION DATA EXPORT"],
            ["Generated:", generated_at.isoformat(sep=" ", timespec="seconds")],
            ["Location:", session.location or na],
            ["Technician:", session.technician or na],
            [],
            ["ENVIRONMENTAL CONDITIONS"],
            ["Parameter", "Value", "Unit"],
            ["Temperature", reading(session.temperature), "°C"],
            ["Humidity", reading(session.humidity), "%"],
            ["Pressure", reading(session.pressure), "kPa"],
            [],
            ["PIPETTE CALIBRATION RESULTS"],
            ["Pipette #", "Model", "Serial Number", "Nominal Volume (µL)", "Accuracy %", "Precision %", "Status"],
        ]

        for i, p in enumerate(pipettes):
            rows.append([
                i + 1,
                p.model or na,
                p.serial_number or na,
                reading(p.nominal_volume),
                self._fmt(p.average_accuracy, pct),
                self._fmt(p.average_precision, pct),
                p.effective_status,
            ])

        rows.extend([[], ["DETAILED MEASUREMENTS"]])
        for i, p in enumerate(pipettes):
            if not p.has_measurements:
                continue
            rows.extend([
                [],
                [f"Pipette {i + 1}: {p.model or 'Unknown'} (S/N: {p.serial_number or na})"],
                ["Measurement #", "Mass (g)", "Volume (µL)", "Accuracy %", "Precision %"],
            ])
            rows.extend([j + 1, *self._measurement_cells(m)] for j, m in enumerate(p.measurements))

        location = session.location or "Lab"
        return CsvData(
            file_name=f"Calibration_Export_{location}_{generated_at.date().isoformat()}.csv",
            rows=rows,
        )

    # =========================================================================
    # Certificate Data
    # =========================================================================

    def build_certificate_data(
        self,
        pipettes: Sequence[PipetteRecord],
        session: SessionInfo,
        issued_at: datetime,
    ) -> CertificateData:
        """Build the ISO 8655 calibration certificate content."""
        logger.info(f"Building certificate data for {len(pipettes)} pipettes")
        na = self.settings.not_available_label

        certificate_number = f"CERT-{int(issued_at.timestamp() * 1000)}"
        calibration_date = session.calibration_date or issued_at.date()

        service_fields = [
            CertificateField(label="Service Provider:", value=session.service_provider or na),
            CertificateField(label="Technician:", value=session.technician or na),
            CertificateField(label="Location:", value=session.location or na),
            CertificateField(label="Calibration Date:", value=calibration_date.isoformat()),
            CertificateField(label="Certificate Number:", value=certificate_number),
        ]

        environmental_fields = [
            CertificateField(label="Temperature:", value=self._reading_label(session.temperature, "°C")),
            CertificateField(label="Humidity:", value=self._reading_label(session.humidity, "%")),
            CertificateField(label="Pressure:", value=self._reading_label(session.pressure, "kPa")),
            CertificateField(label="Balance S/N:", value=session.balance_serial or na),
            CertificateField(label="Balance Cal. Date:", value=self._date_label(session.balance_cal_date)),
        ]

        summary_rows = [
            CertificateRow(
                model=p.model or na,
                serial_number=p.serial_number or na,
                volume=self._volume_label(p.nominal_volume),
                result=p.effective_status,
                accuracy=self._percent_label(p.average_accuracy),
            )
            for p in pipettes
        ]

        pipette_details = [self._pipette_detail(p, i) for i, p in enumerate(pipettes)]

        location = session.location or "Lab"
        return CertificateData(
            certificate_number=certificate_number,
            issued_at=issued_at,
            file_name=f"Calibration_Certificate_{location}_{calibration_date.isoformat()}.pdf",
            lab_name=self.settings.lab_name,
            lab_tagline=self.settings.lab_tagline,
            service_fields=service_fields,
            environmental_fields=environmental_fields,
            summary_rows=summary_rows,
            pipette_details=pipette_details,
            statement=list(CERTIFICATION_STATEMENT),
            footer_note=CERTIFICATE_FOOTER,
        )

    def _pipette_detail(self, pipette: PipetteRecord, position: int) -> PipetteDetail:
        na = self.settings.not_available_label
        return PipetteDetail(
            position=position,
            heading=f"Pipette {position + 1}: {pipette.model or 'Unknown Model'}",
            serial_number=pipette.serial_number or na,
            nominal_volume=self._volume_label(pipette.nominal_volume),
            status=pipette.effective_status,
            measurement_rows=[
                [str(i + 1), *self._measurement_cells(m)]
                for i, m in enumerate(pipette.measurements)
            ],
        )

    # =========================================================================
    # Formatting helpers
    # =========================================================================

    def _fmt(self, value: Optional[float], decimals: int) -> str:
        if value is None:
            return self.settings.not_available_label
        return f"{value:.{decimals}f}"

    def _measurement_cells(self, measurement: Measurement) -> list[str]:
        """Mass, volume, accuracy and precision formatted with the configured decimals."""
        pct = self.settings.percent_decimals
        return [
            self._fmt(measurement.mass, self.settings.mass_decimals),
            self._fmt(measurement.volume, self.settings.volume_decimals),
            self._fmt(measurement.accuracy, pct),
            self._fmt(measurement.precision, pct),
        ]

    def _percent_label(self, value: Optional[float]) -> str:
        if value is None:
            return self.settings.not_available_label
        return f"{value:.{self.settings.percent_decimals}f}%"

    def _volume_label(self, value: Optional[float]) -> str:
        if value is None:
            return self.settings.not_available_label
        return f"{value:g} µL"

    def _reading_label(self, value: Optional[float], unit: str) -> str:
        if value is None:
            return self.settings.not_available_label
        return f"{value:g} {unit}"

    def _date_label(self, value: Optional[date]) -> str:
        return value.isoformat() if value is not None else self.settings.not_available_label

    @staticmethod
    def _pipette_label(pipette: PipetteRecord, index: int) -> str:
        return f"{pipette.model or 'Pipette'} {index + 1}"
