"""Entry point for building calibration export payloads."""

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from calibration_stats.config import Settings, settings
from calibration_stats.models.calibration import PipetteRecord, SessionInfo
from calibration_stats.models.reports import ExportBundle
from calibration_stats.services.compliance import ComplianceChecker
from calibration_stats.services.report_builder import ReportBuilder
from calibration_stats.services.statistics_engine import StatisticsEngine

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for the host application."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_report_builder(config: Settings = settings) -> ReportBuilder:
    """Wire an engine, a compliance checker and a report builder from settings."""
    return ReportBuilder(
        engine=StatisticsEngine(sigma_multiplier=config.control_limit_sigma),
        checker=ComplianceChecker(config),
        settings=config,
    )


def build_export_bundle(
    pipettes: Sequence[PipetteRecord],
    session: Optional[SessionInfo] = None,
    today: Optional[date] = None,
    issued_at: Optional[datetime] = None,
    config: Settings = settings,
) -> ExportBundle:
    """Build chart, workbook, CSV and certificate payloads in one pass.

    Args:
        pipettes: Pipette records in display order
        session: Session details; an empty SessionInfo when omitted
        today: Date used for balance validity and file names (defaults to today)
        issued_at: Certificate issue and CSV generation time (defaults to now)
        config: Settings to use instead of the module-level instance

    Returns:
        ExportBundle with all four payloads
    """
    session = session or SessionInfo()
    issued_at = issued_at or datetime.now()
    today = today or issued_at.date()

    builder = create_report_builder(config)
    logger.info(f"Building export bundle for {len(pipettes)} pipettes")

    return ExportBundle(
        charts=builder.build_chart_data(pipettes),
        workbook=builder.build_workbook_data(pipettes, session, today),
        csv=builder.build_csv_data(pipettes, session, issued_at),
        certificate=builder.build_certificate_data(pipettes, session, issued_at),
    )
