"""Shared fixtures for calibration statistics tests."""

from datetime import date

import pytest

from calibration_stats.config import Settings
from calibration_stats.models.calibration import Measurement, PipetteRecord, SessionInfo
from calibration_stats.services.compliance import ComplianceChecker
from calibration_stats.services.report_builder import ReportBuilder
from calibration_stats.services.statistics_engine import StatisticsEngine


@pytest.fixture
def test_settings() -> Settings:
    """Settings with defaults only (no .env file)."""
    return Settings(_env_file=None)


@pytest.fixture
def engine() -> StatisticsEngine:
    """Create engine instance."""
    return StatisticsEngine()


@pytest.fixture
def checker(test_settings: Settings) -> ComplianceChecker:
    return ComplianceChecker(test_settings)


@pytest.fixture
def builder(engine: StatisticsEngine, checker: ComplianceChecker, test_settings: Settings) -> ReportBuilder:
    return ReportBuilder(engine=engine, checker=checker, settings=test_settings)


def _measurement(volume: float, accuracy=None, precision=None, passed=True) -> Measurement:
    # Water at ~20 °C: 1 µL ≈ 0.001 g
    return Measurement(
        mass=volume / 1000.0,
        volume=volume,
        accuracy=accuracy,
        precision=precision,
        passed=passed,
    )


@pytest.fixture
def passing_pipette() -> PipetteRecord:
    """100 µL pipette, four readings around nominal, PASS."""
    return PipetteRecord(
        model="Eppendorf Research plus",
        manufacturer="Eppendorf",
        serial_number="EP-1001",
        nominal_volume=100.0,
        test_volume=100.0,
        measurements=[
            _measurement(99.8, accuracy=-0.2, precision=0.14),
            _measurement(100.0, accuracy=0.0, precision=0.14),
            _measurement(100.2, accuracy=0.2, precision=0.14),
            _measurement(100.0, accuracy=0.0, precision=0.14),
        ],
        status="PASS",
        average_accuracy=0.0,
        average_precision=0.14,
    )


@pytest.fixture
def failing_pipette() -> PipetteRecord:
    """200 µL pipette with a wide spread, FAIL."""
    return PipetteRecord(
        model="Gilson Pipetman",
        manufacturer="Gilson",
        serial_number="GP-2002",
        nominal_volume=200.0,
        test_volume=200.0,
        measurements=[
            _measurement(201.5, accuracy=0.75, precision=0.95),
            _measurement(202.0, accuracy=1.0, precision=0.95, passed=False),
            _measurement(198.0, accuracy=-1.0, precision=0.95, passed=False),
            _measurement(203.0, accuracy=1.5, precision=0.95, passed=False),
        ],
        status="FAIL",
        average_accuracy=0.56,
        average_precision=0.95,
    )


@pytest.fixture
def empty_pipette() -> PipetteRecord:
    """Pipette with no metadata, no readings and no status."""
    return PipetteRecord()


@pytest.fixture
def constant_pipette() -> PipetteRecord:
    """Pipette with identical readings, no accuracy values and an unrecognized status."""
    return PipetteRecord(
        model="Thermo Finnpipette",
        serial_number="TH-4004",
        nominal_volume=50.0,
        measurements=[_measurement(50.0), _measurement(50.0), _measurement(50.0)],
        status="WEIRD",
    )


@pytest.fixture
def pipettes(passing_pipette, failing_pipette, empty_pipette, constant_pipette) -> list[PipetteRecord]:
    return [passing_pipette, failing_pipette, empty_pipette, constant_pipette]


@pytest.fixture
def session() -> SessionInfo:
    return SessionInfo(
        service_provider="Platinum Calibration",
        technician="A. Rivera",
        location="Bench 3",
        calibration_date=date(2025, 6, 1),
        temperature=21.5,
        humidity=45.0,
        pressure=101.3,
        balance_serial="BAL-778",
        balance_cal_date=date(2025, 1, 1),
        balance_due_date=date(2026, 1, 1),
    )
