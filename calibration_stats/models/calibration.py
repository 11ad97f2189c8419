"""Pydantic models for pipette calibration input data.

Models for individual gravimetric measurements, the pipette records that
own them, and the session-level information printed on reports.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PipetteStatus(str, Enum):
    """Aggregate calibration status of a pipette."""

    PASS = "PASS"
    FAIL = "FAIL"
    PENDING = "PENDING"


class Measurement(BaseModel):
    """Single gravimetric calibration reading.

    Attributes:
        mass: Weighed mass of the dispensed liquid (g)
        volume: Volume derived from the mass (µL)
        accuracy: Deviation of the volume from the target volume (%)
        precision: Repeatability among replicate readings (%)
        passed: Whether the reading is within tolerance
    """

    model_config = {"frozen": True, "populate_by_name": True}

    mass: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Weighed mass in grams",
        json_schema_extra={"example": 0.0998},
    )
    volume: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Derived volume in microliters",
        json_schema_extra={"example": 100.12},
    )
    accuracy: Optional[float] = Field(
        default=None,
        allow_inf_nan=False,
        description="Accuracy as percent deviation from target (may be negative)",
        json_schema_extra={"example": -0.35},
    )
    precision: Optional[float] = Field(
        default=None,
        ge=0,
        allow_inf_nan=False,
        description="Precision as percent repeatability",
        json_schema_extra={"example": 0.21},
    )
    passed: bool = Field(
        default=False,
        alias="pass",
        description="Whether the reading is within tolerance",
    )


class PipetteRecord(BaseModel):
    """Calibration record for one pipette.

    Measurements keep their acquisition order; control charts plot them
    in that order.
    """

    model_config = {"frozen": True}

    model: Optional[str] = Field(default=None, description="Pipette model")
    manufacturer: Optional[str] = Field(default=None, description="Manufacturer name")
    serial_number: Optional[str] = Field(default=None, description="Serial number")
    nominal_volume: Optional[float] = Field(
        default=None,
        gt=0,
        description="Nominal volume in microliters",
        json_schema_extra={"example": 100.0},
    )
    test_volume: Optional[float] = Field(
        default=None,
        gt=0,
        description="Volume tested in microliters",
        json_schema_extra={"example": 100.0},
    )
    measurements: list[Measurement] = Field(
        default_factory=list,
        description="Readings in acquisition order",
    )
    status: Optional[str] = Field(
        default=None,
        description="Aggregate status (PASS, FAIL or PENDING); unset means PENDING",
    )
    average_accuracy: Optional[float] = Field(
        default=None,
        description="Cached mean accuracy (%)",
    )
    average_precision: Optional[float] = Field(
        default=None,
        description="Cached mean precision (%)",
    )

    @property
    def effective_status(self) -> str:
        """Status as reported, with PENDING standing in for an unset one."""
        if not self.status:
            return PipetteStatus.PENDING.value
        if isinstance(self.status, PipetteStatus):
            return self.status.value
        return self.status

    @property
    def has_measurements(self) -> bool:
        return len(self.measurements) > 0

    def volumes(self) -> list[float]:
        return [m.volume for m in self.measurements]

    def accuracies(self) -> list[float]:
        # 0.0 is a real accuracy; only missing values are skipped
        return [m.accuracy for m in self.measurements if m.accuracy is not None]


class SessionInfo(BaseModel):
    """Session-level details for a calibration run.

    Every field is optional. A missing value is reported as not available
    rather than treated as an error.
    """

    service_provider: Optional[str] = None
    technician: Optional[str] = None
    location: Optional[str] = None
    calibration_date: Optional[date] = None
    temperature: Optional[float] = Field(
        default=None,
        allow_inf_nan=False,
        description="Ambient temperature (°C)",
        json_schema_extra={"example": 21.5},
    )
    humidity: Optional[float] = Field(
        default=None,
        ge=0,
        le=100,
        description="Relative humidity (%)",
        json_schema_extra={"example": 45.0},
    )
    pressure: Optional[float] = Field(
        default=None,
        gt=0,
        allow_inf_nan=False,
        description="Barometric pressure (kPa)",
        json_schema_extra={"example": 101.3},
    )
    balance_serial: Optional[str] = None
    balance_cal_date: Optional[date] = None
    balance_due_date: Optional[date] = None
