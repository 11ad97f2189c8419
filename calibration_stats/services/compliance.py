"""ISO 8655 environmental compliance and balance validity checks."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from calibration_stats.config import Settings
from calibration_stats.models.calibration import SessionInfo


class BalanceStatus(str, Enum):
    VALID = "VALID"
    EXPIRED = "EXPIRED"


class EnvironmentalCompliance(BaseModel):
    """Compliance of a session's conditions. None means the reading is absent."""

    temperature_compliant: Optional[bool] = Field(default=None)
    humidity_compliant: Optional[bool] = Field(default=None)
    pressure_compliant: Optional[bool] = Field(default=None)
    balance_status: Optional[BalanceStatus] = Field(default=None)

    @property
    def fully_compliant(self) -> bool:
        """True only when every reading is present and within range and the balance is valid."""
        return (
            self.temperature_compliant is True
            and self.humidity_compliant is True
            and self.pressure_compliant is True
            and self.balance_status == BalanceStatus.VALID
        )


class ComplianceChecker:
    """Checks session conditions against configured inclusive ranges."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def check_temperature(self, temperature: Optional[float]) -> Optional[bool]:
        return self._within(temperature, self.settings.temperature_range)

    def check_humidity(self, humidity: Optional[float]) -> Optional[bool]:
        return self._within(humidity, self.settings.humidity_range)

    def check_pressure(self, pressure: Optional[float]) -> Optional[bool]:
        return self._within(pressure, self.settings.pressure_range)

    def check_balance(
        self,
        cal_date: Optional[date],
        due_date: Optional[date],
        today: date,
    ) -> Optional[BalanceStatus]:
        """Balance is valid up to and including its due date.

        Returns None when either date is missing.
        """
        if cal_date is None or due_date is None:
            return None
        return BalanceStatus.VALID if today <= due_date else BalanceStatus.EXPIRED

    def evaluate(self, session: SessionInfo, today: date) -> EnvironmentalCompliance:
        return EnvironmentalCompliance(
            temperature_compliant=self.check_temperature(session.temperature),
            humidity_compliant=self.check_humidity(session.humidity),
            pressure_compliant=self.check_pressure(session.pressure),
            balance_status=self.check_balance(
                session.balance_cal_date, session.balance_due_date, today
            ),
        )

    @staticmethod
    def _within(value: Optional[float], bounds: tuple[float, float]) -> Optional[bool]:
        # 0.0 is a real reading, only None is "not available"
        if value is None:
            return None
        low, high = bounds
        return low <= value <= high
