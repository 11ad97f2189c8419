"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables (prefix CALIBRATION_)."""

    python_env: str = "development"
    log_level: str = "INFO"

    # Statistics
    histogram_bin_count: int = 10
    control_limit_sigma: float = 3.0

    # Report formatting
    not_available_label: str = "N/A"
    volume_decimals: int = 2
    mass_decimals: int = 4
    percent_decimals: int = 2

    # ISO 8655 environmental ranges (inclusive)
    temperature_min_c: float = 15.0
    temperature_max_c: float = 30.0
    humidity_min_pct: float = 30.0
    humidity_max_pct: float = 75.0
    pressure_min_kpa: float = 95.0
    pressure_max_kpa: float = 105.0

    # Certificate branding
    lab_name: str = "PLATINUM CALIBRATION SERVICES"
    lab_tagline: str = "ISO 8655 Certified Pipette Calibration"

    @property
    def temperature_range(self) -> tuple[float, float]:
        return (self.temperature_min_c, self.temperature_max_c)

    @property
    def humidity_range(self) -> tuple[float, float]:
        return (self.humidity_min_pct, self.humidity_max_pct)

    @property
    def pressure_range(self) -> tuple[float, float]:
        return (self.pressure_min_kpa, self.pressure_max_kpa)

    model_config = {
        "env_prefix": "CALIBRATION_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


settings = Settings()
