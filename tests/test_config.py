"""Tests for application settings."""

from calibration_stats.config import Settings


def test_defaults():
    """Settings should have the ISO 8655 defaults without any environment."""
    config = Settings(_env_file=None)

    assert config.histogram_bin_count == 10
    assert config.control_limit_sigma == 3.0
    assert config.not_available_label == "N/A"
    assert config.temperature_range == (15.0, 30.0)
    assert config.humidity_range == (30.0, 75.0)
    assert config.pressure_range == (95.0, 105.0)


def test_environment_override(monkeypatch):
    """Environment variables with the CALIBRATION_ prefix override defaults."""
    monkeypatch.setenv("CALIBRATION_HISTOGRAM_BIN_COUNT", "5")
    monkeypatch.setenv("CALIBRATION_NOT_AVAILABLE_LABEL", "-")

    config = Settings(_env_file=None)

    assert config.histogram_bin_count == 5
    assert config.not_available_label == "-"


def test_env_file(tmp_path):
    """Settings should load values from a .env file."""
    env_file = tmp_path / ".env"
    env_file.write_text("CALIBRATION_LAB_NAME=Acme Metrology\n", encoding="utf-8")

    config = Settings(_env_file=env_file)

    assert config.lab_name == "Acme Metrology"
