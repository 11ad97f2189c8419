"""Statistics and report payloads for pipette calibration data."""

__version__ = "1.0.0"
