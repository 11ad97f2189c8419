"""Calculation and report services.

Services:
- statistics_engine.py - Descriptive statistics, control limits, histograms, status tallies
- compliance.py - ISO 8655 environmental and balance checks
- report_builder.py - Chart, workbook and certificate payloads
"""

from calibration_stats.services.compliance import ComplianceChecker
from calibration_stats.services.report_builder import ReportBuilder
from calibration_stats.services.statistics_engine import StatisticsEngine

__all__ = ["StatisticsEngine", "ComplianceChecker", "ReportBuilder"]
