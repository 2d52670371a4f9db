"""Split plan reports."""

from .report_writer import ReportWriter, build_report

__all__ = ["ReportWriter", "build_report"]
