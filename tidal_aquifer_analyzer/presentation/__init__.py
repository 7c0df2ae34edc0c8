"""Presentation package - report figures, CSV tables and the PPTX deck."""

from .report import ReportOutputs, write_report

__all__ = ["ReportOutputs", "write_report"]
