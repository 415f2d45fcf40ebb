"""Terminal rendering of hydration run reports."""

from hydrate.report.renderer import ReportRenderer

__all__ = ["ReportRenderer"]
