"""Reporting utilities."""

from .decision_trace import DecisionTraceCollector, SlotDecision
from .reports import build_error_report, build_success_report
from .warnings import build_warnings_and_hints

__all__ = [
    "DecisionTraceCollector",
    "SlotDecision",
    "build_error_report",
    "build_success_report",
    "build_warnings_and_hints",
]
