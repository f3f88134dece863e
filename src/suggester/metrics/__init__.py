"""Suggestion metrics."""

from .collector import collect_metrics

__all__ = ["collect_metrics"]
