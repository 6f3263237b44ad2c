"""Tracing module."""

from .aggregator import TracingAggregator

__all__ = ["TracingAggregator"]
