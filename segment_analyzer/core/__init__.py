"""Core components for segment analysis."""

from .analyzer import SegmentAnalyzer
from .types import TraceServiceConfig, DBLatencyThresholds, TraceSegment

__all__ = ["SegmentAnalyzer", "TraceServiceConfig", "DBLatencyThresholds", "TraceSegment"]
