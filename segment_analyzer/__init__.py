"""
Segment Analyzer - derives topology and metric records from trace segments
"""

__version__ = "2.0.0"

from .core.analyzer import SegmentAnalyzer
from .core.types import DBLatencyThresholds, TraceSegment, TraceServiceConfig

__all__ = ["SegmentAnalyzer", "DBLatencyThresholds", "TraceSegment", "TraceServiceConfig"]
