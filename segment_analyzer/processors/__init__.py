"""Processors for segment decoding and record building."""

from .source_builder import SourceBuilder
from .file_processor import SegmentFileProcessor
from .segment_parser import SegmentParser

__all__ = [
    "SourceBuilder",
    "SegmentFileProcessor",
    "SegmentParser",
]
