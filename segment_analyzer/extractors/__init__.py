"""Data extraction utilities for decoded spans."""

from .db_statement_extractor import DatabaseStatementExtractor
from .trace_id_extractor import TraceIdAccumulator

__all__ = ["DatabaseStatementExtractor", "TraceIdAccumulator"]
