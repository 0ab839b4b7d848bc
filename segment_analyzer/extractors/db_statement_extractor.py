"""
Slow database statement detection from exit span tags.
"""

from typing import Iterable, Optional, Tuple

from ..core.types import KeyStringValuePair, SpanTags


class DatabaseStatementExtractor:
    """Extracts the statement text and slow flag from database span tags."""

    def __init__(self, config):
        """
        Initialize with configuration.

        Args:
            config: TraceServiceConfig instance
        """
        self.config = config

    def truncate_statement(self, statement: Optional[str]) -> Optional[str]:
        """
        Cap a statement at the configured maximum length.

        Args:
            statement: Raw db.statement tag value

        Returns:
            The first max_slow_sql_length characters, or the value unchanged
        """
        max_length = self.config.max_slow_sql_length
        if statement and len(statement) > max_length:
            return statement[:max_length]
        return statement

    def extract_slow_statement(
        self,
        tags: Iterable[KeyStringValuePair],
        latency: int
    ) -> Tuple[bool, Optional[str]]:
        """
        Scan the full tag set of a database exit span.

        The statement and the threshold check are evaluated independently, so
        the tags may appear in any order. The slow flag is only final once
        every tag has been seen.

        Args:
            tags: Ordered span tags
            latency: Span latency in milliseconds

        Returns:
            Tuple of (is_slow, statement)
            - is_slow: True if latency strictly exceeds the db.type threshold
            - statement: Possibly truncated db.statement value, or None
        """
        is_slow = False
        statement = None
        thresholds = self.config.db_latency_thresholds

        for tag in tags:
            if tag.key == SpanTags.DB_STATEMENT:
                statement = self.truncate_statement(tag.value)
            elif tag.key == SpanTags.DB_TYPE:
                if latency > thresholds.get_threshold(tag.value):
                    is_slow = True

        return is_slow, statement
