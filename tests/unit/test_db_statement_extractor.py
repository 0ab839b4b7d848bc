"""
Unit tests for segment_analyzer.extractors.db_statement_extractor module.
"""
import pytest

from segment_analyzer.core.types import KeyStringValuePair, TraceServiceConfig
from segment_analyzer.extractors import DatabaseStatementExtractor


def make_tags(**kwargs):
    """Helper to create span tags; keyword order is kept."""
    return [KeyStringValuePair(k.replace('_', '.'), v) for k, v in kwargs.items()]


@pytest.fixture
def extractor():
    return DatabaseStatementExtractor(
        TraceServiceConfig(max_slow_sql_length=20, db_latency_thresholds='default:200,mysql:100')
    )


class TestDatabaseStatementExtractor:
    """Tests for the DatabaseStatementExtractor class."""

    def test_slow_when_latency_exceeds_type_threshold(self, extractor):
        is_slow, statement = extractor.extract_slow_statement(
            make_tags(db_type='mysql', db_statement='SELECT 1'), 101
        )

        assert is_slow is True
        assert statement == 'SELECT 1'

    def test_not_slow_at_threshold(self, extractor):
        is_slow, _ = extractor.extract_slow_statement(make_tags(db_type='mysql'), 100)

        assert is_slow is False

    def test_unknown_type_uses_default_threshold(self, extractor):
        assert extractor.extract_slow_statement(make_tags(db_type='redis'), 150)[0] is False
        assert extractor.extract_slow_statement(make_tags(db_type='redis'), 201)[0] is True

    def test_without_db_type_never_slow(self, extractor):
        is_slow, statement = extractor.extract_slow_statement(make_tags(db_statement='SELECT 1'), 99999)

        assert is_slow is False
        assert statement == 'SELECT 1'

    def test_statement_after_type_is_still_captured(self, extractor):
        is_slow, statement = extractor.extract_slow_statement(
            make_tags(db_statement='UPDATE t SET a = 1', db_type='mysql'), 150
        )

        assert is_slow is True
        assert statement == 'UPDATE t SET a = 1'

    def test_truncate_statement(self, extractor):
        assert extractor.truncate_statement('x' * 25) == 'x' * 20
        assert extractor.truncate_statement('x' * 20) == 'x' * 20
        assert extractor.truncate_statement('') == ''
        assert extractor.truncate_statement(None) is None

    def test_unrelated_tags_are_ignored(self, extractor):
        tags = [KeyStringValuePair('url', 'jdbc:mysql://db'), KeyStringValuePair('db.instance', 'orders')]

        assert extractor.extract_slow_statement(tags, 5000) == (False, None)
