"""
Unit tests for segment_analyzer.processors.segment_parser module.
"""
import pytest

from conftest import SEGMENT_MINUTE_BUCKET, SEGMENT_START, make_entry_span, make_exit_span
from segment_analyzer.core.types import (
    ListenerPoint,
    SpanDecorator,
    SpanType,
    TraceSegment,
    UniqueId,
)
from segment_analyzer.listeners import SpanListener, SpanListenerFactory
from segment_analyzer.processors import SegmentParser


class RecordingListener(SpanListener):
    """Listener recording every event it receives."""

    def __init__(self, interests, journal):
        self.INTERESTS = frozenset(interests)
        self.journal = journal

    def parse_entry(self, span, segment_core_info):
        self.journal.append(('entry', span.span_id))

    def parse_exit(self, span, segment_core_info):
        self.journal.append(('exit', span.span_id))

    def parse_global_trace_id(self, unique_id, segment_core_info):
        self.journal.append(('trace', unique_id.id_parts))

    def build(self):
        self.journal.append(('build',))


class RecordingFactory(SpanListenerFactory):

    def __init__(self, interests=tuple(ListenerPoint)):
        self.interests = interests
        self.journal = []
        self.created = 0

    def create(self):
        self.created += 1
        return RecordingListener(self.interests, self.journal)


def make_segment(spans, trace_ids=()):
    return TraceSegment(
        segment_id='segment-1',
        service_id=3,
        service_instance_id=11,
        global_trace_ids=tuple(UniqueId(tuple(parts)) for parts in trace_ids),
        spans=tuple(spans),
    )


class TestSegmentParser:
    """Tests for the SegmentParser class."""

    def test_events_in_order_then_build(self):
        factory = RecordingFactory()
        local = SpanDecorator(span_id=2, span_type=SpanType.LOCAL, start_time=SEGMENT_START)
        segment = make_segment(
            [make_entry_span(span_id=0), make_exit_span(span_id=1), local],
            trace_ids=[('a', 'b')]
        )

        SegmentParser([factory]).parse(segment)

        assert factory.journal == [('trace', ('a', 'b')), ('entry', 0), ('exit', 1), ('build',)]

    def test_listener_only_receives_declared_points(self):
        factory = RecordingFactory(interests=[ListenerPoint.EXIT])
        segment = make_segment([make_entry_span(span_id=0), make_exit_span(span_id=1)], trace_ids=[('a',)])

        SegmentParser([factory]).parse(segment)

        assert factory.journal == [('exit', 1), ('build',)]

    def test_new_listener_per_segment(self):
        factory = RecordingFactory()
        parser = SegmentParser([factory])

        parser.parse(make_segment([make_entry_span()]))
        parser.parse(make_segment([make_entry_span()]))

        assert factory.created == 2

    def test_core_info_from_spans(self):
        spans = [
            make_entry_span(span_id=0, start=SEGMENT_START, latency=500),
            make_exit_span(span_id=1, start=SEGMENT_START - 60000, latency=100, is_error=True),
        ]

        info = SegmentParser.build_core_info(make_segment(spans))

        assert info.segment_id == 'segment-1'
        assert info.service_id == 3
        assert info.service_instance_id == 11
        assert info.start_time == SEGMENT_START - 60000
        assert info.end_time == SEGMENT_START + 500
        # bucket comes from the first span, not the earliest one
        assert info.minute_time_bucket == SEGMENT_MINUTE_BUCKET
        assert info.is_error is True

    def test_empty_segment_still_builds(self):
        factory = RecordingFactory()

        info = SegmentParser([factory]).parse(make_segment([]))

        assert info.minute_time_bucket == 0
        assert factory.journal == [('build',)]

    def test_listener_failure_propagates(self):

        class ExplodingListener(RecordingListener):
            def parse_entry(self, span, segment_core_info):
                raise LookupError('boom')

        class ExplodingFactory(RecordingFactory):
            def create(self):
                return ExplodingListener(self.interests, self.journal)

        factory = ExplodingFactory()

        with pytest.raises(LookupError):
            SegmentParser([factory]).parse(make_segment([make_entry_span()]))
        assert ('build',) not in factory.journal


class TestNotify:
    """Tests for the SpanListener.notify dispatch."""

    def test_undeclared_point_is_rejected(self, segment_core_info):
        listener = RecordingListener([ListenerPoint.ENTRY], [])

        with pytest.raises(ValueError):
            listener.notify(ListenerPoint.EXIT, make_exit_span(), segment_core_info)
