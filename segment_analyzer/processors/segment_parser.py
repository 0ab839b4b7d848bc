"""
Segment parser: drives span listeners over one decoded segment.
"""

import logging
from typing import Dict, List

from ..core.types import ListenerPoint, SegmentCoreInfo, SpanType, TraceSegment
from ..formatters import get_minute_time_bucket

logger = logging.getLogger(__name__)

_SPAN_TYPE_POINTS = {
    SpanType.ENTRY: ListenerPoint.ENTRY,
    SpanType.EXIT: ListenerPoint.EXIT,
}


class SegmentParser:
    """Creates fresh listeners for a segment and feeds them its events."""

    def __init__(self, listener_factories):
        """
        Initialize with listener factories.

        Args:
            listener_factories: Iterable of SpanListenerFactory; each one
                                contributes one new listener per segment
        """
        self.listener_factories = list(listener_factories)

    @staticmethod
    def build_core_info(segment: TraceSegment) -> SegmentCoreInfo:
        """
        Derive segment-level metadata.

        The minute bucket comes from the first span of the segment; start and
        end times span every span in it.

        Args:
            segment: Decoded segment

        Returns:
            SegmentCoreInfo for the segment
        """
        spans = segment.spans
        if spans:
            start_time = min(s.start_time for s in spans)
            end_time = max(s.end_time for s in spans)
            minute_time_bucket = get_minute_time_bucket(spans[0].start_time)
        else:
            start_time, end_time, minute_time_bucket = 0, 0, 0

        return SegmentCoreInfo(
            segment_id=segment.segment_id,
            service_id=segment.service_id,
            service_instance_id=segment.service_instance_id,
            start_time=start_time,
            end_time=end_time,
            minute_time_bucket=minute_time_bucket,
            is_error=any(s.is_error for s in spans),
        )

    def parse(self, segment: TraceSegment) -> SegmentCoreInfo:
        """
        Notify listeners of every event of the segment, then build them.

        Global trace ids are delivered first, followed by entry and exit spans
        in segment order. Local spans produce no event. Any listener failure
        propagates and aborts the segment.

        Args:
            segment: Decoded segment

        Returns:
            The SegmentCoreInfo the listeners were given
        """
        segment_core_info = self.build_core_info(segment)
        listeners = [factory.create() for factory in self.listener_factories]

        interested: Dict[ListenerPoint, List] = {
            point: [listener for listener in listeners if listener.contains_point(point)]
            for point in ListenerPoint
        }

        for unique_id in segment.global_trace_ids:
            for listener in interested[ListenerPoint.GLOBAL_TRACE_IDS]:
                listener.notify(ListenerPoint.GLOBAL_TRACE_IDS, unique_id, segment_core_info)

        for span in segment.spans:
            point = _SPAN_TYPE_POINTS.get(span.span_type)
            if point is None:
                continue
            for listener in interested[point]:
                listener.notify(point, span, segment_core_info)

        for listener in listeners:
            listener.build()

        logger.debug("Parsed segment %s: %d spans, %d listeners",
                     segment.segment_id, len(segment.spans), len(listeners))
        return segment_core_info
