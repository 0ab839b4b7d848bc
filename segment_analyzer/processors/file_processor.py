"""
JSON segment file processing using streaming parser.
"""

import logging
from typing import Any, Dict, Iterator

import ijson

from ..core.exceptions import SegmentFormatError
from ..core.types import (
    Const,
    KeyStringValuePair,
    ReferenceDecorator,
    SpanDecorator,
    SpanLayer,
    SpanType,
    TraceSegment,
    UniqueId,
)

logger = logging.getLogger(__name__)


class SegmentFileProcessor:
    """Decodes trace segment JSON documents into TraceSegment objects."""

    @staticmethod
    def process_file(file_path: str) -> Iterator[TraceSegment]:
        """
        Stream the segments of a JSON file.

        The document is expected to hold a top-level "segments" array.

        Args:
            file_path: Path to the segment JSON file

        Yields:
            TraceSegment per array item, in file order
        """
        with open(file_path, 'rb') as f:
            segment_count = 0
            try:
                for item in ijson.items(f, 'segments.item'):
                    segment_count += 1
                    yield SegmentFileProcessor.parse_segment(item)
            except ijson.JSONError as e:
                raise SegmentFormatError(f"Segment file '{file_path}' is not valid JSON: {e}") from e

        logger.info("Read %d segments from %s", segment_count, file_path)

    @staticmethod
    def parse_segment(data: Dict[str, Any]) -> TraceSegment:
        """
        Convert one segment dictionary to a TraceSegment.

        Args:
            data: Segment dictionary (camelCase keys)

        Returns:
            TraceSegment

        Raises:
            SegmentFormatError: If a required field is missing or malformed
        """
        try:
            return TraceSegment(
                segment_id=str(data['traceSegmentId']),
                service_id=int(data['serviceId']),
                service_instance_id=int(data['serviceInstanceId']),
                global_trace_ids=tuple(
                    UniqueId(tuple(uid.get('idParts', [])))
                    for uid in data.get('globalTraceIds', [])
                ),
                spans=tuple(SegmentFileProcessor._parse_span(span) for span in data.get('spans', [])),
            )
        except SegmentFormatError:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise SegmentFormatError(f"Invalid segment: {e!r}") from e

    @staticmethod
    def _parse_span(span: Dict[str, Any]) -> SpanDecorator:
        try:
            span_type = SpanType(span['spanType'])
            span_layer = SpanLayer(span.get('spanLayer', SpanLayer.UNKNOWN.value))
        except ValueError as e:
            raise SegmentFormatError(f"Invalid span {span.get('spanId')!r}: {e}") from e

        return SpanDecorator(
            span_id=int(span['spanId']),
            parent_span_id=int(span.get('parentSpanId', -1)),
            span_type=span_type,
            span_layer=span_layer,
            start_time=int(span.get('startTime', 0)),
            end_time=int(span.get('endTime', 0)),
            is_error=bool(span.get('isError', False)),
            operation_name_id=int(span.get('operationNameId', Const.NONE)),
            peer_id=int(span.get('peerId', Const.UNSET_PEER_ID)),
            component_id=int(span.get('componentId', Const.NONE)),
            tags=tuple(
                KeyStringValuePair(tag['key'], tag.get('value', ''))
                for tag in span.get('tags', [])
            ),
            refs=tuple(
                ReferenceDecorator(
                    parent_endpoint_id=int(ref.get('parentEndpointId', Const.NONE)),
                    parent_service_instance_id=int(ref.get('parentServiceInstanceId', Const.NONE)),
                    network_address_id=int(ref.get('networkAddressId', Const.NONE)),
                    parent_span_id=int(ref.get('parentSpanId', -1)),
                    parent_trace_segment_id=str(ref.get('parentTraceSegmentId', '')),
                )
                for ref in span.get('refs', [])
            ),
        )
