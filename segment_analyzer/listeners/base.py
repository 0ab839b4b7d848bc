"""
Span listener contract.

A listener declares the events it is interested in once, receives every
matching event of one segment through `notify`, and emits its records when
`build` is called after the last span.
"""

from abc import ABC, abstractmethod
from typing import FrozenSet, Union

from ..core.types import ListenerPoint, SegmentCoreInfo, SpanDecorator, UniqueId


class SpanListener(ABC):
    """Per-segment listener driven by tagged span events."""

    INTERESTS: FrozenSet[ListenerPoint] = frozenset()

    def contains_point(self, point: ListenerPoint) -> bool:
        return point in self.INTERESTS

    def notify(
        self,
        point: ListenerPoint,
        target: Union[SpanDecorator, UniqueId],
        segment_core_info: SegmentCoreInfo
    ) -> None:
        """
        Dispatch one event to the matching handler.

        Args:
            point: Kind of event
            target: The span for ENTRY/EXIT, the UniqueId for GLOBAL_TRACE_IDS
            segment_core_info: Metadata of the segment being parsed

        Raises:
            ValueError: If the listener did not declare interest in `point`
        """
        if not self.contains_point(point):
            raise ValueError(f"{type(self).__name__} does not handle {point.value} events")
        if point is ListenerPoint.ENTRY:
            self.parse_entry(target, segment_core_info)
        elif point is ListenerPoint.EXIT:
            self.parse_exit(target, segment_core_info)
        else:
            self.parse_global_trace_id(target, segment_core_info)

    def parse_entry(self, span: SpanDecorator, segment_core_info: SegmentCoreInfo) -> None:
        pass

    def parse_exit(self, span: SpanDecorator, segment_core_info: SegmentCoreInfo) -> None:
        pass

    def parse_global_trace_id(self, unique_id: UniqueId, segment_core_info: SegmentCoreInfo) -> None:
        pass

    @abstractmethod
    def build(self) -> None:
        """Emit everything accumulated for the segment."""


class SpanListenerFactory(ABC):
    """Creates one fresh listener per segment."""

    @abstractmethod
    def create(self) -> SpanListener:
        pass
