"""
Main segment analyzer orchestrator.
"""

import logging
from collections import Counter
from typing import Iterable, Optional

from ..core.types import TraceServiceConfig, TraceSegment
from ..listeners import MultiScopesSpanListenerFactory
from ..processors import SegmentFileProcessor, SegmentParser
from ..storage import InMemorySourceReceiver, InventoryCaches

logger = logging.getLogger(__name__)


class _CountingReceiver:
    """Forwards records to the real sink and counts them per scope."""

    def __init__(self, delegate, counts: Counter):
        self.delegate = delegate
        self.counts = counts

    def receive(self, record) -> None:
        self.delegate.receive(record)
        self.counts[record.scope] += 1


class SegmentAnalyzer:
    """Wires caches, configuration and sink, and processes segments one by one."""

    def __init__(
        self,
        caches: InventoryCaches,
        config: Optional[TraceServiceConfig] = None,
        source_receiver=None
    ):
        """
        Initialize the SegmentAnalyzer.

        Args:
            caches: Inventory caches used to resolve ids to names
            config: Slow statement configuration (defaults apply when omitted)
            source_receiver: Record sink; an InMemorySourceReceiver is created
                             when omitted
        """
        self.caches = caches
        self.config = config or TraceServiceConfig()
        self.source_receiver = source_receiver if source_receiver is not None else InMemorySourceReceiver()

        self.segment_count = 0
        self.record_counts: Counter = Counter()

        self.listener_factory = MultiScopesSpanListenerFactory(
            _CountingReceiver(self.source_receiver, self.record_counts),
            caches.service_cache,
            caches.instance_cache,
            caches.endpoint_cache,
            self.config
        )
        self.segment_parser = SegmentParser([self.listener_factory])
        self.file_processor = SegmentFileProcessor()

    def process_segment(self, segment: TraceSegment) -> None:
        """
        Derive and emit all records of one segment.

        Args:
            segment: Decoded segment

        Raises:
            InventoryLookupError: If an id in the segment is not registered
        """
        self.segment_parser.parse(segment)
        self.segment_count += 1

    def process_segments(self, segments: Iterable[TraceSegment]) -> None:
        for segment in segments:
            self.process_segment(segment)

    def process_segment_file(self, file_path: str) -> None:
        """
        Process every segment of a JSON segment file.

        Args:
            file_path: Path to the segment JSON file
        """
        before = self.segment_count
        self.process_segments(self.file_processor.process_file(file_path))
        logger.info("Processed %d segments from %s, %d records emitted in total",
                    self.segment_count - before, file_path, sum(self.record_counts.values()))
