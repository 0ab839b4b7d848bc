"""
Multi-scope span listener.

Turns the entry and exit spans of one segment into service, instance,
endpoint and relation records, plus database access and slow statement
records for database exit spans.
"""

import logging
from typing import List, Optional

from ..core.types import (
    Const,
    DetectPoint,
    ListenerPoint,
    RequestType,
    SegmentCoreInfo,
    SpanDecorator,
    SpanLayer,
    UniqueId,
)
from ..extractors import DatabaseStatementExtractor, TraceIdAccumulator
from ..formatters import get_minute_time_bucket
from ..processors.source_builder import SourceBuilder
from ..records import DatabaseSlowStatement
from .base import SpanListener, SpanListenerFactory

logger = logging.getLogger(__name__)


class MultiScopesSpanListener(SpanListener):
    """Accumulates source builders for one segment and emits them on build()."""

    INTERESTS = frozenset({ListenerPoint.ENTRY, ListenerPoint.EXIT, ListenerPoint.GLOBAL_TRACE_IDS})

    def __init__(self, source_receiver, service_cache, instance_cache, endpoint_cache, config):
        """
        Initialize with the collaborators resolved at wiring time.

        Args:
            source_receiver: Sink every emitted record is handed to
            service_cache: ServiceInventoryCache
            instance_cache: ServiceInstanceInventoryCache
            endpoint_cache: EndpointInventoryCache
            config: TraceServiceConfig instance
        """
        self.source_receiver = source_receiver
        self.service_cache = service_cache
        self.instance_cache = instance_cache
        self.endpoint_cache = endpoint_cache
        self.config = config
        self.statement_extractor = DatabaseStatementExtractor(config)

        self.entry_source_builders: List[SourceBuilder] = []
        self.exit_source_builders: List[SourceBuilder] = []
        self.slow_database_accesses: List[DatabaseSlowStatement] = []
        self.entry_span: Optional[SpanDecorator] = None
        self.minute_time_bucket: Optional[int] = None
        self._trace_ids = TraceIdAccumulator()

    @property
    def trace_id(self) -> Optional[str]:
        return self._trace_ids.trace_id

    def parse_entry(self, span: SpanDecorator, segment_core_info: SegmentCoreInfo) -> None:
        if self.minute_time_bucket is None:
            self.minute_time_bucket = segment_core_info.minute_time_bucket

        if span.refs_count > 0:
            for reference in span.refs:
                source_builder = SourceBuilder()
                source_builder.source_endpoint_id = reference.parent_endpoint_id

                if span.span_layer == SpanLayer.MQ:
                    # The parent of a consumer is the queue address, not the producing service
                    service_id = self.service_cache.get_service_id(reference.network_address_id)
                    source_builder.source_service_instance_id = self.instance_cache.get_service_instance_id(
                        service_id, reference.network_address_id
                    )
                    source_builder.source_service_id = service_id
                else:
                    source_builder.source_service_instance_id = reference.parent_service_instance_id
                    source_builder.source_service_id = self.instance_cache.get(
                        reference.parent_service_instance_id
                    ).service_id

                self._set_entry_destination(source_builder, span, segment_core_info, optional_source_endpoint=True)
                self.entry_source_builders.append(source_builder)
        else:
            source_builder = SourceBuilder()
            source_builder.source_endpoint_id = Const.USER_ENDPOINT_ID
            source_builder.source_service_instance_id = Const.USER_INSTANCE_ID
            source_builder.source_service_id = Const.USER_SERVICE_ID
            self._set_entry_destination(source_builder, span, segment_core_info)
            self.entry_source_builders.append(source_builder)

        self.entry_span = span

    def _set_entry_destination(
        self,
        source_builder: SourceBuilder,
        span: SpanDecorator,
        segment_core_info: SegmentCoreInfo,
        optional_source_endpoint: bool = False
    ) -> None:
        source_builder.dest_endpoint_id = span.operation_name_id
        source_builder.dest_service_instance_id = segment_core_info.service_instance_id
        source_builder.dest_service_id = segment_core_info.service_id
        source_builder.detect_point = DetectPoint.SERVER
        source_builder.component_id = span.component_id
        self._set_public_attrs(source_builder, span, optional_source_endpoint)

    def parse_exit(self, span: SpanDecorator, segment_core_info: SegmentCoreInfo) -> None:
        if self.minute_time_bucket is None:
            self.minute_time_bucket = segment_core_info.minute_time_bucket

        peer_id = span.peer_id
        if peer_id == Const.UNSET_PEER_ID:
            logger.debug("Skipping exit span %s of segment %s: no peer",
                         span.span_id, segment_core_info.segment_id)
            return

        dest_service_id = self.service_cache.get_service_id(peer_id)
        mapping_service_id = self.service_cache.get_mapping_service_id(dest_service_id)
        dest_instance_id = self.instance_cache.get_service_instance_id(dest_service_id, peer_id)

        source_builder = SourceBuilder()
        source_builder.source_endpoint_id = Const.USER_ENDPOINT_ID
        source_builder.source_service_instance_id = segment_core_info.service_instance_id
        source_builder.source_service_id = segment_core_info.service_id
        source_builder.dest_endpoint_id = span.operation_name_id
        source_builder.dest_service_instance_id = dest_instance_id
        if mapping_service_id == Const.NONE:
            source_builder.dest_service_id = dest_service_id
        else:
            source_builder.dest_service_id = mapping_service_id
        source_builder.detect_point = DetectPoint.CLIENT
        source_builder.component_id = span.component_id
        self._set_public_attrs(source_builder, span)
        self.exit_source_builders.append(source_builder)

        if source_builder.type == RequestType.DATABASE:
            is_slow, statement = self.statement_extractor.extract_slow_statement(
                span.tags, source_builder.latency
            )
            if is_slow:
                slow_statement = DatabaseSlowStatement(
                    id=f"{segment_core_info.segment_id}-{span.span_id}",
                    database_service_id=source_builder.dest_service_id,
                    statement=statement,
                    latency=source_builder.latency,
                    time_bucket=get_minute_time_bucket(span.start_time),
                    trace_id=self.trace_id,
                )
                logger.debug("Slow database access %s: %d ms", slow_statement.id, slow_statement.latency)
                self.slow_database_accesses.append(slow_statement)

    def _set_public_attrs(
        self,
        source_builder: SourceBuilder,
        span: SpanDecorator,
        optional_source_endpoint: bool = False
    ) -> None:
        source_builder.latency = int(span.end_time - span.start_time)
        source_builder.response_code = Const.NONE
        source_builder.status = not span.is_error

        if span.span_layer == SpanLayer.HTTP:
            source_builder.type = RequestType.HTTP
        elif span.span_layer == SpanLayer.DATABASE:
            source_builder.type = RequestType.DATABASE
        else:
            source_builder.type = RequestType.RPC

        source_builder.source_service_name = self.service_cache.get(source_builder.source_service_id).name
        source_builder.source_service_instance_name = self.instance_cache.get(
            source_builder.source_service_instance_id
        ).name
        source_builder.source_endpoint_name = self._endpoint_name(
            source_builder.source_endpoint_id, optional_source_endpoint
        )
        source_builder.dest_service_name = self.service_cache.get(source_builder.dest_service_id).name
        source_builder.dest_service_instance_name = self.instance_cache.get(
            source_builder.dest_service_instance_id
        ).name
        source_builder.dest_endpoint_name = self._endpoint_name(source_builder.dest_endpoint_id)

    def _endpoint_name(self, endpoint_id: int, optional: bool = False) -> Optional[str]:
        # Only a reference's parent endpoint may be absent
        if optional and endpoint_id == Const.NONE:
            return None
        return self.endpoint_cache.get(endpoint_id).name

    def parse_global_trace_id(self, unique_id: UniqueId, segment_core_info: SegmentCoreInfo) -> None:
        self._trace_ids.accept(unique_id.id_parts)

    def build(self) -> None:
        receive = self.source_receiver.receive
        emitted = 0

        for entry_source_builder in self.entry_source_builders:
            entry_source_builder.time_bucket = self.minute_time_bucket
            receive(entry_source_builder.to_all())
            receive(entry_source_builder.to_service())
            receive(entry_source_builder.to_service_instance())
            receive(entry_source_builder.to_endpoint())
            receive(entry_source_builder.to_service_relation())
            receive(entry_source_builder.to_service_instance_relation())
            emitted += 6
            endpoint_relation = entry_source_builder.to_endpoint_relation()
            if endpoint_relation is not None:
                receive(endpoint_relation)
                emitted += 1

        for exit_source_builder in self.exit_source_builders:
            if self.entry_span is not None:
                exit_source_builder.source_endpoint_id = self.entry_span.operation_name_id
            else:
                exit_source_builder.source_endpoint_id = Const.USER_ENDPOINT_ID
            exit_source_builder.source_endpoint_name = self._endpoint_name(exit_source_builder.source_endpoint_id)

            exit_source_builder.time_bucket = self.minute_time_bucket
            receive(exit_source_builder.to_service_relation())
            receive(exit_source_builder.to_service_instance_relation())
            emitted += 2
            if exit_source_builder.type == RequestType.DATABASE:
                receive(exit_source_builder.to_database_access())
                emitted += 1

        for slow_statement in self.slow_database_accesses:
            receive(slow_statement)
            emitted += 1

        logger.debug("Emitted %d records (%d entry legs, %d exit legs, %d slow statements)",
                     emitted, len(self.entry_source_builders), len(self.exit_source_builders),
                     len(self.slow_database_accesses))


class MultiScopesSpanListenerFactory(SpanListenerFactory):
    """Creates a MultiScopesSpanListener per segment with shared collaborators."""

    def __init__(self, source_receiver, service_cache, instance_cache, endpoint_cache, config):
        self.source_receiver = source_receiver
        self.service_cache = service_cache
        self.instance_cache = instance_cache
        self.endpoint_cache = endpoint_cache
        self.config = config

    def create(self) -> MultiScopesSpanListener:
        return MultiScopesSpanListener(
            self.source_receiver,
            self.service_cache,
            self.instance_cache,
            self.endpoint_cache,
            self.config
        )
