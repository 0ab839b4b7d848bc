"""
Pytest configuration and shared fixtures for segment analyzer tests.
"""
import json
import pytest

from segment_analyzer.core.types import (
    KeyStringValuePair,
    ReferenceDecorator,
    SegmentCoreInfo,
    SpanDecorator,
    SpanLayer,
    SpanType,
    TraceServiceConfig,
)
from segment_analyzer.listeners import MultiScopesSpanListener
from segment_analyzer.storage import InMemorySourceReceiver, InventoryCaches

# 2023-11-14 22:13:20 UTC
SEGMENT_START = 1700000000000
SEGMENT_MINUTE_BUCKET = 202311142213

GATEWAY_SERVICE_ID = 2
ORDER_SERVICE_ID = 3
MYSQL_SERVICE_ID = 4
PROXY_SERVICE_ID = 5
KAFKA_SERVICE_ID = 6

GATEWAY_INSTANCE_ID = 10
ORDER_INSTANCE_ID = 11
MYSQL_INSTANCE_ID = 12
PROXY_INSTANCE_ID = 13
KAFKA_INSTANCE_ID = 14

CHECKOUT_ENDPOINT_ID = 21
ORDERS_ENDPOINT_ID = 20
QUERY_ENDPOINT_ID = 22
CONSUMER_ENDPOINT_ID = 23
PROXY_ENDPOINT_ID = 24

MYSQL_PEER_ID = 100
PROXY_PEER_ID = 200
KAFKA_PEER_ID = 300

INVENTORY = {
    "services": [
        {"id": GATEWAY_SERVICE_ID, "name": "gateway"},
        {"id": ORDER_SERVICE_ID, "name": "order-service"},
        {"id": MYSQL_SERVICE_ID, "name": "mysql:3306", "addressId": MYSQL_PEER_ID},
        {"id": PROXY_SERVICE_ID, "name": "order-proxy:8080", "addressId": PROXY_PEER_ID,
         "mappingServiceId": ORDER_SERVICE_ID},
        {"id": KAFKA_SERVICE_ID, "name": "kafka:9092", "addressId": KAFKA_PEER_ID},
    ],
    "serviceInstances": [
        {"id": GATEWAY_INSTANCE_ID, "name": "gateway-pod-1", "serviceId": GATEWAY_SERVICE_ID},
        {"id": ORDER_INSTANCE_ID, "name": "order-pod-1", "serviceId": ORDER_SERVICE_ID},
        {"id": MYSQL_INSTANCE_ID, "name": "mysql:3306", "serviceId": MYSQL_SERVICE_ID,
         "addressId": MYSQL_PEER_ID},
        {"id": PROXY_INSTANCE_ID, "name": "order-proxy:8080", "serviceId": PROXY_SERVICE_ID,
         "addressId": PROXY_PEER_ID},
        {"id": KAFKA_INSTANCE_ID, "name": "kafka:9092", "serviceId": KAFKA_SERVICE_ID,
         "addressId": KAFKA_PEER_ID},
    ],
    "endpoints": [
        {"id": ORDERS_ENDPOINT_ID, "name": "/api/orders", "serviceId": ORDER_SERVICE_ID},
        {"id": CHECKOUT_ENDPOINT_ID, "name": "/checkout", "serviceId": GATEWAY_SERVICE_ID},
        {"id": QUERY_ENDPOINT_ID, "name": "Mysql/JDBI/Statement/executeQuery", "serviceId": ORDER_SERVICE_ID},
        {"id": CONSUMER_ENDPOINT_ID, "name": "Kafka/orders/Consumer", "serviceId": ORDER_SERVICE_ID},
        {"id": PROXY_ENDPOINT_ID, "name": "/proxy/orders", "serviceId": ORDER_SERVICE_ID},
    ],
}


def make_tags(*pairs):
    """Helper to create ordered span tags from (key, value) tuples."""
    return tuple(KeyStringValuePair(k, v) for k, v in pairs)


def make_entry_span(refs=(), layer=SpanLayer.HTTP, span_id=0, start=SEGMENT_START, latency=120,
                    operation_name_id=ORDERS_ENDPOINT_ID, is_error=False, component_id=1):
    """Helper to create an entry span in the order service."""
    return SpanDecorator(
        span_id=span_id,
        span_type=SpanType.ENTRY,
        span_layer=layer,
        start_time=start,
        end_time=start + latency,
        is_error=is_error,
        operation_name_id=operation_name_id,
        component_id=component_id,
        refs=tuple(refs),
    )


def make_exit_span(peer_id=MYSQL_PEER_ID, layer=SpanLayer.DATABASE, span_id=1, start=SEGMENT_START + 10,
                   latency=50, tags=(), operation_name_id=QUERY_ENDPOINT_ID, is_error=False, component_id=5):
    """Helper to create an exit span leaving the order service."""
    return SpanDecorator(
        span_id=span_id,
        parent_span_id=0,
        span_type=SpanType.EXIT,
        span_layer=layer,
        start_time=start,
        end_time=start + latency,
        is_error=is_error,
        operation_name_id=operation_name_id,
        peer_id=peer_id,
        component_id=component_id,
        tags=tuple(tags),
    )


def gateway_ref(parent_endpoint_id=CHECKOUT_ENDPOINT_ID):
    """Reference from the gateway instance."""
    return ReferenceDecorator(
        parent_endpoint_id=parent_endpoint_id,
        parent_service_instance_id=GATEWAY_INSTANCE_ID,
        parent_span_id=3,
        parent_trace_segment_id='gateway-segment',
    )


@pytest.fixture
def inventory_data():
    """Inventory document (deep copy so tests may mutate it)."""
    return json.loads(json.dumps(INVENTORY))


@pytest.fixture
def caches(inventory_data):
    """Inventory caches loaded with the sample services."""
    return InventoryCaches.from_dict(inventory_data)


@pytest.fixture
def config():
    """Configuration with a 100 ms mysql threshold."""
    return TraceServiceConfig(max_slow_sql_length=2000, db_latency_thresholds='default:200,mysql:100')


@pytest.fixture
def receiver():
    """Record sink collecting everything in order."""
    return InMemorySourceReceiver()


@pytest.fixture
def listener(receiver, caches, config):
    """Fresh listener wired to the sample caches."""
    return MultiScopesSpanListener(
        receiver,
        caches.service_cache,
        caches.instance_cache,
        caches.endpoint_cache,
        config
    )


@pytest.fixture
def segment_core_info():
    """Metadata of a segment recorded by order-pod-1."""
    return SegmentCoreInfo(
        segment_id='segment-1',
        service_id=ORDER_SERVICE_ID,
        service_instance_id=ORDER_INSTANCE_ID,
        start_time=SEGMENT_START,
        end_time=SEGMENT_START + 500,
        minute_time_bucket=SEGMENT_MINUTE_BUCKET,
    )


@pytest.fixture
def sample_segment_document():
    """Segment document in the JSON file format."""
    return {
        "traceSegmentId": "segment-1",
        "serviceId": ORDER_SERVICE_ID,
        "serviceInstanceId": ORDER_INSTANCE_ID,
        "globalTraceIds": [{"idParts": [1700, 42, 7]}],
        "spans": [
            {
                "spanId": 0,
                "parentSpanId": -1,
                "spanType": "Entry",
                "spanLayer": "Http",
                "startTime": SEGMENT_START,
                "endTime": SEGMENT_START + 400,
                "operationNameId": ORDERS_ENDPOINT_ID,
                "componentId": 1,
                "refs": [
                    {
                        "parentEndpointId": CHECKOUT_ENDPOINT_ID,
                        "parentServiceInstanceId": GATEWAY_INSTANCE_ID,
                        "parentSpanId": 3,
                        "parentTraceSegmentId": "gateway-segment"
                    }
                ]
            },
            {
                "spanId": 1,
                "parentSpanId": 0,
                "spanType": "Exit",
                "spanLayer": "Database",
                "startTime": SEGMENT_START + 100000,
                "endTime": SEGMENT_START + 100250,
                "operationNameId": QUERY_ENDPOINT_ID,
                "peerId": MYSQL_PEER_ID,
                "componentId": 5,
                "tags": [
                    {"key": "db.type", "value": "mysql"},
                    {"key": "db.statement", "value": "SELECT * FROM orders WHERE id = ?"}
                ]
            },
            {
                "spanId": 2,
                "parentSpanId": 0,
                "spanType": "Local",
                "startTime": SEGMENT_START + 300,
                "endTime": SEGMENT_START + 310,
                "operationNameId": ORDERS_ENDPOINT_ID
            }
        ]
    }


@pytest.fixture
def temp_json_file(tmp_path):
    """Create a temporary JSON file and return a helper function."""
    def _create_file(data, name=None):
        file_path = tmp_path / (name or f"test_{id(data)}.json")
        with open(file_path, "w") as f:
            json.dump(data, f)
        return str(file_path)

    return _create_file
