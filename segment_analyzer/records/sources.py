"""
Output records emitted to the record sink.

Every record is a frozen value object; `scope` names the aggregation scope a
downstream backend routes it to.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional

from ..core.types import DetectPoint, RequestType


@dataclass(frozen=True)
class All:
    """Full-scope traffic record for one inbound call."""
    scope: ClassVar[str] = 'All'

    name: str
    service_instance_name: str
    endpoint_name: str
    latency: int
    status: bool
    response_code: int
    type: RequestType
    time_bucket: int


@dataclass(frozen=True)
class Service:
    scope: ClassVar[str] = 'Service'

    id: int
    name: str
    service_instance_name: str
    endpoint_name: str
    latency: int
    status: bool
    response_code: int
    type: RequestType
    time_bucket: int


@dataclass(frozen=True)
class ServiceInstance:
    scope: ClassVar[str] = 'ServiceInstance'

    id: int
    name: str
    service_id: int
    service_name: str
    endpoint_name: str
    latency: int
    status: bool
    response_code: int
    type: RequestType
    time_bucket: int


@dataclass(frozen=True)
class Endpoint:
    scope: ClassVar[str] = 'Endpoint'

    id: int
    name: str
    service_id: int
    service_name: str
    service_instance_id: int
    service_instance_name: str
    latency: int
    status: bool
    response_code: int
    type: RequestType
    time_bucket: int


@dataclass(frozen=True)
class ServiceRelation:
    scope: ClassVar[str] = 'ServiceRelation'

    source_service_id: int
    source_service_name: str
    source_service_instance_name: str
    dest_service_id: int
    dest_service_name: str
    dest_service_instance_name: str
    endpoint: str
    component_id: int
    latency: int
    status: bool
    response_code: int
    type: RequestType
    detect_point: DetectPoint
    time_bucket: int


@dataclass(frozen=True)
class ServiceInstanceRelation:
    scope: ClassVar[str] = 'ServiceInstanceRelation'

    source_service_instance_id: int
    source_service_id: int
    source_service_name: str
    source_service_instance_name: str
    dest_service_instance_id: int
    dest_service_id: int
    dest_service_name: str
    dest_service_instance_name: str
    endpoint: str
    component_id: int
    latency: int
    status: bool
    response_code: int
    type: RequestType
    detect_point: DetectPoint
    time_bucket: int


@dataclass(frozen=True)
class EndpointRelation:
    """Caller endpoint -> callee endpoint edge."""
    scope: ClassVar[str] = 'EndpointRelation'

    endpoint_id: int
    endpoint: str
    service_id: int
    service_name: str
    service_instance_id: int
    service_instance_name: str
    child_endpoint_id: int
    child_endpoint: str
    child_service_id: int
    child_service_name: str
    child_service_instance_id: int
    child_service_instance_name: str
    component_id: int
    rpc_latency: int
    status: bool
    response_code: int
    type: RequestType
    detect_point: DetectPoint
    time_bucket: int


@dataclass(frozen=True)
class DatabaseAccess:
    """Access to a database service observed from the client side."""
    scope: ClassVar[str] = 'DatabaseAccess'

    database_service_id: int
    name: str
    database_type_id: int
    latency: int
    status: bool
    time_bucket: int


@dataclass(frozen=True)
class DatabaseSlowStatement:
    """
    A database access slower than its per-type threshold.

    `id` is "<segment id>-<span id>". `time_bucket` comes from the span's own
    start time rather than the segment's shared bucket.
    """
    scope: ClassVar[str] = 'DatabaseSlowStatement'

    id: str
    database_service_id: int
    statement: Optional[str]
    latency: int
    time_bucket: int
    trace_id: Optional[str] = None
