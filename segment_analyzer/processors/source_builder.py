"""
Source builder: one topology edge under construction.
"""

from typing import Optional

from ..core.exceptions import IncompleteSourceError
from ..core.types import Const, DetectPoint, RequestType
from ..records import (
    All,
    Service,
    ServiceInstance,
    Endpoint,
    ServiceRelation,
    ServiceInstanceRelation,
    EndpointRelation,
    DatabaseAccess,
)


class SourceBuilder:
    """
    Accumulates the source and destination side of one call leg and converts
    itself into typed records on demand.

    Ids are filled in by the listener while spans are parsed; names are
    resolved afterwards from the inventory caches. `time_bucket` is stamped
    once, at finalize time.
    """

    def __init__(self):
        self.source_endpoint_id: Optional[int] = None
        self.source_endpoint_name: Optional[str] = None
        self.source_service_instance_id: Optional[int] = None
        self.source_service_instance_name: Optional[str] = None
        self.source_service_id: Optional[int] = None
        self.source_service_name: Optional[str] = None

        self.dest_endpoint_id: Optional[int] = None
        self.dest_endpoint_name: Optional[str] = None
        self.dest_service_instance_id: Optional[int] = None
        self.dest_service_instance_name: Optional[str] = None
        self.dest_service_id: Optional[int] = None
        self.dest_service_name: Optional[str] = None

        self.detect_point: Optional[DetectPoint] = None
        self.component_id: int = Const.NONE
        self.type: Optional[RequestType] = None
        self.latency: int = 0
        self.status: bool = True
        self.response_code: int = Const.NONE
        self.time_bucket: Optional[int] = None

    def _check_complete(self) -> None:
        missing = [
            name for name in (
                'source_endpoint_id', 'source_service_instance_id', 'source_service_id',
                'dest_endpoint_id', 'dest_service_instance_id', 'dest_service_id',
                'detect_point', 'time_bucket',
            )
            if getattr(self, name) is None
        ]
        if missing:
            raise IncompleteSourceError(
                f"Source builder is missing {', '.join(missing)} and cannot be converted"
            )

    def to_all(self) -> All:
        self._check_complete()
        return All(
            name=self.dest_service_name,
            service_instance_name=self.dest_service_instance_name,
            endpoint_name=self.dest_endpoint_name,
            latency=self.latency,
            status=self.status,
            response_code=self.response_code,
            type=self.type,
            time_bucket=self.time_bucket,
        )

    def to_service(self) -> Service:
        self._check_complete()
        return Service(
            id=self.dest_service_id,
            name=self.dest_service_name,
            service_instance_name=self.dest_service_instance_name,
            endpoint_name=self.dest_endpoint_name,
            latency=self.latency,
            status=self.status,
            response_code=self.response_code,
            type=self.type,
            time_bucket=self.time_bucket,
        )

    def to_service_instance(self) -> ServiceInstance:
        self._check_complete()
        return ServiceInstance(
            id=self.dest_service_instance_id,
            name=self.dest_service_instance_name,
            service_id=self.dest_service_id,
            service_name=self.dest_service_name,
            endpoint_name=self.dest_endpoint_name,
            latency=self.latency,
            status=self.status,
            response_code=self.response_code,
            type=self.type,
            time_bucket=self.time_bucket,
        )

    def to_endpoint(self) -> Endpoint:
        self._check_complete()
        return Endpoint(
            id=self.dest_endpoint_id,
            name=self.dest_endpoint_name,
            service_id=self.dest_service_id,
            service_name=self.dest_service_name,
            service_instance_id=self.dest_service_instance_id,
            service_instance_name=self.dest_service_instance_name,
            latency=self.latency,
            status=self.status,
            response_code=self.response_code,
            type=self.type,
            time_bucket=self.time_bucket,
        )

    def to_service_relation(self) -> ServiceRelation:
        self._check_complete()
        return ServiceRelation(
            source_service_id=self.source_service_id,
            source_service_name=self.source_service_name,
            source_service_instance_name=self.source_service_instance_name,
            dest_service_id=self.dest_service_id,
            dest_service_name=self.dest_service_name,
            dest_service_instance_name=self.dest_service_instance_name,
            endpoint=self.dest_endpoint_name,
            component_id=self.component_id,
            latency=self.latency,
            status=self.status,
            response_code=self.response_code,
            type=self.type,
            detect_point=self.detect_point,
            time_bucket=self.time_bucket,
        )

    def to_service_instance_relation(self) -> ServiceInstanceRelation:
        self._check_complete()
        return ServiceInstanceRelation(
            source_service_instance_id=self.source_service_instance_id,
            source_service_id=self.source_service_id,
            source_service_name=self.source_service_name,
            source_service_instance_name=self.source_service_instance_name,
            dest_service_instance_id=self.dest_service_instance_id,
            dest_service_id=self.dest_service_id,
            dest_service_name=self.dest_service_name,
            dest_service_instance_name=self.dest_service_instance_name,
            endpoint=self.dest_endpoint_name,
            component_id=self.component_id,
            latency=self.latency,
            status=self.status,
            response_code=self.response_code,
            type=self.type,
            detect_point=self.detect_point,
            time_bucket=self.time_bucket,
        )

    def to_endpoint_relation(self) -> Optional[EndpointRelation]:
        """
        Build the endpoint relation, or None when either endpoint is unknown.

        A cross-process reference may not carry its parent endpoint, in which
        case no endpoint-level edge can be established.
        """
        self._check_complete()
        if not self.source_endpoint_name or not self.dest_endpoint_name:
            return None
        return EndpointRelation(
            endpoint_id=self.source_endpoint_id,
            endpoint=self.source_endpoint_name,
            service_id=self.source_service_id,
            service_name=self.source_service_name,
            service_instance_id=self.source_service_instance_id,
            service_instance_name=self.source_service_instance_name,
            child_endpoint_id=self.dest_endpoint_id,
            child_endpoint=self.dest_endpoint_name,
            child_service_id=self.dest_service_id,
            child_service_name=self.dest_service_name,
            child_service_instance_id=self.dest_service_instance_id,
            child_service_instance_name=self.dest_service_instance_name,
            component_id=self.component_id,
            rpc_latency=self.latency,
            status=self.status,
            response_code=self.response_code,
            type=self.type,
            detect_point=self.detect_point,
            time_bucket=self.time_bucket,
        )

    def to_database_access(self) -> DatabaseAccess:
        self._check_complete()
        return DatabaseAccess(
            database_service_id=self.dest_service_id,
            name=self.dest_service_name,
            database_type_id=self.component_id,
            latency=self.latency,
            status=self.status,
            time_bucket=self.time_bucket,
        )
