"""Immutable topology and metric records."""

from .sources import (
    All,
    Service,
    ServiceInstance,
    Endpoint,
    ServiceRelation,
    ServiceInstanceRelation,
    EndpointRelation,
    DatabaseAccess,
    DatabaseSlowStatement,
)

__all__ = [
    "All",
    "Service",
    "ServiceInstance",
    "Endpoint",
    "ServiceRelation",
    "ServiceInstanceRelation",
    "EndpointRelation",
    "DatabaseAccess",
    "DatabaseSlowStatement",
]
