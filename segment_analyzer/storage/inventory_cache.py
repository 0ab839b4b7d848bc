"""
In-memory inventory caches resolving numeric ids to names.

Each cache is populated once (from an inventory document or by explicit
registration) and then read concurrently by any number of segment workers.
Registration takes a lock; lookups are plain dictionary reads.
"""

import json
import threading
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from ..core.exceptions import InventoryLookupError, SegmentFormatError
from ..core.types import Const


@dataclass(frozen=True)
class ServiceInventory:
    id: int
    name: str
    mapping_service_id: int = Const.NONE
    address_id: int = Const.NONE


@dataclass(frozen=True)
class ServiceInstanceInventory:
    id: int
    name: str
    service_id: int
    address_id: int = Const.NONE


@dataclass(frozen=True)
class EndpointInventory:
    id: int
    name: str
    service_id: int = Const.NONE


class ServiceInventoryCache:
    """Services by id and by the network address they were registered for."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: Dict[int, ServiceInventory] = {}
        self._by_address: Dict[int, int] = {}
        self.register(ServiceInventory(Const.USER_SERVICE_ID, Const.USER_CODE))

    def register(self, service: ServiceInventory) -> None:
        with self._lock:
            self._by_id[service.id] = service
            if service.address_id != Const.NONE:
                self._by_address[service.address_id] = service.id

    def get(self, service_id: int) -> ServiceInventory:
        try:
            return self._by_id[service_id]
        except KeyError:
            raise InventoryLookupError('service', service_id) from None

    def get_service_id(self, network_address_id: int) -> int:
        """Resolve the service registered for a peer / network address."""
        try:
            return self._by_address[network_address_id]
        except KeyError:
            raise InventoryLookupError('service for network address', network_address_id) from None

    def get_mapping_service_id(self, service_id: int) -> int:
        """Return the override service id, or Const.NONE when there is none."""
        return self.get(service_id).mapping_service_id


class ServiceInstanceInventoryCache:
    """Service instances by id and by (service id, network address)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: Dict[int, ServiceInstanceInventory] = {}
        self._by_address: Dict[Tuple[int, int], int] = {}
        self.register(ServiceInstanceInventory(Const.USER_INSTANCE_ID, Const.USER_CODE, Const.USER_SERVICE_ID))

    def register(self, instance: ServiceInstanceInventory) -> None:
        with self._lock:
            self._by_id[instance.id] = instance
            if instance.address_id != Const.NONE:
                self._by_address[(instance.service_id, instance.address_id)] = instance.id

    def get(self, service_instance_id: int) -> ServiceInstanceInventory:
        try:
            return self._by_id[service_instance_id]
        except KeyError:
            raise InventoryLookupError('service instance', service_instance_id) from None

    def get_service_instance_id(self, service_id: int, network_address_id: int) -> int:
        key = (service_id, network_address_id)
        try:
            return self._by_address[key]
        except KeyError:
            raise InventoryLookupError('service instance for (service, network address)', key) from None


class EndpointInventoryCache:
    """Endpoints by id."""

    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: Dict[int, EndpointInventory] = {}
        self.register(EndpointInventory(Const.USER_ENDPOINT_ID, Const.USER_CODE, Const.USER_SERVICE_ID))

    def register(self, endpoint: EndpointInventory) -> None:
        with self._lock:
            self._by_id[endpoint.id] = endpoint

    def get(self, endpoint_id: int) -> EndpointInventory:
        try:
            return self._by_id[endpoint_id]
        except KeyError:
            raise InventoryLookupError('endpoint', endpoint_id) from None


@dataclass
class InventoryCaches:
    """The three inventory caches a segment listener resolves against."""
    service_cache: ServiceInventoryCache
    instance_cache: ServiceInstanceInventoryCache
    endpoint_cache: EndpointInventoryCache

    @classmethod
    def empty(cls) -> 'InventoryCaches':
        return cls(ServiceInventoryCache(), ServiceInstanceInventoryCache(), EndpointInventoryCache())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InventoryCaches':
        """
        Build caches from an inventory document.

        Expected shape:
            {"services": [{"id", "name", "mappingServiceId"?, "addressId"?}],
             "serviceInstances": [{"id", "name", "serviceId", "addressId"?}],
             "endpoints": [{"id", "name", "serviceId"?}]}

        Raises:
            SegmentFormatError: If an entry lacks a required field
        """
        if not isinstance(data, dict):
            raise SegmentFormatError("Inventory document must be a JSON object")
        caches = cls.empty()
        try:
            for item in data.get('services', []):
                caches.service_cache.register(ServiceInventory(
                    id=int(item['id']),
                    name=item['name'],
                    mapping_service_id=int(item.get('mappingServiceId', Const.NONE)),
                    address_id=int(item.get('addressId', Const.NONE)),
                ))
            for item in data.get('serviceInstances', []):
                caches.instance_cache.register(ServiceInstanceInventory(
                    id=int(item['id']),
                    name=item['name'],
                    service_id=int(item['serviceId']),
                    address_id=int(item.get('addressId', Const.NONE)),
                ))
            for item in data.get('endpoints', []):
                caches.endpoint_cache.register(EndpointInventory(
                    id=int(item['id']),
                    name=item['name'],
                    service_id=int(item.get('serviceId', Const.NONE)),
                ))
        except (KeyError, TypeError, ValueError) as e:
            raise SegmentFormatError(f"Invalid inventory entry: {e}") from e
        return caches

    @classmethod
    def from_file(cls, file_path: str) -> 'InventoryCaches':
        with open(file_path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise SegmentFormatError(f"Inventory file '{file_path}' is not valid JSON: {e}") from e
        return cls.from_dict(data)
