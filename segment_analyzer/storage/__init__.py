"""Inventory caches and record sinks."""

from .inventory_cache import (
    ServiceInventory,
    ServiceInstanceInventory,
    EndpointInventory,
    ServiceInventoryCache,
    ServiceInstanceInventoryCache,
    EndpointInventoryCache,
    InventoryCaches,
)
from .source_receiver import SourceReceiver, InMemorySourceReceiver

__all__ = [
    'ServiceInventory',
    'ServiceInstanceInventory',
    'EndpointInventory',
    'ServiceInventoryCache',
    'ServiceInstanceInventoryCache',
    'EndpointInventoryCache',
    'InventoryCaches',
    'SourceReceiver',
    'InMemorySourceReceiver',
]
