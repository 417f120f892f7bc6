"""Adapters — tool bindings for the build steps.

Public re-exports for convenient access.
"""

from rezdox.adapters.base import Adapter, ExecutionContext
from rezdox.adapters.mock import MockAdapter
from rezdox.adapters.registry import AdapterRegistry, default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
    "default_registry",
]
