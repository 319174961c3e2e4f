"""Adapters — bindings for the shell, the filesystem and the archiver.

Public re-exports for convenient access.
"""

from dxship.adapters.base import Adapter, ExecutionContext
from dxship.adapters.mock import MockAdapter
from dxship.adapters.registry import AdapterRegistry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
]
