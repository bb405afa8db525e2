"""
Storage backend abstraction for OneMap.

Supports two key-value backends:
- FileBackend: one JSON file per key in a local directory (default)
- MemoryBackend: in-process dict, for tests and throwaway sessions
"""

from onemap.storage.protocol import KeyValueStore
from onemap.storage.file_backend import FileBackend
from onemap.storage.memory_backend import MemoryBackend
from onemap.storage.factory import create_store

__all__ = [
    'KeyValueStore',
    'FileBackend',
    'MemoryBackend',
    'create_store',
]
