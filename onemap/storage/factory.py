"""
Backend Factory for OneMap.

Creates the key-value store selected by configuration.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from onemap.config import DEFAULT_BACKEND, get_storage_backend, get_storage_dir
from onemap.storage.file_backend import FileBackend
from onemap.storage.memory_backend import MemoryBackend
from onemap.storage.protocol import KeyValueStore

logger = logging.getLogger(__name__)


def create_store(
    config: Optional[dict] = None,
    force_backend: Optional[str] = None,
    storage_dir: Optional[Union[str, Path]] = None,
) -> KeyValueStore:
    """
    Create a key-value store.

    Args:
        config: Configuration dict (None = read config.json / environment)
        force_backend: Override the configured backend type
        storage_dir: Override the configured storage directory (file backend)

    Returns:
        FileBackend or MemoryBackend instance
    """
    backend_type = force_backend or get_storage_backend(config)

    if backend_type == "memory":
        return MemoryBackend()

    if backend_type != "file":
        logger.warning(f"Unknown storage backend '{backend_type}', using '{DEFAULT_BACKEND}'")

    directory = Path(storage_dir) if storage_dir else get_storage_dir(config)
    return FileBackend(directory)
