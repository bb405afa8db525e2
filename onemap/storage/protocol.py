"""
KeyValueStore Protocol Definition.

The persistence adapter only needs string values under string keys. Every
save overwrites the whole value; there are no partial updates.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Abstract protocol for key-value storage backends."""

    @property
    def backend_type(self) -> str:
        """Return the backend type identifier ('file' or 'memory')."""
        ...

    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under key.

        Returns:
            The stored string, or None if nothing is stored
        """
        ...

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...

    def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key is not an error."""
        ...
