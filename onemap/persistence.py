"""
Persistence adapter: whole-map save/load against a key-value store.

The map is written as one JSON document under a fixed key; every save
overwrites the previous value. load() never raises for bad data: anything
it cannot read gives None and a warning in the log, and the caller falls
back to a fresh map.
"""

import json
import logging
from typing import Optional

from onemap.collaborators import Clock, UtcClock
from onemap.constants import STORAGE_KEY
from onemap.graph_store import log_integrity_issues
from onemap.models import MindMap
from onemap.storage.protocol import KeyValueStore

logger = logging.getLogger(__name__)


class PersistenceAdapter:
    """Serializes MindMap objects to a KeyValueStore."""

    def __init__(self, store: KeyValueStore, clock: Optional[Clock] = None, key: str = STORAGE_KEY):
        self.store = store
        self.clock = clock or UtcClock()
        self.key = key

    def save(self, mind_map: MindMap) -> MindMap:
        """
        Write the full map with updatedAt set to now.

        Returns:
            The map as saved (with the new updated_at)
        """
        saved = mind_map.with_snapshot(mind_map.snapshot, updated_at=self.clock.now())
        payload = json.dumps(saved.to_dict(), indent=2, ensure_ascii=False)
        self.store.set(self.key, payload)
        logger.info(
            f"Saved map '{saved.name}' ({len(saved.nodes)} nodes, "
            f"{len(saved.connections)} connections) to {self.store.backend_type} store"
        )
        return saved

    def load(self) -> Optional[MindMap]:
        """
        Read the stored map.

        Returns:
            The map with defaults applied to every node, or None when nothing
            is stored or the stored value is malformed
        """
        try:
            raw = self.store.get(self.key)
        except UnicodeDecodeError as e:
            logger.warning(f"Saved map under '{self.key}' is not valid UTF-8: {e}")
            return None
        if raw is None:
            logger.info(f"No saved map under '{self.key}'")
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Saved map under '{self.key}' is not valid JSON: {e}")
            return None

        try:
            mind_map = MindMap.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Saved map under '{self.key}' is malformed: {e!r}")
            return None

        log_integrity_issues(mind_map.snapshot, context=f"Loaded map '{mind_map.name}'")
        logger.info(f"Loaded map '{mind_map.name}' with {len(mind_map.nodes)} nodes")
        return mind_map

    def clear(self) -> None:
        self.store.delete(self.key)
