"""
MindMapEditor - session facade between the host page and the graph engine.

The editor owns one GraphStore, the connect-mode state machine and the
current selection. Each public method runs one pure mutation against the
current snapshot and commits the result, so the host page never holds
graph state of its own.

User-rule violations (deleting the root, connecting a node to itself) are
reported through the Notifier and leave the map untouched. Deleting asks
the Confirm collaborator first; a "no" is a no-op.
"""

import logging
from typing import Any, Callable, Optional

from onemap import mutations
from onemap.collaborators import (
    Clock,
    Confirm,
    IdGenerator,
    LoggingNotifier,
    Notifier,
    UtcClock,
    UuidGenerator,
)
from onemap.connection_mode import ConnectionModeController, ConnectionPhase, ConnectionState
from onemap.errors import RootDeletionError, UserRuleViolation
from onemap.graph_store import GraphStore
from onemap.models import GraphSnapshot, MindMap, Node
from onemap.persistence import PersistenceAdapter
from onemap.visibility import VisibilityResolver, VisibleGraph

logger = logging.getLogger(__name__)


class MindMapEditor:
    """Editing session for one mind map."""

    def __init__(
        self,
        persistence: PersistenceAdapter,
        confirm: Confirm,
        notifier: Optional[Notifier] = None,
        ids: Optional[IdGenerator] = None,
        clock: Optional[Clock] = None,
        mind_map: Optional[MindMap] = None,
    ):
        self.persistence = persistence
        self.confirm = confirm
        self.notifier = notifier or LoggingNotifier()
        self.ids = ids or UuidGenerator()
        self.clock = clock or UtcClock()
        self.resolver = VisibilityResolver()
        self.store = GraphStore()
        self.selected_node_id: Optional[str] = None

        self.connection_mode = ConnectionModeController(self._connect_from_mode)
        self.connection_mode.set_on_state_change(self._announce_connection_state)

        self._map = mind_map or mutations.new_map(ids=self.ids, clock=self.clock)
        self.store.commit(self._map.snapshot)

    # --- State ---

    @property
    def snapshot(self) -> GraphSnapshot:
        return self.store.snapshot

    @property
    def mind_map(self) -> MindMap:
        """The current map: stored metadata plus the live snapshot."""
        return self._map.with_snapshot(self.store.snapshot)

    def get(self, node_id: str) -> Optional[Node]:
        return self.store.get(node_id)

    def visible(self) -> VisibleGraph:
        return self.resolver.resolve(self.store.snapshot)

    # --- Persistence ---

    def load(self) -> MindMap:
        """
        Replace the session with the stored map.

        Falls back to a fresh map when nothing usable is stored.
        """
        loaded = self.persistence.load()
        if loaded is None:
            logger.warning("No usable saved map, starting a new one")
            loaded = mutations.new_map(ids=self.ids, clock=self.clock)
        self._map = loaded
        self.store.replace(loaded.nodes, loaded.connections)
        self.selected_node_id = None
        self.connection_mode.cancel()
        return loaded

    def save(self) -> MindMap:
        saved = self.persistence.save(self.mind_map)
        self._map = saved
        self.notifier.notify("Map saved", "Your changes were saved.", "positive")
        return saved

    # --- Mutations ---

    def add_node(self, parent_id: Optional[str] = None) -> Optional[str]:
        """Add a child of parent_id (or of the root). Returns the new id and selects it."""
        if not self._apply(mutations.add_node, parent_id, ids=self.ids, clock=self.clock):
            return None
        new_id = self.store.snapshot.nodes[-1].id
        self.selected_node_id = new_id
        self.notifier.notify("Node added", "Double-click to edit the new node.", "positive")
        return new_id

    def delete_node(self, node_id: str, confirm: Optional[Confirm] = None) -> bool:
        """
        Delete a node and its subtree after confirmation.

        Args:
            node_id: Node to delete
            confirm: Override for the session's Confirm (e.g. an answered dialog)

        Returns:
            True if anything was deleted
        """
        node = self.store.get(node_id)
        if node is None:
            return False
        if node.is_root:
            self._report(RootDeletionError(node_id))
            return False

        gate = confirm or self.confirm
        if not gate.ask(f'Delete node "{node.text}" and all of its children?'):
            logger.info(f"Delete of node {node_id} cancelled")
            return False

        if not self._apply(mutations.delete_node, node_id, clock=self.clock):
            return False

        if self.selected_node_id not in self.store.snapshot:
            self.selected_node_id = None
        source_id = self.connection_mode.state.source_id
        if source_id is not None and source_id not in self.store.snapshot:
            self.connection_mode.cancel()

        self.notifier.notify(
            "Node deleted", f'"{node.text}" and its children were deleted.', "positive"
        )
        return True

    def duplicate_node(self, node_id: str) -> Optional[str]:
        original = self.store.get(node_id)
        if not self._apply(mutations.duplicate_node, node_id, ids=self.ids, clock=self.clock):
            return None
        new_id = self.store.snapshot.nodes[-1].id
        self.selected_node_id = new_id
        self.notifier.notify("Node duplicated", f'"{original.text}" was duplicated.', "positive")
        return new_id

    def update_node(self, node_id: str, **fields: Any) -> bool:
        return self._apply(mutations.update_node, node_id, clock=self.clock, **fields)

    def rename_node(self, node_id: str, text: str) -> bool:
        return self._apply(mutations.rename_node, node_id, text, clock=self.clock)

    def toggle_expanded(self, node_id: str) -> bool:
        return self._apply(mutations.toggle_expanded, node_id, clock=self.clock)

    def set_background_color(self, node_id: str, color: str) -> bool:
        return self._apply(mutations.set_background_color, node_id, color, clock=self.clock)

    def set_font_size(self, node_id: str, font_size: int) -> bool:
        return self._apply(mutations.set_font_size, node_id, font_size, clock=self.clock)

    def toggle_font_weight(self, node_id: str) -> bool:
        return self._apply(mutations.toggle_font_weight, node_id, clock=self.clock)

    def connect(self, source_id: str, target_id: str) -> bool:
        if not self._apply(mutations.connect, source_id, target_id, ids=self.ids):
            return False
        self.notifier.notify("Connection created", "Nodes connected.", "positive")
        return True

    # --- Interaction ---

    def toggle_connect_mode(self) -> ConnectionState:
        return self.connection_mode.toggle()

    def start_connection_from(self, node_id: str) -> ConnectionState:
        if node_id not in self.store.snapshot:
            return self.connection_mode.state
        return self.connection_mode.begin_from(node_id)

    def node_clicked(self, node_id: str) -> Optional[str]:
        """
        Route a node click.

        In connect mode the click goes to the state machine; otherwise it
        toggles the selection. Returns the selected node id afterwards.
        """
        if node_id not in self.store.snapshot:
            return self.selected_node_id
        if self.connection_mode.is_active:
            self.connection_mode.node_clicked(node_id)
        else:
            self.selected_node_id = None if self.selected_node_id == node_id else node_id
        return self.selected_node_id

    # --- Internals ---

    def _apply(self, operation: Callable[..., GraphSnapshot], *args: Any, **kwargs: Any) -> bool:
        """Run a mutation on the current snapshot and commit it. Returns True if it changed."""
        before = self.store.snapshot
        try:
            after = operation(before, *args, **kwargs)
        except UserRuleViolation as e:
            self._report(e)
            return False
        if after is before:
            return False
        self.store.commit(after)
        return True

    def _report(self, error: UserRuleViolation) -> None:
        logger.warning(f"Rejected: {error}")
        self.notifier.notify(error.title, str(error), "negative")

    def _connect_from_mode(self, source_id: str, target_id: str) -> None:
        self.connect(source_id, target_id)

    def _announce_connection_state(self, state: ConnectionState) -> None:
        if state.phase is ConnectionPhase.AWAITING_SOURCE:
            self.notifier.notify("Connect mode on", "Click two nodes to connect them.", "info")
        elif state.phase is ConnectionPhase.AWAITING_TARGET:
            self.notifier.notify("Node selected", "Click another node to create the connection.", "info")
        else:
            self.notifier.notify("Connect mode off", "", "info")
