"""
Mutation operations for the mind-map graph.

Every operation is a pure function:

    new_snapshot = operation(snapshot, *args, ids=..., clock=...)

Nothing is changed in place. Stale ids (a node that no longer exists) make
an operation a no-op that returns the input snapshot unchanged. Operations
the user is not allowed to perform raise a UserRuleViolation before
anything is built.

Parent/child structure lives in Node.children. Tree edges are created
alongside it by add_node; edges created by connect() are cross-links and
never touch 'children'.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from onemap.collaborators import Clock, IdGenerator, UtcClock, UuidGenerator
from onemap.constants import (
    CHILD_OFFSET_X,
    CHILD_OFFSET_Y,
    DEFAULT_EDGE_STYLE,
    DEFAULT_EDGE_TYPE,
    DEFAULT_MAP_NAME,
    DEFAULT_NODE_COLORS,
    DEFAULT_ROOT_TEXT,
    DUPLICATE_OFFSET_X,
    DUPLICATE_OFFSET_Y,
    DUPLICATE_SUFFIX,
    FONT_SIZES,
)
from onemap.errors import RootDeletionError, SelfConnectionError
from onemap.models import Edge, GraphSnapshot, MindMap, Node, Position
from onemap.traversal import walk_children

logger = logging.getLogger(__name__)

_DEFAULT_IDS = UuidGenerator()
_DEFAULT_CLOCK = UtcClock()

# Fields update_node is allowed to merge. Structure (id, is_root, parent_id,
# children) only changes through the dedicated operations.
UPDATABLE_FIELDS = frozenset({
    "text",
    "background_color",
    "color",
    "font_size",
    "font_weight",
    "is_expanded",
    "position",
})


def new_edge(source_id: str, target_id: str, ids: Optional[IdGenerator] = None) -> Edge:
    """Create an edge with the default rendering type and style."""
    ids = ids or _DEFAULT_IDS
    return Edge(
        id=ids.generate(),
        source=source_id,
        target=target_id,
        type=DEFAULT_EDGE_TYPE,
        style=dict(DEFAULT_EDGE_STYLE),
    )


def new_map(
    name: str = DEFAULT_MAP_NAME,
    ids: Optional[IdGenerator] = None,
    clock: Optional[Clock] = None,
) -> MindMap:
    """Create a map seeded with a single root node."""
    ids = ids or _DEFAULT_IDS
    clock = clock or _DEFAULT_CLOCK
    now = clock.now()
    root = Node(
        id=ids.generate(),
        text=DEFAULT_ROOT_TEXT,
        is_root=True,
        created_at=now,
        updated_at=now,
    )
    return MindMap(id=ids.generate(), name=name, nodes=(root,), connections=(), updated_at=now)


def add_node(
    snapshot: GraphSnapshot,
    parent_id: Optional[str] = None,
    *,
    ids: Optional[IdGenerator] = None,
    clock: Optional[Clock] = None,
) -> GraphSnapshot:
    """
    Add a child node under parent_id (or under the root).

    The new node is placed to the right of its anchor, one row further down
    for every child the anchor already has. Its background colour cycles
    through DEFAULT_NODE_COLORS by node count. A tree edge anchor -> node is
    created and the node id is appended to the anchor's children.

    The new node is always the last node of the returned snapshot.
    Returns the input snapshot if no anchor can be resolved.
    """
    ids = ids or _DEFAULT_IDS
    clock = clock or _DEFAULT_CLOCK

    anchor = snapshot.get(parent_id) if parent_id else None
    if anchor is None:
        if parent_id:
            logger.info(f"Parent {parent_id} not found, adding under root")
        anchor = snapshot.root
    if anchor is None:
        logger.warning("Cannot add node: map has no root")
        return snapshot

    now = clock.now()
    color = DEFAULT_NODE_COLORS[len(snapshot.nodes) % len(DEFAULT_NODE_COLORS)]
    node = Node(
        id=ids.generate(),
        background_color=color,
        parent_id=anchor.id,
        position=anchor.position.offset(CHILD_OFFSET_X, CHILD_OFFSET_Y * len(anchor.children)),
        created_at=now,
        updated_at=now,
    )
    updated_anchor = replace(anchor, children=anchor.children + (node.id,), updated_at=now)
    edge = new_edge(anchor.id, node.id, ids)

    nodes = snapshot.replace_nodes([updated_anchor]).nodes + (node,)
    return GraphSnapshot(nodes=nodes, edges=snapshot.edges + (edge,))


def collect_descendants(snapshot: GraphSnapshot, node_id: str) -> set:
    """Ids of node_id and everything reachable from it through 'children'."""
    return set(walk_children(snapshot, node_id))


def delete_node(
    snapshot: GraphSnapshot,
    node_id: str,
    *,
    clock: Optional[Clock] = None,
) -> GraphSnapshot:
    """
    Delete a node together with its whole 'children' subtree.

    Removes every edge touching a removed node and strips removed ids from
    the children of surviving nodes.

    Raises:
        RootDeletionError: node_id is the root
    """
    clock = clock or _DEFAULT_CLOCK

    target = snapshot.get(node_id)
    if target is None:
        return snapshot
    if target.is_root:
        raise RootDeletionError(node_id)

    doomed = collect_descendants(snapshot, node_id)
    root = snapshot.root
    if root is not None and root.id in doomed:
        # Only reachable through a cycle in 'children'
        logger.warning(f"Root {root.id} is reachable from {node_id} through a cycle; keeping it")
        doomed.discard(root.id)

    now = clock.now()
    survivors = []
    for node in snapshot.nodes:
        if node.id in doomed:
            continue
        kept_children = tuple(c for c in node.children if c not in doomed)
        if kept_children != node.children:
            node = replace(node, children=kept_children, updated_at=now)
        survivors.append(node)

    edges = tuple(
        e for e in snapshot.edges
        if e.source not in doomed and e.target not in doomed
    )
    logger.info(f"Deleted node {node_id} and {len(doomed) - 1} descendant(s)")
    return GraphSnapshot(nodes=tuple(survivors), edges=edges)


def duplicate_node(
    snapshot: GraphSnapshot,
    node_id: str,
    *,
    ids: Optional[IdGenerator] = None,
    clock: Optional[Clock] = None,
) -> GraphSnapshot:
    """
    Append a shallow copy of a node.

    The copy gets a new id, an offset position, fresh timestamps, no
    children and is never the root. It keeps the original's parent_id but is
    not added to any children list, and no edge is created for it.
    """
    ids = ids or _DEFAULT_IDS
    clock = clock or _DEFAULT_CLOCK

    original = snapshot.get(node_id)
    if original is None:
        return snapshot

    now = clock.now()
    copy = replace(
        original,
        id=ids.generate(),
        text=f"{original.text}{DUPLICATE_SUFFIX}",
        position=original.position.offset(DUPLICATE_OFFSET_X, DUPLICATE_OFFSET_Y),
        children=(),
        is_root=False,
        created_at=now,
        updated_at=now,
    )
    return replace(snapshot, nodes=snapshot.nodes + (copy,))


def update_node(
    snapshot: GraphSnapshot,
    node_id: str,
    *,
    clock: Optional[Clock] = None,
    **fields: Any,
) -> GraphSnapshot:
    """
    Merge fields into a node and refresh its updated_at.

    Only UPDATABLE_FIELDS may be given; anything else is a programming
    error and raises ValueError.
    """
    clock = clock or _DEFAULT_CLOCK

    unknown = set(fields) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update node field(s): {', '.join(sorted(unknown))}")

    node = snapshot.get(node_id)
    if node is None:
        return snapshot

    changes: Dict[str, Any] = dict(fields)
    if "position" in changes:
        changes["position"] = Position.from_value(changes["position"])
    updated = replace(node, updated_at=clock.now(), **changes)
    return snapshot.replace_nodes([updated])


def rename_node(
    snapshot: GraphSnapshot,
    node_id: str,
    text: str,
    *,
    clock: Optional[Clock] = None,
) -> GraphSnapshot:
    """Set a node's text. Blank or unchanged text (after trimming) is ignored."""
    node = snapshot.get(node_id)
    if node is None:
        return snapshot
    text = (text or "").strip()
    if not text or text == node.text:
        return snapshot
    return update_node(snapshot, node_id, clock=clock, text=text)


def toggle_expanded(
    snapshot: GraphSnapshot,
    node_id: str,
    *,
    clock: Optional[Clock] = None,
) -> GraphSnapshot:
    node = snapshot.get(node_id)
    if node is None:
        return snapshot
    return update_node(snapshot, node_id, clock=clock, is_expanded=not node.is_expanded)


def set_background_color(
    snapshot: GraphSnapshot,
    node_id: str,
    color: str,
    *,
    clock: Optional[Clock] = None,
) -> GraphSnapshot:
    return update_node(snapshot, node_id, clock=clock, background_color=color)


def set_font_size(
    snapshot: GraphSnapshot,
    node_id: str,
    font_size: int,
    *,
    clock: Optional[Clock] = None,
) -> GraphSnapshot:
    if font_size not in FONT_SIZES:
        raise ValueError(f"Font size must be one of {FONT_SIZES}, got {font_size!r}")
    return update_node(snapshot, node_id, clock=clock, font_size=font_size)


def toggle_font_weight(
    snapshot: GraphSnapshot,
    node_id: str,
    *,
    clock: Optional[Clock] = None,
) -> GraphSnapshot:
    node = snapshot.get(node_id)
    if node is None:
        return snapshot
    weight = "normal" if node.font_weight == "bold" else "bold"
    return update_node(snapshot, node_id, clock=clock, font_weight=weight)


def connect(
    snapshot: GraphSnapshot,
    source_id: str,
    target_id: str,
    *,
    ids: Optional[IdGenerator] = None,
) -> GraphSnapshot:
    """
    Add a cross-link edge source -> target.

    Duplicate edges between the same pair are allowed. Neither node's
    children list changes.

    Raises:
        SelfConnectionError: source_id == target_id
    """
    if source_id == target_id:
        raise SelfConnectionError(source_id)
    if source_id not in snapshot or target_id not in snapshot:
        return snapshot
    edge = new_edge(source_id, target_id, ids)
    return replace(snapshot, edges=snapshot.edges + (edge,))
