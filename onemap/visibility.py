"""
Visible subgraph for the current expand/collapse state.

A node is visible when every ancestor on its path from the root is
expanded. A collapsed node is itself visible but hides its whole subtree,
whatever the descendants' own is_expanded flags say; those flags are kept
so re-expanding restores the previous shape.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from onemap.models import Edge, GraphSnapshot, Node
from onemap.traversal import walk_children

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisibleGraph:
    """Renderable part of a snapshot."""
    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()

    @property
    def node_ids(self) -> Tuple[str, ...]:
        return tuple(n.id for n in self.nodes)


class VisibilityResolver:
    """Computes VisibleGraph from a GraphSnapshot."""

    def resolve(self, snapshot: GraphSnapshot) -> VisibleGraph:
        """Visible nodes come out in pre-order from the root, following each children list."""
        root = snapshot.root
        if root is None:
            if snapshot.nodes:
                logger.warning("Map has no root node; showing every node")
            nodes = snapshot.nodes
        else:
            ids = walk_children(snapshot, root.id, descend=lambda n: n.is_expanded)
            nodes = tuple(snapshot.get(i) for i in ids)

        visible_ids = {n.id for n in nodes}
        # Tree edges and cross-links follow the same rule
        edges = tuple(
            e for e in snapshot.edges
            if e.source in visible_ids and e.target in visible_ids
        )
        return VisibleGraph(nodes=nodes, edges=edges)


def resolve_visible(snapshot: GraphSnapshot) -> VisibleGraph:
    return VisibilityResolver().resolve(snapshot)
