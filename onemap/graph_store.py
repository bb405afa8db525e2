"""
GraphStore - holder of the current snapshot for one map.

The store is the single place that owns state. Mutation functions in
onemap.mutations are pure; the caller passes store.snapshot in and commits
exactly one returned snapshot per operation.
"""

import logging
from typing import Iterable, List, Optional, Tuple

import networkx as nx

from onemap.models import Edge, GraphSnapshot, Node

logger = logging.getLogger(__name__)


class GraphStore:
    """Owns the (nodes, edges) snapshot of exactly one map at a time."""

    def __init__(self, snapshot: Optional[GraphSnapshot] = None):
        self._snapshot = snapshot or GraphSnapshot()

    @property
    def snapshot(self) -> GraphSnapshot:
        return self._snapshot

    def get(self, node_id: str) -> Optional[Node]:
        return self._snapshot.get(node_id)

    def all(self) -> Tuple[Tuple[Node, ...], Tuple[Edge, ...]]:
        return self._snapshot.nodes, self._snapshot.edges

    def replace(self, nodes: Iterable[Node], edges: Iterable[Edge]) -> GraphSnapshot:
        """Replace the whole state (used on load)."""
        return self.commit(GraphSnapshot(nodes=tuple(nodes), edges=tuple(edges)))

    def commit(self, snapshot: GraphSnapshot) -> GraphSnapshot:
        """Make snapshot the current state. Returns it for chaining."""
        self._snapshot = snapshot
        return snapshot


def children_graph(snapshot: GraphSnapshot) -> nx.DiGraph:
    """Build a DiGraph of parent -> child relations taken from 'children' lists."""
    G = nx.DiGraph()
    for node in snapshot.nodes:
        G.add_node(node.id)
    for node in snapshot.nodes:
        for child_id in node.children:
            if child_id in snapshot:
                G.add_edge(node.id, child_id)
    return G


def find_integrity_issues(snapshot: GraphSnapshot) -> List[str]:
    """
    Check the map invariants and return a human-readable list of violations.

    Checked:
    - exactly one root
    - unique node ids and edge ids
    - every child id exists and points back to its parent via parent_id
    - no node listed as a child of more than one node
    - no cycle in the 'children' relation

    Cross-link edges are not checked against 'children'; they are free
    annotations between any two nodes.
    """
    issues: List[str] = []

    roots = [n.id for n in snapshot.nodes if n.is_root]
    if len(roots) != 1:
        issues.append(f"Expected exactly one root node, found {len(roots)}")

    seen_nodes = set()
    for node in snapshot.nodes:
        if node.id in seen_nodes:
            issues.append(f"Duplicate node id {node.id}")
        seen_nodes.add(node.id)

    seen_edges = set()
    for edge in snapshot.edges:
        if edge.id in seen_edges:
            issues.append(f"Duplicate edge id {edge.id}")
        seen_edges.add(edge.id)

    listed_under = {}
    for node in snapshot.nodes:
        for child_id in node.children:
            child = snapshot.get(child_id)
            if child is None:
                issues.append(f"Node {node.id} lists missing child {child_id}")
                continue
            if child.parent_id != node.id:
                issues.append(
                    f"Node {child_id} is a child of {node.id} but has parent_id {child.parent_id}"
                )
            if child_id in listed_under and listed_under[child_id] != node.id:
                issues.append(
                    f"Node {child_id} is listed under both {listed_under[child_id]} and {node.id}"
                )
            listed_under.setdefault(child_id, node.id)

    G = children_graph(snapshot)
    for cycle in nx.simple_cycles(G):
        issues.append(f"Cycle in children: {' -> '.join(cycle + [cycle[0]])}")

    return issues


def log_integrity_issues(snapshot: GraphSnapshot, context: str = "") -> List[str]:
    """Run find_integrity_issues and log each violation as a warning."""
    issues = find_integrity_issues(snapshot)
    prefix = f"{context}: " if context else ""
    for issue in issues:
        logger.warning(f"{prefix}{issue}")
    return issues
