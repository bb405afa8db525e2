"""
Iterative traversal over the 'children' relation.

Stored data can be malformed (a node listed under two parents, or a cycle in
'children'). Traversal uses an explicit stack and a visited set so such data
cannot cause unbounded recursion or an infinite loop.
"""

import logging
from typing import Callable, List, Optional

from onemap.models import GraphSnapshot, Node

logger = logging.getLogger(__name__)


def walk_children(
    snapshot: GraphSnapshot,
    start_id: str,
    descend: Optional[Callable[[Node], bool]] = None,
) -> List[str]:
    """
    Return the ids reachable from start_id through 'children', in pre-order.

    Args:
        snapshot: Graph to walk
        start_id: Node to start from (included in the result if it exists)
        descend: Predicate deciding whether a node's children are visited.
                 None means always descend.

    Child ids that do not resolve to a node are skipped.
    """
    order: List[str] = []
    visited = set()
    stack = [start_id]

    while stack:
        node_id = stack.pop()
        if node_id in visited:
            logger.warning(
                f"Node {node_id} reached twice while walking from {start_id}: "
                f"'children' does not form a tree"
            )
            continue
        node = snapshot.get(node_id)
        if node is None:
            continue
        visited.add(node_id)
        order.append(node_id)
        if descend is None or descend(node):
            # Reversed so the first child is popped first
            stack.extend(reversed(node.children))

    return order
