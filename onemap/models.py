"""
Data model for the mind-map engine.

All model objects are frozen dataclasses. Mutation functions never change a
node or edge in place; they build new objects with dataclasses.replace and
return a new GraphSnapshot.

Attribute names are snake_case in Python. to_dict() / from_dict() convert to
and from the camelCase record shape that is persisted:

    {
      "id": "...", "text": "...", "backgroundColor": "#3B82F6",
      "color": "#FFFFFF", "fontSize": 14, "fontWeight": "normal",
      "isRoot": false, "parentId": "...", "children": ["..."],
      "isExpanded": true, "position": {"x": 400, "y": 300},
      "createdAt": "...", "updatedAt": "..."
    }
"""

from dataclasses import dataclass, field, replace
from functools import cached_property
from typing import Dict, Any, List, Optional, Tuple, Iterable

from onemap.constants import (
    DEFAULT_NODE_TEXT,
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_TEXT_COLOR,
    DEFAULT_FONT_SIZE,
    DEFAULT_FONT_WEIGHT,
    DEFAULT_POSITION,
    DEFAULT_EDGE_TYPE,
    DEFAULT_EDGE_STYLE,
    DEFAULT_MAP_NAME,
    FONT_WEIGHTS,
)


def _require_id(data: Dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str) or not value:
        raise ValueError(f"'{key}' must be a non-empty string, got {value!r}")
    return value


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_font_weight(value: Any) -> bool:
    return isinstance(value, str) and value in FONT_WEIGHTS


def _optional_field(data: Dict[str, Any], key: str, check, default: Any) -> Any:
    """Return data[key], or default when it is missing or empty. Wrong types raise ValueError."""
    value = data.get(key)
    if value is None:
        return default
    if not check(value):
        raise ValueError(f"'{key}' has an invalid value {value!r}")
    return value or default


def _coordinate(value: Any, default: float) -> float:
    if value is None:
        return default
    if not _is_number(value):
        raise ValueError(f"Position coordinate must be a number, got {value!r}")
    return value


@dataclass(frozen=True)
class Position:
    """2D canvas coordinate."""
    x: float = DEFAULT_POSITION[0]
    y: float = DEFAULT_POSITION[1]

    def offset(self, dx: float, dy: float) -> "Position":
        return Position(self.x + dx, self.y + dy)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_value(cls, value: Any) -> "Position":
        """
        Build a Position from a Position, an {x, y} dict or an (x, y) pair.
        None gives the default position; a missing or null coordinate gives
        the default for that axis. Non-numeric coordinates raise ValueError.
        """
        if value is None:
            return cls()
        if isinstance(value, Position):
            return value
        if isinstance(value, dict):
            return cls(
                _coordinate(value.get("x"), DEFAULT_POSITION[0]),
                _coordinate(value.get("y"), DEFAULT_POSITION[1]),
            )
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return cls(
                _coordinate(value[0], DEFAULT_POSITION[0]),
                _coordinate(value[1], DEFAULT_POSITION[1]),
            )
        raise ValueError(f"Cannot interpret {value!r} as a position")


@dataclass(frozen=True)
class Node:
    """One mind-map item."""
    id: str
    text: str = DEFAULT_NODE_TEXT
    background_color: str = DEFAULT_BACKGROUND_COLOR
    color: str = DEFAULT_TEXT_COLOR
    font_size: int = DEFAULT_FONT_SIZE
    font_weight: str = DEFAULT_FONT_WEIGHT
    is_root: bool = False
    parent_id: Optional[str] = None
    children: Tuple[str, ...] = ()
    is_expanded: bool = True
    position: Position = field(default_factory=Position)
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "text": self.text,
            "backgroundColor": self.background_color,
            "color": self.color,
            "fontSize": self.font_size,
            "fontWeight": self.font_weight,
            "isRoot": self.is_root,
            "children": list(self.children),
            "isExpanded": self.is_expanded,
            "position": self.position.to_dict(),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.parent_id is not None:
            data["parentId"] = self.parent_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], fallback_timestamp: str = "") -> "Node":
        """
        Build a Node from a persisted record.

        Missing optional fields are filled with the same defaults add_node
        uses, so records written before a field existed still load. Raises
        KeyError / ValueError / TypeError when the record has no usable id
        or a present field has the wrong type.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Node record must be an object, got {type(data).__name__}")

        children = data.get("children") or []
        if not isinstance(children, (list, tuple)):
            raise ValueError(f"'children' must be a list, got {children!r}")

        is_expanded = data.get("isExpanded")
        if is_expanded is not None and not isinstance(is_expanded, bool):
            raise ValueError(f"'isExpanded' must be a boolean, got {is_expanded!r}")
        created_at = data.get("createdAt") or fallback_timestamp

        return cls(
            id=_require_id(data, "id"),
            text=_optional_field(data, "text", _is_str, DEFAULT_NODE_TEXT),
            background_color=_optional_field(data, "backgroundColor", _is_str, DEFAULT_BACKGROUND_COLOR),
            color=_optional_field(data, "color", _is_str, DEFAULT_TEXT_COLOR),
            font_size=_optional_field(data, "fontSize", _is_number, DEFAULT_FONT_SIZE),
            font_weight=_optional_field(data, "fontWeight", _is_font_weight, DEFAULT_FONT_WEIGHT),
            is_root=bool(data.get("isRoot", False)),
            parent_id=data.get("parentId") or None,
            children=tuple(str(c) for c in children),
            is_expanded=True if is_expanded is None else is_expanded,
            position=Position.from_value(data.get("position")),
            created_at=created_at,
            updated_at=data.get("updatedAt") or created_at,
        )


@dataclass(frozen=True)
class Edge:
    """Directed connection between two node ids."""
    id: str
    source: str
    target: str
    type: str = DEFAULT_EDGE_TYPE
    style: Optional[Dict[str, Any]] = field(default_factory=lambda: dict(DEFAULT_EDGE_STYLE))

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "type": self.type,
        }
        if self.style is not None:
            data["style"] = dict(self.style)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Edge":
        if not isinstance(data, dict):
            raise TypeError(f"Edge record must be an object, got {type(data).__name__}")
        style = data.get("style")
        return cls(
            id=_require_id(data, "id"),
            source=_require_id(data, "source"),
            target=_require_id(data, "target"),
            type=data.get("type") or DEFAULT_EDGE_TYPE,
            style=dict(style) if isinstance(style, dict) else dict(DEFAULT_EDGE_STYLE),
        )


@dataclass(frozen=True)
class GraphSnapshot:
    """
    Immutable (nodes, edges) state of one map.

    Node order is creation order; edge order is creation order.
    """
    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()

    @cached_property
    def _index(self) -> Dict[str, Node]:
        return {n.id: n for n in self.nodes}

    def get(self, node_id: Optional[str]) -> Optional[Node]:
        if node_id is None:
            return None
        return self._index.get(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    @property
    def root(self) -> Optional[Node]:
        for node in self.nodes:
            if node.is_root:
                return node
        return None

    def replace_nodes(self, updated: Iterable[Node]) -> "GraphSnapshot":
        """Return a snapshot where nodes with matching ids are swapped in place."""
        by_id = {n.id: n for n in updated}
        return replace(self, nodes=tuple(by_id.get(n.id, n) for n in self.nodes))


@dataclass(frozen=True)
class MindMap:
    """One diagram: metadata plus a node/edge graph."""
    id: str
    name: str = DEFAULT_MAP_NAME
    nodes: Tuple[Node, ...] = ()
    connections: Tuple[Edge, ...] = ()
    updated_at: str = ""

    @property
    def snapshot(self) -> GraphSnapshot:
        return GraphSnapshot(nodes=self.nodes, edges=self.connections)

    def with_snapshot(self, snapshot: GraphSnapshot, updated_at: Optional[str] = None) -> "MindMap":
        return replace(
            self,
            nodes=snapshot.nodes,
            connections=snapshot.edges,
            updated_at=self.updated_at if updated_at is None else updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "nodes": [n.to_dict() for n in self.nodes],
            "connections": [e.to_dict() for e in self.connections],
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_id: str = "") -> "MindMap":
        """
        Build a MindMap from a persisted record.

        'nodes' is required and must be a list. 'connections' may be missing
        (older records) but must be a list when present.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Map record must be an object, got {type(data).__name__}")
        raw_nodes = data["nodes"]
        if not isinstance(raw_nodes, list):
            raise ValueError("'nodes' must be a list")
        raw_edges = data.get("connections")
        if raw_edges is None:
            raw_edges = []
        if not isinstance(raw_edges, list):
            raise ValueError("'connections' must be a list")

        updated_at = data.get("updatedAt") or ""
        nodes: List[Node] = [Node.from_dict(n, fallback_timestamp=updated_at) for n in raw_nodes]
        edges: List[Edge] = [Edge.from_dict(e) for e in raw_edges]
        return cls(
            id=data.get("id") or default_id,
            name=data.get("name") or DEFAULT_MAP_NAME,
            nodes=tuple(nodes),
            connections=tuple(edges),
            updated_at=updated_at,
        )
