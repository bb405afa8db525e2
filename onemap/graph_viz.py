"""
Graph visualizer that produces an ECharts-compatible configuration for the
visible part of a mind map.

The output is a plain dict usable with NiceGUI's ui.echart. Node positions
are the stored positions (layout 'none'); this module does not compute a
layout.

Tree edges (parent -> child through 'children') are drawn solid;
cross-links created in connect mode are drawn dashed.
"""

from typing import Any, Dict, Optional

from onemap.models import Edge, Node
from onemap.visibility import VisibleGraph

# Event keys we request from ECharts click events
REQUESTED_EVENT_KEYS = ['componentType', 'name', 'seriesType', 'value', 'dataType']

SELECTED_BORDER_COLOR = "#3B82F6"
ROOT_BORDER_COLOR = "#FACC15"


class GraphVisualizer:
    """
    Build an ECharts option dict (single 'graph' series) from a VisibleGraph.

    Node entries carry the node id as 'name' so click payloads resolve back
    to node ids; the displayed text goes in the label formatter.
    """

    @staticmethod
    def is_tree_edge(edge: Edge, source: Optional[Node], target: Optional[Node]) -> bool:
        """True when the edge mirrors a 'children' relation."""
        if source is None or target is None:
            return False
        return target.id in source.children and target.parent_id == source.id

    @staticmethod
    def _line_style(edge: Edge, tree_edge: bool) -> Dict[str, Any]:
        style = edge.style or {}
        return {
            "color": style.get("stroke", "#bdbdbd"),
            "width": style.get("strokeWidth", 1),
            "opacity": style.get("strokeOpacity", 0.9),
            "type": "solid" if tree_edge else "dashed",
            "curveness": 0.2 if edge.type == "smoothstep" else 0,
        }

    def generate_echarts(self, visible: VisibleGraph, selected_id: Optional[str] = None) -> Dict[str, Any]:
        by_id = {node.id: node for node in visible.nodes}

        data = []
        for node in visible.nodes:
            border = None
            if node.id == selected_id:
                border = SELECTED_BORDER_COLOR
            elif node.is_root:
                border = ROOT_BORDER_COLOR
            data.append({
                "name": node.id,
                "x": node.position.x,
                "y": node.position.y,
                "symbol": "roundRect",
                "symbolSize": [max(120, len(node.text) * node.font_size * 0.6), node.font_size * 2.8],
                "itemStyle": {
                    "color": node.background_color,
                    "borderColor": border or node.background_color,
                    "borderWidth": 3 if border else 0,
                },
                "label": {
                    "show": True,
                    "formatter": node.text + (" ▸" if node.children and not node.is_expanded else ""),
                    "color": node.color,
                    "fontSize": node.font_size,
                    "fontWeight": node.font_weight,
                },
            })

        links = []
        for edge in visible.edges:
            tree_edge = self.is_tree_edge(edge, by_id.get(edge.source), by_id.get(edge.target))
            links.append({
                "id": edge.id,
                "source": edge.source,
                "target": edge.target,
                "lineStyle": self._line_style(edge, tree_edge),
            })

        return {
            "animation": False,
            "series": [
                {
                    "type": "graph",
                    "layout": "none",
                    "roam": True,
                    "edgeSymbol": ["none", "arrow"],
                    "data": data,
                    "links": links,
                    "emphasis": {"focus": "adjacency"},
                }
            ],
        }
