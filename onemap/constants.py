"""
Shared defaults for mind-map nodes and edges.

The same values are used when a node is created by add_node and when a
stored node is missing a field on load. Keep them in one place.
"""

DEFAULT_NODE_TEXT = "New Node"
DEFAULT_ROOT_TEXT = "Central Idea"
DEFAULT_MAP_NAME = "My Mind Map"

DEFAULT_BACKGROUND_COLOR = "#3B82F6"
DEFAULT_TEXT_COLOR = "#FFFFFF"
DEFAULT_FONT_SIZE = 14
DEFAULT_FONT_WEIGHT = "normal"
DEFAULT_POSITION = (400, 300)

# Round-robin palette for new nodes (indexed by node count)
DEFAULT_NODE_COLORS = [
    "#3B82F6",  # blue
    "#10B981",  # emerald
    "#F59E0B",  # amber
    "#EF4444",  # red
    "#8B5CF6",  # violet
    "#EC4899",  # pink
    "#06B6D4",  # cyan
    "#84CC16",  # lime
]

FONT_SIZES = (10, 12, 14, 16, 18, 20)
FONT_WEIGHTS = ("normal", "bold")

# Layout offsets for new and duplicated nodes
CHILD_OFFSET_X = 200
CHILD_OFFSET_Y = 80
DUPLICATE_OFFSET_X = 150
DUPLICATE_OFFSET_Y = 50
DUPLICATE_SUFFIX = " (copy)"

DEFAULT_EDGE_TYPE = "smoothstep"
DEFAULT_EDGE_STYLE = {
    "stroke": "#E5E7EB",
    "strokeWidth": 0.8,
    "strokeOpacity": 0.4,
}

# Key under which the whole map is written in the key-value store
STORAGE_KEY = "onemap-data"
