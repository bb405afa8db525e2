"""
OneMap - mind-map graph engine.

Core modules:
- models: frozen Node/Edge/GraphSnapshot/MindMap dataclasses
- graph_store: GraphStore and integrity checks
- visibility: expand/collapse visible subgraph
- mutations: pure (snapshot, args) -> snapshot operations
- connection_mode: click-to-connect state machine
- persistence: load/save against a key-value store
- editor: MindMapEditor session facade used by the host page
"""

__version__ = "0.1.0"
