"""
UI Adaptation Layer for OneMap.

Glue between NiceGUI and the editor:
- NiceGuiNotifier: Notifier implementation backed by ui.notify
- ask_confirmation: async yes/no dialog answered before a delete
- normalize_click_payload / resolve_node_id_from_payload: chart click parsing
"""

import logging
from typing import Any, Dict, Optional

from nicegui import ui

from onemap.graph_viz import REQUESTED_EVENT_KEYS
from onemap.models import GraphSnapshot

logger = logging.getLogger(__name__)


class NiceGuiNotifier:
    """Shows notifications as NiceGUI toasts."""

    def __init__(self, position: str = 'bottom-right'):
        self.position = position

    def notify(self, title: str, message: str, severity: str = "info") -> None:
        text = f"{title}: {message}" if message else title
        ui.notify(text, type=severity, position=self.position)


async def ask_confirmation(message: str) -> bool:
    """Open a modal yes/no dialog and wait for the answer."""
    with ui.dialog() as dialog, ui.card():
        ui.label(message)
        with ui.row().classes('w-full justify-end'):
            ui.button('Cancel', on_click=lambda: dialog.submit(False)).props('flat')
            ui.button('Delete', on_click=lambda: dialog.submit(True)).props('color=negative')
    answer = await dialog
    dialog.clear()
    return bool(answer)


def normalize_click_payload(raw_payload: Any) -> Dict[str, Any]:
    """Normalize NiceGUI chart click payloads into a dictionary for easier parsing."""
    if isinstance(raw_payload, dict):
        return raw_payload
    if isinstance(raw_payload, (list, tuple)):
        return {
            REQUESTED_EVENT_KEYS[i]: raw_payload[i]
            for i in range(min(len(raw_payload), len(REQUESTED_EVENT_KEYS)))
        }
    if isinstance(raw_payload, str):
        return {'name': raw_payload}
    return {}


def resolve_node_id_from_payload(payload: Dict[str, Any], snapshot: GraphSnapshot) -> Optional[str]:
    """Return a node id from a normalized payload, validated against the snapshot."""
    if not isinstance(payload, dict):
        return None
    if payload.get('componentType') != 'series':
        return None
    if payload.get('dataType') == 'edge':
        return None

    node_id = payload.get('name')
    if not node_id:
        return None
    if node_id in snapshot:
        return node_id

    for node in snapshot.nodes:
        if node.text == node_id:
            return node.id
    logger.debug(f"Click on unknown node {node_id!r}")
    return None
