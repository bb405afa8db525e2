"""
Main NiceGUI application for OneMap.

Hosts one MindMapEditor per page, renders the visible subgraph with
ui.echart and wires toolbar buttons, chart clicks, a confirmation dialog
and toasts to the editor.
"""

import logging
import sys

from dotenv import load_dotenv
from nicegui import ui

load_dotenv()

from onemap.collaborators import StaticConfirm
from onemap.config import get_log_level
from onemap.constants import DEFAULT_NODE_COLORS, FONT_SIZES
from onemap.editor import MindMapEditor
from onemap.graph_viz import GraphVisualizer
from onemap.persistence import PersistenceAdapter
from onemap.storage import create_store
from onemap.ui_adapter import (
    NiceGuiNotifier,
    ask_confirmation,
    normalize_click_payload,
    resolve_node_id_from_payload,
)

logging.basicConfig(
    level=get_log_level(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)


@ui.page('/')
def index():
    # Deletes pass the answer of the async dialog; anything else is refused
    editor = MindMapEditor(
        persistence=PersistenceAdapter(create_store()),
        confirm=StaticConfirm(False),
        notifier=NiceGuiNotifier(),
    )
    editor.load()
    viz = GraphVisualizer()
    state = {}

    def refresh():
        state['chart'].options.clear()
        state['chart'].options.update(viz.generate_echarts(editor.visible(), editor.selected_node_id))
        state['chart'].update()
        refresh_details()

    def refresh_details():
        node = editor.get(editor.selected_node_id) if editor.selected_node_id else None
        state['connect_button'].props(f"color={'warning' if editor.connection_mode.is_active else 'primary'}")
        state['details'].set_visibility(node is not None)
        if node is None:
            return
        state['text_input'].value = node.text
        state['size_select'].value = node.font_size
        state['expand_button'].text = 'Collapse' if node.is_expanded else 'Expand'

    def with_selection(action):
        def handler():
            node_id = editor.selected_node_id
            if not node_id:
                ui.notify('Select a node first', type='warning')
                return
            action(node_id)
            refresh()
        return handler

    def handle_chart_click(e):
        payload = normalize_click_payload({
            'componentType': e.component_type,
            'name': e.name,
            'seriesType': e.series_type,
            'dataType': e.data_type,
        })
        node_id = resolve_node_id_from_payload(payload, editor.snapshot)
        if node_id:
            editor.node_clicked(node_id)
            refresh()

    async def delete_selected():
        node_id = editor.selected_node_id
        node = editor.get(node_id) if node_id else None
        if node is None:
            ui.notify('Select a node first', type='warning')
            return
        if node.is_root:
            # Editor reports the rule violation without asking
            editor.delete_node(node_id)
        else:
            answer = await ask_confirmation(f'Delete node "{node.text}" and all of its children?')
            editor.delete_node(node_id, confirm=StaticConfirm(answer))
        refresh()

    def save():
        try:
            editor.save()
        except OSError as e:
            logger.error(f"Failed to save map: {e}")
            ui.notify(f'Save failed: {e}', type='negative')

    def rename(_=None):
        node_id = editor.selected_node_id
        if node_id and editor.rename_node(node_id, state['text_input'].value or ''):
            refresh()

    def add_child():
        editor.add_node(editor.selected_node_id)
        refresh()

    def toggle_connect():
        if editor.selected_node_id and not editor.connection_mode.is_active:
            editor.start_connection_from(editor.selected_node_id)
        else:
            editor.toggle_connect_mode()
        refresh()

    with ui.header().classes('items-center gap-2 bg-slate-900'):
        ui.label(editor.mind_map.name).classes('text-lg font-bold mr-4')
        ui.button('Add node', icon='add', on_click=add_child)
        ui.button('Duplicate', icon='content_copy', on_click=with_selection(editor.duplicate_node))
        ui.button('Delete', icon='delete', on_click=delete_selected).props('color=negative')
        state['connect_button'] = ui.button('Connect', icon='link', on_click=toggle_connect)
        ui.button('Save', icon='save', on_click=save).props('color=positive')

    def change_font_size(e):
        node = editor.get(editor.selected_node_id) if editor.selected_node_id else None
        if node is not None and e.value and e.value != node.font_size:
            editor.set_font_size(node.id, e.value)
            refresh()

    state['chart'] = ui.echart(
        viz.generate_echarts(editor.visible()),
        on_point_click=handle_chart_click,
    ).classes('w-full h-[85vh]')

    state['details'] = ui.card().classes('fixed right-6 top-20 w-80 z-20 gap-3')
    with state['details']:
        state['text_input'] = ui.input('Text').classes('w-full').on('keydown.enter', rename).on('blur', rename)
        with ui.row().classes('gap-1'):
            for color in DEFAULT_NODE_COLORS:
                ui.button(
                    on_click=with_selection(lambda nid, c=color: editor.set_background_color(nid, c))
                ).style(f'background-color: {color} !important').props('round dense size=sm')
        with ui.row().classes('items-center gap-2'):
            state['size_select'] = ui.select(
                list(FONT_SIZES), label='Font size', on_change=change_font_size,
            ).classes('w-28')
            ui.button('Bold', on_click=with_selection(editor.toggle_font_weight)).props('flat')
        with ui.row().classes('gap-2'):
            ui.button('Add child', icon='subdirectory_arrow_right', on_click=add_child).props('flat')
            state['expand_button'] = ui.button(
                'Collapse', on_click=with_selection(editor.toggle_expanded)
            ).props('flat')
    refresh_details()


if __name__ in {"__main__", "__mp_main__"}:
    ui.run(
        title='OneMap',
        port=8081,
        reload=not getattr(sys, 'frozen', False),
    )
