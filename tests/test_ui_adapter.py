"""
Tests for chart click payload parsing.
"""

import pytest

from onemap.models import GraphSnapshot, Node
from onemap.ui_adapter import normalize_click_payload, resolve_node_id_from_payload


@pytest.fixture
def snapshot():
    return GraphSnapshot(nodes=(
        Node(id="r", text="Root", is_root=True, children=("a",)),
        Node(id="a", text="Ideas", parent_id="r"),
    ))


class TestNormalizeClickPayload:

    def test_dict_passes_through(self):
        payload = {"componentType": "series", "name": "a"}
        assert normalize_click_payload(payload) is payload

    def test_list_maps_to_requested_keys(self):
        assert normalize_click_payload(["series", "a", "graph"]) == {
            "componentType": "series",
            "name": "a",
            "seriesType": "graph",
        }

    def test_string_is_name(self):
        assert normalize_click_payload("a") == {"name": "a"}

    def test_other_types(self):
        assert normalize_click_payload(None) == {}


class TestResolveNodeId:

    def test_by_id(self, snapshot):
        payload = {"componentType": "series", "name": "a", "dataType": "node"}
        assert resolve_node_id_from_payload(payload, snapshot) == "a"

    def test_falls_back_to_text(self, snapshot):
        payload = {"componentType": "series", "name": "Ideas"}
        assert resolve_node_id_from_payload(payload, snapshot) == "a"

    @pytest.mark.parametrize("payload", [
        {"componentType": "title", "name": "a"},
        {"componentType": "series", "name": "a", "dataType": "edge"},
        {"componentType": "series", "name": ""},
        {"componentType": "series", "name": "nowhere"},
        "a",
    ])
    def test_unresolvable(self, snapshot, payload):
        assert resolve_node_id_from_payload(payload, snapshot) is None
