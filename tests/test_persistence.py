"""
Tests for PersistenceAdapter save/load and the defaulting of stored records.
"""

import json
import logging

import pytest

from onemap import mutations
from onemap.constants import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_EDGE_STYLE,
    DEFAULT_EDGE_TYPE,
    DEFAULT_FONT_SIZE,
    DEFAULT_FONT_WEIGHT,
    DEFAULT_POSITION,
    DEFAULT_TEXT_COLOR,
    STORAGE_KEY,
)
from onemap.models import Position
from onemap.persistence import PersistenceAdapter
from onemap.storage import FileBackend


@pytest.fixture
def populated_map(mind_map, ids, clock):
    s = mind_map.snapshot
    s = mutations.add_node(s, ids=ids, clock=clock)
    a = s.nodes[-1]
    s = mutations.add_node(s, a.id, ids=ids, clock=clock)
    b = s.nodes[-1]
    s = mutations.add_node(s, ids=ids, clock=clock)
    c = s.nodes[-1]
    s = mutations.connect(s, b.id, c.id, ids=ids)
    s = mutations.update_node(s, a.id, clock=clock, is_expanded=False, font_weight="bold")
    return mind_map.with_snapshot(s)


class TestSave:

    def test_writes_whole_map_under_fixed_key(self, persistence, store, populated_map):
        saved = persistence.save(populated_map)

        raw = store.get(STORAGE_KEY)
        data = json.loads(raw)
        assert data["id"] == populated_map.id
        assert data["name"] == populated_map.name
        assert len(data["nodes"]) == len(populated_map.nodes)
        assert len(data["connections"]) == len(populated_map.connections)
        assert data["updatedAt"] == saved.updated_at

    def test_save_sets_updated_at_to_now(self, persistence, populated_map):
        saved = persistence.save(populated_map)
        assert saved.updated_at > populated_map.updated_at

    def test_root_record_has_no_parent_id(self, persistence, store, populated_map):
        persistence.save(populated_map)
        data = json.loads(store.get(STORAGE_KEY))
        root = [n for n in data["nodes"] if n["isRoot"]][0]
        assert "parentId" not in root

    def test_save_overwrites(self, persistence, store, populated_map, mind_map):
        persistence.save(populated_map)
        persistence.save(mind_map)
        data = json.loads(store.get(STORAGE_KEY))
        assert len(data["nodes"]) == 1


class TestLoad:

    def test_round_trip(self, persistence, populated_map):
        saved = persistence.save(populated_map)
        loaded = persistence.load()

        assert loaded == saved
        assert loaded.nodes == populated_map.nodes
        assert loaded.connections == populated_map.connections

    def test_round_trip_is_idempotent(self, persistence, populated_map):
        persistence.save(populated_map)
        first = persistence.load()
        persistence.save(first)
        second = persistence.load()
        assert second.nodes == first.nodes
        assert second.connections == first.connections

    def test_round_trip_through_files(self, tmp_path, clock, populated_map):
        adapter = PersistenceAdapter(FileBackend(tmp_path / "db"), clock=clock)
        saved = adapter.save(populated_map)

        reopened = PersistenceAdapter(FileBackend(tmp_path / "db"), clock=clock)
        assert reopened.load() == saved

    def test_nothing_stored(self, persistence):
        assert persistence.load() is None

    @pytest.mark.parametrize("raw", [
        "{not json",
        "[]",
        "42",
        json.dumps({"connections": []}),
        json.dumps({"nodes": {"a": {}}}),
        json.dumps({"nodes": [], "connections": "nope"}),
        json.dumps({"nodes": [{"text": "no id"}]}),
        json.dumps({"nodes": [{"id": "a", "children": "b"}]}),
        json.dumps({"nodes": [{"id": "a"}], "connections": [{"id": "e", "source": "a"}]}),
        json.dumps({"nodes": [{"id": "r", "isRoot": True, "position": {"x": "left", "y": None}}]}),
        json.dumps({"nodes": [{"id": "r", "position": [1, "2"]}]}),
        json.dumps({"nodes": [{"id": "r", "text": 42}]}),
        json.dumps({"nodes": [{"id": "r", "fontSize": "large"}]}),
        json.dumps({"nodes": [{"id": "r", "fontSize": True}]}),
        json.dumps({"nodes": [{"id": "r", "fontWeight": "heavy"}]}),
        json.dumps({"nodes": [{"id": "r", "isExpanded": "yes"}]}),
        json.dumps({"nodes": [{"id": "r", "backgroundColor": ["#fff"]}]}),
    ])
    def test_malformed_returns_none(self, persistence, store, raw, caplog):
        store.set(STORAGE_KEY, raw)
        with caplog.at_level(logging.WARNING):
            assert persistence.load() is None
        assert caplog.records

    def test_defaults_applied_to_legacy_nodes(self, persistence, store):
        store.set(STORAGE_KEY, json.dumps({
            "id": "m1",
            "name": "Legacy",
            "nodes": [
                {"id": "r", "text": "Root", "isRoot": True, "createdAt": "2024-01-01T00:00:00Z"},
                {"id": "a", "text": "Child", "parentId": "r", "isExpanded": False},
            ],
            "updatedAt": "2024-01-02T00:00:00Z",
        }))

        loaded = persistence.load()

        root = loaded.nodes[0]
        assert root.position == Position(*DEFAULT_POSITION)
        assert root.background_color == DEFAULT_BACKGROUND_COLOR
        assert root.color == DEFAULT_TEXT_COLOR
        assert root.font_size == DEFAULT_FONT_SIZE
        assert root.font_weight == DEFAULT_FONT_WEIGHT
        assert root.children == ()
        assert root.is_expanded is True
        assert root.updated_at == "2024-01-01T00:00:00Z"
        child = loaded.nodes[1]
        assert child.is_expanded is False
        assert child.created_at == "2024-01-02T00:00:00Z"
        assert loaded.connections == ()

    def test_edge_defaults(self, persistence, store):
        store.set(STORAGE_KEY, json.dumps({
            "nodes": [{"id": "r", "isRoot": True, "children": ["a"]}, {"id": "a", "parentId": "r"}],
            "connections": [{"id": "e1", "source": "r", "target": "a"}],
        }))
        edge = persistence.load().connections[0]
        assert edge.type == DEFAULT_EDGE_TYPE
        assert edge.style == DEFAULT_EDGE_STYLE

    def test_integrity_issues_are_logged(self, persistence, store, caplog):
        store.set(STORAGE_KEY, json.dumps({
            "nodes": [
                {"id": "r", "isRoot": True, "children": ["a"]},
                {"id": "a", "parentId": "r", "children": ["r"]},
            ],
        }))
        with caplog.at_level(logging.WARNING):
            loaded = persistence.load()
        assert loaded is not None
        assert any("Cycle" in r.getMessage() for r in caplog.records)

    def test_clear(self, persistence, store, populated_map):
        persistence.save(populated_map)
        persistence.clear()
        assert store.get(STORAGE_KEY) is None

    def test_undecodable_file_returns_none(self, tmp_path, clock, caplog):
        (tmp_path / f"{STORAGE_KEY}.json").write_bytes(b'{"nodes": [\xff\xfe]}')
        adapter = PersistenceAdapter(FileBackend(tmp_path), clock=clock)
        with caplog.at_level(logging.WARNING):
            assert adapter.load() is None
        assert any("UTF-8" in r.getMessage() for r in caplog.records)

    def test_null_coordinate_gets_default(self, persistence, store):
        store.set(STORAGE_KEY, json.dumps({
            "nodes": [{"id": "r", "isRoot": True, "position": {"x": 10, "y": None}}],
        }))
        assert persistence.load().nodes[0].position == Position(10, DEFAULT_POSITION[1])
