import json
import logging

import pytest

from onemap import config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("ONEMAP_STORAGE_BACKEND", "ONEMAP_STORAGE_DIR", "ONEMAP_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_load_missing_config_is_empty(tmp_path):
    assert config.load_config(tmp_path / "config.json") == {}


def test_save_and_load(tmp_path):
    path = tmp_path / "config.json"
    config.save_config({"storage_backend": "memory"}, path)
    assert config.load_config(path) == {"storage_backend": "memory"}


def test_invalid_json_is_ignored(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text("{broken", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        assert config.load_config(path) == {}
    assert caplog.records


def test_non_object_is_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(["memory"]), encoding="utf-8")
    assert config.load_config(path) == {}


def test_storage_backend_priority(monkeypatch):
    assert config.get_storage_backend({}) == "file"
    assert config.get_storage_backend({"storage_backend": "Memory"}) == "memory"
    monkeypatch.setenv("ONEMAP_STORAGE_BACKEND", "file")
    assert config.get_storage_backend({"storage_backend": "memory"}) == "file"


def test_storage_dir(tmp_path, monkeypatch):
    assert config.get_storage_dir({}).name == "db"
    assert config.get_storage_dir({"storage_dir": str(tmp_path)}) == tmp_path
    monkeypatch.setenv("ONEMAP_STORAGE_DIR", str(tmp_path / "env"))
    assert config.get_storage_dir({"storage_dir": str(tmp_path)}) == tmp_path / "env"


def test_log_level():
    assert config.get_log_level({}) == logging.INFO
    assert config.get_log_level({"log_level": "debug"}) == logging.DEBUG
    assert config.get_log_level({"log_level": "chatty"}) == logging.INFO
