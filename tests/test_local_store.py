"""Persistent key-value store."""

import json

from leaguetracker.services.local_store import LocalStore


def test_values_survive_a_new_instance(tmp_path):
    LocalStore(tmp_path).set_item("catalyst-league-player", "Alice")

    assert LocalStore(tmp_path).get_item("catalyst-league-player") == "Alice"
    assert (tmp_path / "store.json").exists()


def test_missing_key(store):
    assert store.get_item("nope") is None
    assert "nope" not in store


def test_remove_item(store):
    store.set_item("a", "1")
    store.set_item("b", "2")

    assert store.remove_item("a") is True
    assert store.remove_item("a") is True
    assert store.keys() == ["b"]


def test_non_object_file_starts_empty(tmp_path):
    (tmp_path / "store.json").write_text(json.dumps(["not", "a", "dict"]), encoding="utf-8")

    assert LocalStore(tmp_path).keys() == []


def test_non_string_values_are_ignored(tmp_path):
    (tmp_path / "store.json").write_text(json.dumps({"a": "ok", "b": 3}), encoding="utf-8")

    store = LocalStore(tmp_path)
    assert store.get_item("a") == "ok"
    assert store.get_item("b") is None
