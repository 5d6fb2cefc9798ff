# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the content store and record loading."""

import json
from pathlib import Path

import pytest

from graphcompose.store import ContentStoreError, MemoryContentStore, load_records

# ###############
# Helpers
# ###############


def _record(node_id: str, type_name: str, **data: object) -> dict[str, object]:
    return {"id": node_id, "parent": None, "children": [], "internal": {"type": type_name}, **data}


# ###############
# MemoryContentStore
# ###############


class TestMemoryContentStore:
    def test_lookup_by_type_and_id(self) -> None:
        store = MemoryContentStore([_record("p1", "Post"), _record("a1", "Author"), _record("p2", "Post")])
        assert [r["id"] for r in store.get_nodes_by_type("Post")] == ["p1", "p2"]
        assert store.get_node_by_id("a1")["internal"]["type"] == "Author"
        assert store.get_node_by_id("missing") is None
        assert store.get_types() == ["Post", "Author"]
        assert len(store) == 3

    def test_replace_moves_record_between_types(self) -> None:
        store = MemoryContentStore([_record("x", "Post")])
        store.add(_record("x", "Page"))
        assert store.get_types() == ["Page"]
        assert store.get_nodes_by_type("Post") == []
        assert len(store) == 1

    def test_delete(self) -> None:
        store = MemoryContentStore([_record("p1", "Post")])
        store.delete("p1")
        store.delete("p1")
        assert len(store) == 0
        assert store.get_types() == []

    @pytest.mark.parametrize("record", [{"internal": {"type": "Post"}}, {"id": "p1"}, {"id": "p1", "internal": {}}])
    def test_malformed_records_are_rejected(self, record: dict[str, object]) -> None:
        with pytest.raises(ContentStoreError, match="internal.type"):
            MemoryContentStore([record])


# ###############
# load_records
# ###############


class TestLoadRecords:
    def test_yaml_list_and_json_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "posts.yaml"
        yaml_file.write_text("- id: p1\n  internal: {type: Post}\n", encoding="utf-8")
        json_file = tmp_path / "author.json"
        json_file.write_text(json.dumps({"id": "a1", "internal": {"type": "Author"}}), encoding="utf-8")

        records = load_records([yaml_file, json_file])
        assert [r["id"] for r in records] == ["p1", "a1"]
        assert records[0]["parent"] is None
        assert records[1]["children"] == []

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ContentStoreError, match="Cannot read content file"):
            load_records([tmp_path / "missing.yaml"])

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ContentStoreError, match="Invalid content file"):
            load_records([path])

    def test_scalar_document(self, tmp_path: Path) -> None:
        path = tmp_path / "scalar.yaml"
        path.write_text("just text\n", encoding="utf-8")
        with pytest.raises(ContentStoreError, match="must contain a record or a list of records"):
            load_records([path])
