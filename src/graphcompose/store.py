# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Content-record store interface and an in-memory implementation.

A content record is a mapping with at least ``id``, ``parent``, ``children``
and ``internal.type``. The schema core only reads records through
:class:`ContentStore`; it never mutates them.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Protocol

import yaml

# ###############
# Public Interface
# ###############

ContentRecord = Mapping[str, Any]


class ContentStoreError(Exception):
    """Raised when record files cannot be loaded or records are malformed."""


class ContentStore(Protocol):
    """Read-only access to content records."""

    def get_nodes_by_type(self, type_name: str) -> list[ContentRecord]: ...

    def get_node_by_id(self, node_id: str) -> ContentRecord | None: ...

    def get_types(self) -> list[str]: ...


class MemoryContentStore:
    """A :class:`ContentStore` backed by plain dictionaries.

    Records keep their insertion order within a type.
    """

    def __init__(self, records: Iterable[ContentRecord] = ()) -> None:
        self._by_id: dict[str, ContentRecord] = {}
        self._by_type: dict[str, dict[str, ContentRecord]] = {}
        for record in records:
            self.add(record)

    def add(self, record: ContentRecord) -> None:
        """Insert or replace *record*."""
        node_id = record.get("id")
        internal = record.get("internal")
        if not isinstance(node_id, str) or not isinstance(internal, Mapping) or not internal.get("type"):
            raise ContentStoreError(f"Record must have a string 'id' and an 'internal.type': {record!r}")
        self.delete(node_id)
        self._by_id[node_id] = record
        self._by_type.setdefault(internal["type"], {})[node_id] = record

    def delete(self, node_id: str) -> None:
        """Remove the record with *node_id*, if present."""
        record = self._by_id.pop(node_id, None)
        if record is not None:
            type_name = record["internal"]["type"]
            self._by_type[type_name].pop(node_id, None)
            if not self._by_type[type_name]:
                del self._by_type[type_name]

    def get_nodes_by_type(self, type_name: str) -> list[ContentRecord]:
        return list(self._by_type.get(type_name, {}).values())

    def get_node_by_id(self, node_id: str) -> ContentRecord | None:
        return self._by_id.get(node_id)

    def get_types(self) -> list[str]:
        return list(self._by_type)

    def __len__(self) -> int:
        return len(self._by_id)


def load_records(paths: Iterable[Path]) -> list[dict[str, Any]]:
    """Load content records from JSON or YAML files.

    Each file holds either a list of records or a single record mapping.
    Missing ``parent`` / ``children`` keys are filled with their empty values.

    Raises:
        ContentStoreError: If a file cannot be read or does not contain records.
    """
    records: list[dict[str, Any]] = []
    for path in paths:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ContentStoreError(f"Cannot read content file '{path}': {exc}") from exc
        try:
            data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ContentStoreError(f"Invalid content file '{path}': {exc}") from exc
        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise ContentStoreError(f"'{path}': content file must contain a record or a list of records")
        for item in data:
            item.setdefault("parent", None)
            item.setdefault("children", [])
            records.append(item)
    return records
