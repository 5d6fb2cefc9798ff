# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Query-time access to content records by type, id and filter."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from graphcompose.query.filtering import matches_filter, sort_records
from graphcompose.schema.registry import TypeRegistry
from graphcompose.store import ContentRecord, ContentStore

# ###############
# Public Interface
# ###############


class NodeModel:
    """Read-only view over a content store, aware of the schema's type graph.

    Abstract types (interfaces and unions) are expanded to their possible
    object types through the registry, so a lookup on ``Node`` or on a union
    matches records of every member type.
    """

    def __init__(self, store: ContentStore, registry: TypeRegistry) -> None:
        self.store = store
        self.registry = registry

    def get_node_by_id(self, node_id: Any, type_name: str | None = None) -> ContentRecord | None:
        if node_id is None:
            return None
        record = self.store.get_node_by_id(str(node_id))
        if record is None or (type_name is not None and not self._is_of_type(record, type_name)):
            return None
        return record

    def get_nodes_by_ids(self, ids: Iterable[Any] | None, type_name: str | None = None) -> list[ContentRecord]:
        """Return the records for *ids* in order, dropping ids that do not resolve."""
        if not ids:
            return []
        result = []
        for node_id in ids:
            record = self.get_node_by_id(node_id, type_name)
            if record is not None:
                result.append(record)
        return result

    def get_all_nodes(self, type_name: str) -> list[ContentRecord]:
        """Return every record whose type is *type_name* or one of its possible types."""
        records: list[ContentRecord] = []
        for name in self._runtime_types(type_name):
            records.extend(self.store.get_nodes_by_type(name))
        return records

    def run_query(
        self,
        type_name: str,
        filter: Mapping[str, Any] | None = None,
        sort: Mapping[str, Any] | None = None,
        skip: int | None = None,
        limit: int | None = None,
        first_only: bool = False,
    ) -> Any:
        """Filter, sort and slice the records of *type_name*.

        Returns the first matching record (or ``None``) when *first_only* is
        set, otherwise the list of matches after ``skip``/``limit``.
        """
        fields = set(filter or {})
        sort_fields = list((sort or {}).get("fields") or [])
        fields.update(path.split(".")[0] for path in sort_fields)
        records = [self.materialize(record, fields) for record in self.get_all_nodes(type_name)]
        matches = [record for record in records if matches_filter(record, filter)]
        if sort_fields:
            matches = sort_records(matches, sort_fields, list((sort or {}).get("order") or []))
        logger.debug("query on {} matched {} of {} records", type_name, len(matches), len(records))
        if first_only:
            return matches[0] if matches else None
        start = skip or 0
        return matches[start : start + limit] if limit is not None else matches[start:]

    def count(self, type_name: str, filter: Mapping[str, Any] | None = None) -> int:
        return len(self.run_query(type_name, filter=filter))

    def materialize(self, record: ContentRecord, field_names: Iterable[str]) -> ContentRecord:
        """Return *record* with resolver-backed fields evaluated.

        Only fields flagged ``needsResolve`` on the record's own type and named
        in *field_names* are computed; the original record is never mutated.
        """
        type_def = self.registry.get_or_none(_record_type(record) or "")
        if type_def is None:
            return record
        resolved: dict[str, Any] | None = None
        for name in field_names:
            field_def = type_def.fields.get(name)
            if field_def is None or field_def.resolve is None or not field_def.extensions.get("needsResolve"):
                continue
            if resolved is None:
                resolved = dict(record)
            defaults = {arg.name: arg.default_value for arg in field_def.args.values() if arg.has_default}
            resolved[name] = field_def.resolve(record, None, **defaults)
        return resolved if resolved is not None else record

    def _runtime_types(self, type_name: str) -> list[str]:
        possible = self.registry.possible_types(type_name)
        return possible if possible else [type_name]

    def _is_of_type(self, record: ContentRecord, type_name: str) -> bool:
        return _record_type(record) in self._runtime_types(type_name)


# ################
# Implementation
# ################


def _record_type(record: ContentRecord) -> str | None:
    internal = record.get("internal")
    if isinstance(internal, Mapping):
        return internal.get("type")
    return None
