# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Accumulated structural samples of content records, per content type.

Each record contributes counts to a :class:`ValueDescriptor` per field:
how often the field held a string, a date string, an int, and so on, with
nested descriptors for object properties and array items. The metadata is
kept between builds so that new records are folded into what is already
known instead of rescanning every record.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from graphcompose.store import ContentRecord

# ###############
# Public Interface
# ###############

NODE_REFERENCE_SUFFIX = "___NODE"

# Record keys maintained by the store itself; never inferred.
IGNORED_KEYS: frozenset[str] = frozenset({"id", "parent", "children", "internal", "$loki"})

KINDS: tuple[str, ...] = (
    "string",
    "date",
    "int",
    "float",
    "boolean",
    "object",
    "array",
    "related_node",
    "related_node_list",
    "null",
)

INT_RANGE = (-(2**31), 2**31 - 1)


@dataclass
class ValueDescriptor:
    """Observed shapes of one field.

    Attributes:
        counts: Number of observations per kind (see :data:`KINDS`).
        props: Descriptors of nested properties, for the ``object`` kind.
        item: Descriptor of array elements, for the ``array`` kind.
        node_ids: Referenced record ids, for the ``related_node*`` kinds.
    """

    counts: dict[str, int] = field(default_factory=dict)
    props: dict[str, ValueDescriptor] = field(default_factory=dict)
    item: ValueDescriptor | None = None
    node_ids: dict[str, int] = field(default_factory=dict)

    def observe(self, value: Any, reference: bool = False) -> None:
        """Fold one value into the descriptor."""
        kind = value_kind(value, reference)
        self.counts[kind] = self.counts.get(kind, 0) + 1
        if kind == "object":
            for key, nested in value.items():
                if key not in IGNORED_KEYS:
                    self.props.setdefault(key, ValueDescriptor()).observe(nested, key.endswith(NODE_REFERENCE_SUFFIX))
        elif kind == "array":
            if self.item is None:
                self.item = ValueDescriptor()
            for element in value:
                self.item.observe(element)
        elif kind == "related_node":
            self.node_ids[str(value)] = self.node_ids.get(str(value), 0) + 1
        elif kind == "related_node_list":
            for node_id in value:
                self.node_ids[str(node_id)] = self.node_ids.get(str(node_id), 0) + 1

    def present_kinds(self) -> dict[str, int]:
        """Return the non-null kinds observed at least once, with their counts."""
        return {kind: count for kind, count in self.counts.items() if count > 0 and kind != "null"}


@dataclass
class InferenceMetadata:
    """Sampled shape of one content type.

    Attributes:
        type_name: The content type.
        seen_ids: Record ids present at the last synchronisation.
        sampled_ids: Record ids folded into :attr:`fields`.
        fields: Descriptor per top-level record field.
    """

    type_name: str
    seen_ids: set[str] = field(default_factory=set)
    sampled_ids: set[str] = field(default_factory=set)
    fields: dict[str, ValueDescriptor] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.sampled_ids)

    def ingest(self, record: ContentRecord) -> None:
        node_id = str(record.get("id"))
        if node_id in self.sampled_ids:
            return
        self.sampled_ids.add(node_id)
        for key, value in record.items():
            if key in IGNORED_KEYS:
                continue
            self.fields.setdefault(key, ValueDescriptor()).observe(value, key.endswith(NODE_REFERENCE_SUFFIX))

    def reset(self) -> None:
        self.seen_ids.clear()
        self.sampled_ids.clear()
        self.fields.clear()

    def sync(self, records: Iterable[ContentRecord], sample_size: int) -> bool:
        """Bring the sample up to date with the current *records*.

        New records are ingested while the sample is below *sample_size*.
        If a previously seen record disappeared the type is rescanned from
        scratch.

        Returns:
            True if the set of records changed since the last call.
        """
        records = list(records)
        current = {str(record.get("id")) for record in records}
        if current == self.seen_ids:
            return False
        if self.seen_ids - current:
            self.reset()
        for record in records:
            if self.total >= sample_size:
                break
            self.ingest(record)
        self.seen_ids = current
        return True


class InferenceMetadataStore:
    """Inference metadata for every content type, kept across builds."""

    def __init__(self, entries: Mapping[str, InferenceMetadata] | None = None) -> None:
        self._entries: dict[str, InferenceMetadata] = dict(entries or {})

    def get(self, type_name: str) -> InferenceMetadata:
        """Return the metadata for *type_name*, creating an empty entry if needed."""
        if type_name not in self._entries:
            self._entries[type_name] = InferenceMetadata(type_name=type_name)
        return self._entries[type_name]

    def has(self, type_name: str) -> bool:
        return type_name in self._entries

    def remove(self, type_name: str) -> None:
        self._entries.pop(type_name, None)

    def items(self) -> list[tuple[str, InferenceMetadata]]:
        return sorted(self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)


def value_kind(value: Any, reference: bool = False) -> str:
    """Classify *value*; *reference* marks a ``___NODE`` field."""
    if value is None:
        return "null"
    if reference:
        if isinstance(value, list):
            return "related_node_list"
        return "related_node"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "int" if INT_RANGE[0] <= value <= INT_RANGE[1] else "float"
    if isinstance(value, float):
        return "float"
    if isinstance(value, date):
        return "date"
    if isinstance(value, str):
        return "date" if is_date_string(value) else "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return "string"


def is_date_string(value: str) -> bool:
    """Return True for ISO 8601 dates such as ``2020-01-31`` or ``2020-01-31T10:00:00Z``."""
    return _ISO_DATE_RE.match(value) is not None


# ################
# Implementation
# ################

_ISO_DATE_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}"
    r"(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?$"
)
