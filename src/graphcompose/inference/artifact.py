# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization and deserialization of inference metadata.

The metadata is stored as compact JSON between builds so incremental
inference can pick up where the previous build left off. The format is
versioned so future changes can be detected.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from graphcompose.inference.metadata import InferenceMetadata, InferenceMetadataStore, ValueDescriptor

# ###############
# Public Interface
# ###############

ARTIFACT_FORMAT_VERSION = "1"


def serialize(store: InferenceMetadataStore) -> str:
    """Serialize inference metadata to a compact JSON string."""
    obj = {
        "v": ARTIFACT_FORMAT_VERSION,
        "types": {name: _metadata_to_dict(entry) for name, entry in store.items()},
    }
    return json.dumps(obj, separators=(",", ":"))


def deserialize(data: str) -> InferenceMetadataStore:
    """Deserialize inference metadata from a JSON string.

    Args:
        data: JSON string produced by :func:`serialize`.

    Returns:
        The reconstructed :class:`InferenceMetadataStore`.

    Raises:
        ValueError: If the artifact format version is not recognised.
    """
    obj = json.loads(data)
    version = obj.get("v")
    if version != ARTIFACT_FORMAT_VERSION:
        raise ValueError(f"Unsupported artifact format version: {version!r}")
    return InferenceMetadataStore({name: _metadata_from_dict(name, d) for name, d in obj.get("types", {}).items()})


def write_artifact(store: InferenceMetadataStore, path: Path) -> None:
    """Write inference metadata to *path*, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(store), encoding="utf-8")


def read_artifact(path: Path) -> InferenceMetadataStore:
    """Read and deserialize inference metadata from *path*."""
    return deserialize(path.read_text(encoding="utf-8"))


# ################
# Implementation
# ################


def _metadata_to_dict(entry: InferenceMetadata) -> dict[str, Any]:
    return {
        "seen": sorted(entry.seen_ids),
        "sampled": sorted(entry.sampled_ids),
        "fields": {key: _descriptor_to_dict(d) for key, d in sorted(entry.fields.items())},
    }


def _metadata_from_dict(name: str, d: dict[str, Any]) -> InferenceMetadata:
    return InferenceMetadata(
        type_name=name,
        seen_ids=set(d.get("seen", [])),
        sampled_ids=set(d.get("sampled", [])),
        fields={key: _descriptor_from_dict(v) for key, v in d.get("fields", {}).items()},
    )


def _descriptor_to_dict(descriptor: ValueDescriptor) -> dict[str, Any]:
    result: dict[str, Any] = {"counts": dict(sorted(descriptor.counts.items()))}
    if descriptor.props:
        result["props"] = {key: _descriptor_to_dict(d) for key, d in sorted(descriptor.props.items())}
    if descriptor.item is not None:
        result["item"] = _descriptor_to_dict(descriptor.item)
    if descriptor.node_ids:
        result["nodes"] = dict(sorted(descriptor.node_ids.items()))
    return result


def _descriptor_from_dict(d: dict[str, Any]) -> ValueDescriptor:
    return ValueDescriptor(
        counts={kind: int(count) for kind, count in d.get("counts", {}).items()},
        props={key: _descriptor_from_dict(v) for key, v in d.get("props", {}).items()},
        item=_descriptor_from_dict(d["item"]) if "item" in d else None,
        node_ids={node_id: int(count) for node_id, count in d.get("nodes", {}).items()},
    )
