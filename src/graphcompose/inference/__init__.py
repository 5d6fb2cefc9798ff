# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type inference from sampled content records."""

from graphcompose.inference.infer import InferenceOptions, add_inferred_type, add_inferred_types
from graphcompose.inference.metadata import InferenceMetadata, InferenceMetadataStore, ValueDescriptor

__all__ = [
    "InferenceMetadata",
    "InferenceMetadataStore",
    "InferenceOptions",
    "ValueDescriptor",
    "add_inferred_type",
    "add_inferred_types",
]
