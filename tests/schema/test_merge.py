# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for type merging, provenance and type-level directives."""

import pytest

from graphcompose.diagnostics import Diagnostics
from graphcompose.errors import BuildPanic, ReservedTypeNameError
from graphcompose.model import CreatedFrom, TypeDefinition, TypeKind, type_to_string
from graphcompose.parser import parse
from graphcompose.plugins import DEFAULT_SITE_PLUGIN, Plugin
from graphcompose.schema import TypeRegistry
from graphcompose.schema.builtins import add_built_in_types
from graphcompose.schema.merge import add_type, is_safe_merge

# ###############
# Helpers
# ###############


def _registry() -> TypeRegistry:
    registry = TypeRegistry()
    add_built_in_types(registry)
    return registry


def _add_sdl(registry: TypeRegistry, sdl: str, plugin: Plugin | None, diagnostics: Diagnostics) -> None:
    for type_def in parse(sdl):
        add_type(registry, type_def, plugin, CreatedFrom.SDL, diagnostics)


# ###############
# Merging
# ###############


class TestMerge:
    def test_new_type_gets_provenance(self) -> None:
        registry, diagnostics = _registry(), Diagnostics()
        _add_sdl(registry, "type Post implements Node { title: String }", Plugin("blog"), diagnostics)
        post = registry.get("Post")
        assert post.get_extension("createdFrom") == CreatedFrom.SDL
        assert post.get_extension("plugin") == "blog"
        assert post.fields["title"].extensions["plugin"] == "blog"
        assert diagnostics.entries == []

    def test_fields_and_interfaces_are_unioned(self) -> None:
        registry, diagnostics = _registry(), Diagnostics()
        blog = Plugin("blog")
        _add_sdl(registry, "type Post implements Node { title: String }", blog, diagnostics)
        _add_sdl(registry, "interface Named { name: String }", blog, diagnostics)
        _add_sdl(registry, "type Post implements Named { title: String! name: String }", blog, diagnostics)
        post = registry.get("Post")
        assert post.interfaces == ["Node", "Named"]
        assert type_to_string(post.fields["title"].type) == "String!"
        assert list(post.fields) == ["title", "name"]
        assert diagnostics.warnings == []

    def test_field_provenance_keeps_first_contributor(self) -> None:
        registry, diagnostics = _registry(), Diagnostics()
        _add_sdl(registry, "type Post implements Node { title: String }", Plugin("blog"), diagnostics)
        _add_sdl(registry, "type Post { title: String! }", Plugin(DEFAULT_SITE_PLUGIN), diagnostics)
        assert registry.get("Post").fields["title"].extensions["plugin"] == "blog"

    def test_unsafe_merge_warns_but_merges(self) -> None:
        registry, diagnostics = _registry(), Diagnostics()
        _add_sdl(registry, "type Post implements Node { title: String }", Plugin("blog"), diagnostics)
        _add_sdl(registry, "type Post { rating: Int }", Plugin("ratings"), diagnostics)
        assert len(diagnostics.warnings) == 1
        assert "`ratings`" in diagnostics.warnings[0]
        assert "`blog`" in diagnostics.warnings[0]
        post = registry.get("Post")
        assert "rating" in post.fields
        assert post.get_extension("plugin") == "ratings"

    def test_customizing_built_in_type_warns(self) -> None:
        registry, diagnostics = _registry(), Diagnostics()
        _add_sdl(registry, "type PageInfo { extra: String }", Plugin("pager"), diagnostics)
        assert len(diagnostics.warnings) == 1
        assert "built-in GraphQL type `PageInfo`" in diagnostics.warnings[0]

    def test_site_metadata_may_be_customized(self) -> None:
        registry, diagnostics = _registry(), Diagnostics()
        _add_sdl(registry, "type SiteSiteMetadata { author: String }", Plugin("seo"), diagnostics)
        assert diagnostics.warnings == []
        assert "author" in registry.get("SiteSiteMetadata").fields

    def test_safe_merge_policy(self) -> None:
        owned = TypeDefinition(name="Post", kind=TypeKind.OBJECT, extensions={"plugin": "blog"})
        assert is_safe_merge(owned, None)
        assert is_safe_merge(owned, Plugin("blog"))
        assert is_safe_merge(owned, Plugin(DEFAULT_SITE_PLUGIN))
        assert not is_safe_merge(owned, Plugin("other"))

    def test_reserved_name_is_rejected(self) -> None:
        with pytest.raises(ReservedTypeNameError):
            _add_sdl(_registry(), "type PostFilterInput { x: Int }", Plugin("blog"), Diagnostics())


# ###############
# Placeholders
# ###############


class TestPlaceholders:
    def test_interface_placeholder_is_filled(self) -> None:
        registry, diagnostics = _registry(), Diagnostics()
        _add_sdl(registry, "type Author implements Named { name: String }", None, diagnostics)
        assert registry.get("Named").is_placeholder
        _add_sdl(registry, "interface Named { name: String }", None, diagnostics)
        named = registry.get("Named")
        assert not named.is_placeholder
        assert named.kind == TypeKind.INTERFACE
        assert "name" in named.fields

    def test_union_members_become_placeholders(self) -> None:
        registry, diagnostics = _registry(), Diagnostics()
        _add_sdl(registry, "union Result = Author | Page", None, diagnostics)
        assert registry.unresolved() == ["Author", "Page"]
        _add_sdl(registry, "type Author { name: String } type Page { path: String }", None, diagnostics)
        assert registry.unresolved() == []


# ###############
# Directives
# ###############


class TestDirectives:
    def test_type_directives_become_extensions(self) -> None:
        registry, diagnostics = _registry(), Diagnostics()
        sdl = """
        type Post implements Node @dontInfer @childOf(types: ["File"], mimeTypes: ["text/markdown"]) {
          title: String
        }
        type File implements Node @infer @mimeTypes(types: ["text/markdown"]) { path: String }
        """
        _add_sdl(registry, sdl, None, diagnostics)
        post = registry.get("Post")
        assert post.get_extension("infer") is False
        assert post.get_extension("childOf") == {"types": ["File"], "mimeTypes": ["text/markdown"]}
        file = registry.get("File")
        assert file.get_extension("infer") is True
        assert file.get_extension("mimeTypes") == {"types": ["text/markdown"]}

    def test_field_directive_becomes_validated_extension(self) -> None:
        registry, diagnostics = _registry(), Diagnostics()
        _add_sdl(registry, "type Post implements Node { author: Author @link }", None, diagnostics)
        assert registry.get("Post").fields["author"].extensions["link"] == {"by": "id"}

    def test_node_interface_directive_is_deprecated(self) -> None:
        registry, diagnostics = _registry(), Diagnostics()
        _add_sdl(registry, "interface Content @nodeInterface { id: ID! }", None, diagnostics)
        assert registry.get("Content").get_extension("nodeInterface") is True
        assert len(diagnostics.warnings) == 1
        assert "`@nodeInterface` extension is deprecated" in diagnostics.warnings[0]

    def test_node_interface_without_id_panics(self) -> None:
        with pytest.raises(BuildPanic, match="must have a field `id` of type `ID!`"):
            _add_sdl(_registry(), "interface Content implements Node { title: String }", None, Diagnostics())
