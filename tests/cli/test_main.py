# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the GraphCompose CLI entry point."""

import json
import sys
from pathlib import Path

import pytest

from graphcompose.cli.main import METADATA_FILE_NAME, SCHEMA_FILE_NAME, main

# ###############
# Helpers
# ###############

_TYPE_DEFS = """\
type Post implements Node {
  title: String
}
"""

_CONTENT = """\
- id: p1
  internal:
    type: Post
    contentDigest: d1
    owner: test
  title: Hello
  views: 3
"""


def _init_site(tmp_path: Path, config: str | None = None) -> None:
    """Write a site with one type definition file and one content file."""
    (tmp_path / "types.graphql").write_text(_TYPE_DEFS, encoding="utf-8")
    (tmp_path / "posts.yaml").write_text(_CONTENT, encoding="utf-8")
    if config is None:
        config = "type-defs: [types.graphql]\ncontent: [posts.yaml]\n"
    (tmp_path / ".graphcompose.yaml").write_text(config, encoding="utf-8")


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> int | str | None:
    monkeypatch.setattr(sys, "argv", ["graphcompose", *args])
    with pytest.raises(SystemExit) as exc_info:
        main()
    return exc_info.value.code


# ###############
# Public Interface
# ###############


def test_main_no_args_prints_help_and_exits(monkeypatch: pytest.MonkeyPatch) -> None:
    """main() with no subcommand prints help and exits with code 0."""
    assert _run(monkeypatch) == 0


# -------- init tests --------


def test_init_creates_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """init writes a default .graphcompose.yaml in the specified directory."""
    assert _run(monkeypatch, "init", str(tmp_path)) == 0
    content = (tmp_path / ".graphcompose.yaml").read_text()
    assert "type-defs: []" in content
    assert "sample-size: 1000" in content


def test_init_default_directory_uses_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """init with no directory argument uses the current working directory."""
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "init") == 0
    assert (tmp_path / ".graphcompose.yaml").exists()


def test_init_fails_if_config_already_exists(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """init exits with error code 1 when the site already exists."""
    (tmp_path / ".graphcompose.yaml").write_text("type-defs: []\n")
    assert _run(monkeypatch, "init", str(tmp_path)) == 1


def test_init_fails_if_directory_does_not_exist(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """init exits with error code 1 when the target directory does not exist."""
    assert _run(monkeypatch, "init", str(tmp_path / "nonexistent")) == 1


# -------- build tests --------


def test_build_writes_schema_and_metadata(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """build writes the schema SDL and the inference metadata to the cache directory."""
    _init_site(tmp_path)
    assert _run(monkeypatch, "build", str(tmp_path)) == 0

    cache_dir = tmp_path / ".graphcompose-cache"
    schema_text = (cache_dir / SCHEMA_FILE_NAME).read_text(encoding="utf-8")
    assert "allPost" in schema_text
    assert "views: Int" in schema_text
    metadata = json.loads((cache_dir / METADATA_FILE_NAME).read_text(encoding="utf-8"))
    assert "Post" in json.dumps(metadata)
    assert "Schema written to" in capsys.readouterr().out


def test_build_twice_reuses_metadata(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """A second build reads the cached inference metadata and succeeds."""
    _init_site(tmp_path)
    assert _run(monkeypatch, "build", str(tmp_path)) == 0
    assert _run(monkeypatch, "build", str(tmp_path)) == 0


def test_build_without_site(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """build exits with code 1 and suggests init when no config exists."""
    assert _run(monkeypatch, "build", str(tmp_path)) == 1
    assert "Run 'graphcompose init'" in capsys.readouterr().err


def test_build_with_invalid_config(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """build reports config errors on stderr."""
    (tmp_path / ".graphcompose.yaml").write_text("type-defs: nope\n")
    assert _run(monkeypatch, "build", str(tmp_path)) == 1
    assert "must be a list of strings" in capsys.readouterr().err


def test_build_with_missing_type_defs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """build exits with code 1 when a type definition file cannot be read."""
    (tmp_path / ".graphcompose.yaml").write_text("type-defs: [missing.graphql]\n")
    assert _run(monkeypatch, "build", str(tmp_path)) == 1


def test_build_reports_parse_errors(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """build exits with code 1 when a type definition file has a syntax error."""
    _init_site(tmp_path)
    (tmp_path / "types.graphql").write_text("type Post {", encoding="utf-8")
    assert _run(monkeypatch, "build", str(tmp_path)) == 1
    assert "types.graphql" in capsys.readouterr().err


# -------- print tests --------


def test_print_outputs_composed_types(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """print writes the composed SDL to stdout."""
    _init_site(tmp_path)
    assert _run(monkeypatch, "print", str(tmp_path)) == 0
    out = capsys.readouterr().out
    assert "type Post implements Node" in out
    assert "PostConnection" in out


def test_build_with_print_section(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """A print section in the config writes the type definitions file during build."""
    _init_site(tmp_path, "type-defs: [types.graphql]\ncontent: [posts.yaml]\nprint:\n  path: out.graphql\n")
    assert _run(monkeypatch, "build", str(tmp_path)) == 0
    assert "type Post implements Node @dontInfer" in (tmp_path / "out.graphql").read_text(encoding="utf-8")
