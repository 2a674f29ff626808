"""Tests for codox.config."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from codox.config import DEFAULT_EXCLUDE_VARS, Options, build_options, load_config
from codox.errors import ConfigError
from codox.filters import ALL, ExactPattern, RegexPattern
from codox.git.commit import Deferred


def test_build_options_applies_defaults(tmp_path: Path) -> None:
    options = build_options(cwd=tmp_path)

    assert isinstance(options, Options)
    assert options.root_path == tmp_path.resolve()
    assert options.language == "clojure"
    assert options.source_paths == ("src",)
    assert options.doc_paths == ("doc",)
    assert options.doc_files == ALL
    assert options.namespaces == ALL
    assert options.exclude_vars is DEFAULT_EXCLUDE_VARS
    assert options.metadata == {}
    assert options.themes == ("default",)
    assert options.writer == "html"
    assert options.output_dir == tmp_path.resolve() / "target" / "doc"
    assert isinstance(options.git_commit, Deferred)
    assert options.git_commit.realized is False


def test_default_exclude_vars_matches_record_factories() -> None:
    assert DEFAULT_EXCLUDE_VARS.search("->Point")
    assert DEFAULT_EXCLUDE_VARS.search("map->Point")
    assert not DEFAULT_EXCLUDE_VARS.search("->point")
    assert not DEFAULT_EXCLUDE_VARS.search("make-point")


def test_build_options_coerces_clojure_style_keys(tmp_path: Path) -> None:
    options = build_options(
        {
            ":root-path": str(tmp_path),
            ":source-paths": "src/clj",
            ":namespaces": ["app.core", '#"^app\\.impl"'],
            ":exclude-vars": "^impl-",
            ":doc-files": ["doc/b.md", "doc/a.md"],
            ":git-commit": "deadbeef",
            ":language": ":clojurescript",
            ":html": {"transforms": []},
        }
    )

    assert options.source_paths == ("src/clj",)
    assert options.namespaces[0] == ExactPattern("app.core")
    assert isinstance(options.namespaces[1], RegexPattern)
    assert options.exclude_vars.pattern == "^impl-"
    assert options.doc_files == ("doc/b.md", "doc/a.md")
    assert options.commit() == "deadbeef"
    assert options.language == "clojurescript"
    assert options.extra == {"html": {"transforms": []}}


def test_build_options_accepts_compiled_patterns_and_null_exclusion(tmp_path: Path) -> None:
    options = build_options(
        {"root_path": tmp_path, "namespaces": re.compile("core"), "exclude_vars": None}
    )

    assert len(options.namespaces) == 1
    assert options.namespaces[0].matches("app.core")
    assert options.exclude_vars is None


def test_build_options_rejects_invalid_values(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        build_options({"root_path": tmp_path, "exclude_vars": "("})
    with pytest.raises(ConfigError):
        build_options({"root_path": tmp_path, "metadata": ["not", "a", "map"]})


def test_output_dir_keeps_absolute_paths(tmp_path: Path) -> None:
    target = tmp_path / "elsewhere"

    options = build_options({"root_path": tmp_path / "project", "output_path": str(target)})

    assert options.output_dir == target


def test_load_config_returns_empty_when_missing(tmp_path: Path) -> None:
    assert load_config(tmp_path) == {}


def test_load_config_parses_yaml_mapping(tmp_path: Path) -> None:
    (tmp_path / ".codox.yml").write_text(
        """
source-paths:
  - src/main
namespaces: all
metadata:
  doc/format: markdown
  added: "0.1"
src-dir-uri: "https://example.com/blob/{git-commit}/"
src-linenum-anchor-prefix: L
""",
        encoding="utf-8",
    )

    loaded = load_config(tmp_path)
    options = build_options({**loaded, "root_path": tmp_path})

    assert loaded["source_paths"] == ["src/main"]
    assert options.metadata == {"doc/format": "markdown", "added": "0.1"}
    assert options.namespaces == ALL
    assert options.src_dir_uri == "https://example.com/blob/{git-commit}/"
    assert options.src_linenum_anchor_prefix == "L"


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    config_file = tmp_path / ".codox.yml"
    config_file.write_text("- src\n- test\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(config_file)


def test_load_config_reports_yaml_errors(tmp_path: Path) -> None:
    config_file = tmp_path / ".codox.yml"
    config_file.write_text("source-paths: [src\n", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config(config_file)

    assert ".codox.yml" in str(excinfo.value)
