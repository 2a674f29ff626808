"""Tests for writer lookup and the built-in writers."""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from codox.errors import RendererResolutionError
from codox.git.commit import Deferred
from codox.models import Document, Namespace, RenderInput, Var
from codox.writers import HtmlWriter, JsonWriter, Writer, resolve_writer, source_uri
from tests._fixtures.source_tree import SourceTree


class RecordingWriter(Writer):
    """Writer double registered through a fake entry point."""

    def __init__(self) -> None:
        self.inputs: list[RenderInput] = []

    def write(self, render_input: RenderInput) -> None:  # pragma: no cover - simple recorder
        self.inputs.append(render_input)


def _render_input(source_tree: SourceTree, **overrides) -> RenderInput:  # type: ignore[no-untyped-def]
    namespaces = (
        Namespace(
            name="lib.core",
            doc="Core helpers.",
            publics=(
                Var(name="square", type="fn", doc="Squares x.", arglists=("[x]",), path="src/lib/core.clj", line=7),
                Var(name="hidden-square", type="fn", no_doc=True, path="src/lib/core.clj", line=9),
            ),
        ),
        Namespace(name="lib.internal", no_doc=True, publics=(Var(name="secret"),)),
    )
    documents = (Document(name="intro", title="Introduction", content="# Introduction\n", path="doc/intro.md"),)
    return RenderInput(
        options=source_tree.options(**overrides),
        namespaces=namespaces,
        documents=documents,
    )


def test_resolve_writer_defaults_to_html() -> None:
    assert isinstance(resolve_writer(None), HtmlWriter)
    assert isinstance(resolve_writer("json"), JsonWriter)


def test_resolve_writer_raises_for_unknown_identifier() -> None:
    with pytest.raises(RendererResolutionError) as excinfo:
        resolve_writer("pdf")

    assert excinfo.value.identifier == "pdf"
    assert "pdf" in str(excinfo.value)


def test_resolve_writer_loads_entry_points(monkeypatch) -> None:
    dummy_entry = SimpleNamespace(name="recording", load=lambda: RecordingWriter)

    monkeypatch.setattr(
        "codox.plugins.metadata.entry_points",
        lambda group: [dummy_entry] if group == "codox.writers" else [],
    )

    assert isinstance(resolve_writer("recording"), RecordingWriter)


def test_resolve_writer_wraps_entry_point_load_failures(monkeypatch) -> None:
    def _boom():  # type: ignore[no-untyped-def]
        raise ImportError("no module named fancy")

    monkeypatch.setattr(
        "codox.plugins.metadata.entry_points",
        lambda group: [SimpleNamespace(name="fancy", load=_boom)],
    )

    with pytest.raises(RendererResolutionError) as excinfo:
        resolve_writer("fancy")

    assert "no module named fancy" in str(excinfo.value)


def test_source_uri_joins_path_and_line_anchor(source_tree: SourceTree) -> None:
    options = source_tree.options(
        src_dir_uri="https://example.com/blob/main/", src_linenum_anchor_prefix="L"
    )

    uri = source_uri(options, Var(name="f", path="src/lib/core.clj", line=12))

    assert uri == "https://example.com/blob/main/src/lib/core.clj#L12"
    assert source_uri(options, Var(name="f")) is None
    assert source_uri(source_tree.options(), Var(name="f", path="src/a.clj")) is None


def test_source_uri_forces_commit_only_when_referenced(source_tree: SourceTree) -> None:
    calls: list[int] = []

    def _commit() -> str:
        calls.append(1)
        return "abc123"

    plain = source_tree.options(src_dir_uri="https://example.com/", git_commit=Deferred(_commit))
    templated = source_tree.options(
        src_dir_uri="https://example.com/blob/{git-commit}/", git_commit=Deferred(_commit)
    )
    var = Var(name="f", path="src/a.clj")

    assert source_uri(plain, var) == "https://example.com/src/a.clj"
    assert calls == []
    assert source_uri(templated, var) == "https://example.com/blob/abc123/src/a.clj"
    assert calls == [1]


def test_html_writer_renders_pages_without_no_doc_entries(source_tree: SourceTree) -> None:
    render_input = _render_input(
        source_tree,
        src_dir_uri="https://example.com/blob/main/",
        src_linenum_anchor_prefix="L",
        name="lib",
        version="1.0.0",
    )

    HtmlWriter().write(render_input)

    output = source_tree.path("target", "doc")
    index = (output / "index.html").read_text(encoding="utf-8")
    page = (output / "lib.core.html").read_text(encoding="utf-8")
    assert "lib.core" in index
    assert "lib.internal" not in index
    assert not (output / "lib.internal.html").exists()
    assert "square" in page
    assert "hidden-square" not in page
    assert "https://example.com/blob/main/src/lib/core.clj#L7" in page
    assert (output / "intro.html").exists()


def test_json_writer_dumps_visible_model(source_tree: SourceTree) -> None:
    JsonWriter().write(_render_input(source_tree, output_path="out"))

    payload = json.loads(source_tree.path("out", "codox.json").read_text(encoding="utf-8"))

    assert [namespace["name"] for namespace in payload["namespaces"]] == ["lib.core"]
    assert [var["name"] for var in payload["namespaces"][0]["publics"]] == ["square"]
    assert payload["namespaces"][0]["publics"][0]["arglists"] == ["[x]"]
    assert payload["documents"][0]["title"] == "Introduction"
