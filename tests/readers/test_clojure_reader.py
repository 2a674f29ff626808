"""Tests for the clojure and clojurescript namespace readers."""

from __future__ import annotations

from pathlib import Path

import pytest

from codox.errors import SourceReadError
from codox.readers.clojure import ClojureReader, ClojureScriptReader
from tests._fixtures.source_tree import SourceTree


def _publics(namespace) -> list[str]:  # type: ignore[no-untyped-def]
    return [var.name for var in namespace.publics]


def test_clojure_reader_extracts_namespace_and_definitions(source_tree: SourceTree) -> None:
    source_tree.write(
        {
            "src/lib/core.clj": '''
                (ns lib.core
                  "Core helpers."
                  {:author "Ada" :added "0.1"}
                  (:require [clojure.string :as str]))

                (def pi "Approximately pi." 3.14)

                (def answer 42)

                (defn square
                  "Squares x."
                  {:added "0.2"}
                  [x]
                  (* x x))

                (defn- hidden [] nil)

                (defn ^:private also-hidden [] nil)

                (defn ^:no-doc internal
                  ([] (internal 1))
                  ([x] x))

                (defmacro unless [test & body]
                  `(if (not ~test) (do ~@body)))

                (defmulti area :shape)
            ''',
        }
    )

    (namespace,) = ClojureReader().read([source_tree.path("src")])

    assert namespace.name == "lib.core"
    assert namespace.doc == "Core helpers."
    assert namespace.author == "Ada"
    assert namespace.added == "0.1"
    assert _publics(namespace) == ["pi", "answer", "square", "internal", "unless", "area"]

    pi, answer, square, internal, unless, area = namespace.publics
    assert pi.doc == "Approximately pi."
    assert pi.type == "var"
    assert answer.doc is None
    assert square.type == "fn"
    assert square.doc == "Squares x."
    assert square.added == "0.2"
    assert square.arglists == ("[x]",)
    assert square.file == "lib/core.clj"
    assert square.line == 10
    assert internal.no_doc is True
    assert internal.arglists == ("[]", "[x]")
    assert unless.type == "macro"
    assert unless.arglists == ("[test & body]",)
    assert area.type == "multimethod"


def test_clojure_reader_reads_protocol_members_and_record_factories(
    source_tree: SourceTree,
) -> None:
    source_tree.write(
        {
            "src/shapes.clj": '''
                (ns shapes)

                (defprotocol Shape
                  "Things with an area."
                  :extend-via-metadata true
                  (area [s] "Area of s.")
                  (scale [s k] [s kx ky]))

                (defrecord Circle [r])

                (deftype Square [side])
            ''',
        }
    )

    (namespace,) = ClojureReader().read([source_tree.path("src")])

    assert _publics(namespace) == ["Shape", "->Circle", "map->Circle", "->Square"]
    shape = namespace.publics[0]
    assert shape.type == "protocol"
    assert shape.doc == "Things with an area."
    assert [member.name for member in shape.members] == ["area", "scale"]
    assert shape.members[0].doc == "Area of s."
    assert shape.members[1].arglists == ("[s k]", "[s kx ky]")
    assert namespace.publics[1].arglists == ("[r]",)
    assert namespace.publics[1].doc == "Positional factory function for class shapes.Circle."


def test_dialect_readers_pick_their_files_and_reader_features(source_tree: SourceTree) -> None:
    source_tree.write(
        {
            "src/app/jvm.clj": "(ns app.jvm)\n(defn only-jvm [] nil)\n",
            "src/app/web.cljs": "(ns app.web)\n(defn only-web [] nil)\n",
            "src/app/shared.cljc": '''
                (ns app.shared)
                #?(:clj (defn host-fn [] nil)
                   :cljs (defn browser-fn [] nil))
                #?(:clj (defmacro with-thing [& body] `(do ~@body)))
                (defn everywhere [] nil)
            ''',
        }
    )
    src = [source_tree.path("src")]

    clj = {namespace.name: _publics(namespace) for namespace in ClojureReader().read(src)}
    cljs = {namespace.name: _publics(namespace) for namespace in ClojureScriptReader().read(src)}

    assert clj == {
        "app.jvm": ["only-jvm"],
        "app.shared": ["host-fn", "with-thing", "everywhere"],
    }
    assert cljs == {
        "app.shared": ["browser-fn", "everywhere"],
        "app.web": ["only-web"],
    }


def test_clojurescript_reader_ignores_macros() -> None:
    reader = ClojureScriptReader()

    assert reader.needs_macro_pass is True
    assert reader.include_macros is False
    assert ClojureReader().needs_macro_pass is False


def test_clojure_reader_skips_files_without_ns(source_tree: SourceTree) -> None:
    source_tree.write({"src/user.clj": "(println \"scratch\")\n"})

    assert ClojureReader().read([source_tree.path("src")]) == []


def test_clojure_reader_reports_syntax_errors_with_path(source_tree: SourceTree) -> None:
    source_tree.write({"src/broken.clj": "(ns broken)\n(defn oops [x]\n"})

    with pytest.raises(SourceReadError) as excinfo:
        ClojureReader().read([source_tree.path("src")])

    assert excinfo.value.path == source_tree.path("src", "broken.clj")
    assert "broken.clj" in str(excinfo.value)


def test_clojure_reader_rejects_missing_source_path(tmp_path: Path) -> None:
    missing = tmp_path / "nope"

    with pytest.raises(SourceReadError) as excinfo:
        ClojureReader().read([missing])

    assert excinfo.value.path == missing


def test_clojure_reader_delegates_to_exception_handler(source_tree: SourceTree) -> None:
    source_tree.write(
        {
            "src/a.clj": "(ns a)\n(defn ok [] nil)\n",
            "src/b.clj": "(ns b)\n(defn oops [\n",
        }
    )
    seen: list[Path] = []

    def handler(exc: Exception, path: Path) -> None:
        assert isinstance(exc, SourceReadError)
        seen.append(path)

    namespaces = ClojureReader().read([source_tree.path("src")], {"exception_handler": handler})

    assert [namespace.name for namespace in namespaces] == ["a"]
    assert seen == [source_tree.path("src", "b.clj")]


def test_clojure_reader_is_deterministic(source_tree: SourceTree) -> None:
    source_tree.write(
        {
            "src/z/last.clj": "(ns z.last)\n",
            "src/a/first.clj": "(ns a.first)\n",
            "src/m.clj": "(ns m)\n",
        }
    )
    src = [source_tree.path("src")]

    first = ClojureReader().read(src)
    second = ClojureReader().read(src)

    assert first == second
    assert [namespace.name for namespace in first] == ["a.first", "m", "z.last"]
