"""Namespace readers for the clojure and clojurescript dialects."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..errors import SourceReadError
from ..logging import get_logger
from ..models import Namespace, Var
from .base import NamespaceReader
from .forms import (
    FormSyntaxError,
    Keyword,
    ListForm,
    MapForm,
    Symbol,
    VectorForm,
    meta_to_dict,
    read_forms,
    render,
    to_python,
)

_DEFINITION_TYPES = {
    "def": "var",
    "defonce": "var",
    "defn": "fn",
    "defn-": "fn",
    "defmacro": "macro",
    "defmulti": "multimethod",
    "defprotocol": "protocol",
}

_RECORD_DEFINERS = {"defrecord", "deftype"}

# Compiler-supplied metadata that carries no documentation value.
_DROPPED_META = {"private", "line", "column", "file", "end-line", "end-column"}


@dataclass(frozen=True)
class _SourceFile:
    path: Path
    relative: str


def _iter_source_files(root: Path, extensions: Tuple[str, ...]) -> Iterator[_SourceFile]:
    if root.is_file():
        if root.suffix in extensions:
            yield _SourceFile(path=root, relative=root.name)
        return
    if not root.is_dir():
        raise SourceReadError(root, "path does not exist")

    sources: List[_SourceFile] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [name for name in dirnames if not name.startswith(".")]
        current_dir = Path(dirpath)
        for filename in filenames:
            path = current_dir / filename
            if path.suffix not in extensions:
                continue
            sources.append(_SourceFile(path=path, relative=path.relative_to(root).as_posix()))
    yield from sorted(sources, key=lambda source: source.relative)


def _local_name(symbol: Symbol) -> str:
    name = symbol.name
    if "/" in name and name != "/":
        return name.rsplit("/", 1)[1]
    return name


def _flag(value: Any) -> Optional[bool]:
    if value is None:
        return None
    return bool(value)


def _version(value: Any) -> Optional[str]:
    if value is None or value is False:
        return None
    if isinstance(value, str):
        return value
    return render(value)


def _unquote(form: Any) -> Any:
    if isinstance(form, ListForm) and len(form) == 2 and form[0] == Symbol("quote"):
        return form[1]
    return form


def _arglists(body: Sequence[Any]) -> Tuple[str, ...]:
    if body and isinstance(body[0], VectorForm):
        return (render(body[0]),)
    return tuple(
        render(arity[0])
        for arity in body
        if isinstance(arity, ListForm) and arity and isinstance(arity[0], VectorForm)
    )


def _explicit_arglists(form: Any) -> Tuple[str, ...]:
    form = _unquote(form)
    if isinstance(form, (ListForm, VectorForm)):
        return tuple(render(item) for item in form if isinstance(item, VectorForm))
    return ()


def _extra_meta(meta: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: to_python(value) for key, value in meta.items() if key not in _DROPPED_META}


class ClojureReader(NamespaceReader):
    """Reads ``.clj``/``.cljc`` sources with the ``clj`` reader feature."""

    extensions: Tuple[str, ...] = (".clj", ".cljc")
    features: Tuple[str, ...] = ("clj",)
    include_macros = True

    def __init__(self) -> None:
        self.logger = get_logger(f"readers.{type(self).__name__}")

    def read(
        self, paths: Sequence[Path], options: Mapping[str, Any] | None = None
    ) -> List[Namespace]:
        handler = (options or {}).get("exception_handler")
        namespaces: List[Namespace] = []
        for root in paths:
            for source in _iter_source_files(Path(root), self.extensions):
                try:
                    namespace = self._read_file(source)
                except SourceReadError as exc:
                    if handler is None:
                        raise
                    handler(exc, source.path)
                    continue
                if namespace is not None:
                    namespaces.append(namespace)
        self.logger.debug("Read %d namespaces from %d source paths", len(namespaces), len(paths))
        return namespaces

    def _read_file(self, source: _SourceFile) -> Optional[Namespace]:
        try:
            text = source.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(source.path, str(exc)) from exc
        try:
            forms = read_forms(text, features=self.features)
        except FormSyntaxError as exc:
            raise SourceReadError(source.path, str(exc)) from exc

        ns_form: Optional[ListForm] = None
        publics: List[Var] = []
        for form in forms:
            if not isinstance(form, ListForm) or not form or not isinstance(form[0], Symbol):
                continue
            if ns_form is None:
                if _local_name(form[0]) == "ns" and len(form) > 1 and isinstance(form[1], Symbol):
                    ns_form = form
                continue
            publics.extend(self._read_definition(form, ns_form[1].name, source.relative))

        if ns_form is None:
            self.logger.debug("Skipping %s: no ns form", source.path)
            return None
        return self._namespace(ns_form, publics)

    def _namespace(self, form: ListForm, publics: List[Var]) -> Namespace:
        symbol: Symbol = form[1]
        meta = dict(symbol.meta)
        rest = list(form[2:])
        doc = None
        if rest and isinstance(rest[0], str):
            doc = rest.pop(0)
        if rest and isinstance(rest[0], MapForm):
            meta.update(meta_to_dict(rest.pop(0)))
        meta_doc = meta.pop("doc", None)
        if isinstance(meta_doc, str):
            doc = meta_doc
        author = meta.pop("author", None)
        return Namespace(
            name=symbol.name,
            doc=doc,
            publics=tuple(publics),
            no_doc=_flag(meta.pop("no-doc", None)),
            added=_version(meta.pop("added", None)),
            deprecated=_version(meta.pop("deprecated", None)),
            author=author if isinstance(author, str) else None,
            meta=_extra_meta(meta),
        )

    def _read_definition(self, form: ListForm, ns_name: str, relative: str) -> List[Var]:
        head = _local_name(form[0])
        if head in _RECORD_DEFINERS:
            return self._record_factories(head, form, ns_name, relative)
        kind = _DEFINITION_TYPES.get(head)
        if kind is None or len(form) < 2 or not isinstance(form[1], Symbol):
            return []

        symbol: Symbol = form[1]
        meta = dict(symbol.meta)
        if head == "defn-" or meta.get("private") is True:
            return []
        if kind == "macro" and not self.include_macros:
            return []

        rest = list(form[2:])
        doc: Optional[str] = None
        arglists: Tuple[str, ...] = ()
        members: Tuple[Var, ...] = ()
        if kind == "var":
            if len(rest) >= 2 and isinstance(rest[0], str):
                doc = rest[0]
        else:
            if rest and isinstance(rest[0], str):
                doc = rest.pop(0)
            if rest and isinstance(rest[0], MapForm):
                meta.update(meta_to_dict(rest.pop(0)))
            if kind in {"fn", "macro"}:
                arglists = _arglists(rest)
            elif kind == "protocol":
                members = self._protocol_members(rest, relative)

        if "arglists" in meta:
            arglists = _explicit_arglists(meta.pop("arglists"))
        meta_doc = meta.pop("doc", None)
        if isinstance(meta_doc, str):
            doc = meta_doc

        return [
            Var(
                name=symbol.name,
                type=kind,
                doc=doc,
                arglists=arglists,
                members=members,
                no_doc=_flag(meta.pop("no-doc", None)),
                added=_version(meta.pop("added", None)),
                deprecated=_version(meta.pop("deprecated", None)),
                file=relative,
                line=form.line,
                meta=_extra_meta(meta),
            )
        ]

    def _protocol_members(self, body: Sequence[Any], relative: str) -> Tuple[Var, ...]:
        members: List[Var] = []
        items = list(body)
        while items:
            item = items.pop(0)
            if isinstance(item, Keyword):
                # protocol options such as :extend-via-metadata take a value
                if items:
                    items.pop(0)
                continue
            if not isinstance(item, ListForm) or not item or not isinstance(item[0], Symbol):
                continue
            signature = item[1:]
            doc = next((part for part in signature if isinstance(part, str)), None)
            members.append(
                Var(
                    name=item[0].name,
                    type="fn",
                    doc=doc,
                    arglists=tuple(render(part) for part in signature if isinstance(part, VectorForm)),
                    file=relative,
                    line=item.line,
                )
            )
        return tuple(members)

    def _record_factories(
        self, head: str, form: ListForm, ns_name: str, relative: str
    ) -> List[Var]:
        if len(form) < 3 or not isinstance(form[1], Symbol) or not isinstance(form[2], VectorForm):
            return []
        symbol: Symbol = form[1]
        if symbol.meta.get("private") is True:
            return []
        class_name = f"{ns_name.replace('-', '_')}.{symbol.name}"
        factories = [
            Var(
                name=f"->{symbol.name}",
                type="fn",
                doc=f"Positional factory function for class {class_name}.",
                arglists=(render(form[2]),),
                file=relative,
                line=form.line,
            )
        ]
        if head == "defrecord":
            factories.append(
                Var(
                    name=f"map->{symbol.name}",
                    type="fn",
                    doc=(
                        f"Factory function for class {class_name}, "
                        "taking a map of keywords to field values."
                    ),
                    arglists=("[m]",),
                    file=relative,
                    line=form.line,
                )
            )
        return factories


class ClojureScriptReader(ClojureReader):
    """Reads ``.cljs``/``.cljc`` sources with the ``cljs`` reader feature.

    Macros are defined for the host compiler, so this reader never reports
    them; callers run a separate clojure pass to recover them.
    """

    extensions = (".cljs", ".cljc")
    features = ("cljs",)
    include_macros = False
    needs_macro_pass = True


__all__ = ["ClojureReader", "ClojureScriptReader"]
