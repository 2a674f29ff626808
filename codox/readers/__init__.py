"""Namespace reader implementations and dialect lookup."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, List, Mapping, Sequence

from .base import NamespaceReader
from .clojure import ClojureReader, ClojureScriptReader
from ..models import Namespace
from ..plugins import find_entry_point, instantiate, plugin_names

_ENTRY_POINT_GROUP = "codox.readers"

_BUILTIN_FACTORIES: dict[str, Callable[[], NamespaceReader]] = {
    "clojure": ClojureReader,
    "clojurescript": ClojureScriptReader,
}


def available_languages() -> List[str]:
    """Return every dialect key a reader is registered for."""
    return plugin_names(list(_BUILTIN_FACTORIES), _ENTRY_POINT_GROUP)


def resolve_reader(language: str) -> NamespaceReader:
    """Return a reader instance for ``language``.

    Built-in dialects win over entry points registered under the same key.
    """
    key = str(language).lower()
    factory = _BUILTIN_FACTORIES.get(key)
    if factory is not None:
        return factory()

    entry = find_entry_point(_ENTRY_POINT_GROUP, key)
    if entry is None:
        known = ", ".join(available_languages())
        raise ValueError(f"Unsupported language {language!r} (known: {known})")
    return instantiate(entry.load(), NamespaceReader)


def read_macro_namespaces(
    paths: Sequence[Path], options: Mapping[str, Any] | None = None
) -> List[Namespace]:
    """Read ``paths`` with the clojure reader, keeping only macro vars.

    Namespaces that define no macros are dropped.
    """
    namespaces: List[Namespace] = []
    for namespace in ClojureReader().read(paths, options):
        macros = tuple(var for var in namespace.publics if var.is_macro)
        if macros:
            namespaces.append(replace(namespace, publics=macros))
    return namespaces


__all__ = [
    "ClojureReader",
    "ClojureScriptReader",
    "NamespaceReader",
    "available_languages",
    "read_macro_namespaces",
    "resolve_reader",
]
