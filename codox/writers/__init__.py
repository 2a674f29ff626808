"""Writer implementations and lookup by identifier."""

from __future__ import annotations

from typing import Callable, List

from .base import Writer, source_uri
from .html import HtmlWriter
from .json_data import JsonWriter
from ..errors import RendererResolutionError
from ..plugins import find_entry_point, instantiate, plugin_names

_ENTRY_POINT_GROUP = "codox.writers"

DEFAULT_WRITER = "html"

_BUILTIN_FACTORIES: dict[str, Callable[[], Writer]] = {
    "html": HtmlWriter,
    "json": JsonWriter,
}


def available_writers() -> List[str]:
    """Return every identifier a writer is registered under."""
    return plugin_names(list(_BUILTIN_FACTORIES), _ENTRY_POINT_GROUP)


def resolve_writer(identifier: str | None = None) -> Writer:
    """Return the writer registered under ``identifier`` (default ``html``)."""
    key = (identifier or DEFAULT_WRITER).lower()
    factory = _BUILTIN_FACTORIES.get(key)
    if factory is not None:
        return factory()

    entry = find_entry_point(_ENTRY_POINT_GROUP, key)
    if entry is None:
        raise RendererResolutionError(key, f"known writers: {', '.join(available_writers())}")
    try:
        return instantiate(entry.load(), Writer)
    except Exception as exc:
        raise RendererResolutionError(key, str(exc)) from exc


__all__ = [
    "DEFAULT_WRITER",
    "HtmlWriter",
    "JsonWriter",
    "Writer",
    "available_writers",
    "resolve_writer",
    "source_uri",
]
