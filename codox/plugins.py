"""Entry point discovery shared by the reader and writer registries."""

from __future__ import annotations

from importlib import metadata
from typing import List, Type, TypeVar

P = TypeVar("P")


def iter_entry_points(group: str) -> List[metadata.EntryPoint]:
    """Return the entry points installed under ``group``."""
    return list(metadata.entry_points(group=group))


def plugin_names(builtin: List[str], group: str) -> List[str]:
    """Built-in names followed by entry point names not already listed."""
    names = list(builtin)
    for entry in iter_entry_points(group):
        if entry.name not in names:
            names.append(entry.name)
    return names


def find_entry_point(group: str, key: str) -> metadata.EntryPoint | None:
    """Return the entry point in ``group`` whose name matches ``key`` case-insensitively."""
    for entry in iter_entry_points(group):
        if entry.name.lower() == key:
            return entry
    return None


def instantiate(obj: object, base: Type[P]) -> P:
    """Turn a loaded entry point (instance, subclass or factory) into a ``base``."""
    if isinstance(obj, base):
        return obj
    if isinstance(obj, type) and issubclass(obj, base):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, base):
            return instance
    raise TypeError(f"Entry point must provide a {base.__name__} subclass or factory")


__all__ = ["find_entry_point", "instantiate", "iter_entry_points", "plugin_names"]
