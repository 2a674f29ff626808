"""Namespace merging and metadata default overlays."""

from __future__ import annotations

from dataclasses import fields, replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, TypeVar, Union

from .models import Namespace, Var

Node = Union[Namespace, Var]
N = TypeVar("N", Namespace, Var)

# Child collection of each node kind in the Namespace -> Var -> Var tree.
_CHILDREN = {Namespace: "publics", Var: "members"}

# Structural fields that defaults never overlay.
_STRUCTURAL = {"name", "publics", "members", "meta"}


def merge_namespaces(namespaces: Iterable[Namespace]) -> List[Namespace]:
    """Collapse records sharing a name into one, concatenating their publics.

    Groups keep first-encounter order; the first record of a group supplies
    every field except ``publics``. Same-named vars are not deduplicated.
    """
    groups: Dict[Optional[str], List[Namespace]] = {}
    for namespace in namespaces:
        groups.setdefault(namespace.name, []).append(namespace)

    merged: List[Namespace] = []
    for group in groups.values():
        base = group[0]
        if len(group) == 1:
            merged.append(base)
            continue
        publics = tuple(var for namespace in group for var in namespace.publics)
        merged.append(replace(base, publics=publics))
    return merged


def map_tree(node: N, fn: Callable[[Node], Node]) -> N:
    """Apply ``fn`` to ``node`` and then, recursively, to all of its children."""
    updated = fn(node)
    attribute = _CHILDREN[type(updated)]
    children = tuple(map_tree(child, fn) for child in getattr(updated, attribute))
    return replace(updated, **{attribute: children})  # type: ignore[return-value]


def overlay_defaults(node: N, defaults: Mapping[str, Any]) -> N:
    """Return ``node`` with ``defaults`` filling whatever it leaves unset.

    Keys naming a field (``added``, ``no-doc``...) fill that field when it is
    ``None``; any other key is merged into ``meta`` beneath the node's own
    entries.
    """
    if not defaults:
        return node
    names = {field.name for field in fields(node)} - _STRUCTURAL
    changes: Dict[str, Any] = {}
    extra: Dict[str, Any] = {}
    for key, value in defaults.items():
        attribute = str(key).replace("-", "_")
        if attribute in names:
            if getattr(node, attribute) is None:
                changes[attribute] = value
        elif attribute not in _STRUCTURAL:
            extra[key] = value
    if extra:
        changes["meta"] = {**extra, **node.meta}
    if not changes:
        return node
    return replace(node, **changes)


def add_ns_defaults(
    namespaces: Iterable[Namespace], defaults: Mapping[str, Any] | None
) -> List[Namespace]:
    """Overlay ``defaults`` on every namespace, var and nested member."""
    if not defaults:
        return list(namespaces)
    return [map_tree(namespace, lambda node: overlay_defaults(node, defaults)) for namespace in namespaces]


__all__ = ["add_ns_defaults", "map_tree", "merge_namespaces", "overlay_defaults"]
