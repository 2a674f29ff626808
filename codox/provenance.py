"""Source path annotation for generated source links."""

from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List, Sequence

from .errors import ProvenanceLookupFailure
from .logging import get_logger
from .merge import Node, map_tree
from .models import Namespace, Var

logger = get_logger("provenance")


def find_source_file(file: str, roots: Sequence[Path]) -> Path:
    """Return the first ``root / file`` that exists, in ``roots`` order."""
    for root in roots:
        if root.is_file():
            # single-file source paths record the bare file name
            if root.name == file:
                return root
            continue
        candidate = root / file
        if candidate.is_file():
            return candidate
    raise ProvenanceLookupFailure(file, tuple(roots))


def _relative_path(path: Path, root_path: Path) -> str:
    try:
        return path.relative_to(root_path).as_posix()
    except ValueError:
        return Path(os.path.relpath(path, root_path)).as_posix()


def add_source_paths(
    namespaces: Iterable[Namespace],
    root_path: Path | str,
    source_paths: Sequence[Path | str],
) -> List[Namespace]:
    """Record on every var the path of its file relative to ``root_path``.

    Vars whose file cannot be located keep ``path`` unset.
    """
    root = Path(root_path)
    roots = [root / source for source in source_paths]
    found: dict[str, str | None] = {}

    def _annotate(node: Node) -> Node:
        if not isinstance(node, Var) or not node.file:
            return node
        if node.file not in found:
            try:
                found[node.file] = _relative_path(find_source_file(node.file, roots), root)
            except ProvenanceLookupFailure as exc:
                logger.debug("No source path for %s: %s", node.name, exc)
                found[node.file] = None
        path = found[node.file]
        if path is None or path == node.path:
            return node
        return replace(node, path=path)

    return [map_tree(namespace, _annotate) for namespace in namespaces]


__all__ = ["add_source_paths", "find_source_file"]
