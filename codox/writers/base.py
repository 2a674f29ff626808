"""Base classes and shared helpers for output writers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..config import Options
from ..models import Namespace, RenderInput, Var

GIT_COMMIT_PLACEHOLDER = "{git-commit}"


class Writer(ABC):
    """Contract for renderers that turn a run's model into output files."""

    @abstractmethod
    def write(self, render_input: RenderInput) -> None:
        """Produce output for ``render_input``."""


def source_uri(options: Options, var: Var) -> Optional[str]:
    """Return a link to ``var``'s source, or ``None`` when it cannot be built.

    The commit id is only looked up when ``src_dir_uri`` references it.
    """
    if not options.src_dir_uri or not var.path:
        return None
    base = options.src_dir_uri
    if GIT_COMMIT_PLACEHOLDER in base:
        base = base.replace(GIT_COMMIT_PLACEHOLDER, options.commit() or "")
    uri = f"{base}{var.path}"
    if var.line is not None:
        uri = f"{uri}#{options.src_linenum_anchor_prefix or ''}{var.line}"
    return uri


def visible_namespaces(render_input: RenderInput) -> list[Namespace]:
    """Namespaces to render: ``no_doc`` ones are dropped, order is by name."""
    namespaces = [namespace for namespace in render_input.namespaces if not namespace.no_doc]
    return sorted(namespaces, key=lambda namespace: str(namespace.name))


def visible_vars(namespace: Namespace) -> list[Var]:
    """Public vars to render for ``namespace``, without ``no_doc`` vars."""
    return sorted((var for var in namespace.publics if not var.no_doc), key=lambda var: var.name)


__all__ = ["Writer", "source_uri", "visible_namespaces", "visible_vars"]
