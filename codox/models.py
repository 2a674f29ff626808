"""Core data models shared across codox components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .config import Options


@dataclass(frozen=True)
class Var:
    """A documented public binding inside a namespace."""

    name: str
    type: str = "var"
    doc: Optional[str] = None
    arglists: Tuple[str, ...] = ()
    members: Tuple["Var", ...] = ()
    no_doc: Optional[bool] = None
    added: Optional[str] = None
    deprecated: Optional[str] = None
    file: Optional[str] = None
    line: Optional[int] = None
    path: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_macro(self) -> bool:
        return self.type == "macro"


@dataclass(frozen=True)
class Namespace:
    """A named grouping of public vars read from one source module."""

    name: Optional[str]
    doc: Optional[str] = None
    publics: Tuple[Var, ...] = ()
    no_doc: Optional[bool] = None
    added: Optional[str] = None
    deprecated: Optional[str] = None
    author: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Document:
    """A free-form documentation page."""

    name: str
    content: str
    path: str
    title: Optional[str] = None
    format: str = "markdown"


@dataclass(frozen=True)
class RenderInput:
    """Everything a writer needs to produce output for one run."""

    options: "Options"
    namespaces: Tuple[Namespace, ...]
    documents: Tuple[Document, ...]


def var_symbol(namespace: Namespace, var: Var) -> str:
    """Return the fully qualified ``ns/var`` name."""
    return f"{namespace.name}/{var.name}"


__all__ = ["Document", "Namespace", "RenderInput", "Var", "var_symbol"]
