"""Base classes for namespace reader plugins."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Mapping, Sequence

from ..models import Namespace


class NamespaceReader(ABC):
    """Contract for readers that turn source paths into namespace records."""

    #: Whether macros are invisible to this reader and need a separate pass.
    needs_macro_pass: bool = False

    @abstractmethod
    def read(
        self, paths: Sequence[Path], options: Mapping[str, Any] | None = None
    ) -> List[Namespace]:
        """Return the namespaces defined under ``paths`` in discovery order."""
