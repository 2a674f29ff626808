"""Exception types raised by the codox pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping


class CodoxError(RuntimeError):
    """Base class for fatal documentation run failures."""


class ConfigError(CodoxError):
    """Raised when a configuration or project file cannot be parsed."""


class SourceReadError(CodoxError):
    """Raised when a configured source path is unreadable or malformed."""

    def __init__(self, path: Path | str, reason: str | None = None) -> None:
        self.path = Path(path)
        self.reason = reason
        message = f"Could not read source {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RendererResolutionError(CodoxError):
    """Raised when the configured writer identifier cannot be resolved."""

    def __init__(self, identifier: str, reason: str | None = None) -> None:
        self.identifier = identifier
        message = f"Could not resolve codox writer {identifier!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class CommitLookupError(CodoxError):
    """Raised when the repository commit id cannot be determined."""

    def __init__(self, message: str, result: Mapping[str, object] | None = None) -> None:
        self.result = dict(result or {})
        super().__init__(message)


class ProvenanceLookupFailure(LookupError):
    """A var's originating file was not found under any source root.

    Recovered inside the provenance annotator; never escapes a run.
    """

    def __init__(self, file: str, roots: tuple[Path, ...]) -> None:
        self.file = file
        self.roots = roots
        super().__init__(f"{file} not found under {', '.join(str(root) for root in roots) or 'no roots'}")


__all__ = [
    "CodoxError",
    "CommitLookupError",
    "ConfigError",
    "ProvenanceLookupFailure",
    "RendererResolutionError",
    "SourceReadError",
]
