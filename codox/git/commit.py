"""Repository commit lookup for source links."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Generic, Optional, TypeVar

from ..errors import CommitLookupError

T = TypeVar("T")

_UNSET = object()


class Deferred(Generic[T]):
    """Compute a value on first ``get()`` and memoize it.

    A failed computation is not cached; the next ``get()`` retries it.
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self._factory = factory
        self._value: object = _UNSET

    @classmethod
    def of(cls, value: T) -> "Deferred[T]":
        deferred = cls(lambda: value)
        deferred._value = value
        return deferred

    @property
    def realized(self) -> bool:
        return self._value is not _UNSET

    def get(self) -> T:
        if self._value is _UNSET:
            self._value = self._factory()
        return self._value  # type: ignore[return-value]

    def __repr__(self) -> str:
        if self.realized:
            return f"Deferred({self._value!r})"
        return "Deferred(<pending>)"


Runner = Callable[[list[str], Path], "subprocess.CompletedProcess[str]"]


def _default_runner(args: list[str], cwd: Path) -> "subprocess.CompletedProcess[str]":
    return subprocess.run(
        args,
        cwd=str(cwd),
        check=False,
        text=True,
        capture_output=True,
    )


def git_commit(directory: Path | str, runner: Optional[Runner] = None) -> str:
    """Return the commit id checked out in ``directory``."""
    run = runner or _default_runner
    args = ["git", "rev-parse", "HEAD"]
    try:
        completed = run(args, Path(directory))
    except OSError as exc:
        raise CommitLookupError(f"Error getting git commit: {exc}") from exc
    if completed.returncode != 0:
        raise CommitLookupError(
            "Error getting git commit",
            {"exit": completed.returncode, "out": completed.stdout, "err": completed.stderr},
        )
    return completed.stdout.strip()


def deferred_git_commit(directory: Path | str, runner: Optional[Runner] = None) -> Deferred[str]:
    """Return a deferred cell that runs ``git rev-parse HEAD`` when first read."""
    return Deferred(lambda: git_commit(directory, runner))


__all__ = ["Deferred", "deferred_git_commit", "git_commit"]
