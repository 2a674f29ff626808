"""Logging for codox runs: the ``codox`` logger tree and option dumps."""

from __future__ import annotations

import logging
from pathlib import Path
from pprint import pformat
from typing import Any, Iterable, Mapping

ROOT = "codox"

CONSOLE_FORMAT = "[codox] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Option values that are process state rather than configuration.
_UNPRINTED_OPTIONS = {"exception_handler", "git_commit"}


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``codox`` or the ``codox.<name>`` child logger."""
    return logging.getLogger(f"{ROOT}.{name}" if name else ROOT)


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """Send the ``codox`` tree to stderr (and ``log_file``) at INFO, or DEBUG when verbose.

    Calling it again replaces the handlers installed by the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger(ROOT)
    root.setLevel(level)
    root.propagate = False
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    handlers: list[tuple[logging.Handler, str]] = [(logging.StreamHandler(), CONSOLE_FORMAT)]
    if log_file is not None:
        handlers.append((logging.FileHandler(log_file, encoding="utf-8"), FILE_FORMAT))
    for handler, fmt in handlers:
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)
    return root


def format_options(options: Mapping[str, Any], *, skip: Iterable[str] = _UNPRINTED_OPTIONS) -> str:
    """Pretty-print an option map with the ``:kebab-case`` keys project files use.

    Keys are sorted; ``git_commit`` and ``exception_handler`` are left out so
    printing never triggers the commit lookup.
    """
    skipped = {str(key).lstrip(":").replace("-", "_") for key in skip}
    spelled = {
        ":" + str(key).lstrip(":").replace("_", "-"): value
        for key, value in options.items()
        if str(key).lstrip(":").replace("-", "_") not in skipped
    }
    return pformat(dict(sorted(spelled.items())), sort_dicts=False)


__all__ = ["configure_logging", "format_options", "get_logger"]
