"""Readers for free-form documentation pages."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from ..errors import SourceReadError
from ..models import Document

_FORMATS = {
    ".md": "markdown",
    ".markdown": "markdown",
    ".txt": "text",
}


def _title(content: str, fallback: str) -> str:
    for line in content.splitlines():
        stripped = line.strip()
        if stripped.startswith("#"):
            heading = stripped.lstrip("#").strip()
            if heading:
                return heading
    return fallback


def _document(path: Path, name: str) -> Document:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(path, str(exc)) from exc
    return Document(
        name=name,
        content=content,
        path=path.as_posix(),
        title=_title(content, name),
        format=_FORMATS.get(path.suffix.lower(), "text"),
    )


def read_file(path: Path | str) -> Document:
    """Read a single document; its name is the file name without extension."""
    path = Path(path)
    return _document(path, path.stem)


def read_documents(*directories: Path | str) -> List[Document]:
    """Recursively read every document under ``directories``.

    Names are paths relative to their directory without the extension.
    Directories that do not exist contribute nothing.
    """
    documents: List[Document] = []
    for directory in directories:
        root = Path(directory)
        if not root.is_dir():
            continue
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(name for name in dirnames if not name.startswith("."))
            current_dir = Path(dirpath)
            for filename in sorted(filenames):
                path = current_dir / filename
                if path.suffix.lower() not in _FORMATS:
                    continue
                name = path.relative_to(root).with_suffix("").as_posix()
                documents.append(_document(path, name))
    return documents


__all__ = ["read_documents", "read_file"]
