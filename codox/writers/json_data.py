"""Writer that dumps the documentation model as JSON."""

from __future__ import annotations

import json
from typing import Any, Dict

from ..logging import get_logger
from ..models import Document, Namespace, RenderInput, Var
from .base import Writer, source_uri, visible_namespaces, visible_vars

OUTPUT_FILENAME = "codox.json"


class JsonWriter(Writer):
    """Writes visible namespaces and documents to ``codox.json``."""

    def __init__(self) -> None:
        self.logger = get_logger("writers.json")

    def write(self, render_input: RenderInput) -> None:
        options = render_input.options
        payload = {
            "project": {
                "name": options.name,
                "version": options.version,
                "description": options.description,
            },
            "namespaces": [
                self._namespace(render_input, namespace)
                for namespace in visible_namespaces(render_input)
            ],
            "documents": [_document(document) for document in render_input.documents],
        }
        output_dir = options.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)
        target = output_dir / OUTPUT_FILENAME
        target.write_text(json.dumps(payload, indent=2, sort_keys=True, default=str), encoding="utf-8")
        self.logger.info("Wrote %s", target)

    def _namespace(self, render_input: RenderInput, namespace: Namespace) -> Dict[str, Any]:
        return {
            "name": namespace.name,
            "doc": namespace.doc,
            "added": namespace.added,
            "deprecated": namespace.deprecated,
            "author": namespace.author,
            "meta": dict(namespace.meta),
            "publics": [self._var(render_input, var) for var in visible_vars(namespace)],
        }

    def _var(self, render_input: RenderInput, var: Var) -> Dict[str, Any]:
        return {
            "name": var.name,
            "type": var.type,
            "doc": var.doc,
            "arglists": list(var.arglists),
            "added": var.added,
            "deprecated": var.deprecated,
            "path": var.path,
            "line": var.line,
            "source_uri": source_uri(render_input.options, var),
            "meta": dict(var.meta),
            "members": [
                self._var(render_input, member) for member in var.members if not member.no_doc
            ],
        }


def _document(document: Document) -> Dict[str, Any]:
    return {
        "name": document.name,
        "title": document.title,
        "format": document.format,
        "content": document.content,
    }


__all__ = ["JsonWriter", "OUTPUT_FILENAME"]
