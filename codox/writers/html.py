"""Default HTML writer backed by Jinja2 templates."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..logging import get_logger
from ..models import Document, Namespace, RenderInput
from .base import Writer, source_uri, visible_namespaces, visible_vars


def namespace_filename(namespace: Namespace) -> str:
    return f"{namespace.name}.html"


def document_filename(document: Document) -> str:
    return f"{document.name.replace('/', '-')}.html"


class HtmlWriter(Writer):
    """Writes an index page plus one page per namespace and document."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self.logger = get_logger("writers.html")
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["namespace_filename"] = namespace_filename
        self._env.filters["document_filename"] = document_filename

    def write(self, render_input: RenderInput) -> None:
        options = render_input.options
        output_dir = options.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)

        namespaces = visible_namespaces(render_input)
        context: Dict[str, Any] = {
            "project": {
                "name": options.name or options.root_path.name,
                "version": options.version,
                "description": options.description,
            },
            "namespaces": namespaces,
            "documents": list(render_input.documents),
        }

        self._render("index.html", output_dir / "index.html", context)
        for namespace in namespaces:
            vars_ = [
                {"var": var, "source_uri": source_uri(options, var)}
                for var in visible_vars(namespace)
            ]
            self._render(
                "namespace.html",
                output_dir / namespace_filename(namespace),
                {**context, "namespace": namespace, "vars": vars_},
            )
        for document in render_input.documents:
            self._render(
                "document.html",
                output_dir / document_filename(document),
                {**context, "document": document},
            )
        self.logger.info(
            "Wrote %d namespace pages and %d documents to %s",
            len(namespaces),
            len(render_input.documents),
            output_dir,
        )

    def _render(self, template_name: str, target: Path, context: Dict[str, Any]) -> None:
        template = self._env.get_template(template_name)
        target.write_text(template.render(**context), encoding="utf-8")


__all__ = ["HtmlWriter", "document_filename", "namespace_filename"]
