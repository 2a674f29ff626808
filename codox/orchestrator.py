"""Pipeline orchestration for a documentation run."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional

from .config import Options, build_options
from .filters import ALL, filter_namespaces, remove_excluded_vars
from .logging import get_logger
from .merge import add_ns_defaults, merge_namespaces
from .models import Document, Namespace, RenderInput
from .provenance import add_source_paths
from .readers import NamespaceReader, read_macro_namespaces, resolve_reader
from .readers.plaintext import read_documents as read_document_dirs
from .readers.plaintext import read_file
from .writers import Writer, resolve_writer


class Orchestrator:
    """Sequences reading, filtering, annotation and writing for one run."""

    def __init__(
        self,
        reader_resolver: Callable[[str], NamespaceReader] | None = None,
        writer_resolver: Callable[[Optional[str]], Writer] | None = None,
    ) -> None:
        self._resolve_reader = reader_resolver or resolve_reader
        self._resolve_writer = writer_resolver or resolve_writer
        self.logger = get_logger("orchestrator")

    def run(self, options: Options | Mapping[str, Any] | None = None) -> RenderInput:
        """Read namespaces and documents, hand them to the writer, return the model."""
        if not isinstance(options, Options):
            options = build_options(options)

        # Resolve the writer before reading so a bad identifier fails fast.
        writer = self._resolve_writer(options.writer)
        self.logger.debug("Using writer %s", type(writer).__name__)

        namespaces = self.read_namespaces(options)
        documents = self.read_documents(options)
        render_input = RenderInput(
            options=options,
            namespaces=tuple(namespaces),
            documents=tuple(documents),
        )
        writer.write(render_input)
        self.logger.info(
            "Documented %d namespaces and %d documents", len(namespaces), len(documents)
        )
        return render_input

    def read_namespaces(self, options: Options) -> List[Namespace]:
        """Run the extraction pipeline and return the final namespace records."""
        reader = self._resolve_reader(options.language)
        source_roots = options.source_roots()
        reader_options = options.reader_options()

        namespaces = reader.read(source_roots, reader_options)
        if reader.needs_macro_pass:
            macro_namespaces = read_macro_namespaces(source_roots, reader_options)
            self.logger.debug("Macro pass found %d namespaces", len(macro_namespaces))
            namespaces = [*namespaces, *macro_namespaces]
        namespaces = merge_namespaces(namespaces)

        namespaces = filter_namespaces(namespaces, options.namespaces)
        namespaces = remove_excluded_vars(namespaces, options.exclude_vars)
        namespaces = add_source_paths(namespaces, options.root_path, options.source_paths)
        return add_ns_defaults(namespaces, options.metadata)

    def read_documents(self, options: Options) -> List[Document]:
        """Load explicit ``doc_files`` in order, or scan ``doc_paths`` sorted by name."""
        root = options.root_path
        if options.doc_files != ALL:
            return [read_file(_under(root, name)) for name in options.doc_files]
        if not options.doc_paths:
            return []
        documents = read_document_dirs(*(_under(root, path) for path in options.doc_paths))
        return sorted(documents, key=lambda document: document.name)


def _under(root: Path, path: str) -> Path:
    candidate = Path(path)
    return candidate if candidate.is_absolute() else root / candidate


def generate_docs(options: Options | Mapping[str, Any] | None = None) -> RenderInput:
    """Generate documentation from source files."""
    return Orchestrator().run(options)


__all__ = ["Orchestrator", "generate_docs"]
