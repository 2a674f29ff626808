"""CLI entrypoint for codox."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict

from .config import build_options
from .errors import CodoxError
from .logging import configure_logging, format_options, get_logger
from .orchestrator import Orchestrator
from .project import load_project_options


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codox",
        description="Generate API documentation from clojure and clojurescript sources.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write the run log to this file.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    parser.add_argument(
        "--language",
        choices=["clojure", "clojurescript"],
        help="Source dialect to read.",
    )
    parser.add_argument("--writer", help="Writer to render output with (html, json).")
    parser.add_argument("--output-path", help="Directory to write output into.")
    parser.add_argument(
        "--source-path",
        action="append",
        dest="source_paths",
        help="Source root to read; repeat for several roots.",
    )
    parser.add_argument(
        "--namespace",
        action="append",
        dest="namespaces",
        help='Namespace to document; use #"regex" for a pattern. Repeatable.',
    )
    parser.add_argument("--exclude-vars", help="Regular expression of var names to skip.")
    parser.add_argument(
        "--doc-path",
        action="append",
        dest="doc_paths",
        help="Directory of documentation pages; repeat for several.",
    )
    parser.add_argument(
        "--arg-path",
        action="append",
        dest="arg_paths",
        help="Dot-separated key path of an options map in deps.edn, e.g. aliases.codox.exec-args.",
    )
    return parser


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for key in ("language", "writer", "output_path", "source_paths", "namespaces", "exclude_vars", "doc_paths"):
        value = getattr(args, key, None)
        if value is not None:
            overrides[key] = value
    return overrides


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for codox."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    logger = get_logger("cli")

    base: Dict[str, Any] = {}
    if args.arg_paths:
        base["arg_paths"] = [path.split(".") for path in args.arg_paths]

    try:
        project_options = load_project_options(args.path, base)
        project_options.update(_overrides(args))
        options = build_options(project_options)
        logger.info("Codox options:\n%s", format_options(project_options))
        Orchestrator().run(options)
    except CodoxError as exc:
        parser.exit(1, f"codox failed: {exc}\nRun with --verbose for more details.\n")
    except ValueError as exc:
        parser.exit(1, f"codox failed: {exc}\n")

    print(f"Documentation written to {_relativize(options.output_dir)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
