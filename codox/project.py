"""Option discovery from project files (.codox.yml, deps.edn, project.clj)."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from .config import load_config, normalize_keys
from .errors import ConfigError
from .logging import get_logger
from .readers.forms import FormSyntaxError, Keyword, ListForm, MapForm, Symbol, read_forms, to_python

logger = get_logger("project")

_PROJECT_KEYS = ("description", "profiles")


def find_vals(forms: Sequence[Any], keys: Iterable[str]) -> Dict[str, Any]:
    """Collect ``:key value`` pairs from a flat form sequence."""
    wanted = set(keys)
    found: Dict[str, Any] = {}
    index = 0
    while index < len(forms) - 1:
        item = forms[index]
        if isinstance(item, Keyword) and item.name in wanted:
            found[item.name] = forms[index + 1]
            index += 2
            continue
        index += 1
    return found


def _read_edn(path: Path) -> List[Any]:
    try:
        return read_forms(path.read_text(encoding="utf-8"), features=("clj",))
    except (OSError, UnicodeDecodeError, FormSyntaxError) as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc


def _python_value(form: Any, path: Path) -> Any:
    try:
        return to_python(form)
    except re.error as exc:
        raise ConfigError(f"Invalid regular expression in {path.name}: {exc}") from exc


def _get_in(data: Any, key_path: Sequence[Any]) -> Any:
    for key in key_path:
        if not isinstance(data, Mapping):
            return None
        data = data.get(str(key).lstrip(":"))
    return data


def deps_edn_options(path: Path, arg_paths: Sequence[Sequence[Any]] | None) -> Dict[str, Any]:
    """Merge, in order, the maps found at ``arg_paths`` inside ``deps.edn``."""
    forms = _read_edn(path)
    if not forms or not isinstance(forms[0], MapForm):
        raise ConfigError(f"{path.name} must contain a map")
    data = _python_value(forms[0], path)
    merged: Dict[str, Any] = {}
    for key_path in arg_paths or []:
        section = _get_in(data, key_path)
        if isinstance(section, Mapping):
            merged.update(section)
        else:
            logger.debug("No options map at %s in %s", list(key_path), path.name)
    return normalize_keys(merged)


def project_clj_options(path: Path) -> Dict[str, Any]:
    """Return name, version, description and the ``:codox`` profile section."""
    form = next(
        (
            item
            for item in _read_edn(path)
            if isinstance(item, ListForm) and item and item[0] == Symbol("defproject")
        ),
        None,
    )
    if form is None or len(form) < 3:
        raise ConfigError(f"{path.name} does not contain a defproject form")

    project_name = str(form[1]).rsplit("/", 1)[-1]
    version = form[2] if isinstance(form[2], str) else None
    values = {key: _python_value(value, path) for key, value in find_vals(form[3:], _PROJECT_KEYS).items()}
    section = _get_in(values.get("profiles"), ["codox", "codox"])

    options: Dict[str, Any] = {
        "name": project_name,
        "version": version,
        "description": values.get("description", ""),
    }
    if isinstance(section, Mapping):
        options.update(normalize_keys(section))
    return options


def load_project_options(root: Path | str, base: Mapping[str, Any] | None = None) -> Dict[str, Any]:
    """Return ``base`` merged with options found in ``root``'s project files.

    The first of ``.codox.yml``, ``deps.edn`` and ``project.clj`` present in
    ``root`` is used; its values win over ``base``.
    """
    root = Path(root).expanduser().resolve()
    options = normalize_keys(base or {})
    arg_paths = options.pop("arg_paths", None)

    section = load_config(root)
    if section:
        source = ".codox.yml"
    elif (root / "deps.edn").exists():
        source = "deps.edn"
        section = deps_edn_options(root / "deps.edn", arg_paths)
    elif (root / "project.clj").exists():
        source = "project.clj"
        section = project_clj_options(root / "project.clj")
    else:
        source = None
    if source:
        logger.debug("Loaded options from %s", root / source)

    options.update(section)
    options.setdefault("root_path", str(root))
    return options


__all__ = [
    "deps_edn_options",
    "find_vals",
    "load_project_options",
    "project_clj_options",
]
