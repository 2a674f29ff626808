"""Option records and configuration loading for codox (.codox.yml)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

import yaml

from .errors import ConfigError
from .filters import ALL, Pattern, compile_pattern, compile_regex
from .git.commit import Deferred, deferred_git_commit

CONFIG_FILENAME = ".codox.yml"

DEFAULT_EXCLUDE_VARS = compile_regex(r"^(map)?->\p{Upper}")


@dataclass(frozen=True)
class Options:
    """Settings for one documentation run. Never mutated once built."""

    root_path: Path
    language: str = "clojure"
    source_paths: Tuple[str, ...] = ("src",)
    namespaces: Union[str, Tuple[Pattern, ...]] = ALL
    exclude_vars: Optional[re.Pattern[str]] = DEFAULT_EXCLUDE_VARS
    doc_paths: Tuple[str, ...] = ("doc",)
    doc_files: Union[str, Tuple[str, ...]] = ALL
    metadata: Mapping[str, Any] = field(default_factory=dict)
    writer: str = "html"
    output_path: str = "target/doc"
    src_dir_uri: Optional[str] = None
    src_linenum_anchor_prefix: Optional[str] = None
    git_commit: Optional[Deferred[str]] = None
    themes: Tuple[str, ...] = ("default",)
    name: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None
    exception_handler: Optional[Callable[[Exception, Path], None]] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def output_dir(self) -> Path:
        output = Path(self.output_path)
        return output if output.is_absolute() else self.root_path / output

    def source_roots(self) -> list[Path]:
        """Source paths resolved against the root path, in configured order."""
        return [self.root_path / source for source in self.source_paths]

    def reader_options(self) -> Dict[str, Any]:
        if self.exception_handler is None:
            return {}
        return {"exception_handler": self.exception_handler}

    def commit(self) -> Optional[str]:
        """Force the deferred commit id, if one is configured."""
        if self.git_commit is None:
            return None
        return self.git_commit.get()


_OPTION_FIELDS = {item.name for item in fields(Options)} - {"extra"}


def normalize_keys(data: Mapping[Any, Any]) -> Dict[str, Any]:
    """Map ``:source-paths`` / ``source-paths`` style keys to field names."""
    return {str(key).lstrip(":").replace("-", "_"): value for key, value in data.items()}


def build_options(
    overrides: Mapping[str, Any] | None = None, *, cwd: Path | None = None
) -> Options:
    """Merge ``overrides`` over the defaults into an :class:`Options` record."""
    data = normalize_keys(overrides or {})
    root_path = Path(data.pop("root_path", None) or cwd or Path.cwd()).expanduser().resolve()

    values: Dict[str, Any] = {"root_path": root_path}
    extra: Dict[str, Any] = dict(_as_dict(data.pop("extra", None)))
    for key, value in data.items():
        if key not in _OPTION_FIELDS:
            extra[key] = value
            continue
        values[key] = _coerce(key, value)

    if values.get("git_commit") is None:
        values["git_commit"] = deferred_git_commit(root_path)
    values["extra"] = extra
    return Options(**values)


def _coerce(key: str, value: Any) -> Any:
    if key in {"source_paths", "doc_paths", "themes"}:
        return _as_str_tuple(value)
    if key == "namespaces":
        if value is None or value == ALL:
            return ALL
        if isinstance(value, (str, re.Pattern, Mapping)):
            value = [value]
        return tuple(compile_pattern(item) for item in value)
    if key == "doc_files":
        if value is None or value == ALL:
            return ALL
        return _as_str_tuple(value)
    if key == "exclude_vars":
        try:
            return compile_regex(value)
        except (re.error, ValueError) as exc:
            raise ConfigError(f"Invalid exclude-vars pattern {value!r}: {exc}") from exc
    if key == "metadata":
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ConfigError("metadata must be a mapping")
        return dict(value)
    if key == "git_commit":
        if value is None or isinstance(value, Deferred):
            return value
        return Deferred.of(str(value))
    if key == "language":
        return str(value).lstrip(":")
    if key in {"writer", "output_path"}:
        return str(value)
    if key in {"src_dir_uri", "src_linenum_anchor_prefix", "name", "version", "description"}:
        return None if value is None else str(value)
    return value


def load_config(config_path: Path) -> Dict[str, Any]:
    """Load option overrides from ``.codox.yml``; missing files yield ``{}``."""
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        return {}
    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")
    return normalize_keys(data)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _as_str_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, Path)):
        return (str(value),)
    if isinstance(value, Sequence):
        return tuple(str(item) for item in value if isinstance(item, (str, Path, int, float)))
    return ()


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_EXCLUDE_VARS",
    "Options",
    "build_options",
    "load_config",
    "normalize_keys",
]
