"""Namespace selection and var exclusion."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from .logging import get_logger
from .models import Namespace, var_symbol
from .readers.forms import compile_java_regex

ALL = "all"

logger = get_logger("filters")

_REGEX_LITERAL = re.compile(r'^#"(.*)"$', re.DOTALL)


@dataclass(frozen=True)
class ExactPattern:
    """Matches a name that equals ``value`` exactly."""

    value: str

    def matches(self, name: str) -> bool:
        return name == self.value


@dataclass(frozen=True)
class RegexPattern:
    """Matches a name containing a match for ``regex`` anywhere."""

    regex: re.Pattern[str]

    def matches(self, name: str) -> bool:
        return self.regex.search(name) is not None


Pattern = Union[ExactPattern, RegexPattern]


def compile_pattern(raw: Any) -> Pattern:
    """Coerce a user-supplied selector entry into a pattern.

    Compiled regexes, ``{"regex": ...}`` mappings and ``#"..."`` literals
    become regex patterns; any other value matches by exact name.
    """
    if isinstance(raw, (ExactPattern, RegexPattern)):
        return raw
    if isinstance(raw, re.Pattern):
        return RegexPattern(raw)
    if isinstance(raw, Mapping):
        source = raw.get("regex")
        if not isinstance(source, str):
            raise ValueError(f"Pattern mapping must contain a 'regex' string: {raw!r}")
        return RegexPattern(compile_java_regex(source))
    if isinstance(raw, str):
        literal = _REGEX_LITERAL.match(raw)
        if literal:
            return RegexPattern(compile_java_regex(literal.group(1)))
    return ExactPattern(str(raw))


def compile_regex(raw: Any) -> Optional[re.Pattern[str]]:
    """Coerce an exclusion pattern; strings are treated as regular expressions."""
    if raw is None:
        return None
    if isinstance(raw, re.Pattern):
        return raw
    if isinstance(raw, RegexPattern):
        return raw.regex
    if isinstance(raw, str):
        literal = _REGEX_LITERAL.match(raw)
        return compile_java_regex(literal.group(1) if literal else raw)
    raise ValueError(f"Exclusion pattern must be a regular expression: {raw!r}")


def ns_matches(namespace: Namespace, pattern: Pattern) -> bool:
    if namespace.name is None:
        return False
    return pattern.matches(str(namespace.name))


def filter_namespaces(
    namespaces: Iterable[Namespace], selector: Union[str, Sequence[Any], None]
) -> List[Namespace]:
    """Keep namespaces whose name matches any selector pattern.

    ``"all"`` or ``None`` keeps everything; an empty selector keeps nothing.
    A single name, regex or pattern counts as a one-item selector.
    """
    namespaces = list(namespaces)
    if selector is None or selector == ALL:
        return namespaces
    if isinstance(selector, (str, re.Pattern, Mapping, ExactPattern, RegexPattern)):
        selector = [selector]
    patterns = [compile_pattern(item) for item in selector]
    return [
        namespace
        for namespace in namespaces
        if any(ns_matches(namespace, pattern) for pattern in patterns)
    ]


def remove_excluded_vars(
    namespaces: Iterable[Namespace], exclude_vars: Optional[re.Pattern[str]]
) -> List[Namespace]:
    """Drop public vars whose local name contains a match for ``exclude_vars``."""
    namespaces = list(namespaces)
    if exclude_vars is None:
        return namespaces

    result: List[Namespace] = []
    for namespace in namespaces:
        kept = []
        for var in namespace.publics:
            if exclude_vars.search(var.name):
                logger.info("Excluding var %s", var_symbol(namespace, var))
                continue
            kept.append(var)
        if len(kept) == len(namespace.publics):
            result.append(namespace)
        else:
            result.append(replace(namespace, publics=tuple(kept)))
    return result


__all__ = [
    "ALL",
    "ExactPattern",
    "Pattern",
    "RegexPattern",
    "compile_pattern",
    "compile_regex",
    "filter_namespaces",
    "ns_matches",
    "remove_excluded_vars",
]
