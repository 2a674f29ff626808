"""Minimal reader for the literal syntax that surrounds definition forms.

Only what is needed to locate namespaces and their top-level definitions is
supported: collections, strings, characters, regex literals, metadata, quote
style reader macros, discard, tagged literals and reader conditionals. Forms
are never evaluated.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Iterator, List, Mapping, NamedTuple, Optional, Sequence


class FormSyntaxError(ValueError):
    """Raised when source text cannot be read into forms."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)


@dataclass(frozen=True)
class Symbol:
    name: str
    meta: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Keyword:
    name: str

    def __str__(self) -> str:
        return f":{self.name}"


@dataclass(frozen=True)
class Regex:
    source: str


@dataclass(frozen=True)
class Char:
    value: str


class _Seq(tuple):
    """Tuple-backed collection form that remembers its starting line."""

    line: Optional[int] = None

    @classmethod
    def at(cls, items: Iterable[Any], line: Optional[int]) -> "_Seq":
        form = cls(items)
        form.line = line
        return form


class ListForm(_Seq):
    pass


class VectorForm(_Seq):
    pass


class SetForm(_Seq):
    pass


class MapForm(_Seq):
    """Map literal stored as alternating keys and values."""

    def items(self) -> Iterator[tuple[Any, Any]]:
        return zip(self[0::2], self[1::2])

    def get(self, key: Any, default: Any = None) -> Any:
        for candidate, value in self.items():
            if candidate == key:
                return value
        return default


class _Token(NamedTuple):
    kind: str
    value: str
    line: int


_TOKEN_PATTERN = re.compile(
    r"""
    (?P<ws>[\s,]+)
  | (?P<comment>;[^\n]*)
  | (?P<string>"(?:\\.|[^"\\])*")
  | (?P<regex>\#"(?:\\.|[^"\\])*")
  | (?P<char>\\(?:newline|space|tab|formfeed|backspace|return|u[0-9a-fA-F]{4}|o[0-7]{1,3}|.))
  | (?P<open>\#\?@\(|\#\?\(|\#\{|\#\(|[(\[{])
  | (?P<close>[)\]}])
  | (?P<discard>\#_)
  | (?P<macro>\#'|~@|['`~@^])
  | (?P<atom>[^\s,;()\[\]{}"\\]+)
    """,
    re.VERBOSE | re.DOTALL,
)

_CLOSERS = {"(": ")", "[": "]", "{": "}", "#{": "}", "#(": ")", "#?(": ")", "#?@(": ")"}

_QUOTE_MACROS = {
    "'": "quote",
    "`": "syntax-quote",
    "~": "unquote",
    "~@": "unquote-splicing",
    "@": "deref",
    "#'": "var",
}

_STRING_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", '"': '"', "\\": "\\"}
_ESCAPE_PATTERN = re.compile(r"\\(u[0-9a-fA-F]{4}|.)", re.DOTALL)

_INT_PATTERN = re.compile(r"^[+-]?\d+N?$")
_HEX_PATTERN = re.compile(r"^[+-]?0[xX][0-9a-fA-F]+$")
_FLOAT_PATTERN = re.compile(r"^[+-]?\d+(\.\d*)?([eE][+-]?\d+)?M?$")


def _tokenize(text: str) -> Iterator[_Token]:
    newlines = [index for index, char in enumerate(text) if char == "\n"]
    position = 0
    length = len(text)
    while position < length:
        match = _TOKEN_PATTERN.match(text, position)
        line = bisect_right(newlines, position - 1) + 1
        if match is None:
            raise FormSyntaxError(f"Unreadable character {text[position]!r}", line)
        kind = match.lastgroup or ""
        position = match.end()
        if kind in {"ws", "comment"}:
            continue
        yield _Token(kind, match.group(), line)


def _unescape(body: str) -> str:
    def _sub(match: re.Match[str]) -> str:
        escape = match.group(1)
        if escape.startswith("u") and len(escape) == 5:
            return chr(int(escape[1:], 16))
        return _STRING_ESCAPES.get(escape, escape)

    return _ESCAPE_PATTERN.sub(_sub, body)


def _parse_atom(token: str) -> Any:
    if token == "nil":
        return None
    if token == "true":
        return True
    if token == "false":
        return False
    if token.startswith(":"):
        return Keyword(token.lstrip(":"))
    if _INT_PATTERN.match(token):
        return int(token.rstrip("N"))
    if _HEX_PATTERN.match(token):
        return int(token, 16)
    if _FLOAT_PATTERN.match(token):
        return float(token.rstrip("M"))
    return Symbol(token)


def meta_to_dict(form: Any) -> Dict[str, Any]:
    """Normalise a metadata form (``^:flag``, ``^Tag``, ``^{...}``) to a dict."""
    if isinstance(form, Keyword):
        return {form.name: True}
    if isinstance(form, (Symbol, str)):
        return {"tag": str(form)}
    if isinstance(form, MapForm):
        result: Dict[str, Any] = {}
        for key, value in form.items():
            name = key.name if isinstance(key, (Keyword, Symbol)) else str(key)
            result[name] = value
        return result
    return {}


class _Parser:
    def __init__(self, text: str, features: Sequence[str]) -> None:
        self._tokens = list(_tokenize(text))
        self._position = 0
        self._features = set(features)

    def read_all(self) -> List[Any]:
        forms: List[Any] = []
        while self._position < len(self._tokens):
            token = self._tokens[self._position]
            if token.kind == "close":
                raise FormSyntaxError(f"Unmatched delimiter {token.value}", token.line)
            forms.extend(self._read())
        return forms

    def _next(self) -> _Token:
        token = self._tokens[self._position]
        self._position += 1
        return token

    def _read_one(self, line: int) -> Any:
        while True:
            if self._position >= len(self._tokens):
                raise FormSyntaxError("EOF while reading", line)
            token = self._tokens[self._position]
            if token.kind == "close":
                raise FormSyntaxError(f"Unexpected delimiter {token.value}", token.line)
            forms = self._read()
            if forms:
                return forms[0]

    def _read_seq(self, close: str, line: int) -> List[Any]:
        items: List[Any] = []
        while True:
            if self._position >= len(self._tokens):
                raise FormSyntaxError(f"EOF while reading, starting at line {line}", line)
            token = self._tokens[self._position]
            if token.kind == "close":
                if token.value != close:
                    raise FormSyntaxError(f"Unmatched delimiter {token.value}", token.line)
                self._position += 1
                return items
            items.extend(self._read())

    def _read(self) -> List[Any]:
        token = self._next()
        kind, value, line = token
        if kind == "open":
            items = self._read_seq(_CLOSERS[value], line)
            if value in {"(", "#("}:
                return [ListForm.at(items, line)]
            if value == "[":
                return [VectorForm.at(items, line)]
            if value == "{":
                if len(items) % 2:
                    raise FormSyntaxError("Map literal must contain an even number of forms", line)
                return [MapForm.at(items, line)]
            if value == "#{":
                return [SetForm.at(items, line)]
            return self._select_conditional(items, splice=value == "#?@(", line=line)
        if kind == "close":
            raise FormSyntaxError(f"Unmatched delimiter {value}", line)
        if kind == "string":
            return [_unescape(value[1:-1])]
        if kind == "regex":
            return [Regex(value[2:-1])]
        if kind == "char":
            return [Char(value[1:])]
        if kind == "discard":
            self._read_one(line)
            return []
        if kind == "macro":
            if value == "^":
                meta = meta_to_dict(self._read_one(line))
                target = self._read_one(line)
                if isinstance(target, Symbol):
                    target = replace(target, meta={**target.meta, **meta})
                return [target]
            quoted = self._read_one(line)
            return [ListForm.at((Symbol(_QUOTE_MACROS[value]), quoted), line)]
        if value.startswith("##"):
            return [Symbol(value[2:])]
        if value.startswith("#"):
            # tagged literal or namespaced map: keep the wrapped form
            return [self._read_one(line)]
        return [_parse_atom(value)]

    def _select_conditional(self, items: List[Any], *, splice: bool, line: int) -> List[Any]:
        if len(items) % 2:
            raise FormSyntaxError("Reader conditional requires an even number of forms", line)
        for feature, form in zip(items[0::2], items[1::2]):
            if not isinstance(feature, Keyword):
                raise FormSyntaxError("Reader conditional feature must be a keyword", line)
            if feature.name in self._features or feature.name == "default":
                if splice:
                    if not isinstance(form, (ListForm, VectorForm)):
                        raise FormSyntaxError("Spliced reader conditional requires a sequence", line)
                    return list(form)
                return [form]
        return []


def read_forms(text: str, *, features: Sequence[str] = ("clj",)) -> List[Any]:
    """Read every top-level form in ``text``."""
    return _Parser(text, features).read_all()


# Java's POSIX character classes, as bodies of an equivalent ``[...]`` set.
_POSIX_CLASSES = {
    "Lower": "a-z",
    "Upper": "A-Z",
    "ASCII": "\\x00-\\x7F",
    "Alpha": "a-zA-Z",
    "Digit": "0-9",
    "Alnum": "a-zA-Z0-9",
    "Punct": "!-/:-@\\[-`{-~",
    "Graph": "!-~",
    "Print": " -~",
    "Blank": " \\t",
    "Cntrl": "\\x00-\\x1F\\x7F",
    "XDigit": "0-9a-fA-F",
    "Space": " \\t\\n\\x0B\\f\\r",
}

_PROPERTY_ESCAPE = re.compile(r"\\([pP])\{(?:Is)?(\w+)\}")


def java_regex(source: str) -> str:
    """Rewrite Java-only regex syntax in ``source`` for Python's ``re``.

    POSIX property classes (``\\p{Upper}``, ``\\P{Digit}``...) become
    explicit character sets; everything else is passed through unchanged, so
    unsupported constructs still fail when compiled.
    """
    parts: List[str] = []
    class_start: Optional[int] = None
    index = 0
    while index < len(source):
        char = source[index]
        if char == "\\":
            escape = _PROPERTY_ESCAPE.match(source, index)
            body = _POSIX_CLASSES.get(escape.group(2)) if escape else None
            negated = escape is not None and escape.group(1) == "P"
            if body is not None and class_start is None:
                parts.append(f"[{'^' if negated else ''}{body}]")
                index = escape.end()
                continue
            if body is not None and not negated:
                parts.append(body)
                index = escape.end()
                continue
            parts.append(source[index : index + 2])
            index += 2
            continue
        if char == "[" and class_start is None:
            class_start = len(parts)
        elif char == "]" and class_start is not None:
            opened = "".join(parts[class_start:])
            # a bracket right after "[" or "[^" is a literal member
            if opened not in {"[", "[^"}:
                class_start = None
        parts.append(char)
        index += 1
    return "".join(parts)


def compile_java_regex(source: str) -> re.Pattern[str]:
    """Compile a regex literal written for the JVM."""
    return re.compile(java_regex(source))


def render(form: Any) -> str:
    """Render a form back to compact source text."""
    if form is None:
        return "nil"
    if isinstance(form, bool):
        return "true" if form else "false"
    if isinstance(form, str):
        escaped = form.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(form, Regex):
        return f'#"{form.source}"'
    if isinstance(form, Char):
        return f"\\{form.value}"
    if isinstance(form, VectorForm):
        return "[" + " ".join(render(item) for item in form) + "]"
    if isinstance(form, ListForm):
        return "(" + " ".join(render(item) for item in form) + ")"
    if isinstance(form, SetForm):
        return "#{" + " ".join(render(item) for item in form) + "}"
    if isinstance(form, MapForm):
        return "{" + " ".join(render(item) for item in form) + "}"
    return str(form)


def to_python(form: Any) -> Any:
    """Convert a data form to plain Python values (maps, lists, strings)."""
    if isinstance(form, MapForm):
        return {_key_name(key): to_python(value) for key, value in form.items()}
    if isinstance(form, (VectorForm, ListForm, SetForm)):
        return [to_python(item) for item in form]
    if isinstance(form, Regex):
        return compile_java_regex(form.source)
    if isinstance(form, (Keyword, Symbol)):
        return form.name
    if isinstance(form, Char):
        return form.value
    return form


def _key_name(key: Any) -> Any:
    if isinstance(key, (Keyword, Symbol)):
        return key.name
    return to_python(key)


__all__ = [
    "Char",
    "FormSyntaxError",
    "Keyword",
    "ListForm",
    "MapForm",
    "Regex",
    "SetForm",
    "Symbol",
    "VectorForm",
    "compile_java_regex",
    "java_regex",
    "meta_to_dict",
    "read_forms",
    "render",
    "to_python",
]
