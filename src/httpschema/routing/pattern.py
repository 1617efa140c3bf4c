"""Path pattern engine.

Parses Express-style path templates into tokens, derives the ordered
parameter identifiers, matches concrete paths, and substitutes values
back into a template.

Pattern language::

    /users/:id          named parameter "id"
    /file-:id.json      named parameter embedded in a literal segment
    /users/:id(\\d+)     named parameter with a custom pattern
    /a/*/b/*            wildcards, identified positionally as "0" and "1"
    /a/\\*               escaped literal "*"

Optional (``:id?``) and repeated (``:id+``) parameters are recognized
and rejected.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache

from httpschema.errors import DuplicateParamError, MissingParamError, UnsupportedPatternError

# Characters that end a parameter name (":id.json" -> "id")
DELIMITERS: frozenset[str] = frozenset("/:-.~!$&'()*+,;=@%")

# Capture marker every "*" is rewritten to before lexing
WILDCARD_MARKER = "(.*)"

# Default pattern for a named parameter: one non-empty segment
DEFAULT_PATTERN = r"[^/]+?"

_NAME_STOP = DELIMITERS | {"?", "\\"}
_MODIFIERS = frozenset("?+")


@dataclass(frozen=True, slots=True)
class PathToken:
    """A lexed piece of a path template.

    Literal:    ``/users``     (name=None)
    Named:      ``:id``        (name="id", pattern=DEFAULT_PATTERN)
    Custom:     ``:id(\\d+)``   (name="id", pattern=r"\\d+")
    Wildcard:   ``*``          (name="0", pattern=".*", positional=True)
    """

    value: str
    name: str | None = None
    pattern: str | None = None
    positional: bool = False

    @property
    def is_param(self) -> bool:
        return self.name is not None


@dataclass(frozen=True, slots=True)
class ParsedPath:
    """A parsed path template. Immutable and safe to share."""

    template: str
    tokens: tuple[PathToken, ...]
    regex: re.Pattern[str]

    @property
    def param_names(self) -> tuple[str, ...]:
        """Parameter identifiers in path order (named and positional)."""
        return tuple(token.name for token in self.tokens if token.name is not None)

    def match(self, path: str) -> dict[str, str] | None:
        """Match a concrete path, returning captured params or ``None``."""
        found = self.regex.match(path)
        if found is None:
            return None
        return dict(zip(self.param_names, found.groups(), strict=True))

    def compile(self, values: Mapping[object, object] | None = None) -> str:
        """Substitute *values* into the template.

        Named parameters are looked up by name. Wildcards are looked up
        by ordinal, as ``"0"``, ``"1"``, … (integer keys are accepted
        too). Values are inserted verbatim; reserved characters are not
        escaped.

        Raises ``MissingParamError`` if a parameter has no value.
        """
        values = values or {}
        parts: list[str] = []
        for token in self.tokens:
            if token.name is None:
                parts.append(token.value)
                continue
            value = values.get(token.name)
            if value is None and token.positional:
                value = values.get(int(token.name))
            if value is None:
                raise MissingParamError(token.name, self.template)
            parts.append(str(value))
        return "".join(parts)


def mark_wildcards(template: str) -> str:
    """Rewrite every unescaped ``*`` outside a group to the capture marker.

    ``"/a/*/b"`` -> ``"/a/(.*)/b"``
    """
    out: list[str] = []
    depth = 0
    i = 0
    while i < len(template):
        ch = template[i]
        if ch == "\\":
            out.append(template[i : i + 2])
            i += 2
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        out.append(WILDCARD_MARKER if ch == "*" and depth == 0 else ch)
        i += 1
    return "".join(out)


@lru_cache(maxsize=1024)
def parse_pattern(template: str) -> ParsedPath:
    """Parse a path template into a ``ParsedPath``.

    Raises ``UnsupportedPatternError`` for optional/repeated parameters,
    empty names, and malformed groups. Raises ``DuplicateParamError``
    if two parameters share an identifier, including a named parameter
    called ``"0"`` next to a wildcard.

    Examples::

        parse_pattern("/file/:id").param_names   -> ("id",)
        parse_pattern("/a/*/b/*").param_names    -> ("0", "1")
    """
    source = mark_wildcards(template)
    tokens: list[PathToken] = []
    literal: list[str] = []
    positional = 0
    i = 0

    def flush() -> None:
        if literal:
            tokens.append(PathToken("".join(literal)))
            literal.clear()

    while i < len(source):
        ch = source[i]

        if ch == "\\":
            if i + 1 == len(source):
                raise UnsupportedPatternError(template, "Trailing escape character")
            literal.append(source[i + 1])
            i += 2
            continue

        if ch == ":":
            end = i + 1
            while end < len(source) and source[end] not in _NAME_STOP:
                end += 1
            name = source[i + 1 : end]
            if not name:
                raise UnsupportedPatternError(template, f"Missing parameter name at {i}")
            pattern = DEFAULT_PATTERN
            if end < len(source) and source[end] == "(":
                pattern, end = _read_group(template, source, end)
            flush()
            tokens.append(PathToken(source[i:end], name=name, pattern=pattern))
            i = _reject_modifier(template, source, end)
            continue

        if ch == "(":
            pattern, end = _read_group(template, source, i)
            value = "*" if source[i:end] == WILDCARD_MARKER else source[i:end]
            flush()
            tokens.append(PathToken(value, name=str(positional), pattern=pattern, positional=True))
            positional += 1
            i = _reject_modifier(template, source, end)
            continue

        if ch == ")":
            raise UnsupportedPatternError(template, f"Unbalanced ')' at {i}")

        literal.append(ch)
        i += 1

    flush()

    seen: set[str] = set()
    for token in tokens:
        if token.name is None:
            continue
        if token.name in seen:
            raise DuplicateParamError(template, token.name)
        seen.add(token.name)

    return ParsedPath(template=template, tokens=tuple(tokens), regex=_build_regex(template, tokens))


def compile_path(template: str, values: Mapping[object, object] | None = None) -> str:
    """Build a concrete path from *template* and parameter *values*.

    ``compile_path("/a/*/b/*", {"0": "x", "1": "y"})`` -> ``"/a/x/b/y"``
    """
    return parse_pattern(template).compile(values)


def _read_group(template: str, source: str, start: int) -> tuple[str, int]:
    """Read a ``( ... )`` group starting at *start*.

    Returns the inner pattern and the index just past the closing paren.
    Nested groups must be non-capturing so captured values stay aligned
    with the parameter identifiers.
    """
    depth = 1
    i = start + 1
    while i < len(source):
        ch = source[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "(":
            if not source.startswith("?", i + 1) or source.startswith("?P<", i + 1):
                raise UnsupportedPatternError(template, f"Capturing groups are not allowed at {i}")
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                pattern = source[start + 1 : i]
                if not pattern:
                    raise UnsupportedPatternError(template, f"Missing pattern at {start}")
                return pattern, i + 1
        i += 1
    raise UnsupportedPatternError(template, f"Unbalanced pattern at {start}")


def _reject_modifier(template: str, source: str, index: int) -> int:
    if index < len(source) and source[index] in _MODIFIERS:
        kind = "Optional" if source[index] == "?" else "Repeated"
        raise UnsupportedPatternError(template, f"{kind} parameters are not supported")
    return index


def _build_regex(template: str, tokens: list[PathToken]) -> re.Pattern[str]:
    parts = ["^"]
    for token in tokens:
        if token.pattern is None:
            parts.append(re.escape(token.value))
        else:
            parts.append(f"({token.pattern})")
    # Non-strict: a trailing slash is always optional
    body = "".join(parts)
    body += "?" if body.endswith("/") else "/?"
    try:
        return re.compile(body + "$")
    except re.error as exc:
        raise UnsupportedPatternError(template, f"Invalid pattern ({exc})") from exc
