"""Named-pattern dictionary: loading, reference resolution and compilation.

Dictionaries hold one definition per line::

    # comment
    NAME  regex-with-%{OTHER}-references

A reference is ``%{NAME}`` (non-capturing), ``%{NAME:field}`` (captured as
``field``) or ``%{NAME:field:int|float}`` (captured and coerced).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from ..errors import (
    CyclicPatternError,
    PatternCompileError,
    UndefinedPatternError,
)
from .grok import COERCIONS, Capture, Grok
from .providers import DictionaryProvider, PackageDictionaryProvider

logger = logging.getLogger(__name__)

_REFERENCE_RE = re.compile(
    r"%\{(?P<name>[A-Za-z0-9_]+)(?::(?P<field>[^:{}]+))?(?::(?P<type>[A-Za-z]+))?\}"
)
# One left-to-right scan: escape pairs pass through untouched, so "\\(" is a
# literal backslash before a real group while "\(" is never a group.
_TOKEN_RE = re.compile(
    r"(?P<escape>\\.)"
    r"|\(\?P?<(?P<group>[A-Za-z_][A-Za-z0-9_]*)>"
    r"|" + _REFERENCE_RE.pattern,
    re.DOTALL,
)
_DEFINITION_RE = re.compile(r"^(?P<name>[A-Za-z0-9_]+)\s+(?P<pattern>.*\S)\s*$")

_VISITING = 1
_DONE = 2


class GrokDictionary:
    """Merged namespace of named patterns from one or more dictionaries.

    Later definitions override earlier ones with the same name, so inline
    user definitions loaded last can replace built-in patterns.
    """

    def __init__(self, provider: DictionaryProvider | None = None):
        self._provider = provider or PackageDictionaryProvider()
        self._patterns: dict[str, str] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._patterns

    def __len__(self) -> int:
        return len(self._patterns)

    @property
    def names(self) -> list[str]:
        return sorted(self._patterns)

    def add_dictionary(self, text: str | Iterable[str]) -> None:
        """Load definitions from dictionary text (or an iterable of lines)."""
        lines = text.splitlines() if isinstance(text, str) else text
        for i, raw_line in enumerate(lines, start=1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            m = _DEFINITION_RE.match(line)
            if m is None:
                logger.warning("Skipping malformed pattern definition %d: %s", i, line)
                continue
            self._patterns[m.group("name")] = m.group("pattern")

    def add_resource(self, name: str) -> None:
        """Load a dictionary by name from the configured provider."""
        self.add_dictionary(self._provider.load(name))

    def add_pattern(self, name: str, pattern: str) -> None:
        self._patterns[name] = pattern

    def bind(self) -> None:
        """Check that every definition resolves, transitively and without cycles.

        Raises:
            UndefinedPatternError: A definition references an unknown name
            CyclicPatternError: Definitions reference each other in a loop
        """
        state: dict[str, int] = {}
        for name in self._patterns:
            self._visit(name, state, ())

    def _visit(self, name: str, state: dict[str, int], path: tuple[str, ...]) -> None:
        mark = state.get(name)
        if mark == _DONE:
            return
        if mark == _VISITING:
            raise CyclicPatternError((*path[path.index(name):], name))

        state[name] = _VISITING
        for ref in _REFERENCE_RE.finditer(self._patterns[name]):
            ref_name = ref.group("name")
            if ref_name not in self._patterns:
                raise UndefinedPatternError(ref_name, referenced_by=name)
            self._visit(ref_name, state, (*path, name))
        state[name] = _DONE

    def compile_expression(self, expression: str) -> Grok:
        """Expand every reference in ``expression`` and compile the result."""
        captures: list[Capture] = []
        source = self._expand(expression, (), captures)
        try:
            regex = re.compile(source)
        except re.error as exc:
            raise PatternCompileError(expression, str(exc)) from exc
        return Grok(expression=expression, regex=regex, captures=tuple(captures))

    def _expand(self, text: str, stack: tuple[str, ...], captures: list[Capture]) -> str:
        """Expand ``text``, allocating capture groups in textual order."""

        def token(m: re.Match[str]) -> str:
            if m.group("escape") is not None:
                return m.group(0)
            if m.group("group") is not None:
                group = _new_capture(captures, m.group("group"), None)
                return f"(?P<{group}>"

            name = m.group("name")
            if name in stack:
                raise CyclicPatternError((*stack[stack.index(name):], name))
            definition = self._patterns.get(name)
            if definition is None:
                raise UndefinedPatternError(name, referenced_by=stack[-1] if stack else None)

            field = m.group("field")
            if field is None:
                body = self._expand(definition, (*stack, name), captures)
                return f"(?:{body})"

            type_ = m.group("type")
            if type_ is not None and type_ not in COERCIONS:
                raise PatternCompileError(
                    m.group(0), f"unsupported type '{type_}', expected one of {COERCIONS}"
                )
            # The outer capture opens before any capture inside its definition.
            group = _new_capture(captures, field, type_)
            body = self._expand(definition, (*stack, name), captures)
            return f"(?P<{group}>{body})"

        return _TOKEN_RE.sub(token, text)


def _new_capture(captures: list[Capture], field: str, type_: str | None) -> str:
    """Allocate a unique regex group name for ``field``."""
    group = f"_g{len(captures)}"
    captures.append(Capture(group=group, field=field, type=type_))
    return group
