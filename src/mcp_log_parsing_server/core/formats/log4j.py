"""Log4j PatternLayout -> Grok expression translation."""

from __future__ import annotations

import re

from ..errors import FormatTranslationError

_DIRECTIVE_RE = re.compile(
    r"%(?P<left>-)?(?P<min>\d+)?(?:\.(?P<max>\d+))?"
    r"(?P<conv>[A-Za-z%])"
    r"(?:\{(?P<opt>[^}]*)\})?"
    r"(?:\{(?P<tz>[^}]*)\})?"
)

# Conversion character -> Grok fragment.
CONVERSIONS: dict[str, str] = {
    "c": "%{LOG4J_LOGGER:logger}",
    "C": "%{JAVACLASS:class}",
    "F": "%{JAVAFILE:file}",
    "l": "%{LOG4J_LOCATION:location}",
    "L": "%{INT:line}",
    "m": "%{LOG4J_MESSAGE:message}",
    "M": "%{JAVAMETHOD:method}",
    "n": "",
    "p": "%{LOG4J_LEVEL:level}",
    "r": "%{INT:relative_time}",
    "t": "%{LOG4J_THREAD:thread}",
    "x": "%{LOG4J_NDC:ndc}",
    "X": "%{LOG4J_MDC:mdc}",
}

# Named %d{...} formats.
DATE_FORMATS: dict[str, str] = {
    "ISO8601": "%{LOG4J_DATE_ISO8601:timestamp}",
    "ABSOLUTE": "%{LOG4J_DATE_ABSOLUTE:timestamp}",
    "DATE": "%{LOG4J_DATE_DATE:timestamp}",
}


def _date_token(letter: str, count: int) -> str | None:
    """Regex for a run of ``count`` SimpleDateFormat letters, or None if unsupported."""
    if letter == "y":
        return r"\d{2}" if count == 2 else r"\d{4}"
    if letter == "M":
        if count >= 3:
            return "%{MONTH}"
        return r"\d{1,2}" if count == 1 else r"\d{2}"
    if letter in "dHhkKms":
        return r"\d{1,2}" if count == 1 else rf"\d{{{count}}}"
    if letter == "S":
        return r"\d{1,3}" if count == 1 else rf"\d{{{count}}}"
    if letter in "DwWFu":
        return r"\d{1,3}"
    if letter == "E":
        return "%{DAY}"
    if letter == "a":
        return "(?:AM|PM)"
    if letter == "G":
        return "(?:AD|BC)"
    if letter == "z":
        return r"[A-Za-z]+(?:[+-]\d{2}:?\d{2})?"
    if letter == "Z":
        return r"[+-]\d{4}"
    if letter == "X":
        return r"(?:Z|[+-]\d{2}(?::?\d{2})?)"
    return None


def _translate_date(fmt: str, directive: str, position: int, layout: str) -> str:
    """Translate a SimpleDateFormat string into a captured regex."""
    out: list[str] = []
    i = 0
    n = len(fmt)
    while i < n:
        ch = fmt[i]
        if ch == "'":
            end = fmt.find("'", i + 1)
            if end == -1:
                raise FormatTranslationError(directive, position, layout)
            # '' is a literal quote
            out.append("'" if end == i + 1 else re.escape(fmt[i + 1 : end]))
            i = end + 1
            continue
        if ch.isascii() and ch.isalpha():
            j = i
            while j < n and fmt[j] == ch:
                j += 1
            token = _date_token(ch, j - i)
            if token is None:
                raise FormatTranslationError(directive, position, layout)
            out.append(token)
            i = j
            continue
        out.append(re.escape(ch))
        i += 1
    return f"(?<timestamp>{''.join(out)})"


def _translate_directive(m: re.Match[str], layout: str) -> str:
    directive = m.group(0)
    position = m.start()
    conv = m.group("conv")
    opt = m.group("opt")

    if conv == "d":
        if not opt:
            return DATE_FORMATS["ISO8601"]
        named = DATE_FORMATS.get(opt)
        if named is not None:
            return named
        # The optional second block is a time zone; it never shows in the output.
        return _translate_date(opt, directive, position, layout)

    if conv == "X" and opt:
        key = re.sub(r"[^0-9A-Za-z]+", "_", opt).strip("_").lower()
        if not key:
            raise FormatTranslationError(directive, position, layout)
        return f"%{{LOG4J_MDC:mdc_{key}}}"

    fragment = CONVERSIONS.get(conv)
    if fragment is None:
        raise FormatTranslationError(directive, position, layout)
    return fragment


def _pad(fragment: str, left_justify: bool) -> str:
    """Allow the space padding a minimum field width adds."""
    if not fragment:
        return fragment
    return f"{fragment} *" if left_justify else f" *{fragment}"


def translate_log4j_layout(layout: str) -> str:
    """Translate a log4j conversion pattern into a Grok expression.

    Raises:
        FormatTranslationError: The layout holds an unknown or malformed directive
    """
    out: list[str] = []
    literal: list[str] = []

    def flush() -> None:
        if literal:
            out.append(re.escape("".join(literal)))
            literal.clear()

    i = 0
    n = len(layout)
    while i < n:
        ch = layout[i]
        if ch != "%":
            literal.append(ch)
            i += 1
            continue

        m = _DIRECTIVE_RE.match(layout, i)
        if m is None:
            raise FormatTranslationError(layout[i : i + 2], i, layout)
        if m.group("conv") == "%":
            literal.append("%")
            i = m.start("conv") + 1
            continue

        flush()
        fragment = _translate_directive(m, layout)
        if m.group("min"):
            fragment = _pad(fragment, m.group("left") is not None)
        out.append(fragment)
        i = m.end()

    flush()
    return "".join(out)
