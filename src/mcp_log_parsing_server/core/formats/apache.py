"""Apache custom log layout -> Grok expression translation.

Handles mod_log_config layouts such as ``%h %l %u %t "%r" %>s %b``. Every
directive is looked up in a substitution table; text between directives is
matched literally.
"""

from __future__ import annotations

import re

from ..errors import FormatTranslationError

_DIRECTIVE_RE = re.compile(
    r"%(?P<cond>!?\d{3}(?:,\d{3})*)?"
    r"(?P<mod>[<>])?"
    r"(?:\{(?P<arg>[^}]*)\})?"
    r"(?P<conv>[A-Za-z%])"
)

# C-style escapes allowed in LogFormat strings; others stand for themselves.
_C_ESCAPES = {"n": "\n", "t": "\t"}

# Directive letter -> Grok fragment.
DIRECTIVES: dict[str, str] = {
    "a": "%{IPORHOST:client_ip}",
    "A": "%{IPORHOST:local_ip}",
    "B": "%{INT:bytes}",
    "b": "(?:%{INT:bytes}|-)",
    "D": "%{INT:duration_us}",
    "f": "%{NOTSPACE:filename}",
    "h": "%{IPORHOST:client_ip}",
    "H": "%{NOTSPACE:protocol}",
    "I": "%{INT:bytes_received}",
    "k": "%{INT:keepalive_requests}",
    "l": "%{USER:logname}",
    "L": "%{NOTSPACE:log_id}",
    "m": "%{WORD:method}",
    "O": "%{INT:bytes_sent}",
    "p": "%{INT:server_port}",
    "P": "%{INT:pid}",
    "q": "(?:%{URIPARAM:query_string})?",
    "r": (
        "(?:%{WORD:method} %{NOTSPACE:path}(?: %{NOTSPACE:protocol})?"
        "|%{DATA:raw_request})"
    ),
    "R": "%{NOTSPACE:handler}",
    "s": "%{INT:status}",
    "S": "%{INT:bytes_transferred}",
    "t": r"\[%{HTTPDATE:timestamp}\]",
    "T": "%{INT:duration_s}",
    "u": "%{USER:user}",
    "U": "%{URIPATH:url_path}",
    "v": "%{IPORHOST:canonical_server_name}",
    "V": "%{IPORHOST:server_name}",
    "X": "(?<connection_status>[X+-])",
}

# {argument} forms that change what a directive logs.
DIRECTIVE_VARIANTS: dict[tuple[str, str], str] = {
    ("a", "c"): "%{IPORHOST:peer_ip}",
    ("h", "c"): "%{IPORHOST:peer_host}",
    ("p", "canonical"): "%{INT:server_port}",
    ("p", "local"): "%{INT:local_port}",
    ("p", "remote"): "%{INT:client_port}",
    ("P", "pid"): "%{INT:pid}",
    ("P", "tid"): "%{INT:tid}",
    ("P", "hextid"): "%{BASE16NUM:tid}",
    ("T", "s"): "%{INT:duration_s}",
    ("T", "ms"): "%{INT:duration_ms}",
    ("T", "us"): "%{INT:duration_us}",
}

# Directives whose {argument} names the logged value: letter -> (pattern, field prefix).
NAMED_DIRECTIVES: dict[str, tuple[str, str]] = {
    "C": ("DATA", "cookie_"),
    "e": ("DATA", "env_"),
    "i": ("DATA", ""),
    "n": ("DATA", "note_"),
    "o": ("DATA", "response_"),
}

# strftime conversions accepted inside %{format}t.
STRFTIME: dict[str, str] = {
    "a": "%{DAY}",
    "A": "%{DAY}",
    "b": "%{MONTH}",
    "B": "%{MONTH}",
    "h": "%{MONTH}",
    "d": r"\d{2}",
    "e": r" ?\d{1,2}",
    "H": r"\d{2}",
    "I": r"\d{2}",
    "j": r"\d{3}",
    "m": r"\d{2}",
    "M": r"\d{2}",
    "p": "(?:AM|PM)",
    "S": r"\d{2}",
    "y": r"\d{2}",
    "Y": r"\d{4}",
    "z": r"[+-]\d{4}",
    "Z": "[A-Za-z]+",
    "T": r"\d{2}:\d{2}:\d{2}",
    "R": r"\d{2}:\d{2}",
    "D": r"\d{2}/\d{2}/\d{2}",
    "F": r"\d{4}-\d{2}-\d{2}",
    "s": r"\d+",
    "u": "[1-7]",
    "w": "[0-6]",
    "n": r"\s",
    "t": r"\s",
    "%": "%",
}

# Whole-argument time keywords: %{sec}t, %{msec_frac}t, ...
TIME_KEYWORDS: dict[str, str] = {
    "sec": r"\d+",
    "msec": r"\d+",
    "usec": r"\d+",
    "msec_frac": r"\d{3}",
    "usec_frac": r"\d{6}",
}


def _field_name(arg: str) -> str:
    """Turn a header/variable name into a snake_case field name."""
    return re.sub(r"[^0-9A-Za-z]+", "_", arg).strip("_").lower()


def _translate_time(fmt: str, directive: str, position: int, layout: str) -> str:
    """Translate the argument of %{format}t into a captured regex."""
    for prefix in ("begin:", "end:"):
        if fmt.startswith(prefix):
            fmt = fmt[len(prefix):]
            break

    keyword = TIME_KEYWORDS.get(fmt)
    if keyword is not None:
        return f"(?<timestamp_{fmt}>{keyword})"

    out: list[str] = []
    i = 0
    while i < len(fmt):
        ch = fmt[i]
        if ch != "%":
            out.append(re.escape(ch))
            i += 1
            continue
        conv = fmt[i + 1] if i + 1 < len(fmt) else ""
        fragment = STRFTIME.get(conv)
        if fragment is None:
            raise FormatTranslationError(directive, position, layout)
        out.append(fragment)
        i += 2
    return f"(?<timestamp>{''.join(out)})"


def _translate_directive(m: re.Match[str], layout: str) -> str:
    """Return the Grok fragment for one directive match."""
    directive = m.group(0)
    position = m.start()
    conv = m.group("conv")
    arg = m.group("arg")

    if arg is not None:
        variant = DIRECTIVE_VARIANTS.get((conv, arg))
        if variant is not None:
            return variant
        if conv == "t":
            return _translate_time(arg, directive, position, layout)
        if conv not in NAMED_DIRECTIVES:
            raise FormatTranslationError(directive, position, layout)

    named = NAMED_DIRECTIVES.get(conv)
    if named is not None:
        field = _field_name(arg or "")
        if not field:
            raise FormatTranslationError(directive, position, layout)
        pattern, prefix = named
        return f"%{{{pattern}:{prefix}{field}}}"

    fragment = DIRECTIVES.get(conv)
    if fragment is None:
        raise FormatTranslationError(directive, position, layout)
    return fragment


def translate_apache_layout(layout: str) -> str:
    """Translate an Apache custom log layout into a Grok expression.

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
        if ch == "\\" and i + 1 < n:
            nxt = layout[i + 1]
            literal.append(_C_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        if ch != "%":
            literal.append(ch)
            i += 1
            continue

        m = _DIRECTIVE_RE.match(layout, i)
        if m is None:
            raise FormatTranslationError(layout[i : i + 2], i, layout)
        if m.group("conv") == "%":
            if m.group(0) != "%%":
                raise FormatTranslationError(m.group(0), i, layout)
            literal.append("%")
        else:
            flush()
            out.append(_translate_directive(m, layout))
        i = m.end()

    flush()
    return "".join(out)
