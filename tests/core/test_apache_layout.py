from __future__ import annotations

import pytest

from mcp_log_parsing_server.core.config import APACHE_CUSTOMLOG_FORMAT_DEFAULT
from mcp_log_parsing_server.core.errors import FormatTranslationError
from mcp_log_parsing_server.core.formats import translate_apache_layout


def _parse(compile_grok, layout: str, line: str) -> dict | None:
    return compile_grok(translate_apache_layout(layout)).match(line)


def test_default_layout(compile_grok, access_line: str) -> None:
    fields = _parse(compile_grok, APACHE_CUSTOMLOG_FORMAT_DEFAULT, access_line)

    assert fields == {
        "client_ip": "127.0.0.1",
        "logname": "-",
        "user": "-",
        "timestamp": "10/Oct/2023:13:55:36 -0700",
        "method": "GET",
        "path": "/index.html",
        "protocol": "HTTP/1.1",
        "status": "200",
        "bytes": "1024",
    }


def test_translation_is_deterministic() -> None:
    layout = '%h %l %u %t "%r" %>s %b "%{Referer}i"'
    assert translate_apache_layout(layout) == translate_apache_layout(layout)


def test_combined_layout_with_headers(compile_grok, access_line: str) -> None:
    layout = '%h %l %u %t "%r" %>s %b "%{Referer}i" "%{User-Agent}i"'
    line = access_line + ' "http://example.com/start" "Mozilla/5.0 (X11; Linux)"'

    fields = _parse(compile_grok, layout, line)

    assert fields is not None
    assert fields["referer"] == "http://example.com/start"
    assert fields["user_agent"] == "Mozilla/5.0 (X11; Linux)"


def test_unparseable_request_falls_back_to_raw(compile_grok) -> None:
    fields = _parse(compile_grok, '%h "%r" %s', '10.0.0.1 "-" 408')
    assert fields == {"client_ip": "10.0.0.1", "raw_request": "-", "status": "408"}


def test_dash_bytes(compile_grok) -> None:
    fields = _parse(compile_grok, "%h %>s %b", "10.0.0.1 304 -")
    assert fields == {"client_ip": "10.0.0.1", "status": "304"}


def test_strftime_time(compile_grok) -> None:
    layout = "%h [%{%d/%b/%Y:%H:%M:%S %z}t] %s"
    fields = _parse(compile_grok, layout, "10.0.0.1 [10/Oct/2023:13:55:36 -0700] 200")
    assert fields is not None
    assert fields["timestamp"] == "10/Oct/2023:13:55:36 -0700"


def test_time_keywords_and_durations(compile_grok) -> None:
    layout = "%h %{begin:sec}t.%{msec_frac}t %D %{ms}T"
    fields = _parse(compile_grok, layout, "10.0.0.1 1696945536.123 5300 5")
    assert fields == {
        "client_ip": "10.0.0.1",
        "timestamp_sec": "1696945536",
        "timestamp_msec_frac": "123",
        "duration_us": "5300",
        "duration_ms": "5",
    }


def test_prefixed_named_directives(compile_grok) -> None:
    layout = "%{sid}C %{HOME}e %{Content-Type}o [%{note}n]"
    fields = _parse(compile_grok, layout, "abc /root text/html [x]")
    assert fields == {
        "cookie_sid": "abc",
        "env_home": "/root",
        "response_content_type": "text/html",
        "note_note": "x",
    }


def test_status_conditions_and_modifiers(compile_grok) -> None:
    layout = '%h %!200,304{User-agent}i %<s %{remote}p'
    fields = _parse(compile_grok, layout, "10.0.0.1 curl/8.0 200 51234")
    assert fields == {
        "client_ip": "10.0.0.1",
        "user_agent": "curl/8.0",
        "status": "200",
        "client_port": "51234",
    }


def test_peer_host_variant(compile_grok) -> None:
    fields = _parse(compile_grok, "%h %{c}h %s", "10.0.0.1 10.0.0.9 200")
    assert fields == {"client_ip": "10.0.0.1", "peer_host": "10.0.0.9", "status": "200"}


def test_literal_percent_and_escapes(compile_grok) -> None:
    fields = _parse(compile_grok, "%h\\t100%% \\\"%s\\\"", '10.0.0.1\t100% "200"')
    assert fields == {"client_ip": "10.0.0.1", "status": "200"}


def test_regex_metacharacters_in_literals_are_escaped(compile_grok) -> None:
    fields = _parse(compile_grok, "(%h) [%s] *", "(10.0.0.1) [200] *")
    assert fields == {"client_ip": "10.0.0.1", "status": "200"}


def test_connection_status(compile_grok) -> None:
    fields = _parse(compile_grok, "%h %X", "10.0.0.1 +")
    assert fields == {"client_ip": "10.0.0.1", "connection_status": "+"}


@pytest.mark.parametrize(
    ("layout", "directive", "position"),
    [
        ("%h %Z", "%Z", 3),
        ("%h %", "%", 3),
        ("%h %{Referer}", "%{", 3),
        ("%h %{%Q}t", "%{%Q}t", 3),
        ("%{}i", "%{}i", 0),
        ("%h %{x}%", "%{x}%", 3),
        ("%{bogus}h %s", "%{bogus}h", 0),
        ("%h %{nonsense}s", "%{nonsense}s", 3),
    ],
)
def test_bad_directives_are_reported(layout: str, directive: str, position: int) -> None:
    with pytest.raises(FormatTranslationError) as ei:
        translate_apache_layout(layout)

    assert ei.value.directive == directive
    assert ei.value.position == position
    assert ei.value.layout == layout
