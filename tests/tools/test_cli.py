from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from mcp_log_parsing_server import cli
from mcp_log_parsing_server.core.config import LOG4J_FORMAT_DEFAULT


def _run(monkeypatch: pytest.MonkeyPatch, *argv: str) -> None:
    monkeypatch.setattr(sys, "argv", ["log-parse", *argv])
    cli.main()


def test_prints_one_json_object_per_record(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
    log4j_lines: list[str],
) -> None:
    log = tmp_path / "app.log"
    log.write_text("\n".join(log4j_lines) + "\n", encoding="utf-8")

    _run(
        monkeypatch,
        str(log),
        "--mode",
        "log4j",
        "--config",
        "log.on.parse.error=INCLUDE_AS_STACK_TRACE",
        "--limit",
        "1",
    )

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["offset"] == 0
    assert record["level"] == "ERROR"
    assert record["stack_trace"].startswith("java.lang.IllegalStateException")


def test_truncated_records_are_flagged(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
    access_line: str,
) -> None:
    log = tmp_path / "access.log"
    log.write_text("ok line\n" + access_line + "\n", encoding="utf-8")

    _run(
        monkeypatch,
        str(log),
        "--mode",
        "REGEX",
        "--config",
        r"log.regex=^(\S+)",
        "--config",
        'log.regex.fieldPath.to.group.name={"first": 1}',
        "--max-object-len",
        "9",
    )

    short, long = (json.loads(line) for line in capsys.readouterr().out.splitlines())
    assert "truncated" not in short
    assert short["first"] == "ok"
    assert long["truncated"] is True
    assert long["first"] == "127.0.0.1"


def test_show_pattern(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    _run(monkeypatch, str(tmp_path / "unused.log"), "--mode", "GROK", "--show-pattern")
    assert capsys.readouterr().out.strip() == "%{COMMONAPACHELOG}"


def test_config_values_are_json_decoded(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    _run(
        monkeypatch,
        str(tmp_path / "unused.log"),
        "--mode",
        "LOG4J",
        "--config",
        'log4j.custom.log.format="%p\\t%m"',
        "--show-pattern",
    )
    out = capsys.readouterr().out.strip()
    assert out != LOG4J_FORMAT_DEFAULT
    assert out.startswith("%{LOG4J_LEVEL:level}")


def test_missing_file_exits_with_usage_code(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    with pytest.raises(SystemExit) as ei:
        _run(monkeypatch, str(tmp_path / "missing.log"), "--mode", "LOG4J")

    assert ei.value.code == 2
    assert "not found" in capsys.readouterr().err


def test_bad_config_exits_with_usage_code(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    with pytest.raises(SystemExit) as ei:
        _run(
            monkeypatch,
            str(tmp_path / "app.log"),
            "--mode",
            "LOG4J",
            "--config",
            "log.on.parse.error=SOMETIMES",
        )

    assert ei.value.code == 2
    assert "log.on.parse.error" in capsys.readouterr().err
