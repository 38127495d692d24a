from __future__ import annotations

import pytest

from mcp_log_parsing_server.core.config import LOG4J_TRIM_STACK_TRACES_TO_LENGTH_KEY
from mcp_log_parsing_server.core.error_policy import resolve_max_stack_trace_lines
from mcp_log_parsing_server.core.errors import ConfigurationError, InternalError
from mcp_log_parsing_server.core.models import OnParseError


@pytest.mark.parametrize(
    ("mode", "expected"),
    [
        (OnParseError.ERROR, -1),
        (OnParseError.IGNORE, 0),
        (OnParseError.INCLUDE_AS_STACK_TRACE, 50),
    ],
)
def test_policy_to_line_budget(mode: OnParseError, expected: int) -> None:
    assert resolve_max_stack_trace_lines(mode, 50) == expected


def test_trim_length_only_matters_for_stack_traces() -> None:
    assert resolve_max_stack_trace_lines(OnParseError.ERROR, -5) == -1
    assert resolve_max_stack_trace_lines(OnParseError.INCLUDE_AS_STACK_TRACE, 0) == 0


def test_negative_trim_length_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError) as ei:
        resolve_max_stack_trace_lines(OnParseError.INCLUDE_AS_STACK_TRACE, -1)
    assert ei.value.key == LOG4J_TRIM_STACK_TRACES_TO_LENGTH_KEY


@pytest.mark.parametrize("value", [None, "ERROR", 0])
def test_unknown_policy_is_an_internal_error(value: object) -> None:
    # Matching is by enum identity, so even an equal string is rejected.
    with pytest.raises(InternalError):
        resolve_max_stack_trace_lines(value, 50)  # type: ignore[arg-type]
