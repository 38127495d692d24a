"""Maps the on-parse-error policy to a stack-trace line budget."""

from __future__ import annotations

from .config import LOG4J_TRIM_STACK_TRACES_TO_LENGTH_KEY
from .errors import ConfigurationError, InternalError
from .models import OnParseError

# Budget values understood by LogLineParser.
FAIL_ON_ERROR = -1
DISCARD_ON_ERROR = 0


def resolve_max_stack_trace_lines(on_parse_error: OnParseError, trim_length: int) -> int:
    """Return how many trailing unmatched lines a record may absorb.

    -1 makes every unmatched line an error, 0 silently drops unmatched lines and
    N > 0 folds up to N lines following a record into its stack trace.
    """
    if on_parse_error is OnParseError.ERROR:
        return FAIL_ON_ERROR
    if on_parse_error is OnParseError.IGNORE:
        return DISCARD_ON_ERROR
    if on_parse_error is OnParseError.INCLUDE_AS_STACK_TRACE:
        if trim_length < 0:
            raise ConfigurationError(
                "stack trace trim length must be >= 0",
                key=LOG4J_TRIM_STACK_TRACES_TO_LENGTH_KEY,
                value=trim_length,
            )
        return trim_length
    raise InternalError(f"Unexpected value for OnParseError: {on_parse_error!r}")
