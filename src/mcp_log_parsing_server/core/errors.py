"""
Exceptions raised while building and running log parsers.

Construction-time failures (configuration, translation, pattern resolution)
surface to callers of ``LogParserFactory.build_parser`` as
``ParserConstructionError``; ``RecordParseError`` is the only runtime error.
"""

from __future__ import annotations

from collections.abc import Sequence


class LogParsingError(Exception):
    """
    Base exception for all log parsing errors.

    Allows callers to catch everything raised by this package in one place.
    """

    pass


class ConfigurationError(LogParsingError):
    """
    Raised when a configuration value is invalid, missing or out of range.

    Attributes:
        key: The configuration key at fault (optional)
        value: The offending value (optional)
        message: Detailed error message
    """

    def __init__(
        self,
        message: str,
        key: str | None = None,
        value: object | None = None,
    ):
        self.key = key
        self.value = value
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with key and value context."""
        if self.key and self.value is not None:
            return f"{self.message} (key='{self.key}', value={self.value!r})"
        elif self.key:
            return f"{self.message} (key='{self.key}')"
        return self.message


class FormatTranslationError(LogParsingError):
    """
    Raised when a layout string contains a directive that cannot be translated.

    Attributes:
        directive: The unrecognized directive text (e.g. '%Z')
        position: 0-based index of the directive in the layout
        layout: The full layout string
    """

    def __init__(self, directive: str, position: int, layout: str):
        self.directive = directive
        self.position = position
        self.layout = layout
        super().__init__(
            f"Unrecognized directive '{directive}' at position {position} "
            f"in layout {layout!r}"
        )


class PatternError(LogParsingError):
    """Base class for named-pattern resolution and compilation failures."""

    pass


class UndefinedPatternError(PatternError):
    """
    Raised when a %{NAME} reference has no definition in any loaded dictionary.

    Attributes:
        name: The missing pattern name
        referenced_by: Name of the pattern that referenced it (optional)
    """

    def __init__(self, name: str, referenced_by: str | None = None):
        self.name = name
        self.referenced_by = referenced_by
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.referenced_by:
            return (
                f"Undefined pattern '{self.name}' "
                f"(referenced by '{self.referenced_by}')"
            )
        return f"Undefined pattern '{self.name}'"


class CyclicPatternError(PatternError):
    """
    Raised when named patterns reference each other in a cycle.

    Attributes:
        path: Pattern names along the cycle; first and last are the same
    """

    def __init__(self, path: Sequence[str]):
        self.path = tuple(path)
        super().__init__(f"Cyclic pattern reference: {' -> '.join(self.path)}")


class PatternCompileError(PatternError):
    """
    Raised when an expanded pattern is not a valid regular expression.

    Attributes:
        pattern: The source pattern handed to the compiler
        reason: Message from the regular expression engine
    """

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        # Truncate long patterns for readability
        shown = pattern[:120] + "..." if len(pattern) > 120 else pattern
        super().__init__(f"Invalid pattern {shown!r}: {reason}")


class ParserConstructionError(LogParsingError):
    """
    Raised when a parser cannot be built for an input.

    Wraps the underlying translation, resolution or compile failure.

    Attributes:
        record_id: Source identifier the parser was requested for
        offset: Starting offset the parser was requested at
        cause: Message of the underlying failure
    """

    def __init__(self, record_id: str, offset: int, cause: str):
        self.record_id = record_id
        self.offset = offset
        self.cause = cause
        super().__init__(
            f"Cannot create parser for '{record_id}' at offset {offset}: {cause}"
        )


class PreconditionError(ParserConstructionError):
    """
    Raised when a parser is requested for a stream not at its start.

    Attributes:
        position: The stream position actually found
    """

    def __init__(self, record_id: str, offset: int, position: int):
        self.position = position
        super().__init__(
            record_id,
            offset,
            f"stream must be at position '0', it is at '{position}'",
        )


class RecordParseError(LogParsingError):
    """
    Raised at parse time when a line does not match and the policy is ERROR.

    Attributes:
        record_id: Identifier of the record being parsed
        offset: Offset of the offending line
        line: The offending line
        reason: Why the line was rejected
    """

    def __init__(self, record_id: str, offset: int, line: str, reason: str):
        self.record_id = record_id
        self.offset = offset
        self.line = line
        self.reason = reason
        content = line[:100] + "..." if len(line) > 100 else line
        super().__init__(
            f"Error parsing log line {content!r} in '{record_id}' "
            f"at offset {offset}, reason: {reason}"
        )


class InternalError(LogParsingError):
    """Raised when an internal invariant is violated."""

    pass
