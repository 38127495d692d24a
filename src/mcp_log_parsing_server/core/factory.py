"""Parser factory: turns a log mode plus configuration into bound parsers.

A factory is built once per configuration and may be shared between threads.
It owns two caches (Grok and plain regex) so each distinct pattern source is
compiled once, however many inputs are parsed.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .cache import PatternCache
from .config import REGEX_FIELD_PATH_TO_GROUP_KEY, FactoryConfig
from .error_policy import DISCARD_ON_ERROR, resolve_max_stack_trace_lines
from .errors import (
    ConfigurationError,
    InternalError,
    LogParsingError,
    ParserConstructionError,
    PatternCompileError,
    PreconditionError,
)
from .formats import (
    APACHE_ERROR_LOG_FORMAT_EXPRESSION,
    COMBINED_LOG_FORMAT_EXPRESSION,
    COMMON_LOG_FORMAT_EXPRESSION,
    GrokParser,
    LogLineParser,
    RegexParser,
    translate_apache_layout,
    translate_log4j_layout,
)
from .grok import (
    APACHE_ERROR_LOG_PATTERNS,
    BASE_DICTIONARIES,
    LOG4J_PATTERNS,
    DictionaryProvider,
    Grok,
    GrokDictionary,
    PackageDictionaryProvider,
)
from .models import LogMode
from .stream import CharStream

logger = logging.getLogger(__name__)

REGEX_PARSER_NAME = "Regular Expression"


@dataclass(frozen=True, slots=True)
class _GrokRecipe:
    """How one Grok-backed mode gets its expression."""

    name: str
    expression: Callable[[FactoryConfig], str]
    dictionaries: tuple[str, ...] = ()


_GROK_RECIPES: dict[LogMode, _GrokRecipe] = {
    LogMode.COMMON_LOG_FORMAT: _GrokRecipe(
        "Common Log Format", lambda _: COMMON_LOG_FORMAT_EXPRESSION
    ),
    LogMode.COMBINED_LOG_FORMAT: _GrokRecipe(
        "Combined Log Format", lambda _: COMBINED_LOG_FORMAT_EXPRESSION
    ),
    LogMode.APACHE_CUSTOM_LOG_FORMAT: _GrokRecipe(
        "Apache Access Log Format",
        lambda c: translate_apache_layout(c.apache_custom_log_format),
    ),
    LogMode.APACHE_ERROR_LOG_FORMAT: _GrokRecipe(
        "Apache Error Log Format",
        lambda _: APACHE_ERROR_LOG_FORMAT_EXPRESSION,
        (APACHE_ERROR_LOG_PATTERNS,),
    ),
    LogMode.GROK: _GrokRecipe("Grok Format", lambda c: c.grok_pattern),
    LogMode.LOG4J: _GrokRecipe(
        "Log4j Log Format",
        lambda c: translate_log4j_layout(c.log4j_custom_log_format),
        (LOG4J_PATTERNS,),
    ),
}


def coerce_mode(mode: LogMode | str) -> LogMode:
    """Accept a LogMode or its name in any case ("log4j", "common-log-format")."""
    if isinstance(mode, LogMode):
        return mode
    normalized = str(mode).strip().upper().replace("-", "_").replace(" ", "_")
    try:
        return LogMode(normalized)
    except ValueError:
        valid = ", ".join(m.value for m in LogMode)
        raise ConfigurationError(
            f"Unknown log mode, expected one of: {valid}", key="mode", value=mode
        ) from None


def _compile_regex(source: str) -> re.Pattern[str]:
    try:
        return re.compile(source)
    except re.error as exc:
        raise PatternCompileError(source, str(exc)) from exc


class LogParserFactory:
    """Builds parsers for one log mode and configuration.

    Args:
        mode: Log format, as a LogMode or its name
        config: FactoryConfig or a flat key -> value mapping (defaults when None)
        max_object_len: Lines longer than this are truncated; -1 disables truncation
        dictionary_provider: Source of named-pattern dictionaries

    Raises:
        ConfigurationError: Any of the above is invalid
    """

    def __init__(
        self,
        mode: LogMode | str,
        config: FactoryConfig | Mapping[str, Any] | None = None,
        *,
        max_object_len: int = -1,
        dictionary_provider: DictionaryProvider | None = None,
    ):
        self.mode = coerce_mode(mode)
        self.config = (
            config if isinstance(config, FactoryConfig) else FactoryConfig.from_mapping(config)
        )
        if not isinstance(max_object_len, int) or max_object_len < -1:
            raise ConfigurationError(
                "max object length must be -1 (unlimited) or >= 0",
                key="max_object_len",
                value=max_object_len,
            )
        self.max_object_len = max_object_len
        self.max_stack_trace_lines = resolve_max_stack_trace_lines(
            self.config.on_parse_error, self.config.trim_stack_trace_to_length
        )
        self._provider = dictionary_provider or PackageDictionaryProvider()
        self._grok_cache: PatternCache[Grok] = PatternCache(self._compile_grok, name="grok")
        self._regex_cache: PatternCache[re.Pattern[str]] = PatternCache(
            _compile_regex, name="regex"
        )
        logger.debug(
            "Created %s parser factory (on_parse_error=%s, max_stack_trace_lines=%d)",
            self.parser_name,
            self.config.on_parse_error.value,
            self.max_stack_trace_lines,
        )

    @property
    def parser_name(self) -> str:
        if self.mode is LogMode.REGEX:
            return REGEX_PARSER_NAME
        recipe = _GROK_RECIPES.get(self.mode)
        if recipe is None:
            raise InternalError(f"No parser recipe for mode {self.mode!r}")
        return recipe.name

    @property
    def grok_cache(self) -> PatternCache[Grok]:
        return self._grok_cache

    @property
    def regex_cache(self) -> PatternCache[re.Pattern[str]]:
        return self._regex_cache

    def pattern_source(self) -> str:
        """Return the exact pattern text handed to the compiler for this mode."""
        if self.mode is LogMode.REGEX:
            return self.config.regex
        recipe = _GROK_RECIPES.get(self.mode)
        if recipe is None:
            raise InternalError(f"No parser recipe for mode {self.mode!r}")
        return recipe.expression(self.config)

    def _compile_grok(self, expression: str) -> Grok:
        recipe = _GROK_RECIPES[self.mode]
        dictionary = GrokDictionary(self._provider)
        for name in (*BASE_DICTIONARIES, *recipe.dictionaries):
            dictionary.add_resource(name)
        if self.config.grok_pattern_definition:
            dictionary.add_dictionary(self.config.grok_pattern_definition)
        dictionary.bind()
        return dictionary.compile_expression(expression)

    def build_parser(
        self, record_id: str, stream: CharStream, start_offset: int = 0
    ) -> LogLineParser:
        """Bind a new parser to ``stream``, which must be at its start.

        Raises:
            PreconditionError: ``stream`` has already been read from
            ParserConstructionError: The pattern could not be translated, resolved
                or compiled
        """
        if stream.pos != 0:
            raise PreconditionError(record_id, start_offset, stream.pos)

        if self.mode is not LogMode.REGEX and self.mode not in _GROK_RECIPES:
            raise InternalError(f"No parser recipe for mode {self.mode!r}")

        options: dict[str, Any] = {
            "max_object_len": self.max_object_len,
            "retain_original_text": self.config.retain_original_text,
            "name": self.parser_name,
        }
        try:
            if self.mode is LogMode.REGEX:
                pattern = self._regex_cache.get(self.config.regex)
                self._check_groups(pattern)
                return RegexParser(
                    pattern,
                    self.config.field_path_to_group,
                    stream,
                    record_id,
                    start_offset,
                    max_stack_trace_lines=min(self.max_stack_trace_lines, DISCARD_ON_ERROR),
                    **options,
                )
            grok = self._grok_cache.get(self.pattern_source())
            return GrokParser(
                grok,
                stream,
                record_id,
                start_offset,
                max_stack_trace_lines=self.max_stack_trace_lines,
                **options,
            )
        except LogParsingError as exc:
            raise ParserConstructionError(record_id, start_offset, str(exc)) from exc

    def _check_groups(self, pattern: re.Pattern[str]) -> None:
        for field_path, group in self.config.field_path_to_group.items():
            if group > pattern.groups:
                raise ConfigurationError(
                    f"group {group} for '{field_path}' exceeds the {pattern.groups} "
                    "groups in the regex",
                    key=REGEX_FIELD_PATH_TO_GROUP_KEY,
                )
