"""Parser factory configuration.

Configuration arrives as a flat key -> value mapping (shared with the rest of a
pipeline, so unknown keys are ignored) and is validated once into an immutable
``FactoryConfig``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .errors import ConfigurationError
from .models import OnParseError

KEY_PREFIX = "log."

RETAIN_ORIGINAL_TEXT_KEY = KEY_PREFIX + "retain.original.text"
APACHE_CUSTOMLOG_FORMAT_KEY = KEY_PREFIX + "apache.custom.log.format"
REGEX_KEY = KEY_PREFIX + "regex"
REGEX_FIELD_PATH_TO_GROUP_KEY = KEY_PREFIX + "regex.fieldPath.to.group.name"
GROK_PATTERN_KEY = KEY_PREFIX + "grok.pattern"
GROK_PATTERN_DEFINITION_KEY = KEY_PREFIX + "grok.pattern.definition"
LOG4J_FORMAT_KEY = "log4j.custom.log.format"
LOG4J_FORMAT_LEGACY_KEY = KEY_PREFIX + "log4j.custom.log.format"
ON_PARSE_ERROR_KEY = KEY_PREFIX + "on.parse.error"
LOG4J_TRIM_STACK_TRACES_TO_LENGTH_KEY = KEY_PREFIX + "log4j.trim.stack.trace.to.length"

RETAIN_ORIGINAL_TEXT_DEFAULT = False
APACHE_CUSTOMLOG_FORMAT_DEFAULT = '%h %l %u %t "%r" %>s %b'
REGEX_DEFAULT = (
    r"^(\S+) (\S+) (\S+) \[([\w:/]+\s[+\-]\d{4})\] "
    r'"(\S+) (\S+) (\S+)" (\d{3}) (\d+)'
)
GROK_PATTERN_DEFAULT = "%{COMMONAPACHELOG}"
GROK_PATTERN_DEFINITION_DEFAULT = ""
LOG4J_FORMAT_DEFAULT = "%d{ISO8601} %-5p %c{1} - %m"
ON_PARSE_ERROR_DEFAULT = OnParseError.ERROR
LOG4J_TRIM_STACK_TRACES_TO_LENGTH_DEFAULT = 50


def register_configs(configs: dict[str, Any]) -> dict[str, Any]:
    """Fill in defaults for every factory key missing from ``configs``."""
    configs.setdefault(RETAIN_ORIGINAL_TEXT_KEY, RETAIN_ORIGINAL_TEXT_DEFAULT)
    configs.setdefault(APACHE_CUSTOMLOG_FORMAT_KEY, APACHE_CUSTOMLOG_FORMAT_DEFAULT)
    configs.setdefault(REGEX_KEY, REGEX_DEFAULT)
    configs.setdefault(REGEX_FIELD_PATH_TO_GROUP_KEY, {})
    configs.setdefault(GROK_PATTERN_DEFINITION_KEY, GROK_PATTERN_DEFINITION_DEFAULT)
    configs.setdefault(GROK_PATTERN_KEY, GROK_PATTERN_DEFAULT)
    configs.setdefault(LOG4J_FORMAT_KEY, LOG4J_FORMAT_DEFAULT)
    configs.setdefault(ON_PARSE_ERROR_KEY, ON_PARSE_ERROR_DEFAULT)
    configs.setdefault(
        LOG4J_TRIM_STACK_TRACES_TO_LENGTH_KEY, LOG4J_TRIM_STACK_TRACES_TO_LENGTH_DEFAULT
    )
    return configs


def default_configs() -> dict[str, Any]:
    """Return a fresh mapping holding every key at its default."""
    return register_configs({})


class FactoryConfig(BaseModel):
    """Immutable snapshot of everything a parser factory needs."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    retain_original_text: bool = Field(
        default=RETAIN_ORIGINAL_TEXT_DEFAULT, alias=RETAIN_ORIGINAL_TEXT_KEY
    )
    apache_custom_log_format: str = Field(
        default=APACHE_CUSTOMLOG_FORMAT_DEFAULT, alias=APACHE_CUSTOMLOG_FORMAT_KEY
    )
    regex: str = Field(default=REGEX_DEFAULT, alias=REGEX_KEY)
    field_path_to_group: dict[str, int] = Field(
        default_factory=dict, alias=REGEX_FIELD_PATH_TO_GROUP_KEY
    )
    grok_pattern: str = Field(default=GROK_PATTERN_DEFAULT, alias=GROK_PATTERN_KEY)
    grok_pattern_definition: str = Field(
        default=GROK_PATTERN_DEFINITION_DEFAULT, alias=GROK_PATTERN_DEFINITION_KEY
    )
    log4j_custom_log_format: str = Field(
        default=LOG4J_FORMAT_DEFAULT,
        validation_alias=AliasChoices(
            LOG4J_FORMAT_KEY, LOG4J_FORMAT_LEGACY_KEY, "log4j_custom_log_format"
        ),
        serialization_alias=LOG4J_FORMAT_KEY,
    )
    on_parse_error: OnParseError = Field(
        default=ON_PARSE_ERROR_DEFAULT, alias=ON_PARSE_ERROR_KEY
    )
    trim_stack_trace_to_length: int = Field(
        default=LOG4J_TRIM_STACK_TRACES_TO_LENGTH_DEFAULT,
        ge=0,
        alias=LOG4J_TRIM_STACK_TRACES_TO_LENGTH_KEY,
    )

    @field_validator("on_parse_error", mode="before")
    @classmethod
    def _normalize_on_parse_error(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, OnParseError):
            return value.strip().upper()
        return value

    @field_validator("field_path_to_group")
    @classmethod
    def _check_groups(cls, value: dict[str, int]) -> dict[str, int]:
        for field_path, group in value.items():
            if group < 1:
                raise ValueError(
                    f"group for '{field_path}' must be >= 1 (group 0 is the whole match), "
                    f"got {group}"
                )
        return value

    @classmethod
    def from_mapping(cls, configs: Mapping[str, Any] | None = None) -> FactoryConfig:
        """Validate a flat configuration mapping into a FactoryConfig."""
        try:
            return cls.model_validate(dict(configs or {}))
        except ValidationError as exc:
            err = exc.errors()[0]
            loc = err.get("loc") or ()
            key = str(loc[0]) if loc else None
            raise ConfigurationError(err["msg"], key=key, value=err.get("input")) from exc

    def to_mapping(self) -> dict[str, Any]:
        """Return the flat key -> value form of this config."""
        return self.model_dump(by_alias=True)
