"""Grok expressions for the fixed log formats."""

from __future__ import annotations

COMMON_LOG_FORMAT_EXPRESSION = "%{COMMONAPACHELOG}"
COMBINED_LOG_FORMAT_EXPRESSION = "%{COMBINEDAPACHELOG}"
APACHE_ERROR_LOG_FORMAT_EXPRESSION = "%{APACHEERRORLOG}"
