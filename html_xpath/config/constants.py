"""
Configuration constants and type aliases for html_xpath.

This module defines:
- Type literals for fetch failure kinds
- Default values for HTTP retrieval
- Resource limits and constraints
"""

from __future__ import annotations

from typing import Literal

# ==== TYPE DEFINITIONS ==== #

FetchErrorKind = Literal[
    "invalid_url",
    "timeout",
    "http_error",
    "too_large",
    "transport_error",
]
"""
Reason a document could not be retrieved.

- 'invalid_url': URL is malformed or not http(s)
- 'timeout': Request exceeded the time limit
- 'http_error': Server answered with a 4xx or 5xx status
- 'too_large': Body exceeds the size limit
- 'transport_error': Connection, proxy or protocol failure
"""




# ==== HTTP CLIENT DEFAULTS ==== #

DEFAULT_TIMEOUT_SECONDS: int = 10
"""Default timeout for HTTP requests in seconds."""

DEFAULT_USER_AGENT: str = "html-xpath/0.1"
"""User-Agent sent when the caller supplies none."""

DEFAULT_FALLBACK_ENCODING: str = "utf-8"
"""Encoding used when neither headers nor markup declare a charset."""

CHARSET_SNIFF_BYTES: int = 1024
"""How many leading bytes are scanned for a <meta charset> declaration."""




# ==== RESOURCE LIMITS ==== #

DEFAULT_MAX_CONTENT_BYTES: int = 5 * 1024 * 1024
"""
Maximum response size in bytes (5 MiB).

Larger bodies fail with 'too_large' to prevent memory exhaustion.
"""
