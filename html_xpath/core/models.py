"""
Configuration models for html_xpath.

This module defines:
- FetchConfig, settings for network retrieval
- ProxyConfig, proxy host, ports and credentials
"""

from __future__ import annotations

import msgspec

from html_xpath.config.constants import (
    DEFAULT_MAX_CONTENT_BYTES,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)




# ==== CONFIGURATION MODELS ==== #

class FetchConfig(msgspec.Struct, omit_defaults=True):
    """
    Settings for loading documents over HTTP.

    Attributes:
        timeout_seconds: Total request timeout
        max_content_bytes: Largest accepted response body
        user_agent: User-Agent header sent unless the caller overrides it
        follow_redirects: Follow 3xx responses
        proxy: Optional proxy URL (http://, https:// or socks5://)
    """

    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_content_bytes: int = DEFAULT_MAX_CONTENT_BYTES
    user_agent: str = DEFAULT_USER_AGENT
    follow_redirects: bool = True
    proxy: str | None = None




class ProxyConfig(msgspec.Struct, omit_defaults=True):
    """
    Proxy server configuration.

    Attributes:
        host: Proxy server hostname
        http_port: Port for HTTP traffic
        socks5_port: Optional port for SOCKS5 traffic
        username: Optional authentication username
        password: Optional authentication password
    """

    host: str
    http_port: int
    socks5_port: int | None = None
    username: str | None = None
    password: str | None = None
