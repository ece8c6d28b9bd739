"""
Environment-based configuration loading with validation.

This module provides:
- Environment variable parsing with defaults
- Configuration value clamping for safety
- FetchConfig construction from environment
- Proxy configuration loading from JSON files
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from html_xpath.config.constants import (
    DEFAULT_MAX_CONTENT_BYTES,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)
from html_xpath.config.proxies import ProxyManager
from html_xpath.core.models import FetchConfig, ProxyConfig

# ==== ENVIRONMENT VARIABLE HELPERS ==== #

def _env_int(name: str, default: int) -> int:
    """
    Read integer from environment variable with fallback.

    Args:
        name: Environment variable name
        default: Default value if variable not set

    Returns:
        Integer value from environment or default

    Note:
        Raises ValueError if environment value cannot be parsed as int.
    """
    value = os.getenv(name)

    if value is None:
        return default

    return int(value)




def _clamp(value: int, lower: int, upper: int) -> int:
    """
    Clamp integer value to safe range.

    Example:
        _clamp(500, 1, 120) -> 120
        _clamp(0, 1, 120) -> 1
    """
    return max(lower, min(upper, value))




# ==== CONFIGURATION LOADERS ==== #

def load_fetch_config() -> FetchConfig:
    """
    Load network retrieval settings from environment variables.

    Environment Variables:
        HTML_XPATH_TIMEOUT_SECONDS: Request timeout (clamped 1-120)
        HTML_XPATH_MAX_CONTENT_BYTES: Response size limit (clamped 1 KiB-100 MiB)
        HTML_XPATH_USER_AGENT: User-Agent header
        HTML_XPATH_FOLLOW_REDIRECTS: Follow redirects (true/false)
        HTML_XPATH_PROXY: Proxy URL used for every request
        HTML_XPATH_PROXY_CONFIG_PATH: JSON proxy file, used when
            HTML_XPATH_PROXY is unset
        HTML_XPATH_PROXY_SOCKS: Route through the SOCKS5 port of the
            proxy file (true/false)

    Returns:
        FetchConfig with validated configuration values
    """
    # --► TIMEOUT
    timeout_raw = _env_int("HTML_XPATH_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)
    timeout_seconds = _clamp(timeout_raw, 1, 120)

    # --► SIZE LIMIT
    max_bytes_raw = _env_int("HTML_XPATH_MAX_CONTENT_BYTES", DEFAULT_MAX_CONTENT_BYTES)
    max_content_bytes = _clamp(max_bytes_raw, 1024, 100 * 1024 * 1024)

    # --► PROXY
    proxy = os.getenv("HTML_XPATH_PROXY") or None
    proxy_config_path = os.getenv("HTML_XPATH_PROXY_CONFIG_PATH")
    if proxy is None and proxy_config_path:
        proxy_config = load_proxy_config_from_json(Path(proxy_config_path).resolve())
        prefer_socks = os.getenv("HTML_XPATH_PROXY_SOCKS", "false").lower() == "true"
        proxy = ProxyManager.from_proxy_config(proxy_config).httpx_proxy(prefer_socks)

    return FetchConfig(
        timeout_seconds=float(timeout_seconds),
        max_content_bytes=max_content_bytes,
        user_agent=os.getenv("HTML_XPATH_USER_AGENT", DEFAULT_USER_AGENT),
        follow_redirects=(
            os.getenv("HTML_XPATH_FOLLOW_REDIRECTS", "true").lower() == "true"
        ),
        proxy=proxy,
    )




def load_proxy_config_from_json(path: Path) -> ProxyConfig:
    """
    Load proxy configuration from JSON file.

    Expected JSON structure:
        {
            "proxy": {
                "hostname": "proxy.example.com",
                "port": {
                    "http": 8080,
                    "socks5": 1080
                },
                "username": "user",
                "password": "pass"
            }
        }

    Args:
        path: Path to proxy configuration JSON file

    Returns:
        ProxyConfig with parsed proxy settings

    Raises:
        FileNotFoundError: If path does not exist
        json.JSONDecodeError: If file is not valid JSON
        KeyError: If required fields are missing

    Note:
        The SOCKS5 port, username and password are optional.
    """
    raw = json.loads(path.read_text(encoding="utf-8"))
    proxy = raw["proxy"]

    # Extract hostname (strip port if included)
    host = proxy["hostname"].split(":")[0]
    ports = proxy["port"]
    socks5_port = ports.get("socks5")

    return ProxyConfig(
        host=host,
        http_port=int(ports["http"]),
        socks5_port=int(socks5_port) if socks5_port is not None else None,
        username=proxy.get("username"),
        password=proxy.get("password"),
    )
