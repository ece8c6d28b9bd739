"""
Document loader using httpx.

This module provides:
- Synchronous loaders (plain, extra headers, explicit proxy)
- An async loader that honours task cancellation
- Size guardrails and charset-aware decoding before parsing
"""

from __future__ import annotations

from collections.abc import Mapping
from time import perf_counter

import httpx
from yarl import URL

from html_xpath.config.env import load_fetch_config
from html_xpath.core.dom import Node
from html_xpath.core.errors import FetchError
from html_xpath.core.models import FetchConfig
from html_xpath.utils.encoding import decode_html
from html_xpath.utils.logging import get_logger
from html_xpath.utils.parsing import parse_html

logger = get_logger(__name__)

ACCEPT_HTML = "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8"

# ==== REQUEST SETUP ==== #

def validate_url(url: str) -> str:
    """
    Check that url is an absolute http(s) URL.

    Raises:
        FetchError: With kind 'invalid_url' otherwise
    """
    try:
        parsed = URL(url)
    except (TypeError, ValueError) as exc:
        raise FetchError("invalid_url", str(url), str(exc)) from exc

    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise FetchError("invalid_url", url, "expected an absolute http(s) URL")
    return url




def build_headers(config: FetchConfig, headers: Mapping[str, str] | None = None) -> dict[str, str]:
    """Default headers, overridden by the caller's."""
    merged = {"User-Agent": config.user_agent, "Accept": ACCEPT_HTML}
    if headers:
        merged.update(headers)
    return merged




def make_http_client(config: FetchConfig, proxy: str | None = None) -> httpx.Client:
    """Create httpx Client with configuration."""
    return httpx.Client(
        http2=True,
        follow_redirects=config.follow_redirects,
        timeout=httpx.Timeout(config.timeout_seconds),
        proxy=proxy or config.proxy,
    )




def make_async_http_client(config: FetchConfig, proxy: str | None = None) -> httpx.AsyncClient:
    """Create httpx AsyncClient with configuration."""
    return httpx.AsyncClient(
        http2=True,
        follow_redirects=config.follow_redirects,
        timeout=httpx.Timeout(config.timeout_seconds),
        proxy=proxy or config.proxy,
    )




# ==== RESPONSE HANDLING ==== #

def _check_response(response: httpx.Response, url: str, config: FetchConfig) -> None:
    if response.status_code >= 400:
        raise FetchError("http_error", url, f"HTTP {response.status_code}")

    declared = response.headers.get("Content-Length")
    if declared is not None and declared.isdigit() and int(declared) > config.max_content_bytes:
        raise FetchError("too_large", url, f"{declared} bytes declared")




def _append_chunk(body: bytearray, chunk: bytes, url: str, config: FetchConfig) -> None:
    body.extend(chunk)
    if len(body) > config.max_content_bytes:
        raise FetchError("too_large", url, f"body exceeds {config.max_content_bytes} bytes")




def _transport_failure(exc: Exception, url: str) -> FetchError:
    if isinstance(exc, httpx.TimeoutException):
        return FetchError("timeout", url, str(exc)[:200])
    return FetchError("transport_error", url, f"{type(exc).__name__}: {str(exc)[:200]}")




def _finish(url: str, response: httpx.Response, body: bytearray, start: float) -> Node:
    elapsed_ms = int((perf_counter() - start) * 1000)
    logger.info(
        "fetch_finished",
        extra={
            "url": url,
            "http_status": response.status_code,
            "content_len": len(body),
            "latency_ms": elapsed_ms,
        },
    )
    # httpx reads the Content-Type charset; decode_html falls back to <meta> sniffing
    return parse_html(decode_html(bytes(body), response.charset_encoding))




# ==== SYNCHRONOUS LOADERS ==== #

def _load(
    url: str,
    headers: Mapping[str, str] | None,
    proxy: str | None,
    config: FetchConfig | None,
) -> Node:
    config = config or load_fetch_config()
    url = validate_url(url)
    logger.info("fetch_started", extra={"url": url, "proxied": bool(proxy or config.proxy)})
    start = perf_counter()

    try:
        with make_http_client(config, proxy) as client:
            with client.stream("GET", url, headers=build_headers(config, headers)) as response:
                _check_response(response, url, config)
                body = bytearray()
                for chunk in response.iter_bytes():
                    _append_chunk(body, chunk, url, config)
    except FetchError as exc:
        logger.warning("fetch_failed", extra={"url": url, "kind": exc.kind})
        raise
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        error = _transport_failure(exc, url)
        logger.warning("fetch_failed", extra={"url": url, "kind": error.kind})
        raise error from exc

    return _finish(url, response, body, start)




def load_url(url: str, config: FetchConfig | None = None) -> Node:
    """
    Fetch url and parse the response as HTML.

    Args:
        url: Absolute http(s) URL
        config: Fetch settings (default: read from the environment)

    Returns:
        Document node of the parsed response

    Raises:
        FetchError: On invalid URL, timeout, error status, oversized body
            or transport failure
        ParseError: If the body cannot be parsed
    """
    return _load(url, None, None, config)




def load_url_with_header(
    url: str,
    headers: Mapping[str, str],
    config: FetchConfig | None = None,
) -> Node:
    """Like load_url, sending headers on top of the default ones."""
    return _load(url, headers, None, config)




def load_url_with_proxy(url: str, proxy: str, config: FetchConfig | None = None) -> Node:
    """
    Like load_url, routing the request through proxy.

    Example:
        load_url_with_proxy("https://example.com", "http://127.0.0.1:8080")
    """
    return _load(url, None, proxy, config)




# ==== ASYNC LOADER ==== #

async def fetch_document(
    url: str,
    headers: Mapping[str, str] | None = None,
    proxy: str | None = None,
    config: FetchConfig | None = None,
) -> Node:
    """
    Fetch and parse a document without blocking the event loop.

    Cancelling the awaiting task aborts the request in flight;
    asyncio.CancelledError propagates unchanged.

    Raises:
        FetchError: Same failure kinds as load_url
        ParseError: If the body cannot be parsed
    """
    config = config or load_fetch_config()
    url = validate_url(url)
    logger.info("fetch_started", extra={"url": url, "proxied": bool(proxy or config.proxy)})
    start = perf_counter()

    try:
        async with make_async_http_client(config, proxy) as client:
            async with client.stream("GET", url, headers=build_headers(config, headers)) as response:
                _check_response(response, url, config)
                body = bytearray()
                async for chunk in response.aiter_bytes():
                    _append_chunk(body, chunk, url, config)
    except FetchError as exc:
        logger.warning("fetch_failed", extra={"url": url, "kind": exc.kind})
        raise
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        error = _transport_failure(exc, url)
        logger.warning("fetch_failed", extra={"url": url, "kind": error.kind})
        raise error from exc

    return _finish(url, response, body, start)
