"""Shared HTTP helpers used by registry clients.

Encapsulates request tracing so registry modules avoid duplicating the same
DEBUG logging around every call. Transport errors propagate to the caller,
which decides whether a failure is fatal.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import aiohttp

from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def make_session(timeout: float, headers: Optional[Dict[str, str]] = None) -> aiohttp.ClientSession:
    """Create a client session with the per-request timeout applied."""
    connector = aiohttp.TCPConnector(limit=100)
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=timeout),
        connector=connector,
        headers=headers,
    )


async def get_json(
    session: aiohttp.ClientSession,
    url: str,
    *,
    context: str,
    headers: Optional[Dict[str, str]] = None,
) -> Tuple[int, Any]:
    """Perform a GET request and decode the JSON body with DEBUG traces.

    Args:
        session: Open aiohttp session.
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "npm").
        headers: Optional request headers.

    Returns:
        Tuple of (status_code, parsed_json).

    Raises:
        aiohttp.ClientError: on transport failures.
        asyncio.TimeoutError: when the session timeout expires.
        ValueError: when the body is not valid JSON.
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                ),
            )
        async with session.get(url, headers=headers) as response:
            status = response.status
            text = await response.text()

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                status_code=status,
                duration_ms=t.duration_ms(),
                target=safe_target,
                context=context,
            ),
        )

    try:
        return status, json.loads(text)
    except json.JSONDecodeError as exc:
        if is_debug_enabled(logger):
            logger.debug(
                "JSON decode error",
                extra=extra_context(
                    event="parse",
                    component="http_client",
                    action="get_json",
                    outcome="json_decode_error",
                    status_code=status,
                    target=safe_target,
                ),
            )
        raise ValueError(f"{context} returned a non-JSON body (HTTP {status})") from exc
