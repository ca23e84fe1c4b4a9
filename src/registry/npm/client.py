"""NPM registry client: latest published version per package."""

from __future__ import annotations

import asyncio
import logging
import urllib.parse
from typing import Any, Optional

import aiohttp

from constants import Constants
from common.http_client import get_json, make_session
from common.logging_utils import extra_context, safe_url
from versioning.models import FetchOutcome

logger = logging.getLogger(__name__)

_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "depbump/1.0",
}


class FetchError(Exception):
    """A single package's latest version could not be retrieved."""

    def __init__(self, package: str, reason: str):
        super().__init__(f"{package}: {reason}")
        self.package = package
        self.reason = reason


def extract_version(payload: Any) -> str:
    """Return the ``version`` field of a dist-tag document.

    Anything other than an object with a string ``version`` yields the
    ``Constants.VERSION_NOT_FOUND`` sentinel, which never normalizes and so
    is never considered newer.
    """
    if isinstance(payload, dict):
        version = payload.get("version")
        if isinstance(version, str):
            return version
    return Constants.VERSION_NOT_FOUND


class NpmRegistryClient:
    """Asks an npm-compatible registry for ``<package>/latest``."""

    def __init__(
        self,
        base_url: str = Constants.REGISTRY_URL_NPM,
        timeout: float = Constants.REQUEST_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Registry root, with or without trailing slash.
            timeout: Per-request timeout in seconds.
            session: Pre-built session; the client will not close it.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None

    @property
    def base_url(self) -> str:
        return self._base_url

    def latest_url(self, package: str) -> str:
        """Build the dist-tag URL; scoped names keep their ``@scope/`` form."""
        return f"{self._base_url}/{urllib.parse.quote(package, safe='@/')}/latest"

    async def start(self) -> None:
        """Open the HTTP session if one was not supplied."""
        if self._session is None:
            self._session = make_session(self._timeout, headers=_HEADERS)
            self._owns_session = True

    async def stop(self) -> None:
        """Close the HTTP session if this client opened it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    async def fetch_latest(self, package: str) -> FetchOutcome:
        """Retrieve the latest version of ``package`` with one GET.

        Failures are returned inside the outcome rather than raised, so one
        bad package never disturbs the others.
        """
        if self._session is None:
            await self.start()
        assert self._session is not None

        url = self.latest_url(package)
        try:
            status, payload = await get_json(self._session, url, context="npm")
        except asyncio.TimeoutError:
            return self._failed(package, url, f"request timed out after {self._timeout} seconds")
        except aiohttp.ClientError as exc:
            return self._failed(package, url, f"connection error: {exc}")
        except ValueError as exc:
            return self._failed(package, url, str(exc))

        if not 200 <= status < 300:
            return self._failed(package, url, f"registry responded with HTTP {status}")

        return FetchOutcome(name=package, version=extract_version(payload))

    def _failed(self, package: str, url: str, reason: str) -> FetchOutcome:
        logger.debug(
            "Fetch failed",
            extra=extra_context(
                event="fetch_latest",
                component="npm_client",
                outcome="error",
                target=safe_url(url),
                package=package,
            ),
        )
        return FetchOutcome(name=package, error=FetchError(package, reason))

    async def __aenter__(self) -> "NpmRegistryClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()
