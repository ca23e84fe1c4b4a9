"""Concurrent latest-version lookups for a whole dependency set."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Callable, Iterable, List, Optional

from constants import Constants
from common.logging_utils import extra_context, Timer
from registry.npm.client import FetchError, NpmRegistryClient
from versioning.models import FetchOutcome

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[], None]


class ProgressCounter:
    """Thread-safe count of settled fetches.

    Every increment is forwarded to ``callback`` (if any) after the count has
    been updated.
    """

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self._lock = threading.Lock()
        self._value = 0
        self._callback = callback

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            value = self._value
        if self._callback is not None:
            self._callback()
        return value


async def _fetch_one(client: NpmRegistryClient, name: str, counter: ProgressCounter) -> FetchOutcome:
    try:
        outcome = await client.fetch_latest(name)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        # A client bug for one package must not sink the batch.
        logger.debug("Unexpected error fetching %s", name, exc_info=True)
        outcome = FetchOutcome(name=name, error=FetchError(name, f"unexpected error: {exc}"))
    counter.increment()
    return outcome


async def fetch_all(
    names: Iterable[str],
    client: NpmRegistryClient,
    progress: Optional[ProgressCounter] = None,
) -> List[FetchOutcome]:
    """Look up every name concurrently and wait for all of them.

    Args:
        names: Distinct package names.
        client: Registry client; must already be usable.
        progress: Counter bumped once per settled lookup.

    Returns:
        One outcome per requested name. Order is not meaningful; match
        outcomes to packages by ``FetchOutcome.name``.
    """
    counter = progress if progress is not None else ProgressCounter()
    names = list(names)
    with Timer() as t:
        outcomes = await asyncio.gather(*(_fetch_one(client, name, counter) for name in names))

    failed = sum(1 for o in outcomes if not o.ok)
    logger.debug(
        "Fetch batch complete",
        extra=extra_context(
            event="fetch_batch",
            component="fetch",
            outcome="partial" if failed else "success",
            requested=len(names),
            failed=failed,
            duration_ms=t.duration_ms(),
        ),
    )
    return list(outcomes)


def run_fetch_batch(
    names: Iterable[str],
    on_progress: Optional[ProgressCallback] = None,
    *,
    registry_url: str = Constants.REGISTRY_URL_NPM,
    timeout: float = Constants.REQUEST_TIMEOUT,
    client: Optional[NpmRegistryClient] = None,
) -> List[FetchOutcome]:
    """Synchronous entry point: run one fetch batch on a fresh event loop.

    Args:
        names: Distinct package names.
        on_progress: Called once per settled lookup.
        registry_url: Registry root used when ``client`` is not given.
        timeout: Per-request timeout in seconds.
        client: Pre-built client (its lifecycle stays with the caller).
    """
    counter = ProgressCounter(on_progress)

    async def _run() -> List[FetchOutcome]:
        if client is not None:
            return await fetch_all(names, client, counter)
        async with NpmRegistryClient(registry_url, timeout=timeout) as owned:
            return await fetch_all(names, owned, counter)

    return asyncio.run(_run())
