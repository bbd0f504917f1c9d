"""Shared async HTTP plumbing for the postal and geocoding clients."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ...config import settings

logger = logging.getLogger(__name__)


class LookupClient:
    """Base class for JSON lookups with timeout, retry and backoff.

    A ``transport`` can be injected (e.g. ``httpx.MockTransport``) so tests
    never reach the network.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("Lookup base URL is not configured.")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.http_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.http_backoff_seconds
        self.headers = headers or {}
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers=self.headers,
            transport=self._transport,
        )

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``path`` and decode the JSON body.

        Timeouts and network errors are retried with exponential backoff;
        HTTP error statuses and undecodable bodies are raised immediately.
        """
        url = f"{self.base_url}{path}"
        attempt = 0
        async with self._get_client() as client:
            while True:
                try:
                    response = await client.get(url, params=params)
                    response.raise_for_status()
                    return response.json()
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Lookup to {url} failed ({e!r}), retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    await asyncio.sleep(wait_time)
