import asyncio
import time

import httpx

from chainview.exceptions import ExternalServiceError


class RateLimitedClient:
    """Async HTTP client with simple interval-based rate limiting and an explicit timeout.

    Network failures and timeouts are raised as ``ExternalServiceError``; status
    codes are left to the caller (see ``chainview.infra.http.responses``).
    """

    def __init__(
        self,
        rate_per_second: float = 5.0,
        timeout: float = 30.0,
        follow_redirects: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._min_interval = 1.0 / rate_per_second
        self._last_request_time = 0.0
        self._lock = asyncio.Lock()
        self._client = httpx.AsyncClient(timeout=timeout, follow_redirects=follow_redirects, transport=transport)

    async def _wait_for_slot(self) -> None:
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if elapsed < self._min_interval:
                await asyncio.sleep(self._min_interval - elapsed)
            self._last_request_time = time.monotonic()

    async def get(
        self, url: str, params: dict | None = None, headers: dict[str, str] | None = None
    ) -> httpx.Response:
        await self._wait_for_slot()
        try:
            return await self._client.get(url, params=params, headers=headers)
        except httpx.TimeoutException as exc:
            raise ExternalServiceError(f"Request to {_host(url)} timed out") from exc
        except httpx.HTTPError as exc:
            raise ExternalServiceError(f"Request to {_host(url)} failed: {exc}") from exc

    async def post(
        self, url: str, json: dict | list | None = None, headers: dict[str, str] | None = None
    ) -> httpx.Response:
        await self._wait_for_slot()
        try:
            return await self._client.post(url, json=json, headers=headers)
        except httpx.TimeoutException as exc:
            raise ExternalServiceError(f"Request to {_host(url)} timed out") from exc
        except httpx.HTTPError as exc:
            raise ExternalServiceError(f"Request to {_host(url)} failed: {exc}") from exc

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RateLimitedClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()


def _host(url: str) -> str:
    try:
        return httpx.URL(url).host or url
    except httpx.InvalidURL:
        return url
