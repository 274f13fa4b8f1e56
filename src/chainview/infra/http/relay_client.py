"""Client side of the CORS relay: wraps target URLs as ``<relay_url>?url=<target>``."""

import logging

import httpx

from chainview.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)


class RelayClient:
    """Routes requests through the allow-listed relay. An empty ``relay_url`` calls targets directly."""

    def __init__(self, http_client: RateLimitedClient, relay_url: str = "") -> None:
        self._http = http_client
        self._relay_url = relay_url

    @property
    def enabled(self) -> bool:
        return bool(self._relay_url)

    async def get(self, target_url: str, params: dict | None = None) -> httpx.Response:
        if params:
            target_url = str(httpx.URL(target_url, params=params))
        if not self._relay_url:
            return await self._http.get(target_url, headers={"Accept": "application/json"})
        logger.debug("Relaying GET %s", target_url)
        return await self._http.get(self._relay_url, params={"url": target_url}, headers={"Accept": "application/json"})

    async def post(self, target_url: str, json: dict | list | None = None) -> httpx.Response:
        if not self._relay_url:
            return await self._http.post(target_url, json=json)
        logger.debug("Relaying POST %s", target_url)
        return await self._http.post(_with_query(self._relay_url, target_url), json=json)


def _with_query(relay_url: str, target_url: str) -> str:
    return str(httpx.URL(relay_url, params={"url": target_url}))
