"""Server side of the CORS relay: forwards GET/POST to allow-listed explorer hosts."""

import logging
from typing import Annotated, Optional

import httpx
from fastapi import APIRouter, Depends, Query, Request
from starlette.responses import JSONResponse, Response

from chainview.api.deps import get_relay_hosts, get_relay_http
from chainview.exceptions import ExternalServiceError, HostNotAllowedError
from chainview.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["relay"])

RelayHttpDep = Annotated[RateLimitedClient, Depends(get_relay_http)]
RelayHostsDep = Annotated[frozenset[str], Depends(get_relay_hosts)]

MAX_REDIRECTS = 5

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def host_allowed(hostname: str, allowed: frozenset[str]) -> bool:
    """Exact match or a subdomain of an allowed host."""
    hostname = hostname.lower()
    return any(hostname == host or hostname.endswith("." + host) for host in allowed)


def resolve_target(url: str, allowed: frozenset[str]) -> str:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise HostNotAllowedError(f"Invalid target URL: {url}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise HostNotAllowedError(f"Invalid target URL: {url}")
    if not host_allowed(parsed.host, allowed):
        raise HostNotAllowedError(f"Host not allowed: {parsed.host}")
    return url


def _error(status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


def _forwarded(resp: httpx.Response) -> Response:
    if not resp.is_success:
        return _error(resp.status_code, {"error": f"Upstream error: {resp.status_code}", "upstream": resp.text[:500]})
    return Response(content=resp.content, media_type="application/json", headers=CORS_HEADERS)


async def _relay(url: Optional[str], allowed: frozenset[str], send) -> Response:
    """Send to ``url`` and follow redirects by hand, checking every hop against the allow-list."""
    if not url:
        return _error(400, {"error": "Missing url parameter"})
    try:
        target = resolve_target(url, allowed)
    except HostNotAllowedError as exc:
        logger.warning("Relay rejected %s: %s", url, exc)
        return _error(403, {"error": str(exc)})

    for _ in range(MAX_REDIRECTS + 1):
        try:
            resp = await send(target)
        except ExternalServiceError as exc:
            logger.warning("Relay request to %s failed: %s", target, exc)
            return _error(502, {"error": "Proxy request failed", "details": str(exc)})
        if not resp.is_redirect:
            return _forwarded(resp)

        location = resp.headers["Location"]
        try:
            target = resolve_target(str(httpx.URL(target).join(location)), allowed)
        except (HostNotAllowedError, httpx.InvalidURL) as exc:
            logger.warning("Relay blocked redirect from %s to %s: %s", target, location, exc)
            return _error(403, {"error": str(exc) or f"Invalid redirect target: {location}"})

    return _error(502, {"error": "Proxy request failed", "details": f"Too many redirects for {url}"})


@router.options("/relay")
async def relay_preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@router.get("/relay")
async def relay_get(http: RelayHttpDep, allowed: RelayHostsDep, url: Optional[str] = Query(None)) -> Response:
    async def send(target: str) -> httpx.Response:
        return await http.get(target, headers={"Accept": "application/json"})

    return await _relay(url, allowed, send)


@router.post("/relay")
async def relay_post(
    request: Request, http: RelayHttpDep, allowed: RelayHostsDep, url: Optional[str] = Query(None)
) -> Response:
    raw = await request.body()
    try:
        body = await request.json() if raw else None
    except ValueError:
        return _error(400, {"error": "Request body is not valid JSON"})

    async def send(target: str) -> httpx.Response:
        return await http.post(target, json=body, headers={"Content-Type": "application/json"})

    return await _relay(url, allowed, send)
