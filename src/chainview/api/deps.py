from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from chainview.adapters.registry import AdapterRegistry
from chainview.config import Settings
from chainview.container import Container
from chainview.infra.http.rate_limited_client import RateLimitedClient


@inject
def get_settings(settings: Settings = Depends(Provide[Container.settings])) -> Settings:
    return settings


@inject
def get_registry(registry: AdapterRegistry = Depends(Provide[Container.registry])) -> AdapterRegistry:
    return registry


@inject
def get_relay_http(http_client: RateLimitedClient = Depends(Provide[Container.relay_http_client])) -> RateLimitedClient:
    return http_client


@inject
def get_relay_hosts(hosts: frozenset[str] = Depends(Provide[Container.relay_hosts])) -> frozenset[str]:
    return hosts
