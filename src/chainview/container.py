from dependency_injector import containers, providers

from chainview.adapters.registry import build_registry, relay_allowed_hosts
from chainview.config import Settings
from chainview.infra.http.rate_limited_client import RateLimitedClient
from chainview.infra.http.relay_client import RelayClient


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(modules=["chainview.api.deps"])

    settings = providers.Singleton(Settings)

    http_client = providers.Singleton(
        RateLimitedClient,
        rate_per_second=settings.provided.http_rate_per_second,
        timeout=settings.provided.http_timeout,
    )

    relay_client = providers.Singleton(
        RelayClient,
        http_client=http_client,
        relay_url=settings.provided.relay_url,
    )

    registry = providers.Singleton(
        build_registry,
        http_client=http_client,
        relay=relay_client,
        settings=settings,
    )

    # Upstream calls made by the relay endpoint itself; redirects are re-checked against the allow-list
    relay_http_client = providers.Singleton(
        RateLimitedClient,
        rate_per_second=settings.provided.http_rate_per_second,
        timeout=settings.provided.http_timeout,
        follow_redirects=False,
    )

    relay_hosts = providers.Singleton(
        relay_allowed_hosts,
        extra_hosts=settings.provided.relay_extra_hosts,
    )
