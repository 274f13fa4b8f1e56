"""Starknet indexers (Voyager, StarkScan), both reached through the CORS relay."""

import logging
from typing import Any

from chainview.infra.blockchain.starknet.models import StarkscanTx, StarkscanTxPage, VoyagerTx, VoyagerTxPage
from chainview.infra.http.relay_client import RelayClient
from chainview.infra.http.responses import decode_json, parse_payload

logger = logging.getLogger(__name__)

VOYAGER_API_URL = "https://api.voyager.online/beta"
STARKSCAN_API_URL = "https://api.starkscan.co/api/v0"


class VoyagerClient:
    def __init__(self, relay: RelayClient, api_base: str = VOYAGER_API_URL) -> None:
        self._relay = relay
        self._api_base = api_base.rstrip("/")

    async def get_txns(self, address: str, page: int, limit: int) -> list[tuple[VoyagerTx, dict[str, Any]]]:
        resp = await self._relay.get(f"{self._api_base}/txns", params={"to": address, "ps": limit, "p": page})
        data = decode_json(resp, "Voyager")
        parsed = parse_payload(VoyagerTxPage, data, "Voyager")
        return list(zip(parsed.items, data.get("items") or []))


class StarkscanClient:
    def __init__(self, relay: RelayClient, api_base: str = STARKSCAN_API_URL) -> None:
        self._relay = relay
        self._api_base = api_base.rstrip("/")

    async def get_transactions(self, address: str, page: int, limit: int) -> list[tuple[StarkscanTx, dict[str, Any]]]:
        params = {"contract_address": address, "limit": limit, "page": page}
        resp = await self._relay.get(f"{self._api_base}/transactions", params=params)
        data = decode_json(resp, "StarkScan")
        parsed = parse_payload(StarkscanTxPage, data, "StarkScan")
        return list(zip(parsed.data, data.get("data") or []))
