"""Wire shapes of the Cosmos SDK LCD ``/cosmos/tx/v1beta1/txs`` search endpoint."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class Coin(BaseModel):
    denom: str = ""
    amount: str = "0"


class CosmosMessage(BaseModel):
    type_url: str = Field(default="", alias="@type")
    from_address: str | None = None
    to_address: str | None = None
    amount: list[Coin] = []  # MsgSend carries a list, MsgDelegate a single Coin
    sender: str | None = None
    receiver: str | None = None
    token: Coin | None = None
    token_in: Coin | None = None
    source_channel: str | None = None
    delegator_address: str | None = None
    validator_address: str | None = None
    validator_dst_address: str | None = None
    contract: str | None = None

    model_config = {"populate_by_name": True}

    @field_validator("amount", mode="before")
    @classmethod
    def _coin_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, dict):
            return [value]
        return value


class TxBody(BaseModel):
    messages: list[CosmosMessage] = []
    memo: str = ""


class Fee(BaseModel):
    amount: list[Coin] = []


class AuthInfo(BaseModel):
    fee: Fee = Fee()


class CosmosTx(BaseModel):
    body: TxBody = TxBody()
    auth_info: AuthInfo = AuthInfo()


class EventAttribute(BaseModel):
    key: str = ""
    value: str | None = None


class TxEvent(BaseModel):
    type: str = ""
    attributes: list[EventAttribute] = []


class TxLog(BaseModel):
    events: list[TxEvent] = []


class TxResponse(BaseModel):
    txhash: str
    height: str = ""
    timestamp: str
    code: int = 0
    tx: CosmosTx = CosmosTx()
    logs: list[TxLog] = []
    events: list[TxEvent] = []

    def tx_events(self) -> list[TxEvent]:
        """The top-level event list when present, else the legacy per-message logs.

        SDK 0.46/0.47 nodes repeat every log event in the top-level list, so the
        two are never combined.
        """
        if self.events:
            return self.events
        return [event for log in self.logs for event in log.events]


class Pagination(BaseModel):
    total: str | None = None
    next_key: str | None = None


class TxSearchPage(BaseModel):
    tx_responses: list[TxResponse] = []
    pagination: Pagination | None = None
