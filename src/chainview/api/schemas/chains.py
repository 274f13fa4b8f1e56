from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from chainview.domain.enums import Direction, PerpsTag, TxStatus


class ChainResponse(BaseModel):
    id: str
    name: str
    symbol: str
    explorer_url: str
    address_placeholder: str
    is_perps: bool

    model_config = {"from_attributes": True}


class ChainList(BaseModel):
    chains: list[ChainResponse]


class TransactionResponse(BaseModel):
    chain_id: str
    address: str
    timestamp: datetime
    hash: str
    type: str
    direction: Direction
    counterparty: str
    asset: str
    amount: str
    fee: str
    fee_asset: str
    status: TxStatus
    block: str
    explorer_url: str
    notes: str
    tag: Optional[PerpsTag] = None
    pnl: str
    payment_token: Optional[str] = None

    model_config = {"from_attributes": True}


class TransactionPage(BaseModel):
    chain_id: str
    address: str
    records: list[TransactionResponse]
    next_cursor: Optional[str] = None
    has_more: bool
    total_count: Optional[int] = None
