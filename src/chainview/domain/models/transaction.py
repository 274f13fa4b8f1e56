"""Canonical transaction record and the adapter fetch envelope."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from chainview.domain.enums import Direction, PerpsTag, TxStatus
from chainview.domain.timestamps import to_utc_datetime


class CanonicalTransaction(BaseModel):
    """One normalized record. Built once per fetch and never mutated."""

    chain_id: str
    address: str  # queried wallet, echoed for context
    timestamp: datetime  # aware UTC
    hash: str = Field(min_length=1)  # unique per result set; composite "<hash>-<idx>" when one tx yields several records
    type: str
    direction: Direction
    counterparty: str = ""
    asset: str
    amount: str = "0"  # unsigned display decimal
    fee: str = "0"
    fee_asset: str = ""
    status: TxStatus = TxStatus.SUCCESS
    block: str = ""
    explorer_url: str = ""
    notes: str = ""
    tag: PerpsTag | None = None
    pnl: str = "0"  # settlement-token decimal, signed
    payment_token: str | None = None
    raw_details: dict[str, Any] | None = Field(default=None, exclude=True, repr=False)

    model_config = {"frozen": True}

    @field_validator("timestamp", mode="before")
    @classmethod
    def _normalize_timestamp(cls, value: Any) -> datetime:
        return to_utc_datetime(value)

    @field_validator("amount", "fee")
    @classmethod
    def _unsigned(cls, value: str) -> str:
        if value.startswith("-"):
            raise ValueError("amount and fee are unsigned; direction carries polarity")
        return value


class FetchOptions(BaseModel):
    cursor: str | None = None
    limit: int | None = None


class FetchResult(BaseModel):
    records: list[CanonicalTransaction] = []
    next_cursor: str | None = None
    has_more: bool = False
    total_count: int | None = None
