from pydantic import BaseModel, Field


class SubscanTransfer(BaseModel):
    hash: str
    block_num: int = 0
    block_timestamp: int
    from_: str = Field(default="", alias="from")
    to: str = ""
    amount: str = "0"
    amount_v2: str | None = None  # base units; preferred over amount when present
    fee: str = "0"
    success: bool = True
    asset_symbol: str | None = None
    module: str | None = None
    event_idx: int | None = None
    extrinsic_index: str | None = None

    model_config = {"populate_by_name": True}


class SubscanTransferData(BaseModel):
    transfers: list[SubscanTransfer] | None = None
    count: int = 0


class SubscanEnvelope(BaseModel):
    code: int
    message: str = ""
    data: SubscanTransferData | None = None
