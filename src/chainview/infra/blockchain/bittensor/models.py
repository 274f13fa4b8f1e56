from pydantic import BaseModel, Field


class TaostatsAccountRef(BaseModel):
    ss58: str = ""
    hex: str | None = None


class TaostatsTransfer(BaseModel):
    id: str | None = None
    transaction_hash: str | None = None
    extrinsic_id: str | None = None
    block_number: int | None = None
    timestamp: str
    from_: TaostatsAccountRef | None = Field(default=None, alias="from")
    to: TaostatsAccountRef | None = None
    amount: str = "0"
    fee: str | None = None

    model_config = {"populate_by_name": True, "coerce_numbers_to_str": True}


class TaostatsPagination(BaseModel):
    current_page: int | None = None
    total_items: int | None = None
    next_page: int | None = None


class TaostatsTransferPage(BaseModel):
    data: list[TaostatsTransfer] = []
    pagination: TaostatsPagination = TaostatsPagination()
