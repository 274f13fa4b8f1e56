from pydantic import BaseModel, Field


class VoyagerTx(BaseModel):
    hash: str
    block_number: int | None = None
    timestamp: int  # unix seconds
    type: str = ""
    status: str = ""
    contract_address: str | None = None
    entry_point_selector: str | None = None
    actual_fee: str | None = None

    model_config = {"coerce_numbers_to_str": True}


class VoyagerTxPage(BaseModel):
    items: list[VoyagerTx] = []
    last_page: int | None = Field(default=None, alias="lastPage")

    model_config = {"populate_by_name": True}


class StarkscanTx(BaseModel):
    transaction_hash: str
    timestamp: int
    block_number: int | None = None
    transaction_status: str = ""
    contract_address: str | None = None
    actual_fee: str | None = None

    model_config = {"coerce_numbers_to_str": True}


class StarkscanTxPage(BaseModel):
    data: list[StarkscanTx] = []
