"""Wire shapes of Blockscout v2 and Etherscan-style account APIs."""

from pydantic import AliasChoices, BaseModel, Field


class BlockscoutAddressRef(BaseModel):
    hash: str = ""


class BlockscoutFee(BaseModel):
    value: str = "0"


class BlockscoutTx(BaseModel):
    hash: str
    block_number: int | None = Field(default=None, validation_alias=AliasChoices("block_number", "block"))
    timestamp: str
    from_: BlockscoutAddressRef | None = Field(default=None, alias="from")
    to: BlockscoutAddressRef | None = None
    value: str = "0"
    fee: BlockscoutFee | None = None
    gas_price: str | None = None
    gas_used: str | None = None
    status: str | None = None
    method: str | None = None
    transaction_types: list[str] = []


class BlockscoutPageParams(BaseModel):
    block_number: int
    index: int
    items_count: int


class BlockscoutTxPage(BaseModel):
    items: list[BlockscoutTx] = []
    next_page_params: BlockscoutPageParams | None = None


class EtherscanTx(BaseModel):
    hash: str
    block_number: str = Field(default="", alias="blockNumber")
    time_stamp: str = Field(alias="timeStamp")
    from_: str = Field(default="", alias="from")
    to: str | None = ""
    value: str = "0"
    gas_price: str = Field(default="0", alias="gasPrice")
    gas_used: str = Field(default="0", alias="gasUsed")
    is_error: str = Field(default="0", alias="isError")
    function_name: str = Field(default="", alias="functionName")
    method_id: str = Field(default="", alias="methodId")
    input: str = ""

    model_config = {"populate_by_name": True}


class EtherscanEnvelope(BaseModel):
    status: str | None = None
    message: str = ""
    result: list[dict] | str | None = None
