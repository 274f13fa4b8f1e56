from pydantic import AliasChoices, BaseModel, Field


class RoninTx(BaseModel):
    hash: str = Field(validation_alias=AliasChoices("transactionHash", "hash"))
    from_: str = Field(default="", alias="from")
    to: str | None = None
    value: str = "0"
    gas_used: str | None = Field(default=None, alias="gasUsed")
    gas: str | None = None
    gas_price: str = Field(default="0", alias="gasPrice")
    input: str = ""
    block_time: int = Field(alias="blockTime")  # unix seconds
    block_number: int | None = Field(default=None, alias="blockNumber")
    status: int = 1

    model_config = {"populate_by_name": True, "coerce_numbers_to_str": True}


class RoninPaging(BaseModel):
    total: int = 0


class RoninTxResult(BaseModel):
    items: list[RoninTx] = []
    paging: RoninPaging = RoninPaging()


class RoninTxPage(BaseModel):
    result: RoninTxResult = RoninTxResult()
