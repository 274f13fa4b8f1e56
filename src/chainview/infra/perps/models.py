"""Wire shapes of the perpetuals venue APIs."""

from pydantic import BaseModel, Field


class HyperliquidFill(BaseModel):
    coin: str
    px: str = "0"
    sz: str = "0"
    side: str = ""
    time: int  # unix millis
    dir: str | None = None
    closed_pnl: str | None = Field(default=None, alias="closedPnl")
    fee: str = "0"
    fee_token: str | None = Field(default=None, alias="feeToken")
    tid: int
    oid: int | None = None
    hash: str = ""

    model_config = {"populate_by_name": True}


class HyperliquidFundingDelta(BaseModel):
    coin: str
    funding_rate: str = Field(default="0", alias="fundingRate")
    szi: str = "0"
    usdc: str

    model_config = {"populate_by_name": True}


class HyperliquidFunding(BaseModel):
    time: int
    hash: str = ""
    delta: HyperliquidFundingDelta


class DydxFill(BaseModel):
    id: str
    side: str = ""
    liquidity: str = ""
    type: str = ""
    market: str
    market_type: str = Field(alias="marketType")
    price: str = "0"
    size: str = "0"
    fee: str = "0"
    created_at: str = Field(alias="createdAt")
    created_at_height: str = Field(default="", alias="createdAtHeight")
    transaction_hash: str | None = Field(default=None, alias="transactionHash")
    realized_pnl: str | None = Field(default=None, alias="realizedPnl")

    model_config = {"populate_by_name": True}


class DydxFillsPage(BaseModel):
    fills: list[DydxFill] = []


class DydxFundingPayment(BaseModel):
    market: str
    payment: str
    rate: str = "0"
    position_size: str = Field(default="0", alias="positionSize")
    price: str = "0"
    effective_at: str = Field(alias="effectiveAt")
    effective_at_height: str = Field(default="", alias="effectiveAtHeight")

    model_config = {"populate_by_name": True}


class DydxFundingPage(BaseModel):
    funding_payments: list[DydxFundingPayment] = Field(default=[], alias="fundingPayments")

    model_config = {"populate_by_name": True}


class GmxTransactionRef(BaseModel):
    hash: str
    timestamp: int  # unix seconds
    block_number: int = Field(default=0, alias="blockNumber")

    model_config = {"populate_by_name": True}


class GmxTradeAction(BaseModel):
    id: str
    event_name: str = Field(alias="eventName")
    account: str = ""
    market_address: str = Field(default="", alias="marketAddress")
    collateral_token_address: str | None = Field(default=None, alias="collateralTokenAddress")
    size_delta_usd: str | None = Field(default=None, alias="sizeDeltaUsd")
    base_pnl_usd: str | None = Field(default=None, alias="basePnlUsd")
    price_impact_usd: str | None = Field(default=None, alias="priceImpactUsd")
    transaction: GmxTransactionRef

    model_config = {"populate_by_name": True}


class GmxTradeActionsData(BaseModel):
    trade_actions: list[GmxTradeAction] = Field(default=[], alias="tradeActions")

    model_config = {"populate_by_name": True}


class GmxGraphQLResponse(BaseModel):
    data: GmxTradeActionsData | None = None
    errors: list[dict] | None = None
