"""Classification of the first message of a Cosmos tx into record fields."""

from dataclasses import dataclass

from chainview.adapters.cosmos.denoms import denom_decimals, format_denom
from chainview.adapters.utils.direction import resolve_direction
from chainview.adapters.utils.units import format_base_units
from chainview.domain.enums import Direction
from chainview.domain.models.chain import CosmosChainConfig
from chainview.infra.blockchain.cosmos.models import Coin, CosmosMessage, TxEvent

REWARD_EVENT = "withdraw_rewards"


@dataclass(frozen=True)
class ParsedMessage:
    type: str
    direction: Direction
    counterparty: str
    asset: str
    amount: str


def short_type(type_url: str) -> str:
    """``/cosmos.bank.v1beta1.MsgSend`` -> ``MsgSend``."""
    return type_url.rsplit(".", 1)[-1] if type_url else ""


def parse_message(
    msg: CosmosMessage,
    address: str,
    config: CosmosChainConfig,
    events: list[TxEvent] | None = None,
) -> ParsedMessage:
    name = short_type(msg.type_url)
    addr = address.lower()

    def coin_fields(coin: Coin | None) -> tuple[str, str]:
        if coin is None:
            return config.symbol, "0"
        return format_denom(coin.denom, config), format_base_units(coin.amount, denom_decimals(coin.denom, config))

    first_coin = msg.amount[0] if msg.amount else None

    if "MsgSend" in name:
        sender = (msg.from_address or "").lower()
        recipient = (msg.to_address or "").lower()
        direction = resolve_direction(sender, recipient, addr)
        asset, amount = coin_fields(first_coin)
        counterparty = msg.from_address if direction == Direction.IN else msg.to_address
        return ParsedMessage("transfer", direction, counterparty or "", asset, amount)

    if "MsgTransfer" in name:
        sender = (msg.sender or "").lower()
        receiver = (msg.receiver or "").lower()
        if sender == addr:
            direction, counterparty = Direction.OUT, msg.receiver or ""
        elif receiver == addr:
            direction, counterparty = Direction.IN, msg.sender or ""
        else:
            direction, counterparty = Direction.UNKNOWN, ""
        asset, amount = coin_fields(msg.token)
        return ParsedMessage("ibc_transfer", direction, counterparty, asset, amount)

    if "MsgSwap" in name:
        asset, amount = coin_fields(msg.token_in)
        return ParsedMessage("swap", Direction.OUT, f"{config.name} DEX", asset, amount)

    if "MsgUndelegate" in name:
        asset, amount = coin_fields(first_coin)
        return ParsedMessage("unstake", Direction.IN, msg.validator_address or "Validator", asset, amount)

    if "MsgBeginRedelegate" in name:
        asset, amount = coin_fields(first_coin)
        return ParsedMessage("redelegate", Direction.SELF, msg.validator_dst_address or "Validator", asset, amount)

    if "MsgDelegate" in name:
        asset, amount = coin_fields(first_coin)
        return ParsedMessage("stake", Direction.OUT, msg.validator_address or "Validator", asset, amount)

    if "MsgWithdrawDelegatorReward" in name or "MsgWithdrawRewards" in name:
        return ParsedMessage(
            "claim", Direction.IN, "Staking Rewards", config.symbol, _reward_amount(events or [], config)
        )

    if "MsgJoinPool" in name or "MsgJoinSwapExternAmountIn" in name:
        return ParsedMessage("add_liquidity", Direction.OUT, f"{config.name} Pool", "LP", "0")

    if "MsgExitPool" in name or "MsgExitSwapShareAmountIn" in name:
        return ParsedMessage("remove_liquidity", Direction.IN, f"{config.name} Pool", "LP", "0")

    if "MsgVote" in name:
        return ParsedMessage("vote", Direction.SELF, "Governance", config.symbol, "0")

    if "MsgExecuteContract" in name or "MsgInstantiateContract" in name:
        direction = Direction.OUT if (msg.sender or "").lower() == addr else Direction.UNKNOWN
        asset, amount = coin_fields(first_coin)
        return ParsedMessage("contract", direction, msg.contract or "Smart Contract", asset, amount)

    fallback = name.replace("Msg", "", 1).lower() if name else "unknown"
    return ParsedMessage(fallback or "unknown", Direction.UNKNOWN, "", config.symbol, "0")


def _reward_amount(events: list[TxEvent], config: CosmosChainConfig) -> str:
    """Sum native-denom rewards from ``withdraw_rewards`` events, e.g. ``"1234uosmo,5ibc/..."``."""
    total = 0
    for event in events:
        if event.type != REWARD_EVENT:
            continue
        for attr in event.attributes:
            if attr.key != "amount" or not attr.value:
                continue
            for part in attr.value.split(","):
                if part.endswith(config.denom):
                    digits = part[: -len(config.denom)]
                    if digits.isdigit():
                        total += int(digits)
    return format_base_units(total, config.decimals)
