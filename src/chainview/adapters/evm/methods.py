"""Transaction-type classification tables for EVM explorers."""

from chainview.infra.blockchain.evm.models import BlockscoutTx, EtherscanTx

# 4-byte selector → type
SELECTOR_TYPES: dict[str, str] = {
    "0xa9059cbb": "token_transfer",  # transfer(address,uint256)
    "0x23b872dd": "token_transfer",  # transferFrom(address,address,uint256)
    "0x095ea7b3": "approve",
    "0x38ed1739": "swap",  # swapExactTokensForTokens
    "0x7ff36ab5": "swap",  # swapExactETHForTokens
    "0x18cbafe5": "swap",  # swapExactTokensForETH
}

# Checked in order: "unstake" must win over "stake"
METHOD_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("swap", "swap"),
    ("unstake", "unstake"),
    ("stake", "stake"),
    ("claim", "claim"),
    ("approve", "approve"),
)


def type_from_method_name(name: str | None) -> str | None:
    lowered = (name or "").lower()
    if not lowered:
        return None
    for keyword, tx_type in METHOD_KEYWORDS:
        if keyword in lowered:
            return tx_type
    return None


def classify_blockscout(tx: BlockscoutTx) -> str:
    types = tx.transaction_types
    if types == ["coin_transfer"]:
        return "transfer"
    if "token_transfer" in types:
        return "token_transfer"
    by_name = type_from_method_name(tx.method)
    if by_name:
        return by_name
    if "contract_call" in types or tx.method:
        return "contract"
    return "transfer"


def classify_input(input_data: str | None, function_name: str | None = None) -> str:
    """Type from raw calldata: plain value transfer, known selector, method keyword, else contract."""
    if not input_data or input_data == "0x":
        return "transfer"
    selector = input_data[:10].lower()
    if selector in SELECTOR_TYPES:
        return SELECTOR_TYPES[selector]
    return type_from_method_name(function_name) or "contract"


def classify_etherscan(tx: EtherscanTx) -> str:
    return classify_input(tx.input, tx.function_name)
