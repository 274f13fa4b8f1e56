from chainview.domain.models.chain import CosmosChainConfig


def format_denom(denom: str, config: CosmosChainConfig) -> str:
    """Display symbol for a bank denom.

    IBC vouchers are shown abbreviated (``IBC/27394F...``); the origin asset is
    not resolved.
    """
    if denom == config.denom:
        return config.symbol
    if denom.startswith("ibc/"):
        return f"IBC/{denom[4:10]}..."
    if denom.startswith("gamm/pool/"):
        return f"LP-{denom.split('/')[2]}"
    if denom.startswith("factory/"):
        return denom.rsplit("/", 1)[-1].upper()
    if denom.startswith("u") and len(denom) > 1:
        return denom[1:].upper()
    return denom.upper()


def denom_decimals(denom: str, config: CosmosChainConfig) -> int:
    """Base-unit exponent for a bank denom.

    Only the chain's own denom uses the configured decimals. Pool shares and
    ``a``-prefixed (atto) denoms are 18; micro denoms, IBC vouchers and
    everything else default to 6.
    """
    if denom == config.denom:
        return config.decimals
    if denom.startswith("gamm/"):
        return 18
    if denom.startswith("ibc/") or denom.startswith("u"):
        return 6
    if denom.startswith("a") and len(denom) > 1:
        return 18
    return 6
