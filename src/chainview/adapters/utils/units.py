"""Base-unit → display-decimal formatting shared by every adapter family.

All conversions are exact integer/Decimal arithmetic: 18-decimal EVM values
overflow float precision long before they overflow anything else.
"""

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext

DISPLAY_DECIMALS = 8


def format_base_units(raw: str | int | None, decimals: int) -> str:
    """Convert a non-negative integer amount in base units to a display decimal string.

    The fraction is truncated (never rounded) to ``DISPLAY_DECIMALS`` digits and
    trailing zeros are stripped. Malformed, negative or empty input yields ``"0"``.
    """
    if raw is None or isinstance(raw, bool):
        return "0"
    try:
        value = int(str(raw).strip())
    except ValueError:
        return "0"
    if value <= 0 or decimals < 0:
        return "0"

    int_part, frac_part = divmod(value, 10**decimals)
    frac = str(frac_part).rjust(decimals, "0")[:DISPLAY_DECIMALS].rstrip("0") if decimals else ""
    if frac:
        return f"{int_part}.{frac}"
    return str(int_part)


def to_decimal(value: str | int | float | Decimal | None) -> Decimal | None:
    """Parse a venue-reported number; None when absent or unparseable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def truncate_decimals(value: Decimal, places: int = DISPLAY_DECIMALS) -> Decimal:
    """Truncate toward zero to ``places`` fractional digits."""
    with localcontext() as ctx:
        ctx.prec = 80
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_DOWN)


def format_decimal(value: Decimal, places: int = DISPLAY_DECIMALS) -> str:
    """Render a Decimal truncated to ``places`` digits, without exponent or trailing zeros."""
    truncated = truncate_decimals(value, places)
    if truncated == 0:
        return "0"
    text = format(truncated, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def gas_fee_wei(gas_used: str | int | None, gas_price: str | int | None) -> int:
    """``gas_used * gas_price`` in base units; 0 when either is missing or malformed."""
    try:
        return int(gas_used or 0) * int(gas_price or 0)
    except ValueError:
        return 0
