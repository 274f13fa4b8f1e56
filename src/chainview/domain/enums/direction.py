from enum import Enum


class Direction(str, Enum):
    """Polarity of a record relative to the queried address. Amounts are unsigned; this carries the sign."""

    IN = "in"
    OUT = "out"
    SELF = "self"
    UNKNOWN = "unknown"  # source gave no attributable counterparty; never coerce to OUT
