from enum import Enum


class PerpsTag(str, Enum):
    """Derivatives bookkeeping tags understood by the Awaken CSV importer."""

    OPEN_POSITION = "open_position"
    CLOSE_POSITION = "close_position"
    FUNDING_PAYMENT = "funding_payment"
