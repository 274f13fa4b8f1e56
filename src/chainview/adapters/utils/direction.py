from chainview.domain.enums import Direction


def resolve_direction(sender: str, recipient: str, address: str) -> Direction:
    """Direction of a single-hop transfer, compared case-insensitively.

    ``UNKNOWN`` when the queried address is neither party.
    """
    sender, recipient, address = sender.lower(), recipient.lower(), address.lower()
    if sender and sender == recipient:
        return Direction.SELF
    if recipient and recipient == address:
        return Direction.IN
    if sender and sender == address:
        return Direction.OUT
    return Direction.UNKNOWN
