from chainview.domain.enums.api_type import ExplorerApiType
from chainview.domain.enums.direction import Direction
from chainview.domain.enums.perps_tag import PerpsTag
from chainview.domain.enums.status import TxStatus

__all__ = [
    "Direction",
    "ExplorerApiType",
    "PerpsTag",
    "TxStatus",
]
