"""Storage access."""

from advc_explorer.database.manager import DatabaseManager
from advc_explorer.database.models import (
    Base, TransactionRecord, NetworkHistory, CoinStats, MempoolTransaction,
    MempoolStatsRecord, AddressTx, AddressRecord, BlockRecord, PeerInfo
)

__all__ = [
    "DatabaseManager",
    "Base",
    "TransactionRecord",
    "NetworkHistory",
    "CoinStats",
    "MempoolTransaction",
    "MempoolStatsRecord",
    "AddressTx",
    "AddressRecord",
    "BlockRecord",
    "PeerInfo",
]
