"""Data models and configuration."""

from advc_explorer.models.config import ExplorerConfig
from advc_explorer.models.explorer import (
    COINBASE_MARKER,
    Pagination,
    DerivedBlock,
    BlockDetail,
    TransactionDetail,
    MempoolEntry,
    MempoolSnapshot,
    AddressTransaction,
    NetworkStats,
    MiningStats,
    DifficultyPoint,
)
from advc_explorer.models.known_addresses import KnownAddress, get_known_address

__all__ = [
    "ExplorerConfig",
    "COINBASE_MARKER",
    "Pagination",
    "DerivedBlock",
    "BlockDetail",
    "TransactionDetail",
    "MempoolEntry",
    "MempoolSnapshot",
    "AddressTransaction",
    "NetworkStats",
    "MiningStats",
    "DifficultyPoint",
    "KnownAddress",
    "get_known_address",
]
