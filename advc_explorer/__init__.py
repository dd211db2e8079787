"""
AdventureCoin Explorer Engine

Read-side derivation engine for the AdventureCoin block explorer.
Builds block, transaction, address, mempool and mining views from a flat
transaction log, network history snapshots and live node RPC data.
"""

__version__ = "1.0.0"
__author__ = "AdventureCoin Explorer Team"
__description__ = "Read-side view builder for the AdventureCoin block explorer"

from advc_explorer.core.explorer import BlockExplorer
from advc_explorer.core.rpc_client import NodeRPCClient, NodeRPCError
from advc_explorer.core.price_cache import PriceCache
from advc_explorer.database.manager import DatabaseManager
from advc_explorer.models.config import ExplorerConfig

__all__ = [
    "BlockExplorer",
    "NodeRPCClient",
    "NodeRPCError",
    "PriceCache",
    "DatabaseManager",
    "ExplorerConfig",
]
