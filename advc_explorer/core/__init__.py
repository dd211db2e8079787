"""Core view components."""

from advc_explorer.core.rpc_client import NodeRPCClient, NodeRPCError
from advc_explorer.core.price_cache import PriceCache, PriceFeedError
from advc_explorer.core.blocks import BlockAggregator
from advc_explorer.core.transactions import TransactionResolver
from advc_explorer.core.mempool import MempoolPipeline
from advc_explorer.core.addresses import AddressView
from advc_explorer.core.network import NetworkStatsCalculator
from advc_explorer.core.difficulty import DifficultyHistoryBuilder
from advc_explorer.core.explorer import BlockExplorer

__all__ = [
    "NodeRPCClient",
    "NodeRPCError",
    "PriceCache",
    "PriceFeedError",
    "BlockAggregator",
    "TransactionResolver",
    "MempoolPipeline",
    "AddressView",
    "NetworkStatsCalculator",
    "DifficultyHistoryBuilder",
    "BlockExplorer",
]
