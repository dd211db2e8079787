"""Explorer facade wiring the view components together."""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
import structlog

from advc_explorer.core.addresses import AddressView
from advc_explorer.core.blocks import BlockAggregator
from advc_explorer.core.difficulty import DifficultyHistoryBuilder
from advc_explorer.core.fallback import first_available
from advc_explorer.core.mempool import MempoolPipeline
from advc_explorer.core.network import MAX_SUPPLY, NetworkStatsCalculator
from advc_explorer.core.price_cache import PriceCache, calculate_usd_value
from advc_explorer.core.rpc_client import NodeRPCClient
from advc_explorer.core.transactions import TransactionResolver
from advc_explorer.database.manager import DatabaseManager
from advc_explorer.models.config import ExplorerConfig
from advc_explorer.models.explorer import NetworkStats, NetworkSummary, SummaryField

logger = structlog.get_logger(__name__)


def format_number(value: float, max_decimals: int = 3) -> str:
    """Thousands-separated number without trailing fractional zeros."""
    text = f"{value:,.{max_decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class BlockExplorer:
    """Entry point for every explorer view.

    Components share one storage manager and one RPC client. Each public
    view returns a well-typed value even when its sources are unavailable.
    """

    def __init__(self, config: ExplorerConfig,
                 db_manager: Optional[DatabaseManager] = None,
                 rpc_client: Optional[NodeRPCClient] = None,
                 price_cache: Optional[PriceCache] = None):
        self.config = config
        self.logger = logger.bind(component="block_explorer")

        self.db_manager = db_manager or DatabaseManager(config)
        self.rpc_client = rpc_client or NodeRPCClient(config)
        self.price_cache = price_cache or PriceCache(config)

        self.blocks = BlockAggregator(config, self.db_manager)
        self.transactions = TransactionResolver(config, self.db_manager, self.rpc_client)
        self.mempool = MempoolPipeline(config, self.db_manager, self.rpc_client)
        self.addresses = AddressView(config, self.db_manager)
        self.network = NetworkStatsCalculator(config, self.db_manager, self.rpc_client)
        self.difficulty = DifficultyHistoryBuilder(config, self.db_manager)

        self.logger.info("Block explorer initialized")

    def initialize(self) -> bool:
        """Check that storage is reachable; the node is optional."""
        if not self.db_manager.test_connection():
            self.logger.error("Failed to connect to database")
            return False

        if not self.rpc_client.test_connection():
            self.logger.warning("Node RPC unreachable, live views will use stored data")

        return True

    def get_price(self) -> str:
        return self.price_cache.get_price()

    def _stats_and_price(self) -> Tuple[NetworkStats, str]:
        """Stored network stats and the price quote, fetched concurrently."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            stats_future = executor.submit(self.network.get_network_stats)
            price_future = executor.submit(self.price_cache.get_price)
            return stats_future.result(), price_future.result()

    def get_market_cap(self) -> str:
        stats, price = self._stats_and_price()
        return calculate_usd_value(stats.supply, price)

    def get_summary(self) -> NetworkSummary:
        stats, price = self._stats_and_price()

        price_value = float(price)
        market_cap = stats.supply * price_value
        supply_percentage = stats.supply / MAX_SUPPLY * 100

        hash_rate = self.network.live_hash_rate()
        if hash_rate is None:
            hash_rate = stats.nethash * 1000

        return NetworkSummary(
            block_height=SummaryField(stats.count, f"{stats.count:,}"),
            current_supply=SummaryField(stats.supply, format_number(stats.supply)),
            difficulty=SummaryField(stats.difficulty_pow, format_number(stats.difficulty_pow, 4)),
            market_cap=SummaryField(market_cap, f"${format_number(market_cap, 2)}"),
            max_supply=SummaryField(MAX_SUPPLY, f"{MAX_SUPPLY:,}"),
            network_hash_rate=SummaryField(hash_rate, f"{format_number(hash_rate / 1000, 4)} KH/s"),
            peers=SummaryField(stats.connections, f"{stats.connections:,}"),
            price=SummaryField(price_value, f"${price}"),
            supply_percentage=SummaryField(supply_percentage, f"{supply_percentage:.2f}%"),
            timestamp=datetime.now(timezone.utc)
        )

    def get_peer_info(self) -> List[Dict[str, Any]]:
        """Stored peer table, else the node's live peer list."""
        return first_available(
            ("peerinfo", lambda: [peer.to_dict() for peer in self.db_manager.peer_info()]),
            ("rpc:getpeerinfo", self.rpc_client.get_peer_info),
            default=[]
        )

    def close(self):
        self.price_cache.close()
        self.rpc_client.close()
        self.db_manager.close()
