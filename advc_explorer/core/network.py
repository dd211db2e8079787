"""Network statistics, mining statistics and the halving schedule."""

from dataclasses import dataclass
from typing import Any, List, Optional
import structlog

from advc_explorer.core.fallback import first_available
from advc_explorer.core.rpc_client import NodeRPCClient
from advc_explorer.database.manager import DatabaseManager
from advc_explorer.database.models import CoinStats, NetworkHistory
from advc_explorer.models.config import ExplorerConfig
from advc_explorer.models.explorer import (
    HalvingCheckpoint, MiningStats, NetworkStats, SpecialBlock
)

logger = structlog.get_logger(__name__)

# AdventureCoin chain parameters
INITIAL_REWARD = 300
HALVING_INTERVAL = 300_000
BLOCK_TIME_SECONDS = 180
MAX_SUPPLY = 180_000_000
RETARGET_INTERVAL = 3
SECONDS_PER_DAY = 86_400

# Blocks averaged by the node's hash rate estimate
HASHRATE_WINDOW = 120

# (halving, height, reward, cumulative supply, target date)
HALVING_CHECKPOINTS = [
    (0, 0, 300, 0, "Apr 2025"),
    (1, 300_000, 150, 135_000_000, "Jan 2027"),
    (2, 600_000, 75, 157_500_000, "Oct 2028"),
    (3, 900_000, 37.5, 168_750_000, "Jun 2030"),
    (4, 1_200_000, 18.75, 174_375_000, "Mar 2032"),
    (5, 1_500_000, 9.375, 177_187_500, "Nov 2033"),
    (6, 1_800_000, 4.6875, 178_593_750, "Aug 2035"),
    (7, 2_100_000, 2.34375, 179_296_875, "Apr 2037"),
    (8, 2_400_000, 1.171875, 179_296_875, "Jan 2039"),
    (9, 2_700_000, 0.5859375, 179_912_109, "Oct 2040"),
    (10, 3_000_000, 0.29296875, 179_912_109, "May 2042"),
]

# Pre-mine / relaunch distribution blocks
SPECIAL_BLOCK_HEIGHTS = (1, 2, 3)
SPECIAL_BLOCK_DESCRIPTION = "Relaunch distribution"


@dataclass
class HalvingProjection:
    cycle: int
    current_reward: float
    next_halving_height: int
    blocks_until_halving: int
    days_until_halving: float


def project_halving(height: int) -> HalvingProjection:
    """Reward and next-halving projection at a chain height."""
    cycle = height // HALVING_INTERVAL
    next_halving_height = (cycle + 1) * HALVING_INTERVAL
    blocks_until_halving = next_halving_height - height
    return HalvingProjection(
        cycle=cycle,
        current_reward=INITIAL_REWARD / 2 ** cycle,
        next_halving_height=next_halving_height,
        blocks_until_halving=blocks_until_halving,
        days_until_halving=blocks_until_halving * BLOCK_TIME_SECONDS / SECONDS_PER_DAY
    )


def checkpoint_status(halving: int, checkpoint_height: int, height: int) -> str:
    cycle = height // HALVING_INTERVAL
    if halving == cycle:
        return "active"
    return "past" if height >= checkpoint_height else "future"


def halving_schedule(height: int) -> List[HalvingCheckpoint]:
    """The fixed checkpoint table annotated relative to ``height``."""
    return [
        HalvingCheckpoint(
            halving=halving,
            height=checkpoint_height,
            reward=reward,
            supply=supply,
            date=date,
            status=checkpoint_status(halving, checkpoint_height, height)
        )
        for halving, checkpoint_height, reward, supply, date in HALVING_CHECKPOINTS
    ]


def pow_difficulty(value: Any) -> Optional[float]:
    """Proof-of-work difficulty from a ``getmininginfo`` difficulty field."""
    if isinstance(value, dict):
        value = value.get("proof-of-work")
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value:
        return float(value)
    return None


class NetworkStatsCalculator:
    """Combines stored chain counters with live node metrics."""

    def __init__(self, config: ExplorerConfig, db_manager: DatabaseManager, rpc_client: NodeRPCClient):
        self.config = config
        self.db_manager = db_manager
        self.rpc_client = rpc_client
        self.logger = logger.bind(component="network_stats")

    def coin_stats(self) -> Optional[CoinStats]:
        return first_available(("coinstats", self.db_manager.get_coin_stats))

    def latest_history(self) -> Optional[NetworkHistory]:
        return first_available(("networkhistories", self.db_manager.latest_network_history))

    def get_network_stats(self) -> NetworkStats:
        """Stored counters; all zero when the counters are unavailable."""
        stats = self.coin_stats()
        if stats is None:
            self.logger.warning("No coin stats available, using zero values")
            return NetworkStats()

        history = self.latest_history()
        return NetworkStats(
            count=stats.count or 0,
            supply=stats.supply or 0,
            txes=stats.txes or 0,
            connections=stats.connections or 0,
            nethash=((history.nethash or 0) / 1000) if history else 0,
            difficulty_pow=(history.difficulty_pow or 0) if history else 0,
            difficulty_pos=(history.difficulty_pos or 0) if history else 0
        )

    def live_difficulty(self) -> Optional[float]:
        def from_node():
            info = self.rpc_client.get_mining_info() or {}
            return pow_difficulty(info.get("difficulty"))

        return first_available(("rpc:getmininginfo", from_node))

    def live_hash_rate(self) -> Optional[float]:
        """Node hash rate estimate in H/s."""
        def from_node():
            hashps = self.rpc_client.get_network_hash_ps(HASHRATE_WINDOW, -1)
            return float(hashps) if hashps else None

        return first_available(("rpc:getnetworkhashps", from_node))

    def special_blocks(self) -> List[SpecialBlock]:
        """Distribution blocks, each looked up on its own."""
        blocks = []
        for height in SPECIAL_BLOCK_HEIGHTS:
            tx = first_available(
                (f"txes:height={height}", lambda h=height: self.db_manager.transaction_at_height(h, latest=False))
            )
            blocks.append(SpecialBlock(
                height=height,
                reward=0,
                description=SPECIAL_BLOCK_DESCRIPTION,
                hash=tx.blockhash if tx else None
            ))
        return blocks

    def get_mining_stats(self) -> MiningStats:
        stats = self.coin_stats()
        history = self.latest_history()

        height = (stats.count or 0) if stats else 0
        difficulty = self.live_difficulty()
        if difficulty is None:
            difficulty = (history.difficulty_pow or 0) if history else 0

        hashps = self.live_hash_rate()
        if hashps is None:
            hashps = (history.nethash or 0) if history else 0

        projection = project_halving(height)

        return MiningStats(
            blocks=height,
            difficulty=difficulty,
            networkhashps=hashps / 1000,
            current_reward=projection.current_reward,
            next_halving_height=projection.next_halving_height,
            blocks_until_halving=projection.blocks_until_halving,
            days_until_halving=projection.days_until_halving,
            halving_schedule=halving_schedule(height),
            max_supply=MAX_SUPPLY,
            current_supply=(stats.supply or 0) if stats else 0,
            block_time=BLOCK_TIME_SECONDS,
            retarget_interval=RETARGET_INTERVAL,
            special_blocks=self.special_blocks()
        )
