"""Difficulty time series for charting."""

from typing import List
import structlog

from advc_explorer.core.fallback import SOURCE_ERRORS, first_available
from advc_explorer.database.manager import DatabaseManager
from advc_explorer.database.models import NetworkHistory
from advc_explorer.models.config import ExplorerConfig
from advc_explorer.models.explorer import DifficultyPoint

logger = structlog.get_logger(__name__)


class DifficultyHistoryBuilder:
    """
    Difficulty per height, ascending.

    Sources in order of preference: network history snapshots, the optional
    block store, then per-height reconstruction from the transaction log.
    """

    def __init__(self, config: ExplorerConfig, db_manager: DatabaseManager):
        self.config = config
        self.db_manager = db_manager
        self.logger = logger.bind(component="difficulty_history")

    def get_difficulty_history(self, limit: int = 50) -> List[DifficultyPoint]:
        limit = min(max(1, limit), self.config.max_page_size)
        return first_available(
            ("networkhistories", lambda: self.from_network_history(limit)),
            ("blocks", lambda: self.from_block_store(limit)),
            ("txes", lambda: self.from_transactions(limit)),
            default=[]
        )

    def from_network_history(self, limit: int) -> List[DifficultyPoint]:
        snapshots = self.db_manager.recent_network_history(limit)
        points = [
            DifficultyPoint(
                block_height=snapshot.blockindex,
                difficulty=snapshot.difficulty_pow or 0,
                timestamp=snapshot.timestamp
            )
            for snapshot in snapshots
        ]
        return sorted(points, key=lambda point: point.block_height)

    def from_block_store(self, limit: int) -> List[DifficultyPoint]:
        blocks = self.db_manager.recent_blocks(limit)
        points = [
            DifficultyPoint(
                block_height=block.height,
                difficulty=block.difficulty or 0,
                timestamp=block.timestamp
            )
            for block in blocks
        ]
        return sorted(points, key=lambda point: point.block_height)

    def from_transactions(self, limit: int) -> List[DifficultyPoint]:
        """Walk back from the latest height; heights without a transaction are skipped."""
        latest_height = self.db_manager.latest_height()
        if latest_height is None:
            return []

        start_height = max(1, latest_height - limit + 1)
        points = []
        for height in range(start_height, latest_height + 1):
            tx = self.db_manager.transaction_at_height(height, latest=False)
            if tx is None:
                continue
            snapshot = self.db_manager.network_history_at_or_below(height)
            points.append(DifficultyPoint(
                block_height=height,
                difficulty=(snapshot.difficulty_pow or 0) if snapshot else 0,
                timestamp=tx.timestamp
            ))
        return points

    def get_network_history(self, limit: int = 30) -> List[NetworkHistory]:
        """Raw snapshots, newest first."""
        limit = min(max(1, limit), self.config.max_page_size)
        try:
            return self.db_manager.recent_network_history(limit, by_timestamp=True)
        except SOURCE_ERRORS as e:
            self.logger.warning("Failed to load network history", error=str(e))
            return []
