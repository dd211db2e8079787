"""Block reconstruction from the transaction log.

Storage holds no block table of its own: a block is the set of transaction
records sharing a ``blockhash``. The derivation below is a pure function of
that set; the aggregator only decides which sets to load.
"""

from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import structlog

from advc_explorer.core.fallback import SOURCE_ERRORS, first_available
from advc_explorer.database.manager import DatabaseManager
from advc_explorer.database.models import TransactionRecord
from advc_explorer.models.config import ExplorerConfig
from advc_explorer.models.explorer import (
    COINBASE_MARKER, BlockDetail, DerivedBlock, Pagination
)

logger = structlog.get_logger(__name__)


def is_coinbase(transaction: TransactionRecord) -> bool:
    """True if the first input carries the coinbase marker."""
    vin = transaction.vin or []
    return bool(vin) and vin[0].get("addresses") == COINBASE_MARKER


def find_miner(transactions: Iterable[TransactionRecord]) -> Optional[str]:
    """First output address of the first coinbase transaction, if any."""
    for tx in transactions:
        if is_coinbase(tx):
            vout = tx.vout or []
            return vout[0].get("addresses") if vout else None
    return None


def group_by_blockhash(transactions: Iterable[TransactionRecord]) -> Dict[str, List[TransactionRecord]]:
    groups: Dict[str, List[TransactionRecord]] = OrderedDict()
    for tx in transactions:
        groups.setdefault(tx.blockhash, []).append(tx)
    return groups


def derive_block(block_hash: str, transactions: Sequence[TransactionRecord]) -> DerivedBlock:
    """Summarize one block from its member transactions."""
    return DerivedBlock(
        hash=block_hash,
        height=min(tx.blockindex for tx in transactions),
        timestamp=transactions[0].timestamp,
        tx_count=len(transactions),
        mined_by=find_miner(transactions)
    )


class BlockAggregator:
    """Block listings, block detail and chain navigation."""

    def __init__(self, config: ExplorerConfig, db_manager: DatabaseManager):
        self.config = config
        self.db_manager = db_manager
        self.logger = logger.bind(component="block_aggregator")

    def list_blocks(self, page: int = 1, limit: int = 20) -> Tuple[List[DerivedBlock], Pagination]:
        """One page of derived blocks, newest first."""
        page, limit = Pagination.normalize(page, limit, self.config.max_page_size)
        skip = Pagination.offset(page, limit)

        try:
            # Counted once per listing so the page bounds and totals agree
            total_count = self.db_manager.count_blocks()
            pagination = Pagination.build(page, limit, total_count)

            if skip >= total_count:
                return [], pagination

            block_hashes = self.db_manager.block_hashes_page(skip, limit)
            groups = group_by_blockhash(self.db_manager.transactions_for_blocks(block_hashes))
        except SOURCE_ERRORS as e:
            self.logger.warning("Failed to list blocks", page=page, limit=limit, error=str(e))
            return [], Pagination.build(page, limit, 0)

        blocks = [derive_block(block_hash, groups[block_hash])
                  for block_hash in block_hashes if block_hash in groups]
        return blocks, pagination

    def latest_blocks(self, limit: int = 10) -> List[DerivedBlock]:
        blocks, _ = self.list_blocks(1, limit)
        return blocks

    def get_block(self, block_hash: str) -> Optional[BlockDetail]:
        """Block detail, or None when unknown or storage is unavailable."""
        try:
            transactions = self.db_manager.transactions_by_block_hash(block_hash)
            if not transactions:
                self.logger.debug("Block not found", hash=block_hash)
                return None

            summary = derive_block(block_hash, transactions)
            previous = self.db_manager.transaction_at_height(summary.height - 1, latest=True)
            history = self.db_manager.network_history_at_or_below(summary.height)
        except SOURCE_ERRORS as e:
            self.logger.warning("Failed to load block", hash=block_hash, error=str(e))
            return None

        return BlockDetail(
            hash=summary.hash,
            height=summary.height,
            timestamp=summary.timestamp,
            tx_count=summary.tx_count,
            mined_by=summary.mined_by,
            previousblockhash=previous.blockhash if previous else None,
            nextblockhash=self.next_block_hash(summary.height),
            difficulty=(history.difficulty_pow or 0) if history else 0
        )

    def next_block_hash(self, height: int) -> Optional[str]:
        """Hash of the block after ``height``; None at the chain tip."""
        next_height = height + 1

        def from_block_store():
            block = self.db_manager.block_by_height(next_height)
            return block.hash if block else None

        def from_transactions():
            tx = self.db_manager.transaction_at_height(next_height, latest=False)
            return tx.blockhash if tx else None

        return first_available(
            ("blocks", from_block_store),
            ("txes", from_transactions),
        )
