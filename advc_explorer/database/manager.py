"""Database management and read queries."""

from typing import List, Optional
from sqlalchemy import create_engine, text, func, distinct, desc, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
import structlog

from advc_explorer.models.config import ExplorerConfig
from advc_explorer.database.models import (
    Base, TransactionRecord, NetworkHistory, CoinStats, MempoolTransaction,
    MempoolStatsRecord, AddressTx, AddressRecord, BlockRecord, PeerInfo
)

logger = structlog.get_logger(__name__)


class DatabaseManager:
    """Read-only query surface over the explorer collections.

    Query errors are raised as ``SQLAlchemyError``; recovering from them is
    left to the view components.
    """

    def __init__(self, config: ExplorerConfig, engine: Optional[Engine] = None):
        self.config = config
        self.logger = logger.bind(component="database_manager")

        if engine is None:
            engine = create_engine(
                config.database_url,
                pool_size=config.db_pool_size,
                max_overflow=config.db_max_overflow,
                pool_pre_ping=True,
                echo=False
            )
        self.engine = engine

        self.SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine
        )

        self.logger.info("Database manager initialized",
                        dialect=self.engine.dialect.name)

    def create_tables(self):
        """Create all tables (development and test databases)."""
        Base.metadata.create_all(bind=self.engine)
        self.logger.info("Database tables created")

    def get_session(self) -> Session:
        """Get a database session."""
        return self.SessionLocal()

    def test_connection(self) -> bool:
        """Test database connection."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            self.logger.info("Database connection successful")
            return True
        except Exception as e:
            self.logger.error("Database connection failed", error=str(e))
            return False

    # Transaction log
    def count_blocks(self) -> int:
        """Count distinct block hashes in the transaction log."""
        with self.get_session() as session:
            return session.query(func.count(distinct(TransactionRecord.blockhash))).scalar() or 0

    def block_hashes_page(self, skip: int, limit: int) -> List[str]:
        """Block hashes ordered by height descending."""
        height = func.min(TransactionRecord.blockindex).label('height')
        with self.get_session() as session:
            rows = (
                session.query(TransactionRecord.blockhash, height)
                .group_by(TransactionRecord.blockhash)
                .order_by(desc('height'), TransactionRecord.blockhash)
                .offset(skip)
                .limit(limit)
                .all()
            )
            return [row.blockhash for row in rows]

    def transactions_for_blocks(self, block_hashes: List[str]) -> List[TransactionRecord]:
        """All transactions of the given blocks, in ingestion order."""
        if not block_hashes:
            return []
        with self.get_session() as session:
            return (
                session.query(TransactionRecord)
                .filter(TransactionRecord.blockhash.in_(block_hashes))
                .order_by(TransactionRecord.id)
                .all()
            )

    def transactions_by_block_hash(self, block_hash: str) -> List[TransactionRecord]:
        return self.transactions_for_blocks([block_hash])

    def transaction_at_height(self, height: int, latest: bool = True) -> Optional[TransactionRecord]:
        """One transaction at a height, newest or earliest by timestamp."""
        order = desc(TransactionRecord.timestamp) if latest else TransactionRecord.timestamp
        with self.get_session() as session:
            return (
                session.query(TransactionRecord)
                .filter_by(blockindex=height)
                .order_by(order, TransactionRecord.id)
                .first()
            )

    def get_transaction(self, txid: str) -> Optional[TransactionRecord]:
        with self.get_session() as session:
            return session.query(TransactionRecord).filter_by(txid=txid).first()

    def count_transactions(self) -> int:
        with self.get_session() as session:
            return session.query(func.count(TransactionRecord.id)).scalar() or 0

    def transactions_page(self, skip: int, limit: int) -> List[TransactionRecord]:
        """Transactions ordered by timestamp descending."""
        with self.get_session() as session:
            return (
                session.query(TransactionRecord)
                .order_by(desc(TransactionRecord.timestamp), desc(TransactionRecord.id))
                .offset(skip)
                .limit(limit)
                .all()
            )

    def latest_height(self) -> Optional[int]:
        with self.get_session() as session:
            return session.query(func.max(TransactionRecord.blockindex)).scalar()

    # Network history
    def latest_network_history(self) -> Optional[NetworkHistory]:
        with self.get_session() as session:
            return (
                session.query(NetworkHistory)
                .order_by(desc(NetworkHistory.blockindex), desc(NetworkHistory.timestamp))
                .first()
            )

    def network_history_at_or_below(self, height: int) -> Optional[NetworkHistory]:
        """Most recent snapshot taken at or before a height."""
        with self.get_session() as session:
            return (
                session.query(NetworkHistory)
                .filter(NetworkHistory.blockindex <= height)
                .order_by(desc(NetworkHistory.blockindex))
                .first()
            )

    def recent_network_history(self, limit: int, by_timestamp: bool = False) -> List[NetworkHistory]:
        """Most recent snapshots, newest first."""
        key = NetworkHistory.timestamp if by_timestamp else NetworkHistory.blockindex
        with self.get_session() as session:
            return (
                session.query(NetworkHistory)
                .order_by(desc(key))
                .limit(limit)
                .all()
            )

    def get_coin_stats(self) -> Optional[CoinStats]:
        with self.get_session() as session:
            return session.query(CoinStats).first()

    # Mempool
    def mempool_transactions(self) -> List[MempoolTransaction]:
        with self.get_session() as session:
            return (
                session.query(MempoolTransaction)
                .order_by(desc(MempoolTransaction.time))
                .all()
            )

    def get_mempool_transaction(self, txid: str) -> Optional[MempoolTransaction]:
        with self.get_session() as session:
            return session.query(MempoolTransaction).filter_by(txid=txid).first()

    def get_mempool_stats(self) -> Optional[MempoolStatsRecord]:
        with self.get_session() as session:
            return session.query(MempoolStatsRecord).first()

    # Addresses
    def get_address(self, address: str) -> Optional[AddressRecord]:
        with self.get_session() as session:
            return session.query(AddressRecord).filter_by(a_id=address).first()

    def count_address_transactions(self, address: str) -> int:
        with self.get_session() as session:
            return session.query(func.count(AddressTx.id)).filter_by(a_id=address).scalar() or 0

    def address_transactions_page(self, address: str, skip: int, limit: int) -> List[AddressTx]:
        """Index records of an address ordered by block height descending."""
        with self.get_session() as session:
            return (
                session.query(AddressTx)
                .filter_by(a_id=address)
                .order_by(desc(AddressTx.blockindex), desc(AddressTx.id))
                .offset(skip)
                .limit(limit)
                .all()
            )

    def rich_list(self, limit: int) -> List[AddressRecord]:
        with self.get_session() as session:
            return (
                session.query(AddressRecord)
                .order_by(desc(AddressRecord.balance))
                .limit(limit)
                .all()
            )

    # Optional block store
    def has_block_store(self) -> bool:
        return inspect(self.engine).has_table(BlockRecord.__tablename__)

    def block_by_height(self, height: int) -> Optional[BlockRecord]:
        if not self.has_block_store():
            return None
        with self.get_session() as session:
            return session.query(BlockRecord).filter_by(height=height).first()

    def recent_blocks(self, limit: int) -> List[BlockRecord]:
        if not self.has_block_store():
            return []
        with self.get_session() as session:
            return (
                session.query(BlockRecord)
                .order_by(desc(BlockRecord.height))
                .limit(limit)
                .all()
            )

    # Peers
    def peer_info(self) -> List[PeerInfo]:
        with self.get_session() as session:
            return session.query(PeerInfo).order_by(desc(PeerInfo.lastsend)).all()

    def close(self):
        """Close database connections."""
        self.engine.dispose()
        self.logger.info("Database connections closed")
