"""Pytest configuration and fixtures for explorer tests."""

import pytest
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from advc_explorer.core.explorer import BlockExplorer
from advc_explorer.core.rpc_client import NodeRPCClient
from advc_explorer.core.price_cache import PriceCache
from advc_explorer.database.manager import DatabaseManager
from advc_explorer.database.models import (
    TransactionRecord, NetworkHistory, CoinStats, MempoolTransaction,
    MempoolStatsRecord, AddressTx, AddressRecord, BlockRecord, PeerInfo
)
from advc_explorer.models.config import ExplorerConfig
from advc_explorer.models.explorer import COINBASE_MARKER


# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================

@pytest.fixture
def config():
    """Test configuration fixture."""
    return ExplorerConfig(
        _env_file=None,
        db_url="sqlite://",
        mempool_enrich_limit=20,
        enrichment_workers=1,
        max_page_size=100,
        price_cache_seconds=20 * 60,
        log_level="WARNING",
    )


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

@pytest.fixture
def engine():
    """In-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def db_manager(config, engine):
    manager = DatabaseManager(config, engine=engine)
    manager.create_tables()
    return manager


class Seeder:
    """Writes fixture rows the way the chain ingester would."""

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    def add(self, *rows):
        with self.db_manager.get_session() as session:
            session.add_all(rows)
            session.commit()
        return rows

    def tx(self, txid: str, blockhash: str, blockindex: int, timestamp: int,
           vin: Optional[List[Dict[str, Any]]] = None,
           vout: Optional[List[Dict[str, Any]]] = None) -> TransactionRecord:
        record = TransactionRecord(
            txid=txid,
            blockhash=blockhash,
            blockindex=blockindex,
            timestamp=timestamp,
            vin=vin if vin is not None else [{"addresses": "Asender", "amount": 100}],
            vout=vout if vout is not None else [{"addresses": "Areceiver", "amount": 100}],
        )
        self.add(record)
        return record

    def coinbase(self, txid: str, blockhash: str, blockindex: int, timestamp: int,
                 miner: str = "Aminer", amount: int = 30_000_000_000) -> TransactionRecord:
        return self.tx(
            txid, blockhash, blockindex, timestamp,
            vin=[{"addresses": COINBASE_MARKER, "amount": amount}],
            vout=[{"addresses": miner, "amount": amount}],
        )

    def chain(self, heights, txs_per_block: int = 1, base_time: int = 1_700_000_000):
        """One coinbase per block plus ``txs_per_block - 1`` transfers."""
        for height in heights:
            block_hash = f"block{height}"
            timestamp = base_time + height * 180
            self.coinbase(f"cb{height}", block_hash, height, timestamp, miner=f"Aminer{height}")
            for n in range(1, txs_per_block):
                self.tx(f"tx{height}_{n}", block_hash, height, timestamp)

    def history(self, blockindex: int, timestamp: int, difficulty: float = 1.5,
                nethash: float = 250_000.0) -> NetworkHistory:
        record = NetworkHistory(
            blockindex=blockindex,
            timestamp=timestamp,
            difficulty_pow=difficulty,
            difficulty_pos=0,
            nethash=nethash,
        )
        self.add(record)
        return record

    def coin_stats(self, count: int = 1000, supply: float = 45_000_000.0,
                   txes: int = 2500, connections: int = 8) -> CoinStats:
        record = CoinStats(count=count, supply=supply, txes=txes, connections=connections)
        self.add(record)
        return record

    def mempool(self, txid: str, time: int, size: int = 250, fee: float = 0.0001) -> MempoolTransaction:
        record = MempoolTransaction(txid=txid, time=time, size=size, fee=fee)
        self.add(record)
        return record

    def mempool_stats(self, size: int, bytes: int, usage: int) -> MempoolStatsRecord:
        record = MempoolStatsRecord(size=size, bytes=bytes, usage=usage)
        self.add(record)
        return record

    def address(self, a_id: str, balance: int, received: int = 0, sent: int = 0) -> AddressRecord:
        record = AddressRecord(a_id=a_id, balance=balance, received=received, sent=sent)
        self.add(record)
        return record

    def address_tx(self, a_id: str, txid: str, blockindex: int, amount: int = 0) -> AddressTx:
        record = AddressTx(a_id=a_id, txid=txid, blockindex=blockindex, amount=amount)
        self.add(record)
        return record

    def block(self, height: int, block_hash: str, timestamp: int, difficulty: float) -> BlockRecord:
        record = BlockRecord(height=height, hash=block_hash, timestamp=timestamp, difficulty=difficulty)
        self.add(record)
        return record

    def peer(self, address: str, lastsend: int = 0, subver: str = "/AdventureCoin:1.0.0/") -> PeerInfo:
        record = PeerInfo(address=address, version=70016, subver=subver,
                          protocol="70016", country="Unknown", lastsend=lastsend)
        self.add(record)
        return record


@pytest.fixture
def seed(db_manager):
    return Seeder(db_manager)


# ============================================================================
# NODE AND PRICE FEED FIXTURES
# ============================================================================

def raw_transaction(txid: str, outputs, inputs=None) -> Dict[str, Any]:
    """Decoded transaction as returned by ``getrawtransaction <txid> 1``."""
    return {
        "txid": txid,
        "vin": inputs if inputs is not None else [],
        "vout": [
            {"value": value, "n": n, "scriptPubKey": {"addresses": [address]} if address else {"type": "nulldata"}}
            for n, (address, value) in enumerate(outputs)
        ],
    }


@pytest.fixture
def rpc():
    """Node RPC client stub; every call returns empty results unless configured."""
    client = MagicMock(spec=NodeRPCClient)
    client.get_raw_mempool.return_value = {}
    client.get_mempool_info.return_value = {}
    client.get_mining_info.return_value = {}
    client.get_network_hash_ps.return_value = 0
    client.get_peer_info.return_value = []
    client.get_raw_transaction.return_value = None
    client.test_connection.return_value = True
    return client


@pytest.fixture
def price_cache():
    cache = MagicMock(spec=PriceCache)
    cache.get_price.return_value = "0.010000"
    return cache


@pytest.fixture
def explorer(config, db_manager, rpc, price_cache):
    return BlockExplorer(config, db_manager=db_manager, rpc_client=rpc, price_cache=price_cache)
