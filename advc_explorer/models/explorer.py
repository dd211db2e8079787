"""Explorer view data models."""

import math
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Dict, Any, Tuple
from dataclasses import dataclass, field

# Sentinel carried by the first input of a reward-issuing transaction
COINBASE_MARKER = "coinbase"


@dataclass
class Pagination:
    """Page position within a counted result set."""
    current_page: int
    total_pages: int
    total_items: int

    @classmethod
    def build(cls, page: int, limit: int, total_items: int) -> "Pagination":
        return cls(
            current_page=page,
            total_pages=math.ceil(total_items / limit) if limit > 0 else 0,
            total_items=total_items
        )

    @staticmethod
    def normalize(page: int, limit: int, max_limit: int) -> Tuple[int, int]:
        """Clamp a requested page to ``page >= 1`` and ``1 <= limit <= max_limit``."""
        return max(1, page), min(max(1, limit), max_limit)

    @staticmethod
    def offset(page: int, limit: int) -> int:
        return (page - 1) * limit

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalItems": self.total_items,
        }


@dataclass
class DerivedBlock:
    """Block summary reconstructed from the transactions sharing a block hash."""
    hash: str
    height: int
    timestamp: int
    tx_count: int
    mined_by: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash": self.hash,
            "height": self.height,
            "timestamp": self.timestamp,
            "txCount": self.tx_count,
            "minedBy": self.mined_by,
        }


@dataclass
class BlockDetail(DerivedBlock):
    """Single block view with chain links and difficulty."""
    previousblockhash: Optional[str] = None
    nextblockhash: Optional[str] = None
    difficulty: float = 0
    merkleroot: str = "Not available in this data model"
    nonce: int = 0
    size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "previousblockhash": self.previousblockhash,
            "nextblockhash": self.nextblockhash,
            "difficulty": self.difficulty,
            "merkleroot": self.merkleroot,
            "nonce": self.nonce,
            "size": self.size,
        })
        return data


@dataclass
class TransactionDetail:
    """Transaction view, confirmed or pending."""
    txid: str
    timestamp: int
    vin: List[Dict[str, Any]] = field(default_factory=list)
    vout: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0
    blockhash: Optional[str] = None
    blockindex: Optional[int] = None
    is_pending: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "txid": self.txid,
            "timestamp": self.timestamp,
            "vin": self.vin,
            "vout": self.vout,
            "total": self.total,
            "blockhash": self.blockhash,
            "blockindex": self.blockindex,
            "isPending": self.is_pending,
        }


@dataclass
class MempoolEntry:
    """Unconfirmed transaction with optional computed totals."""
    txid: str
    size: int
    time: int
    fee: float = 0
    vin: List[Dict[str, Any]] = field(default_factory=list)
    vout: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0
    value: Decimal = Decimal('0')

    def to_dict(self) -> Dict[str, Any]:
        return {
            "txid": self.txid,
            "size": self.size,
            "time": self.time,
            "fee": self.fee,
            "vin": self.vin,
            "vout": self.vout,
            "total": self.total,
            "value": float(self.value),
        }


@dataclass
class MempoolStats:
    size: int = 0
    bytes: int = 0
    usage: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"size": self.size, "bytes": self.bytes, "usage": self.usage}


@dataclass
class MempoolSnapshot:
    entries: List[MempoolEntry] = field(default_factory=list)
    stats: MempoolStats = field(default_factory=MempoolStats)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transactions": [entry.to_dict() for entry in self.entries],
            "stats": self.stats.to_dict(),
        }


@dataclass
class AddressTransaction:
    """Address index record joined with its transaction timestamp."""
    a_id: str
    txid: str
    blockindex: int
    timestamp: int
    amount: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "a_id": self.a_id,
            "txid": self.txid,
            "blockindex": self.blockindex,
            "timestamp": self.timestamp,
            "amount": self.amount,
        }


@dataclass
class NetworkStats:
    """Chain counters joined with the latest network history snapshot."""
    count: int = 0
    supply: float = 0
    txes: int = 0
    connections: int = 0
    nethash: float = 0
    difficulty_pow: float = 0
    difficulty_pos: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "supply": self.supply,
            "txes": self.txes,
            "connections": self.connections,
            "nethash": self.nethash,
            "difficulty_pow": self.difficulty_pow,
            "difficulty_pos": self.difficulty_pos,
        }


@dataclass
class HalvingCheckpoint:
    halving: int
    height: int
    reward: float
    supply: int
    date: str
    status: str = "future"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "halving": self.halving,
            "height": self.height,
            "reward": self.reward,
            "supply": self.supply,
            "date": self.date,
            "status": self.status,
        }


@dataclass
class SpecialBlock:
    height: int
    reward: float
    description: str
    hash: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "height": self.height,
            "reward": self.reward,
            "description": self.description,
            "hash": self.hash,
        }


@dataclass
class MiningStats:
    """Mining view: live difficulty, hash rate and the halving projection."""
    blocks: int
    difficulty: float
    networkhashps: float
    current_reward: float
    next_halving_height: int
    blocks_until_halving: int
    days_until_halving: float
    halving_schedule: List[HalvingCheckpoint]
    max_supply: int
    current_supply: float
    block_time: int
    retarget_interval: int
    special_blocks: List[SpecialBlock]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "blocks": self.blocks,
            "difficulty": self.difficulty,
            "networkhashps": self.networkhashps,
            "currentReward": self.current_reward,
            "nextHalvingHeight": self.next_halving_height,
            "blocksUntilHalving": self.blocks_until_halving,
            "daysUntilHalving": self.days_until_halving,
            "halvingSchedule": [checkpoint.to_dict() for checkpoint in self.halving_schedule],
            "maxSupply": self.max_supply,
            "currentSupply": self.current_supply,
            "blockTime": self.block_time,
            "retargetInterval": self.retarget_interval,
            "specialBlocks": [block.to_dict() for block in self.special_blocks],
        }


@dataclass
class DifficultyPoint:
    block_height: int
    difficulty: float
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "blockHeight": self.block_height,
            "difficulty": self.difficulty,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class PriceCacheEntry:
    """Cached external price quote."""
    price: str
    timestamp: float

    def age(self, now: float) -> float:
        return now - self.timestamp


@dataclass
class SummaryField:
    value: Any
    formatted: str

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "formatted": self.formatted}


@dataclass
class NetworkSummary:
    """Joined network, supply and market view."""
    block_height: SummaryField
    current_supply: SummaryField
    difficulty: SummaryField
    market_cap: SummaryField
    max_supply: SummaryField
    network_hash_rate: SummaryField
    peers: SummaryField
    price: SummaryField
    supply_percentage: SummaryField
    timestamp: datetime
    network: str = "AdventureCoin"
    symbol: str = "ADVC"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "blockHeight": self.block_height.to_dict(),
            "currentSupply": self.current_supply.to_dict(),
            "difficulty": self.difficulty.to_dict(),
            "marketCap": self.market_cap.to_dict(),
            "maxSupply": self.max_supply.to_dict(),
            "networkHashRate": self.network_hash_rate.to_dict(),
            "peers": self.peers.to_dict(),
            "price": self.price.to_dict(),
            "supplyPercentage": self.supply_percentage.to_dict(),
            "timestamp": self.timestamp.isoformat(),
            "network": self.network,
            "symbol": self.symbol,
        }
