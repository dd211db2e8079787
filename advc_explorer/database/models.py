"""SQLAlchemy models for the explorer collections.

The tables are populated by the external chain ingester; the engine only
reads them.
"""

from sqlalchemy import (
    Column, Integer, BigInteger, String, Float, JSON, Index
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class TransactionRecord(Base):
    """One confirmed transaction.

    ``vin`` and ``vout`` hold ordered lists of ``{"addresses": str, "amount": int}``
    with amounts in smallest units. A coinbase transaction carries the
    ``"coinbase"`` marker as the address of its first input.
    """
    __tablename__ = 'txes'

    id = Column(Integer, primary_key=True, autoincrement=True)
    txid = Column(String(64), nullable=False, unique=True)
    blockhash = Column(String(64), nullable=False)
    blockindex = Column(Integer, nullable=False)
    timestamp = Column(BigInteger, nullable=False)
    vin = Column(JSON, nullable=False, default=list)
    vout = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        Index('idx_txes_blockhash', 'blockhash'),
        Index('idx_txes_blockindex', 'blockindex'),
        Index('idx_txes_timestamp', 'timestamp'),
    )


class NetworkHistory(Base):
    """Point-in-time network metrics written at block cadence."""
    __tablename__ = 'networkhistories'

    id = Column(Integer, primary_key=True, autoincrement=True)
    blockindex = Column(Integer, nullable=False)
    timestamp = Column(BigInteger, nullable=False)
    difficulty_pow = Column(Float, default=0)
    difficulty_pos = Column(Float, default=0)
    nethash = Column(Float, default=0)

    __table_args__ = (
        Index('idx_networkhistories_blockindex', 'blockindex'),
        Index('idx_networkhistories_timestamp', 'timestamp'),
    )

    def to_dict(self):
        return {
            "blockindex": self.blockindex,
            "timestamp": self.timestamp,
            "difficulty_pow": self.difficulty_pow,
            "difficulty_pos": self.difficulty_pos,
            "nethash": self.nethash,
        }


class CoinStats(Base):
    """Aggregate chain counters, a single row."""
    __tablename__ = 'coinstats'

    id = Column(Integer, primary_key=True, autoincrement=True)
    coin = Column(String(32), default='AdventureCoin')
    count = Column(Integer, default=0)
    supply = Column(Float, default=0)
    txes = Column(Integer, default=0)
    connections = Column(Integer, default=0)


class MempoolTransaction(Base):
    """Stored mempool snapshot entry."""
    __tablename__ = 'mempool'

    txid = Column(String(64), primary_key=True)
    size = Column(Integer, default=0)
    time = Column(BigInteger, default=0)
    fee = Column(Float, default=0)


class MempoolStatsRecord(Base):
    __tablename__ = 'mempoolstats'

    id = Column(Integer, primary_key=True, autoincrement=True)
    size = Column(Integer, default=0)
    bytes = Column(Integer, default=0)
    usage = Column(Integer, default=0)


class AddressTx(Base):
    """One (address, transaction) relation."""
    __tablename__ = 'addresstxes'

    id = Column(Integer, primary_key=True, autoincrement=True)
    a_id = Column(String(64), nullable=False)
    txid = Column(String(64), nullable=False)
    blockindex = Column(Integer, nullable=False)
    amount = Column(BigInteger, default=0)

    __table_args__ = (
        Index('idx_addresstxes_address_block', 'a_id', 'blockindex'),
    )


class AddressRecord(Base):
    """Address balance summary, amounts in smallest units."""
    __tablename__ = 'addresses'

    a_id = Column(String(64), primary_key=True)
    received = Column(BigInteger, default=0)
    sent = Column(BigInteger, default=0)
    balance = Column(BigInteger, default=0)

    __table_args__ = (
        Index('idx_addresses_balance_desc', 'balance'),
    )

    def to_dict(self):
        return {
            "a_id": self.a_id,
            "received": self.received,
            "sent": self.sent,
            "balance": self.balance,
        }


class BlockRecord(Base):
    """Optional dedicated block store."""
    __tablename__ = 'blocks'

    height = Column(Integer, primary_key=True)
    hash = Column(String(64), nullable=False, unique=True)
    timestamp = Column(BigInteger)
    difficulty = Column(Float, default=0)


class PeerInfo(Base):
    __tablename__ = 'peerinfo'

    id = Column(Integer, primary_key=True, autoincrement=True)
    address = Column(String(128), nullable=False)
    version = Column(Integer)
    subver = Column(String(128))
    protocol = Column(String(32))
    country = Column(String(64))
    lastsend = Column(BigInteger, default=0)

    def to_dict(self):
        return {
            "address": self.address,
            "version": self.version,
            "subver": self.subver,
            "protocol": self.protocol,
            "country": self.country,
            "lastsend": self.lastsend,
        }
