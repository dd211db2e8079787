"""Transaction detail resolution and confirmed transaction listings."""

from typing import Any, Dict, List, Optional, Tuple
import structlog

from advc_explorer.core.fallback import SOURCE_ERRORS
from advc_explorer.core.rpc_client import NodeRPCClient, NodeRPCError
from advc_explorer.database.manager import DatabaseManager
from advc_explorer.database.models import MempoolTransaction, TransactionRecord
from advc_explorer.models.config import ExplorerConfig
from advc_explorer.models.explorer import COINBASE_MARKER, Pagination, TransactionDetail
from advc_explorer.utils.units import to_smallest_unit

logger = structlog.get_logger(__name__)

UNKNOWN_INPUT = "unknown"


def output_address(output: Dict[str, Any]) -> Optional[str]:
    """First address paid by a decoded output, if it pays one."""
    script = output.get("scriptPubKey") or {}
    addresses = script.get("addresses") or []
    if addresses:
        return addresses[0]
    return script.get("address")


def parse_outputs(raw_tx: Dict[str, Any]) -> Tuple[List[Dict[str, Any]], int]:
    """Addressed outputs of a decoded transaction and their total in smallest units."""
    vout = []
    total = 0
    for output in raw_tx.get("vout") or []:
        address = output_address(output)
        if address is None:
            continue
        amount = to_smallest_unit(output.get("value") or 0)
        vout.append({"addresses": address, "amount": amount})
        total += amount
    return vout, total


def coinbase_input() -> Dict[str, Any]:
    return {"addresses": COINBASE_MARKER, "amount": 0}


def detail_from_record(record: TransactionRecord) -> TransactionDetail:
    vout = list(record.vout or [])
    return TransactionDetail(
        txid=record.txid,
        timestamp=record.timestamp,
        vin=list(record.vin or []),
        vout=vout,
        total=sum(int(output.get("amount") or 0) for output in vout),
        blockhash=record.blockhash,
        blockindex=record.blockindex,
        is_pending=False
    )


class TransactionResolver:
    """Resolves a transaction from confirmed storage, then the mempool."""

    def __init__(self, config: ExplorerConfig, db_manager: DatabaseManager, rpc_client: NodeRPCClient):
        self.config = config
        self.db_manager = db_manager
        self.rpc_client = rpc_client
        self.logger = logger.bind(component="transaction_resolver")

    def get_transaction(self, txid: str) -> Optional[TransactionDetail]:
        """Confirmed record, else an enriched pending entry, else None."""
        try:
            record = self.db_manager.get_transaction(txid)
            if record is not None:
                return detail_from_record(record)
            pending = self.db_manager.get_mempool_transaction(txid)
        except SOURCE_ERRORS as e:
            self.logger.warning("Failed to load transaction", txid=txid, error=str(e))
            return None

        if pending is None:
            self.logger.debug("Transaction not found", txid=txid)
            return None

        return self.resolve_pending(pending)

    def resolve_pending(self, pending: MempoolTransaction) -> TransactionDetail:
        """Enrich a mempool entry from the node, chasing each spent output."""
        bare = TransactionDetail(txid=pending.txid, timestamp=pending.time, is_pending=True)

        try:
            raw_tx = self.rpc_client.get_raw_transaction(pending.txid)
        except NodeRPCError as e:
            self.logger.warning("Pending transaction lookup failed", txid=pending.txid, error=str(e))
            return bare

        if not raw_tx:
            return bare

        vin = []
        for tx_input in raw_tx.get("vin") or []:
            resolved = self.resolve_input(tx_input)
            if resolved is not None:
                vin.append(resolved)

        try:
            vout, total = parse_outputs(raw_tx)
        except (ValueError, ArithmeticError) as e:
            self.logger.warning("Unreadable pending outputs", txid=pending.txid, error=str(e))
            return bare

        return TransactionDetail(
            txid=raw_tx.get("txid") or pending.txid,
            timestamp=pending.time,
            vin=vin,
            vout=vout,
            total=total,
            is_pending=True
        )

    def resolve_input(self, tx_input: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Address and amount of the output an input spends.

        Returns an ``unknown`` placeholder when the previous output cannot be
        looked up, and None for inputs that neither mint nor spend.
        """
        if tx_input.get("coinbase"):
            return coinbase_input()

        prev_txid = tx_input.get("txid")
        if not prev_txid:
            return None

        unknown = {"addresses": UNKNOWN_INPUT, "amount": 0}

        try:
            prev_tx = self.rpc_client.get_raw_transaction(prev_txid)
        except NodeRPCError as e:
            self.logger.warning("Previous transaction lookup failed", txid=prev_txid, error=str(e))
            return unknown

        outputs = (prev_tx or {}).get("vout") or []
        index = tx_input.get("vout")
        if not isinstance(index, int) or not 0 <= index < len(outputs):
            self.logger.warning("Previous output missing", txid=prev_txid, vout=index)
            return unknown

        spent = outputs[index]
        address = output_address(spent)
        if address is None:
            return None
        try:
            amount = to_smallest_unit(spent.get("value") or 0)
        except (ValueError, ArithmeticError) as e:
            self.logger.warning("Unreadable previous output amount", txid=prev_txid, vout=index, error=str(e))
            return unknown
        return {"addresses": address, "amount": amount}

    def recent_transactions(self, limit: int = 10) -> List[TransactionDetail]:
        transactions, _ = self.list_transactions(1, limit)
        return transactions

    def list_transactions(self, page: int = 1, limit: int = 20) -> Tuple[List[TransactionDetail], Pagination]:
        """Confirmed transactions, newest first."""
        page, limit = Pagination.normalize(page, limit, self.config.max_page_size)

        try:
            total_count = self.db_manager.count_transactions()
            records = self.db_manager.transactions_page(Pagination.offset(page, limit), limit)
        except SOURCE_ERRORS as e:
            self.logger.warning("Failed to list transactions", page=page, error=str(e))
            return [], Pagination.build(page, limit, 0)

        return [detail_from_record(record) for record in records], Pagination.build(page, limit, total_count)

    def transactions_by_block_hash(self, block_hash: str) -> List[TransactionDetail]:
        try:
            records = self.db_manager.transactions_by_block_hash(block_hash)
        except SOURCE_ERRORS as e:
            self.logger.warning("Failed to load block transactions", hash=block_hash, error=str(e))
            return []
        return [detail_from_record(record) for record in records]
