"""Mempool snapshot merging and value enrichment."""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any, Dict, List, Tuple
import structlog

from advc_explorer.core.fallback import SOURCE_ERRORS, first_available
from advc_explorer.core.rpc_client import NodeRPCClient, NodeRPCError
from advc_explorer.core.transactions import coinbase_input, parse_outputs
from advc_explorer.database.manager import DatabaseManager
from advc_explorer.models.config import ExplorerConfig
from advc_explorer.models.explorer import MempoolEntry, MempoolSnapshot, MempoolStats
from advc_explorer.utils.units import from_smallest_unit

logger = structlog.get_logger(__name__)

# Placeholder for spent outputs, which the mempool view does not chase
GENERIC_INPUT = "input"


def summarize_inputs(raw_tx: Dict[str, Any]) -> List[Dict[str, Any]]:
    vin = []
    for tx_input in raw_tx.get("vin") or []:
        if tx_input.get("coinbase"):
            vin.append(coinbase_input())
        elif tx_input.get("txid"):
            vin.append({"addresses": GENERIC_INPUT, "amount": 0})
    return vin


def entry_from_rpc(txid: str, info: Dict[str, Any], now: int) -> MempoolEntry:
    fee = info.get("fee")
    if fee is None:
        fee = (info.get("fees") or {}).get("base", 0)
    return MempoolEntry(
        txid=txid,
        size=info.get("size") or info.get("vsize") or 0,
        time=info.get("time") or now,
        fee=fee or 0
    )


class MempoolPipeline:
    """Stored snapshot, replaced by the live node view, then enriched.

    Only the first ``mempool_enrich_limit`` entries (newest first) are
    enriched and returned; the stats still describe the whole pool.
    """

    def __init__(self, config: ExplorerConfig, db_manager: DatabaseManager, rpc_client: NodeRPCClient):
        self.config = config
        self.db_manager = db_manager
        self.rpc_client = rpc_client
        self.logger = logger.bind(component="mempool_pipeline")

    def get_mempool(self) -> MempoolSnapshot:
        entries, stats = self.stored_snapshot()

        live_info = first_available(("rpc:getmempoolinfo", self.rpc_client.get_mempool_info))
        if isinstance(live_info, dict):
            stats = MempoolStats(
                size=live_info.get("size") or stats.size,
                bytes=live_info.get("bytes") or stats.bytes,
                usage=live_info.get("usage") or stats.usage
            )

        # An empty live pool keeps the stored snapshot
        live_entries = first_available(("rpc:getrawmempool", self.live_entries))
        if live_entries:
            entries = live_entries

        selected = entries[:self.config.mempool_enrich_limit]
        return MempoolSnapshot(entries=self.enrich_all(selected), stats=stats)

    def stored_snapshot(self) -> Tuple[List[MempoolEntry], MempoolStats]:
        try:
            rows = self.db_manager.mempool_transactions()
            stats_row = self.db_manager.get_mempool_stats()
        except SOURCE_ERRORS as e:
            self.logger.warning("Stored mempool unavailable", error=str(e))
            return [], MempoolStats()

        now = int(time.time())
        entries = [
            MempoolEntry(txid=row.txid, size=row.size or 0, time=row.time or now, fee=row.fee or 0)
            for row in rows
        ]
        stats = MempoolStats(
            size=stats_row.size or 0,
            bytes=stats_row.bytes or 0,
            usage=stats_row.usage or 0
        ) if stats_row else MempoolStats()
        return entries, stats

    def live_entries(self) -> List[MempoolEntry]:
        raw_mempool = self.rpc_client.get_raw_mempool()
        if not isinstance(raw_mempool, dict):
            return []
        now = int(time.time())
        entries = [entry_from_rpc(txid, info or {}, now) for txid, info in raw_mempool.items()]
        entries.sort(key=lambda entry: entry.time, reverse=True)
        return entries

    def enrich_all(self, entries: List[MempoolEntry]) -> List[MempoolEntry]:
        """Enrich entries concurrently, preserving their order."""
        workers = min(self.config.enrichment_workers, len(entries))
        if workers <= 1:
            return [self.enrich(entry) for entry in entries]
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self.enrich, entries))

    def enrich(self, entry: MempoolEntry) -> MempoolEntry:
        """Attach outputs, input markers and totals; zeroed if the lookup fails."""
        zeroed = replace(entry, vin=[], vout=[], total=0, value=from_smallest_unit(0))

        try:
            raw_tx = self.rpc_client.get_raw_transaction(entry.txid)
            if not raw_tx:
                return zeroed
            vout, total = parse_outputs(raw_tx)
        except (NodeRPCError, ValueError, ArithmeticError) as e:
            self.logger.warning("Mempool enrichment failed", txid=entry.txid, error=str(e))
            return zeroed

        return replace(
            entry,
            vin=summarize_inputs(raw_tx),
            vout=vout,
            total=total,
            value=from_smallest_unit(total)
        )
