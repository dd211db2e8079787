"""Unit tests for the mempool pipeline."""

import pytest
from decimal import Decimal

from advc_explorer.core.mempool import GENERIC_INPUT, MempoolPipeline, entry_from_rpc
from advc_explorer.core.rpc_client import NodeRPCError
from advc_explorer.models.explorer import COINBASE_MARKER
from tests.conftest import raw_transaction


class TestMempoolPipeline:
    """Stored snapshot, live replacement and enrichment."""

    @pytest.fixture
    def pipeline(self, config, db_manager, rpc):
        return MempoolPipeline(config, db_manager, rpc)

    def test_value_is_total_in_coins(self, pipeline, seed, rpc):
        seed.mempool("m1", time=100)
        rpc.get_raw_transaction.return_value = raw_transaction("m1", [("Aa", 2.0), ("Ab", 3.0)])

        snapshot = pipeline.get_mempool()

        entry = snapshot.entries[0]
        assert entry.vout == [
            {"addresses": "Aa", "amount": 200_000_000},
            {"addresses": "Ab", "amount": 300_000_000},
        ]
        assert entry.total == 500_000_000
        assert entry.value == Decimal("5")

    def test_enrichment_is_idempotent(self, pipeline, seed, rpc):
        seed.mempool("m1", time=100)
        rpc.get_raw_transaction.return_value = raw_transaction(
            "m1", [("Aa", 1.0)], inputs=[{"txid": "prev", "vout": 0}]
        )

        first = pipeline.enrich_all(pipeline.stored_snapshot()[0])
        second = pipeline.enrich_all(first)

        assert first == second
        assert first[0].vin == [{"addresses": GENERIC_INPUT, "amount": 0}]

    def test_coinbase_input_marked(self, pipeline, seed, rpc):
        seed.mempool("m1", time=100)
        rpc.get_raw_transaction.return_value = raw_transaction(
            "m1", [("Aa", 1.0)], inputs=[{"coinbase": "03abcd"}]
        )

        entry = pipeline.get_mempool().entries[0]

        assert entry.vin == [{"addresses": COINBASE_MARKER, "amount": 0}]

    def test_stored_snapshot_when_node_empty(self, pipeline, seed, rpc):
        seed.mempool("m1", time=100)
        seed.mempool("m2", time=200)
        seed.mempool_stats(size=2, bytes=500, usage=1200)

        snapshot = pipeline.get_mempool()

        assert [entry.txid for entry in snapshot.entries] == ["m2", "m1"]
        assert snapshot.stats.size == 2
        assert snapshot.stats.bytes == 500

    def test_live_entries_replace_stored(self, pipeline, seed, rpc):
        seed.mempool("stored", time=100)
        rpc.get_raw_mempool.return_value = {
            "old": {"size": 200, "time": 300, "fee": 0.001},
            "new": {"vsize": 150, "time": 400, "fees": {"base": 0.002}},
        }

        snapshot = pipeline.get_mempool()

        assert [entry.txid for entry in snapshot.entries] == ["new", "old"]
        assert snapshot.entries[0].size == 150
        assert snapshot.entries[0].fee == 0.002

    def test_node_failure_keeps_stored(self, pipeline, seed, rpc):
        seed.mempool("stored", time=100)
        rpc.get_raw_mempool.side_effect = NodeRPCError("down")
        rpc.get_mempool_info.side_effect = NodeRPCError("down")

        snapshot = pipeline.get_mempool()

        assert [entry.txid for entry in snapshot.entries] == ["stored"]

    def test_live_stats_override_per_field(self, pipeline, seed, rpc):
        seed.mempool_stats(size=2, bytes=500, usage=1200)
        rpc.get_mempool_info.return_value = {"size": 7, "bytes": 0, "usage": 9000}

        stats = pipeline.get_mempool().stats

        assert stats.size == 7
        assert stats.bytes == 500
        assert stats.usage == 9000

    def test_stats_and_entries_attempted_independently(self, pipeline, rpc):
        rpc.get_mempool_info.side_effect = NodeRPCError("down")
        rpc.get_raw_mempool.return_value = {"live": {"size": 100, "time": 5, "fee": 0}}

        snapshot = pipeline.get_mempool()

        assert [entry.txid for entry in snapshot.entries] == ["live"]

    def test_failed_enrichment_zeroes_entry(self, pipeline, seed, rpc):
        seed.mempool("m1", time=100, size=321)
        rpc.get_raw_transaction.side_effect = NodeRPCError("No such transaction", code=-5)

        entry = pipeline.get_mempool().entries[0]

        assert entry.txid == "m1"
        assert entry.size == 321
        assert entry.vin == []
        assert entry.vout == []
        assert entry.total == 0
        assert entry.value == Decimal("0")

    def test_entries_capped(self, pipeline, rpc):
        rpc.get_raw_mempool.return_value = {
            f"tx{n:02d}": {"size": 100, "time": 1000 + n, "fee": 0} for n in range(30)
        }
        rpc.get_mempool_info.return_value = {"size": 30, "bytes": 3000, "usage": 6000}

        snapshot = pipeline.get_mempool()

        assert len(snapshot.entries) == 20
        assert snapshot.entries[0].txid == "tx29"
        assert snapshot.stats.size == 30
        assert rpc.get_raw_transaction.call_count == 20

    def test_concurrent_enrichment_preserves_order(self, config, db_manager, rpc):
        config.enrichment_workers = 4
        pipeline = MempoolPipeline(config, db_manager, rpc)
        rpc.get_raw_mempool.return_value = {
            f"tx{n}": {"size": 100, "time": n, "fee": 0} for n in range(8)
        }
        rpc.get_raw_transaction.side_effect = lambda txid: raw_transaction(txid, [("A", 1.0)])

        snapshot = pipeline.get_mempool()

        assert [entry.txid for entry in snapshot.entries] == [f"tx{n}" for n in range(7, -1, -1)]
        assert all(entry.total == 100_000_000 for entry in snapshot.entries)

    def test_empty_everywhere(self, pipeline):
        snapshot = pipeline.get_mempool()

        assert snapshot.entries == []
        assert snapshot.to_dict()["stats"] == {"size": 0, "bytes": 0, "usage": 0}


class TestEntryFromRpc:

    def test_missing_time_uses_now(self):
        entry = entry_from_rpc("t", {"size": 10}, now=42)

        assert entry.time == 42
        assert entry.fee == 0
