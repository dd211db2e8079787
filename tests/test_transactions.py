"""Unit tests for transaction resolution."""

import pytest
from unittest.mock import MagicMock
from sqlalchemy.exc import OperationalError

from advc_explorer.core.rpc_client import NodeRPCError
from advc_explorer.core.transactions import (
    TransactionResolver, UNKNOWN_INPUT, parse_outputs, output_address
)
from advc_explorer.database.manager import DatabaseManager
from advc_explorer.models.explorer import COINBASE_MARKER
from tests.conftest import raw_transaction


class TestOutputParsing:

    def test_outputs_without_address_skipped(self):
        raw = raw_transaction("t", [("Aone", 1.5), (None, 0), ("Atwo", 0.25)])

        vout, total = parse_outputs(raw)

        assert vout == [
            {"addresses": "Aone", "amount": 150_000_000},
            {"addresses": "Atwo", "amount": 25_000_000},
        ]
        assert total == 175_000_000

    def test_single_address_form(self):
        assert output_address({"scriptPubKey": {"address": "Anew"}}) == "Anew"

    def test_float_amounts_round_to_smallest_unit(self):
        _, total = parse_outputs(raw_transaction("t", [("A", 0.1), ("B", 0.2)]))

        assert total == 30_000_000


class TestTransactionResolver:
    """Confirmed, pending and missing transactions."""

    @pytest.fixture
    def resolver(self, config, db_manager, rpc):
        return TransactionResolver(config, db_manager, rpc)

    def test_confirmed_transaction(self, resolver, seed, rpc):
        seed.tx("abc", "block1", 1, 1000,
                vin=[{"addresses": "Asender", "amount": 700}],
                vout=[{"addresses": "Ax", "amount": 500}, {"addresses": "Ay", "amount": 200}])

        detail = resolver.get_transaction("abc")

        assert detail.is_pending is False
        assert detail.total == 700
        assert detail.blockhash == "block1"
        assert detail.blockindex == 1
        rpc.get_raw_transaction.assert_not_called()

    def test_pending_transaction_enriched(self, resolver, seed, rpc):
        seed.mempool("pend", time=2000)

        prev = raw_transaction("prev", [("Aspender", 2.0)])
        pending = raw_transaction(
            "pend", [("Adest", 1.5), ("Achange", 0.4999)],
            inputs=[{"txid": "prev", "vout": 0}]
        )
        rpc.get_raw_transaction.side_effect = lambda txid: {"pend": pending, "prev": prev}[txid]

        detail = resolver.get_transaction("pend")

        assert detail.is_pending is True
        assert detail.timestamp == 2000
        assert detail.vin == [{"addresses": "Aspender", "amount": 200_000_000}]
        assert detail.vout[0] == {"addresses": "Adest", "amount": 150_000_000}
        assert detail.total == 150_000_000 + 49_990_000
        assert detail.blockhash is None

    def test_unresolvable_input_marked_unknown(self, resolver, seed, rpc):
        seed.mempool("pend", time=2000)
        pending = raw_transaction("pend", [("Adest", 1.0)], inputs=[{"txid": "gone", "vout": 0}])

        def lookup(txid):
            if txid == "gone":
                raise NodeRPCError("No such transaction", method="getrawtransaction", code=-5)
            return pending

        rpc.get_raw_transaction.side_effect = lookup

        detail = resolver.get_transaction("pend")

        assert detail.vin == [{"addresses": UNKNOWN_INPUT, "amount": 0}]
        assert detail.total == 100_000_000

    def test_out_of_range_input_index_marked_unknown(self, resolver, rpc):
        rpc.get_raw_transaction.return_value = raw_transaction("prev", [("A", 1.0)])

        assert resolver.resolve_input({"txid": "prev", "vout": 3}) == {"addresses": UNKNOWN_INPUT, "amount": 0}

    def test_coinbase_input(self, resolver, rpc):
        assert resolver.resolve_input({"coinbase": "04ffff"}) == {"addresses": COINBASE_MARKER, "amount": 0}
        rpc.get_raw_transaction.assert_not_called()

    def test_node_failure_returns_bare_pending(self, resolver, seed, rpc):
        seed.mempool("pend", time=2000)
        rpc.get_raw_transaction.side_effect = NodeRPCError("down")

        detail = resolver.get_transaction("pend")

        assert detail.is_pending is True
        assert detail.txid == "pend"
        assert detail.vin == []
        assert detail.vout == []
        assert detail.total == 0

    def test_unreadable_output_amount_returns_bare_pending(self, resolver, seed, rpc):
        seed.mempool("pend", time=2000)
        rpc.get_raw_transaction.return_value = {
            "txid": "pend",
            "vin": [],
            "vout": [{"value": "abc", "scriptPubKey": {"addresses": ["Adest"]}}],
        }

        detail = resolver.get_transaction("pend")

        assert detail.is_pending is True
        assert detail.vout == []
        assert detail.total == 0

    def test_unreadable_previous_amount_marked_unknown(self, resolver, rpc):
        rpc.get_raw_transaction.return_value = {
            "txid": "prev",
            "vout": [{"value": "abc", "scriptPubKey": {"addresses": ["Aspender"]}}],
        }

        assert resolver.resolve_input({"txid": "prev", "vout": 0}) == {"addresses": UNKNOWN_INPUT, "amount": 0}

    def test_unknown_transaction(self, resolver):
        assert resolver.get_transaction("nothing") is None

    def test_storage_error_returns_none(self, config, rpc):
        db = MagicMock(spec=DatabaseManager)
        db.get_transaction.side_effect = OperationalError("SELECT", {}, Exception("down"))

        assert TransactionResolver(config, db, rpc).get_transaction("abc") is None

    def test_list_transactions_newest_first(self, resolver, seed):
        for n in range(5):
            seed.tx(f"t{n}", f"b{n}", n + 1, 1000 + n)

        transactions, pagination = resolver.list_transactions(page=1, limit=2)

        assert [tx.txid for tx in transactions] == ["t4", "t3"]
        assert pagination.total_items == 5
        assert pagination.total_pages == 3

    def test_transactions_by_block_hash(self, resolver, seed):
        seed.chain([1], txs_per_block=3)

        transactions = resolver.transactions_by_block_hash("block1")

        assert [tx.txid for tx in transactions] == ["cb1", "tx1_1", "tx1_2"]

    def test_recent_transactions(self, resolver, seed):
        seed.chain(range(1, 4))

        assert len(resolver.recent_transactions(2)) == 2
