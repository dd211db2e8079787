"""Unit tests for the explorer facade."""

import pytest

from advc_explorer.core.explorer import format_number
from advc_explorer.core.rpc_client import NodeRPCError


class TestFormatNumber:

    def test_thousands_and_trimmed_decimals(self):
        assert format_number(45_000_000.0) == "45,000,000"
        assert format_number(1234.5) == "1,234.5"
        assert format_number(0.12346, 4) == "0.1235"


class TestBlockExplorer:
    """Summary, market cap and peers."""

    def test_market_cap(self, explorer, seed, price_cache):
        seed.coin_stats(supply=45_000_000.0)
        price_cache.get_price.return_value = "0.010000"

        assert explorer.get_market_cap() == "450000.00"

    def test_market_cap_without_price(self, explorer, seed, price_cache):
        seed.coin_stats(supply=45_000_000.0)
        price_cache.get_price.return_value = "0.000000"

        assert explorer.get_market_cap() == "0.00"

    def test_summary(self, explorer, seed, rpc):
        seed.coin_stats(count=1234, supply=90_000_000.0, connections=8)
        seed.history(blockindex=1234, timestamp=1, difficulty=2.5, nethash=100_000.0)
        rpc.get_network_hash_ps.return_value = 4_500_000.0

        summary = explorer.get_summary().to_dict()

        assert summary["blockHeight"] == {"value": 1234, "formatted": "1,234"}
        assert summary["supplyPercentage"]["formatted"] == "50.00%"
        assert summary["marketCap"]["value"] == pytest.approx(900_000.0)
        assert summary["networkHashRate"]["formatted"] == "4,500 KH/s"
        assert summary["peers"]["value"] == 8
        assert summary["price"]["formatted"] == "$0.010000"
        assert summary["symbol"] == "ADVC"

    def test_summary_hash_rate_fallback(self, explorer, seed, rpc):
        seed.coin_stats()
        seed.history(blockindex=1, timestamp=1, nethash=250_000.0)
        rpc.get_network_hash_ps.side_effect = NodeRPCError("down")

        summary = explorer.get_summary()

        assert summary.network_hash_rate.value == 250_000.0

    def test_summary_with_empty_storage(self, explorer):
        summary = explorer.get_summary()

        assert summary.block_height.value == 0
        assert summary.market_cap.value == 0

    def test_peers_from_storage(self, explorer, seed, rpc):
        seed.peer("10.0.0.1:39939", lastsend=5)
        seed.peer("10.0.0.2:39939", lastsend=9)

        peers = explorer.get_peer_info()

        assert [peer["address"] for peer in peers] == ["10.0.0.2:39939", "10.0.0.1:39939"]
        rpc.get_peer_info.assert_not_called()

    def test_peers_from_node(self, explorer, rpc):
        rpc.get_peer_info.return_value = [{"addr": "1.2.3.4:39939"}]

        assert explorer.get_peer_info() == [{"addr": "1.2.3.4:39939"}]

    def test_peers_unavailable(self, explorer, rpc):
        rpc.get_peer_info.side_effect = NodeRPCError("down")

        assert explorer.get_peer_info() == []

    def test_initialize(self, explorer, rpc):
        rpc.test_connection.return_value = False

        assert explorer.initialize() is True
