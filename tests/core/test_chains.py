"""
Tests for chain id parsing and per-chain configuration.
"""

import pytest

from orderbook.config import Settings
from orderbook.core.chains import ChainRegistry, format_chain_id, parse_chain_id
from orderbook.core.execution.errors import OrderbookError, OrderbookErrorCode


def test_parse_chain_id():
    assert parse_chain_id("eip155:97476") == 97476
    assert format_chain_id(11155111) == "eip155:11155111"


@pytest.mark.parametrize("value", ["97476", "solana:1", "eip155:", "eip155:abc"])
def test_parse_chain_id_rejects_malformed(value):
    with pytest.raises(OrderbookError) as exc:
        parse_chain_id(value)
    assert exc.value.code == OrderbookErrorCode.INVALID_PARAMETERS


def test_zone_lookup_returns_checksum_address():
    registry = ChainRegistry(zones={"eip155:1": "0xcef2071b4246db4d0e076a377348339f31a07dea"})

    assert registry.zone_for("eip155:1") == "0xCEF2071b4246DB4D0E076A377348339f31a07dEA"


def test_zone_lookup_fails_for_unknown_chain():
    with pytest.raises(OrderbookError) as exc:
        ChainRegistry().zone_for("eip155:1")
    assert exc.value.code == OrderbookErrorCode.INVALID_PARAMETERS


def test_registry_from_settings_has_default_zones():
    registry = ChainRegistry.from_settings(Settings())

    assert registry.zone_for("eip155:97476") == "0xCEF2071b4246DB4D0E076A377348339f31a07dEA"
    assert registry.zone_for("eip155:11155111") == "0x037e8f3FD62BD12B1C116bD48588793e98211acb"
    assert registry.wrapped_native_for("eip155:97476") is None
