"""
Shared fakes for orderbook tests.

Addresses are digit-only so they are already in checksum form.
"""

import itertools

import pytest
from unittest.mock import AsyncMock, MagicMock

from orderbook.core.chains import ChainRegistry
from orderbook.core.execution.models import TransactionReceipt
from orderbook.core.execution.tx_builder import MAX_UINT256


CHAIN_ID = "eip155:97476"
NUMERIC_CHAIN_ID = 97476
WALLET = "0x1111111111111111111111111111111111111111"
SEAPORT = "0x2222222222222222222222222222222222222222"
ZONE = "0x3333333333333333333333333333333333333333"
WETH = "0x4444444444444444444444444444444444444444"
NFT = "0x5555555555555555555555555555555555555555"


class FakePendingTransaction:
    """Broadcast transaction whose receipt is available immediately."""

    def __init__(self, tx_hash: str, chain_id: int = NUMERIC_CHAIN_ID, status: int = 1):
        self.hash = tx_hash
        self.chain_id = chain_id
        self.receipt = TransactionReceipt(
            transaction_hash=tx_hash,
            block_number=100,
            gas_used=21000,
            gas_price=1_000_000_000,
            status=status,
        )
        self.wait = AsyncMock(return_value=self.receipt)


@pytest.fixture
def make_pending_tx():
    counter = itertools.count(1)

    def factory(tx_hash: str = None, status: int = 1) -> FakePendingTransaction:
        return FakePendingTransaction(tx_hash or f"0x{next(counter):064x}", status=status)

    return factory


@pytest.fixture
def provider():
    """Chain reads: everything approved, no balances."""
    mock = MagicMock()
    mock.is_approved_for_all = AsyncMock(return_value=True)
    mock.erc20_allowance = AsyncMock(return_value=MAX_UINT256)
    mock.erc20_balance_of = AsyncMock(return_value=0)
    mock.get_balance = AsyncMock(return_value=0)
    return mock


@pytest.fixture
def signer(provider, make_pending_tx):
    mock = MagicMock()
    mock.provider = provider
    mock.get_address = AsyncMock(return_value=WALLET)
    mock.sign_typed_data = AsyncMock(return_value="0xsignature")
    mock.send_transaction = AsyncMock(side_effect=lambda tx: make_pending_tx())
    return mock


@pytest.fixture
def protocol():
    mock = MagicMock()
    mock.get_contract_address = AsyncMock(return_value=SEAPORT)
    mock.create_order = AsyncMock(return_value=[])
    mock.create_bulk_orders = AsyncMock(return_value=[])
    mock.fulfill_order = AsyncMock(return_value=[])
    mock.cancel_orders = AsyncMock()
    return mock


@pytest.fixture
def api_client():
    mock = MagicMock()
    mock.get_listing = AsyncMock(return_value=None)
    mock.get_offer = AsyncMock(return_value=None)
    mock.create_offer = AsyncMock()
    mock.create_listing = AsyncMock()
    mock.cancel_listing = AsyncMock(return_value=None)
    mock.cancel_offer = AsyncMock(return_value=None)
    mock.get_supported_currencies = AsyncMock(return_value=[])
    mock.get_orderbook_fee = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def chains():
    return ChainRegistry(
        zones={CHAIN_ID: ZONE},
        wrapped_native_tokens={CHAIN_ID: WETH},
    )
