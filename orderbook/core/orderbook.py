"""
Orderbook

Entry point for callers. Holds the marketplace client and chain registry and
builds a fresh handler for every operation, so nothing carries over between
calls except those two.

Usage:
    book = Orderbook()
    result = await book.buy_listing(
        BuyListingParams(orderId="..."),
        signer=signer,
        protocol=protocol,
        chain_id="eip155:97476",
        on_progress=print,
    )
"""

from typing import List, Optional

from ..config import settings
from ..providers.marketplace import MarketplaceClient, get_marketplace_client
from .chains import ChainRegistry
from .execution.models import ProgressCallback
from .handlers import (
    AcceptOfferHandler,
    BuyListingHandler,
    CancelListingHandler,
    CancelOfferHandler,
    CreateListingHandler,
    CreateOfferHandler,
)
from .orders.models import (
    AcceptOfferParams,
    BuyListingParams,
    CancelListingParams,
    CancelOfferParams,
    CreateListingParams,
    CreateOfferParams,
    CreateOrderResult,
    CurrencyToken,
    MarketplaceFee,
    OperationResult,
)


class Orderbook:
    """Orderbook operations for one marketplace."""

    def __init__(
        self,
        api_client: Optional[MarketplaceClient] = None,
        chains: Optional[ChainRegistry] = None,
    ):
        self.api_client = api_client or get_marketplace_client()
        self.chains = chains or ChainRegistry.from_settings(settings)

    def _handler_kwargs(self, signer, protocol, chain_id: str, on_progress: Optional[ProgressCallback]):
        return {
            "api_client": self.api_client,
            "signer": signer,
            "chain_id": chain_id,
            "protocol": protocol,
            "on_progress": on_progress,
            "chains": self.chains,
        }

    # =========================================================================
    # Order creation
    # =========================================================================

    async def create_offer(
        self,
        params: CreateOfferParams,
        *,
        signer,
        protocol,
        chain_id: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> CreateOrderResult:
        handler = CreateOfferHandler(**self._handler_kwargs(signer, protocol, chain_id, on_progress))
        return await handler.execute(params)

    async def create_listing(
        self,
        params: CreateListingParams,
        *,
        signer,
        protocol,
        chain_id: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> CreateOrderResult:
        handler = CreateListingHandler(**self._handler_kwargs(signer, protocol, chain_id, on_progress))
        return await handler.execute(params)

    # =========================================================================
    # Fulfilment
    # =========================================================================

    async def buy_listing(
        self,
        params: BuyListingParams,
        *,
        signer,
        protocol,
        chain_id: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> OperationResult:
        handler = BuyListingHandler(**self._handler_kwargs(signer, protocol, chain_id, on_progress))
        return await handler.execute(params)

    async def accept_offer(
        self,
        params: AcceptOfferParams,
        *,
        signer,
        protocol,
        chain_id: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> OperationResult:
        handler = AcceptOfferHandler(**self._handler_kwargs(signer, protocol, chain_id, on_progress))
        return await handler.execute(params)

    # =========================================================================
    # Cancellation
    # =========================================================================

    async def cancel_listing(
        self,
        params: CancelListingParams,
        *,
        signer,
        protocol,
        chain_id: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> OperationResult:
        handler = CancelListingHandler(**self._handler_kwargs(signer, protocol, chain_id, on_progress))
        return await handler.execute(params)

    async def cancel_offer(
        self,
        params: CancelOfferParams,
        *,
        signer,
        protocol,
        chain_id: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> OperationResult:
        handler = CancelOfferHandler(**self._handler_kwargs(signer, protocol, chain_id, on_progress))
        return await handler.execute(params)

    # =========================================================================
    # Metadata
    # =========================================================================

    async def get_supported_currencies(
        self,
        chain_id: str,
        contract_address: str,
        orderbook: str = "DOMA",
    ) -> List[CurrencyToken]:
        return await self.api_client.get_supported_currencies(chain_id, contract_address, orderbook)

    async def get_orderbook_fee(
        self,
        chain_id: str,
        contract_address: str,
        orderbook: str = "DOMA",
    ) -> List[MarketplaceFee]:
        return await self.api_client.get_orderbook_fee(orderbook, chain_id, contract_address)
