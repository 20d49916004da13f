"""
Marketplace API Client

Client for the Doma orderbook REST API:
- Order lookup (listings and offers, scoped to a fulfiller)
- Order submission (signed offers and listings)
- Off-chain cancellation
- Supported currencies and marketplace fees
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from orderbook.config import settings
from orderbook.core.execution.errors import OrderbookError, OrderbookErrorCode
from orderbook.core.orders.models import CurrencyToken, GetOrderResponse, MarketplaceFee

from .models import (
    CancelOrderRequest,
    CreateOrderRequest,
    CreateOrderResponse,
    OrderbookFeeResponse,
    SupportedCurrenciesResponse,
)

logger = logging.getLogger(__name__)


class MarketplaceClient:
    """
    Client for the marketplace orderbook API.

    All requests carry the configured ``Api-Key`` header. Order lookups return
    None when the marketplace reports the order absent; any other HTTP failure
    raises an OrderbookError with code API_REQUEST_FAILED.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize marketplace client.

        Args:
            base_url: API base URL (default: settings.marketplace_api_url)
            api_key: API key (default: settings.marketplace_api_key)
            timeout: Request timeout in seconds
            http_client: Pre-built HTTP client (tests inject a mock transport)
        """
        self.base_url = (base_url or settings.marketplace_api_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.marketplace_api_key
        self.timeout = timeout or settings.request_timeout_seconds
        self._http_client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                },
            )
        return self._http_client

    async def close(self):
        """Close the HTTP client."""
        if self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()
            self._http_client = None

    def _headers(self) -> Dict[str, str]:
        return {"Api-Key": self.api_key} if self.api_key else {}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        allow_not_found: bool = False,
    ) -> Optional[Any]:
        client = await self._get_client()
        url = f"{self.base_url}{path}"

        try:
            response = await client.request(method, url, json=json, headers=self._headers())
            if allow_not_found and response.status_code == 404:
                return None
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Marketplace {method} {path} returned {e.response.status_code}")
            raise OrderbookError(
                OrderbookErrorCode.API_REQUEST_FAILED,
                f"Marketplace request failed with status {e.response.status_code}",
                cause=e,
                context={"path": path, "status_code": e.response.status_code, "body": e.response.text},
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Marketplace {method} {path} failed: {e}")
            raise OrderbookError(
                OrderbookErrorCode.API_REQUEST_FAILED,
                f"Marketplace request failed: {e}",
                cause=e,
                context={"path": path},
            ) from e

        if not response.content:
            return {}
        return response.json()

    # =========================================================================
    # Orders
    # =========================================================================

    async def get_listing(self, order_id: str, fulfiller_address: str) -> Optional[GetOrderResponse]:
        """
        Get a listing prepared for a specific fulfiller.

        Args:
            order_id: Marketplace order ID
            fulfiller_address: Wallet that will buy the listing

        Returns:
            The listing, or None if not found
        """
        data = await self._request(
            "GET",
            f"/v1/orderbook/listing/{order_id}/{fulfiller_address}",
            allow_not_found=True,
        )
        return self._parse_order(order_id, data)

    async def get_offer(self, order_id: str, fulfiller_address: str) -> Optional[GetOrderResponse]:
        """
        Get an offer prepared for a specific fulfiller.

        Args:
            order_id: Marketplace order ID
            fulfiller_address: Wallet that will accept the offer

        Returns:
            The offer, or None if not found
        """
        data = await self._request(
            "GET",
            f"/v1/orderbook/offer/{order_id}/{fulfiller_address}",
            allow_not_found=True,
        )
        return self._parse_order(order_id, data)

    async def create_offer(self, request: CreateOrderRequest) -> CreateOrderResponse:
        """Submit a signed offer."""
        data = await self._request(
            "POST",
            "/v1/orderbook/offer",
            json=request.model_dump(by_alias=True, exclude_none=True),
        )
        return CreateOrderResponse.model_validate(data)

    async def create_listing(self, request: CreateOrderRequest) -> CreateOrderResponse:
        """Submit a signed listing."""
        data = await self._request(
            "POST",
            "/v1/orderbook/list",
            json=request.model_dump(by_alias=True, exclude_none=True),
        )
        return CreateOrderResponse.model_validate(data)

    async def cancel_listing(self, order_id: str, signature: str) -> None:
        """Cancel a listing with an off-chain signature."""
        request = CancelOrderRequest(orderId=order_id, signature=signature)
        await self._request(
            "POST",
            "/v1/orderbook/listing/cancel",
            json=request.model_dump(by_alias=True),
        )

    async def cancel_offer(self, order_id: str, signature: str) -> None:
        """Cancel an offer with an off-chain signature."""
        request = CancelOrderRequest(orderId=order_id, signature=signature)
        await self._request(
            "POST",
            "/v1/orderbook/offer/cancel",
            json=request.model_dump(by_alias=True),
        )

    # =========================================================================
    # Orderbook metadata
    # =========================================================================

    async def get_supported_currencies(
        self,
        chain_id: str,
        contract_address: str,
        orderbook: str,
    ) -> List[CurrencyToken]:
        """
        Currencies accepted for a collection on an orderbook.

        Entries without a contract address (the native coin) are dropped.
        """
        data = await self._request(
            "GET",
            f"/v1/orderbook/currencies/{chain_id}/{contract_address}/{orderbook}",
        )
        parsed = SupportedCurrenciesResponse.model_validate(data or {})
        return [c for c in parsed.currencies if c.contract_address]

    async def get_orderbook_fee(
        self,
        orderbook: str,
        chain_id: str,
        contract_address: str,
    ) -> List[MarketplaceFee]:
        """Marketplace fees applied to orders for a collection."""
        data = await self._request(
            "GET",
            f"/v1/orderbook/fee/{orderbook}/{chain_id}/{contract_address}",
        )
        return OrderbookFeeResponse.model_validate(data or {}).marketplace_fees

    # =========================================================================
    # Parsing
    # =========================================================================

    def _parse_order(self, order_id: str, data: Optional[Dict[str, Any]]) -> Optional[GetOrderResponse]:
        """Parse an order record; empty bodies count as not found."""
        if not data:
            return None

        order = data.get("order") or {}
        if not order.get("parameters"):
            return None

        return GetOrderResponse(
            orderId=data.get("orderId", order_id),
            order={
                "parameters": order["parameters"],
                "signature": order.get("signature", ""),
            },
            extraData=data.get("extraData") or None,
        )


# Singleton instance
_client_instance: Optional[MarketplaceClient] = None


def get_marketplace_client() -> MarketplaceClient:
    """Get singleton marketplace client instance."""
    global _client_instance
    if _client_instance is None:
        _client_instance = MarketplaceClient()
    return _client_instance
