"""
JSON-RPC provider and signer.

The signer never holds keys: it asks the connected wallet node to sign
(eth_signTypedData_v4) and to sign-and-broadcast (eth_sendTransaction),
the same model as a browser wallet behind an RPC endpoint.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Dict, List, Optional

import httpx
from eth_utils import to_checksum_address

from orderbook.config import settings
from orderbook.core.chains import parse_chain_id
from orderbook.core.execution.errors import OrderbookError, OrderbookErrorCode
from orderbook.core.execution.models import PreparedTransaction, TransactionReceipt
from orderbook.core.execution.tx_builder import (
    encode_allowance,
    encode_balance_of,
    encode_is_approved_for_all,
    parse_hex_int,
)

from .base import ChainProvider, Signer

logger = logging.getLogger(__name__)


class JsonRpcProvider(ChainProvider):
    """
    Async JSON-RPC client for one EVM chain.

    Provides:
    - Balance and allowance introspection (eth_getBalance, eth_call)
    - Receipt polling until confirmation or timeout
    """

    def __init__(
        self,
        rpc_url: str,
        chain_id: int,
        *,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        confirmation_timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.rpc_url = rpc_url
        self.chain_id = chain_id
        self.poll_interval = poll_interval or settings.receipt_poll_interval_seconds
        self.confirmation_timeout = confirmation_timeout or settings.confirmation_timeout_seconds
        self._client = client or httpx.AsyncClient(
            timeout=timeout or settings.request_timeout_seconds,
        )
        self._request_id = 0

    async def rpc_call(self, method: str, params: List[Any]) -> Any:
        """Make an RPC call to the chain."""
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": self._request_id,
        }

        try:
            response = await self._client.post(self.rpc_url, json=payload)
            response.raise_for_status()
            result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise OrderbookError(
                OrderbookErrorCode.RPC_REQUEST_FAILED,
                f"RPC {method} failed: {e}",
                cause=e,
                context={"method": method, "chain_id": self.chain_id},
            ) from e

        if "error" in result:
            error = result["error"] or {}
            raise OrderbookError(
                OrderbookErrorCode.RPC_REQUEST_FAILED,
                f"RPC error: {error.get('message', error)}",
                context={"method": method, "chain_id": self.chain_id, "rpc_error": error},
            )

        return result.get("result")

    async def call(self, to_address: str, data: str) -> str:
        return await self.rpc_call("eth_call", [{"to": to_address, "data": data}, "latest"])

    async def get_balance(self, address: str) -> int:
        return parse_hex_int(await self.rpc_call("eth_getBalance", [address, "latest"]))

    async def erc20_balance_of(self, token: str, owner: str) -> int:
        return parse_hex_int(await self.call(token, encode_balance_of(owner)))

    async def erc20_allowance(self, token: str, owner: str, spender: str) -> int:
        return parse_hex_int(await self.call(token, encode_allowance(owner, spender)))

    async def is_approved_for_all(self, token: str, owner: str, operator: str) -> bool:
        return parse_hex_int(await self.call(token, encode_is_approved_for_all(owner, operator))) != 0

    async def get_accounts(self) -> List[str]:
        return await self.rpc_call("eth_accounts", []) or []

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[TransactionReceipt]:
        receipt = await self.rpc_call("eth_getTransactionReceipt", [tx_hash])
        if not receipt:
            return None
        return TransactionReceipt(
            transaction_hash=receipt.get("transactionHash", tx_hash),
            block_number=parse_hex_int(receipt.get("blockNumber")),
            block_hash=receipt.get("blockHash"),
            gas_used=parse_hex_int(receipt.get("gasUsed")),
            gas_price=parse_hex_int(receipt.get("effectiveGasPrice", "0x0")),
            status=parse_hex_int(receipt.get("status", "0x1")),
        )

    async def wait_for_transaction(self, tx_hash: str) -> TransactionReceipt:
        """
        Poll for a receipt until it appears or the confirmation timeout elapses.

        Raises:
            OrderbookError: the transaction reverted or was not mined in time
        """
        deadline = time.monotonic() + self.confirmation_timeout

        while True:
            receipt = await self.get_transaction_receipt(tx_hash)

            if receipt is not None:
                if not receipt.is_success:
                    raise OrderbookError(
                        OrderbookErrorCode.RPC_REQUEST_FAILED,
                        "Transaction reverted",
                        context={"transaction_hash": tx_hash, "chain_id": self.chain_id},
                    )
                logger.info(f"Transaction confirmed: {tx_hash} (block {receipt.block_number})")
                return receipt

            if time.monotonic() >= deadline:
                raise OrderbookError(
                    OrderbookErrorCode.RPC_REQUEST_FAILED,
                    f"Confirmation timeout after {self.confirmation_timeout}s",
                    context={"transaction_hash": tx_hash, "chain_id": self.chain_id},
                )

            await asyncio.sleep(self.poll_interval)

    async def close(self) -> None:
        """Close HTTP client."""
        await self._client.aclose()


class RpcPendingTransaction:
    """Broadcast transaction whose receipt is fetched from the provider."""

    def __init__(self, provider: ChainProvider, tx_hash: str, chain_id: int):
        self.provider = provider
        self.hash = tx_hash
        self.chain_id = chain_id

    async def wait(self) -> TransactionReceipt:
        return await self.provider.wait_for_transaction(self.hash)

    def __repr__(self) -> str:
        return f"RpcPendingTransaction(hash={self.hash!r}, chain_id={self.chain_id})"


class JsonRpcSigner(Signer):
    """Account managed by the wallet behind a JSON-RPC endpoint."""

    def __init__(self, provider: JsonRpcProvider, address: Optional[str] = None):
        self.provider = provider
        self._address = to_checksum_address(address) if address else None

    async def get_address(self) -> Optional[str]:
        if self._address is None:
            accounts = await self.provider.get_accounts()
            if accounts:
                self._address = to_checksum_address(accounts[0])
        return self._address

    async def sign_typed_data(
        self,
        domain: Dict[str, Any],
        types: Dict[str, Any],
        primary_type: str,
        message: Dict[str, Any],
    ) -> str:
        address = await self.get_address()
        domain_fields = [
            {"name": name, "type": kind}
            for name, kind in (
                ("name", "string"),
                ("version", "string"),
                ("chainId", "uint256"),
                ("verifyingContract", "address"),
            )
            if name in domain
        ]
        typed_data = {
            "types": {"EIP712Domain": domain_fields, **types},
            "primaryType": primary_type,
            "domain": domain,
            "message": message,
        }
        return await self.provider.rpc_call(
            "eth_signTypedData_v4",
            [address, json.dumps(typed_data)],
        )

    async def send_transaction(self, tx: PreparedTransaction) -> RpcPendingTransaction:
        tx_hash = await self.provider.rpc_call("eth_sendTransaction", [tx.to_dict()])
        logger.info(f"Transaction submitted: {tx_hash} ({tx.description or tx.tx_type.value})")
        return RpcPendingTransaction(self.provider, tx_hash, tx.chain_id)


def get_json_rpc_signer(chain_id: str, address: Optional[str] = None) -> JsonRpcSigner:
    """Build a signer for a CAIP-2 chain from the configured RPC URLs."""
    rpc_url = settings.rpc_urls.get(chain_id)
    if not rpc_url:
        raise OrderbookError(
            OrderbookErrorCode.INVALID_PARAMETERS,
            f"No RPC URL configured for chain {chain_id}",
        )
    provider = JsonRpcProvider(rpc_url, parse_chain_id(chain_id))
    return JsonRpcSigner(provider, address)
