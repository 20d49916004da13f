"""Chain identifiers and per-chain protocol configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from eth_utils import is_address, to_checksum_address

from .execution.errors import OrderbookError, OrderbookErrorCode

CAIP2_NAMESPACE = "eip155"


def parse_chain_id(caip2_chain_id: str) -> int:
    """Return the numeric chain id of a CAIP-2 identifier (``eip155:1`` -> ``1``)."""

    namespace, _, reference = str(caip2_chain_id).partition(":")
    if namespace != CAIP2_NAMESPACE or not reference.isdigit():
        raise OrderbookError(
            OrderbookErrorCode.INVALID_PARAMETERS,
            f"Invalid CAIP-2 chain id: {caip2_chain_id!r}",
        )
    return int(reference)


def format_chain_id(chain_id: int) -> str:
    return f"{CAIP2_NAMESPACE}:{chain_id}"


@dataclass
class ChainRegistry:
    """Zone and wrapped-native lookups keyed by CAIP-2 chain id.

    Built from settings and injected into handlers, so a deployment can add a
    chain without code changes.
    """

    zones: Dict[str, str] = field(default_factory=dict)
    wrapped_native_tokens: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings) -> "ChainRegistry":
        return cls(
            zones=dict(settings.zones),
            wrapped_native_tokens=dict(settings.wrapped_native_tokens),
        )

    def zone_for(self, chain_id: str) -> str:
        zone = self.zones.get(chain_id)
        if not zone or not is_address(zone):
            raise OrderbookError(
                OrderbookErrorCode.INVALID_PARAMETERS,
                f"No protocol zone configured for chain {chain_id}",
                context={"chain_id": chain_id},
            )
        return to_checksum_address(zone)

    def wrapped_native_for(self, chain_id: str) -> Optional[str]:
        address = self.wrapped_native_tokens.get(chain_id)
        return to_checksum_address(address) if address else None


__all__ = [
    'CAIP2_NAMESPACE',
    'ChainRegistry',
    'format_chain_id',
    'parse_chain_id',
]
