"""Off-chain cancellation signatures."""

from ..execution.models import OffChainCancelAction
from .models import OffChainCancel


CANCEL_DOMAIN_NAME = "DomaOrderbook"
CANCEL_DOMAIN_VERSION = "1"

CANCEL_TYPES = {
    "OrderCancellation": [
        {"name": "orderId", "type": "string"},
    ],
}


def build_cancel_typed_data(order_id: str, protocol_address: str, chain_id: int) -> dict:
    """EIP-712 payload the marketplace verifies before dropping an order."""
    return {
        "domain": {
            "name": CANCEL_DOMAIN_NAME,
            "version": CANCEL_DOMAIN_VERSION,
            "chainId": chain_id,
            "verifyingContract": protocol_address,
        },
        "types": CANCEL_TYPES,
        "primary_type": "OrderCancellation",
        "message": {"orderId": order_id},
    }


def create_off_chain_cancel_action(
    signer,
    order_id: str,
    protocol_address: str,
    chain_id: int,
) -> OffChainCancelAction:
    """Action that signs a cancellation scoped to order, protocol contract, and chain."""
    typed_data = build_cancel_typed_data(order_id, protocol_address, chain_id)

    async def create_cancel_signature() -> OffChainCancel:
        signature = await signer.sign_typed_data(**typed_data)
        return OffChainCancel(orderId=order_id, signature=signature)

    return OffChainCancelAction(create_cancel_signature=create_cancel_signature)
