"""
Balance and approval requirements for order creation.

Compares the wallet's current allowances and balances against what an order
needs and returns only the actions that close the gap.
"""

import logging
from functools import partial
from typing import List, Optional, Set, Tuple

from ..execution.errors import OrderbookError, OrderbookErrorCode
from ..execution.models import ApprovalAction, ConversionAction
from ..execution.tx_builder import MAX_UINT256, TransactionBuilder
from .models import CreateOrderInput, ItemType


logger = logging.getLogger(__name__)


async def get_approval_actions(
    signer,
    order_input: CreateOrderInput,
    operator: str,
    chain_id: int,
    exact_approval: bool = False,
) -> List[ApprovalAction]:
    """
    Approval actions for every offer item the operator cannot yet move.

    Args:
        signer: Wallet signer (its provider is used for reads)
        order_input: Order whose offer side is checked
        operator: Protocol contract (or conduit) that transfers the items
        chain_id: Numeric chain id for the approval transactions
        exact_approval: Approve exactly the required amount instead of unlimited

    Returns:
        Approval actions, one per token that needs it
    """
    provider = signer.provider
    owner = order_input.offerer
    actions: List[ApprovalAction] = []
    seen: Set[Tuple[str, str]] = set()

    for item in order_input.offer:
        if not item.token:
            continue  # native currency

        key = (item.token.lower(), operator.lower())
        if key in seen:
            continue
        seen.add(key)

        if item.item_type in (ItemType.ERC721, ItemType.ERC1155):
            if await provider.is_approved_for_all(item.token, owner, operator):
                continue
            tx = TransactionBuilder.build_set_approval_for_all(
                chain_id=chain_id,
                owner_address=owner,
                token_address=item.token,
                operator_address=operator,
            )
        else:
            required = int(item.amount or 0)
            allowance = await provider.erc20_allowance(item.token, owner, operator)
            if allowance >= required:
                continue
            tx = TransactionBuilder.build_erc20_approve(
                chain_id=chain_id,
                owner_address=owner,
                token_address=item.token,
                spender_address=operator,
                amount=required if exact_approval else MAX_UINT256,
            )

        logger.info(f"Approval required for {item.token} (operator {operator})")
        actions.append(
            ApprovalAction(
                token=item.token,
                operator=operator,
                transact=partial(signer.send_transaction, tx),
                identifier_or_criteria=item.identifier or "0",
                item_type=item.item_type,
            )
        )

    return actions


async def get_conversion_action(
    signer,
    owner: str,
    wrapped_token: str,
    required_amount: int,
    chain_id: int,
) -> Optional[ConversionAction]:
    """
    Wrap exactly the wrapped-native shortfall, if any.

    Returns:
        None when the wrapped balance already covers ``required_amount``

    Raises:
        OrderbookError: INSUFFICIENT_ETH_BALANCE when native funds cannot
            cover the shortfall
    """
    provider = signer.provider
    wrapped_balance = await provider.erc20_balance_of(wrapped_token, owner)
    difference = required_amount - wrapped_balance

    if difference <= 0:
        return None

    native_balance = await provider.get_balance(owner)
    if native_balance < difference:
        raise OrderbookError(
            OrderbookErrorCode.INSUFFICIENT_ETH_BALANCE,
            "Insufficient funds to cover WETH conversion",
            context={
                "required": str(difference),
                "available": str(native_balance),
                "token": wrapped_token,
            },
        )

    tx = TransactionBuilder.build_weth_deposit(
        chain_id=chain_id,
        owner_address=owner,
        weth_address=wrapped_token,
        amount_wei=difference,
    )
    return ConversionAction(transact=partial(signer.send_transaction, tx), amount=difference)
