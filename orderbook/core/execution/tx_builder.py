"""
Transaction builder for approval, wrapping, and raw protocol transactions.
"""

import secrets
from typing import Optional

from eth_utils import to_checksum_address

from .models import PreparedTransaction, TransactionType


# Minimal selectors for encoding
ERC20_APPROVE_SELECTOR = "0x095ea7b3"        # approve(address,uint256)
ERC20_BALANCE_OF_SELECTOR = "0x70a08231"     # balanceOf(address)
ERC20_ALLOWANCE_SELECTOR = "0xdd62ed3e"      # allowance(address,address)
SET_APPROVAL_FOR_ALL_SELECTOR = "0xa22cb465"  # setApprovalForAll(address,bool)
IS_APPROVED_FOR_ALL_SELECTOR = "0xe985e9c5"   # isApprovedForAll(address,address)
WETH_DEPOSIT_SELECTOR = "0xd0e30db0"         # deposit()

# Maximum uint256 for unlimited approval
MAX_UINT256 = 2**256 - 1


def _encode_uint256(value: int) -> str:
    """Encode a uint256 as a 32-byte hex string (without 0x prefix)."""
    return format(value, "064x")


def _encode_address(address: str) -> str:
    """Encode an address as a 32-byte hex string (without 0x prefix)."""
    addr = address.lower().replace("0x", "")
    return addr.zfill(64)


def _encode_bool(value: bool) -> str:
    return _encode_uint256(1 if value else 0)


def encode_balance_of(owner: str) -> str:
    return ERC20_BALANCE_OF_SELECTOR + _encode_address(owner)


def encode_allowance(owner: str, spender: str) -> str:
    return ERC20_ALLOWANCE_SELECTOR + _encode_address(owner) + _encode_address(spender)


def encode_is_approved_for_all(owner: str, operator: str) -> str:
    return IS_APPROVED_FOR_ALL_SELECTOR + _encode_address(owner) + _encode_address(operator)


class TransactionBuilder:
    """
    Builds transactions for the wallet to sign and broadcast.

    Handles:
    - ERC20 approvals
    - ERC721/ERC1155 operator approvals
    - Wrapped-native deposits
    - Raw protocol calls
    """

    @staticmethod
    def generate_tx_id() -> str:
        """Generate a unique transaction ID."""
        return f"tx_{secrets.token_hex(16)}"

    @staticmethod
    def build_erc20_approve(
        chain_id: int,
        owner_address: str,
        token_address: str,
        spender_address: str,
        amount: int = MAX_UINT256,
        description: str = "",
    ) -> PreparedTransaction:
        """
        Build an ERC20 approval transaction.

        Args:
            chain_id: The chain ID
            owner_address: The token owner (sender)
            token_address: The ERC20 token contract
            spender_address: The address being approved to spend
            amount: The amount to approve (default: unlimited)
            description: Human-readable description

        Returns:
            PreparedTransaction ready to be signed
        """
        calldata = (
            ERC20_APPROVE_SELECTOR +
            _encode_address(spender_address) +
            _encode_uint256(amount)
        )

        return PreparedTransaction(
            tx_id=TransactionBuilder.generate_tx_id(),
            tx_type=TransactionType.APPROVE,
            chain_id=chain_id,
            from_address=to_checksum_address(owner_address),
            to_address=to_checksum_address(token_address),
            data=calldata,
            value=0,
            description=description or f"Approve {spender_address[:10]}... to spend tokens",
        )

    @staticmethod
    def build_set_approval_for_all(
        chain_id: int,
        owner_address: str,
        token_address: str,
        operator_address: str,
        approved: bool = True,
    ) -> PreparedTransaction:
        """
        Build an ERC721/ERC1155 setApprovalForAll transaction.

        Args:
            chain_id: The chain ID
            owner_address: The token owner (sender)
            token_address: The NFT collection contract
            operator_address: The operator being approved
            approved: Grant (True) or revoke (False)

        Returns:
            PreparedTransaction ready to be signed
        """
        calldata = (
            SET_APPROVAL_FOR_ALL_SELECTOR +
            _encode_address(operator_address) +
            _encode_bool(approved)
        )

        return PreparedTransaction(
            tx_id=TransactionBuilder.generate_tx_id(),
            tx_type=TransactionType.SET_APPROVAL_FOR_ALL,
            chain_id=chain_id,
            from_address=to_checksum_address(owner_address),
            to_address=to_checksum_address(token_address),
            data=calldata,
            value=0,
            description=f"Approve {operator_address[:10]}... for all tokens",
        )

    @staticmethod
    def build_weth_deposit(
        chain_id: int,
        owner_address: str,
        weth_address: str,
        amount_wei: int,
    ) -> PreparedTransaction:
        """
        Build a wrapped-native deposit (wrap native coin into its ERC20 form).

        Args:
            chain_id: The chain ID
            owner_address: The depositor
            weth_address: The wrapped-native contract
            amount_wei: Native amount to wrap

        Returns:
            PreparedTransaction ready to be signed
        """
        if amount_wei <= 0:
            raise ValueError("Deposit amount must be positive")

        return PreparedTransaction(
            tx_id=TransactionBuilder.generate_tx_id(),
            tx_type=TransactionType.WRAP,
            chain_id=chain_id,
            from_address=to_checksum_address(owner_address),
            to_address=to_checksum_address(weth_address),
            data=WETH_DEPOSIT_SELECTOR,
            value=amount_wei,
            description=f"Wrap {amount_wei} wei",
        )

    @staticmethod
    def build_from_raw(
        chain_id: int,
        from_address: str,
        to_address: str,
        data: str,
        value: int = 0,
        tx_type: TransactionType = TransactionType.EXCHANGE,
        description: str = "",
    ) -> PreparedTransaction:
        """
        Build a transaction from raw data.

        Args:
            chain_id: The chain ID
            from_address: The sender address
            to_address: The target contract
            data: The calldata (hex encoded)
            value: Wei to send
            tx_type: The transaction type
            description: Human-readable description

        Returns:
            PreparedTransaction ready to be signed
        """
        return PreparedTransaction(
            tx_id=TransactionBuilder.generate_tx_id(),
            tx_type=tx_type,
            chain_id=chain_id,
            from_address=to_checksum_address(from_address),
            to_address=to_checksum_address(to_address),
            data=data if data.startswith("0x") else f"0x{data}",
            value=value,
            description=description,
        )


def parse_hex_int(value: Optional[str]) -> int:
    """Decode a JSON-RPC quantity ("0x..." or decimal string)."""
    if value is None or value in ("", "0x"):
        return 0
    if isinstance(value, int):
        return value
    return int(value, 16) if value.startswith("0x") else int(value)
