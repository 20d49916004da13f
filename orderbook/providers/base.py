from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from orderbook.core.execution.models import (
    PendingTransaction,
    PreparedTransaction,
    TransactionReceipt,
)


class ChainProvider(ABC):
    """Read access to a single EVM chain"""

    chain_id: int

    @abstractmethod
    async def get_balance(self, address: str) -> int:
        """Native coin balance in wei"""
        pass

    @abstractmethod
    async def erc20_balance_of(self, token: str, owner: str) -> int:
        """ERC20 balance in smallest units"""
        pass

    @abstractmethod
    async def erc20_allowance(self, token: str, owner: str, spender: str) -> int:
        """Amount `spender` may move on behalf of `owner`"""
        pass

    @abstractmethod
    async def is_approved_for_all(self, token: str, owner: str, operator: str) -> bool:
        """ERC721/ERC1155 operator approval"""
        pass

    @abstractmethod
    async def wait_for_transaction(self, tx_hash: str) -> TransactionReceipt:
        """Block until the transaction is mined"""
        pass


class Signer(ABC):
    """Wallet account that signs and broadcasts on one chain"""

    provider: ChainProvider

    @abstractmethod
    async def get_address(self) -> Optional[str]:
        """Account address, or None when no account is connected"""
        pass

    @abstractmethod
    async def sign_typed_data(
        self,
        domain: Dict[str, Any],
        types: Dict[str, Any],
        primary_type: str,
        message: Dict[str, Any],
    ) -> str:
        """EIP-712 signature"""
        pass

    @abstractmethod
    async def send_transaction(self, tx: PreparedTransaction) -> PendingTransaction:
        """Broadcast a transaction and return a handle on it"""
        pass
