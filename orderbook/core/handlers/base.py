"""
Base class for orderbook operation handlers.

A handler is built per operation with the wallet signer, the chain, the
marketplace client and the settlement protocol. ``execute`` validates input,
assembles the action list, runs it through the executor and reports back to
the marketplace.
"""

import logging
from abc import ABC, abstractmethod
from typing import Generic, Optional, Sequence, TypeVar

from eth_utils import to_checksum_address

from ...config import settings
from ..chains import ChainRegistry, parse_chain_id
from ..execution.errors import OrderbookError, OrderbookErrorCode
from ..execution.executor import execute_all_actions
from ..execution.models import Action, ProgressCallback
from ..orders.models import OperationResult


logger = logging.getLogger(__name__)

TParams = TypeVar("TParams")
TResult = TypeVar("TResult")
R = TypeVar("R")


class OperationHandler(ABC, Generic[TParams, TResult]):
    """
    One business operation against the orderbook.

    Handlers hold no state across ``execute`` calls; the action list and its
    progress tracker live only for the duration of one call.
    """

    #: Code used when wrapping any failure surfaced by ``execute``
    failure_code: OrderbookErrorCode = OrderbookErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        api_client,
        signer,
        chain_id: str,
        protocol,
        on_progress: Optional[ProgressCallback] = None,
        chains: Optional[ChainRegistry] = None,
    ):
        """
        Args:
            api_client: Marketplace API client
            signer: Wallet signer for the chain
            chain_id: CAIP-2 chain id (``eip155:<n>``)
            protocol: Settlement protocol (see providers.seaport)
            on_progress: Receives a snapshot of all steps on every transition
            chains: Zone / wrapped-native lookup (default: from settings)
        """
        self.api_client = api_client
        self.signer = signer
        self.chain_id = chain_id
        self.numeric_chain_id = parse_chain_id(chain_id)
        self.protocol = protocol
        self.on_progress = on_progress
        self.chains = chains or ChainRegistry.from_settings(settings)

    async def get_wallet_address(self) -> str:
        wallet_address = await self.signer.get_address()
        if not wallet_address:
            raise OrderbookError(
                OrderbookErrorCode.SIGNER_NOT_PROVIDED,
                "Wallet address not found",
            )
        return to_checksum_address(wallet_address)

    async def execute_blockchain_operation(self, actions: Sequence[Action]) -> R:
        return await execute_all_actions(
            list(actions),
            on_progress=self.on_progress,
            chain_id=self.chain_id,
        )

    def wrap_error(self, error: Exception, params) -> OrderbookError:
        """Re-wrap a failure with this operation's code, keeping the cause."""
        wrapped = OrderbookError.from_error(
            error,
            self.failure_code,
            {"chain_id": self.chain_id, "params": params},
        )
        logger.error(
            f"{self.__class__.__name__} failed on {self.chain_id}: "
            f"{' <- '.join(code.value for code in wrapped.codes)}: {wrapped.message}"
        )
        return wrapped

    @staticmethod
    def to_result(receipt) -> OperationResult:
        return OperationResult.from_receipt(receipt)

    @abstractmethod
    async def execute(self, params: TParams) -> TResult:
        ...
