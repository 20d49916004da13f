"""
Error taxonomy for orderbook operations.

A single error type carries a machine-readable code. Each layer that catches
an error re-wraps it with its own code while keeping the original as
``cause``, so the full trail (step failure -> business operation) stays
inspectable.
"""

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class OrderbookErrorCode(str, Enum):
    """Machine-readable error codes."""

    # Validation
    INVALID_PARAMETERS = "INVALID_PARAMETERS"
    UNSUPPORTED_MULTI_ITEM_OFFER = "UNSUPPORTED_MULTI_ITEM_OFFER"
    SIGNER_NOT_PROVIDED = "SIGNER_NOT_PROVIDED"

    # Lookup
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"

    # Balance
    INSUFFICIENT_ETH_BALANCE = "INSUFFICIENT_ETH_BALANCE"
    INSUFFICIENT_WETH_BALANCE = "INSUFFICIENT_WETH_BALANCE"

    # Step types
    SEAPORT_APPROVAL_FAILED = "SEAPORT_APPROVAL_FAILED"
    SEAPORT_SIGNATURE_FAILED = "SEAPORT_SIGNATURE_FAILED"
    OFFCHAIN_CANCEL_ORDER_FAILED = "OFFCHAIN_CANCEL_ORDER_FAILED"
    SEAPORT_TRANSACTION_FAILED = "SEAPORT_TRANSACTION_FAILED"
    TOKEN_CONVERSION_FAILED = "TOKEN_CONVERSION_FAILED"

    # Business operations
    OFFER_CREATION_FAILED = "OFFER_CREATION_FAILED"
    LISTING_CREATION_FAILED = "LISTING_CREATION_FAILED"
    BUY_LISTING_FAILED = "BUY_LISTING_FAILED"
    ACCEPT_OFFER_FAILED = "ACCEPT_OFFER_FAILED"
    LISTING_CANCELLATION_FAILED = "LISTING_CANCELLATION_FAILED"
    OFFER_CANCELLATION_FAILED = "OFFER_CANCELLATION_FAILED"

    # Transport
    API_REQUEST_FAILED = "API_REQUEST_FAILED"
    RPC_REQUEST_FAILED = "RPC_REQUEST_FAILED"

    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class OrderbookError(Exception):
    """
    Typed error raised by every orderbook layer.

    Attributes:
        code: Machine-readable error code
        message: Human-readable message
        cause: The wrapped exception, if any
        context: Structured details (chain_id, params, action_type,
            action_index, progress snapshot, ...)
    """

    def __init__(
        self,
        code: OrderbookErrorCode,
        message: str,
        cause: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.cause = cause
        self.context: Dict[str, Any] = dict(context or {})
        if cause is not None:
            self.__cause__ = cause

    @classmethod
    def from_error(
        cls,
        error: BaseException,
        code: OrderbookErrorCode,
        context: Optional[Dict[str, Any]] = None,
    ) -> "OrderbookError":
        """
        Wrap any exception in an OrderbookError with the given code.

        The wrapped error keeps the inner message; the inner error becomes
        ``cause``. Context from an inner OrderbookError is carried forward and
        extended with ``context``.
        """
        inherited: Dict[str, Any] = {}
        if isinstance(error, OrderbookError):
            inherited.update(error.context)
        inherited.update(context or {})

        message = str(error) or error.__class__.__name__
        return cls(code, message, cause=error, context=inherited)

    def iter_causes(self) -> Iterator[BaseException]:
        """Yield the chain of wrapped errors, innermost last."""
        current = self.cause
        while current is not None:
            yield current
            current = current.cause if isinstance(current, OrderbookError) else current.__cause__

    @property
    def codes(self) -> List[OrderbookErrorCode]:
        """Codes along the cause chain, outermost first."""
        chain = [self.code]
        chain.extend(e.code for e in self.iter_causes() if isinstance(e, OrderbookError))
        return chain

    def __repr__(self) -> str:
        return f"OrderbookError(code={self.code.value!r}, message={self.message!r})"
