"""
Tests for the orderbook error type.
"""

from orderbook.core.execution.errors import OrderbookError, OrderbookErrorCode


class TestOrderbookError:
    def test_carries_code_message_and_context(self):
        error = OrderbookError(
            OrderbookErrorCode.ORDER_NOT_FOUND,
            "Listing not found",
            context={"order_id": "abc"},
        )

        assert error.code == OrderbookErrorCode.ORDER_NOT_FOUND
        assert error.message == "Listing not found"
        assert str(error) == "Listing not found"
        assert error.context == {"order_id": "abc"}
        assert error.cause is None

    def test_from_error_keeps_inner_message_and_cause(self):
        inner = ValueError("boom")

        wrapped = OrderbookError.from_error(inner, OrderbookErrorCode.BUY_LISTING_FAILED, {"chain_id": "eip155:1"})

        assert wrapped.code == OrderbookErrorCode.BUY_LISTING_FAILED
        assert wrapped.message == "boom"
        assert wrapped.cause is inner
        assert wrapped.__cause__ is inner
        assert wrapped.context == {"chain_id": "eip155:1"}

    def test_from_error_merges_inner_context(self):
        inner = OrderbookError(
            OrderbookErrorCode.SEAPORT_TRANSACTION_FAILED,
            "Failed to exchange",
            context={"action_index": 1, "chain_id": None},
        )

        wrapped = OrderbookError.from_error(inner, OrderbookErrorCode.BUY_LISTING_FAILED, {"chain_id": "eip155:1"})

        assert wrapped.context["action_index"] == 1
        assert wrapped.context["chain_id"] == "eip155:1"

    def test_codes_lists_chain_outermost_first(self):
        root = RuntimeError("rpc down")
        step = OrderbookError(OrderbookErrorCode.SEAPORT_APPROVAL_FAILED, "Failed to approve", cause=root)
        outer = OrderbookError.from_error(step, OrderbookErrorCode.OFFER_CREATION_FAILED)

        assert outer.codes == [
            OrderbookErrorCode.OFFER_CREATION_FAILED,
            OrderbookErrorCode.SEAPORT_APPROVAL_FAILED,
        ]
        assert list(outer.iter_causes()) == [step, root]

    def test_empty_message_falls_back_to_class_name(self):
        wrapped = OrderbookError.from_error(KeyError(), OrderbookErrorCode.UNKNOWN_ERROR)

        assert wrapped.message == "KeyError"
