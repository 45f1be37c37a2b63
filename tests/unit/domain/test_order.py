"""Tests for the Order entity, status enum and order id canonicalization."""
import pytest

from core.domain.entities.order import Order, parse_status
from core.domain.enums import OrderStatus, USER_SETTABLE_STATUSES
from core.domain.exceptions import InvalidStatusTransitionError, MalformedRequestError
from core.domain.value_objects import INT64_MAX, canonical_order_id


class TestCanonicalOrderId:
    """Order ids are digit strings rendered without leading zeros."""

    @pytest.mark.parametrize(
        "raw, expected",
        [("7", "7"), ("007", "7"), ("0", "0"), ("000", "0"), (str(INT64_MAX), str(INT64_MAX))],
    )
    def test_canonical_form(self, raw, expected):
        assert canonical_order_id(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "-7", "+7", " 7", "7.0", "1e3", "١٢٣", None, 7])
    def test_rejects_non_digit_ids(self, raw):
        with pytest.raises(MalformedRequestError):
            canonical_order_id(raw)

    def test_rejects_ids_beyond_int64(self):
        with pytest.raises(MalformedRequestError):
            canonical_order_id(str(INT64_MAX + 1))


class TestOrderStatus:
    def test_statuses_are_ordered_by_stage(self):
        assert OrderStatus.NEW < OrderStatus.PENDING < OrderStatus.PROCESSING < OrderStatus.COMPLETE

    def test_only_processing_and_complete_are_user_settable(self):
        assert USER_SETTABLE_STATUSES == {OrderStatus.PROCESSING, OrderStatus.COMPLETE}

    def test_parse_status_accepts_known_integers(self):
        assert parse_status(2) is OrderStatus.PROCESSING

    @pytest.mark.parametrize("raw", [9, -1, "2", True, None, 2.0])
    def test_parse_status_rejects_everything_else(self, raw):
        with pytest.raises(MalformedRequestError):
            parse_status(raw)


class TestOrderSerialization:
    def test_round_trip_keeps_payload(self):
        document = {
            "orderId": "42",
            "status": 1,
            "customerId": "c-1",
            "items": [{"productId": 3, "quantity": 1, "price": 4.5}],
            "timePlaced": "2024-01-01T00:00:00Z",
        }

        order = Order.from_document(document)

        assert order.order_id == "42"
        assert order.status is OrderStatus.PENDING
        assert order.payload == {
            "customerId": "c-1",
            "items": [{"productId": 3, "quantity": 1, "price": 4.5}],
            "timePlaced": "2024-01-01T00:00:00Z",
        }
        assert order.to_document() == document

    def test_missing_status_defaults_to_new(self):
        assert Order.from_document({"orderId": "1"}).status is OrderStatus.NEW

    def test_order_id_is_canonicalized(self):
        assert Order.from_document({"orderId": "0012"}).order_id == "12"

    def test_missing_order_id_is_malformed(self):
        with pytest.raises(MalformedRequestError):
            Order.from_document({"status": 1})

    @pytest.mark.parametrize("inbound_status", [None, 0, 3, 7, "New"])
    def test_intake_discards_inbound_status(self, inbound_status):
        order = Order.from_intake({"orderId": "007", "status": inbound_status, "customerId": "c"})

        assert order.order_id == "7"
        assert order.status is OrderStatus.PENDING
        assert order.payload == {"customerId": "c"}

    @pytest.mark.parametrize("document", [{"status": 1}, {"orderId": "abc"}])
    def test_intake_still_requires_a_valid_order_id(self, document):
        with pytest.raises(MalformedRequestError):
            Order.from_intake(document)


class TestStatusTransitions:
    def test_mark_pending_overwrites_inbound_status(self):
        order = Order(order_id="1", status=OrderStatus.COMPLETE)
        order.mark_pending()
        assert order.status is OrderStatus.PENDING

    def test_advances_one_stage_at_a_time(self):
        order = Order(order_id="1", status=OrderStatus.PENDING)
        order.advance_to(OrderStatus.PROCESSING)
        order.advance_to(OrderStatus.COMPLETE)
        assert order.status is OrderStatus.COMPLETE

    def test_reapplying_current_status_is_allowed(self):
        order = Order(order_id="1", status=OrderStatus.PROCESSING)
        order.advance_to(OrderStatus.PROCESSING)
        assert order.status is OrderStatus.PROCESSING

    @pytest.mark.parametrize(
        "current, target",
        [
            (OrderStatus.PENDING, OrderStatus.COMPLETE),
            (OrderStatus.COMPLETE, OrderStatus.PROCESSING),
            (OrderStatus.NEW, OrderStatus.PROCESSING),
        ],
    )
    def test_rejects_skips_and_backward_moves(self, current, target):
        order = Order(order_id="1", status=current)
        with pytest.raises(InvalidStatusTransitionError):
            order.advance_to(target)
        assert order.status is current
