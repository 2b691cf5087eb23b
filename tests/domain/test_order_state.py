import pytest

from grocery.domain.exceptions import ValidationError
from grocery.domain.order_state import (
    OrderStatus,
    PaymentType,
    assert_can_transition,
    can_transition,
    parse_payment_status,
    parse_payment_type,
    parse_status,
)


class TestTransitions:
    @pytest.mark.parametrize(
        "current,target",
        [
            ("pending", "processing"),
            ("pending", "cancelled"),
            ("processing", "shipped"),
            ("processing", "cancelled"),
            ("shipped", "delivered"),
        ],
    )
    def test_allowed(self, current, target):
        assert can_transition(current, target)
        assert_can_transition(current, target)

    @pytest.mark.parametrize("target", ["pending", "processing", "shipped", "cancelled"])
    def test_delivered_is_terminal(self, target):
        with pytest.raises(ValidationError, match="delivered"):
            assert_can_transition("delivered", target)

    def test_cancelled_is_terminal(self):
        for target in OrderStatus:
            assert not can_transition("cancelled", target.value)

    def test_cannot_skip_shipping(self):
        assert not can_transition("pending", "delivered")
        assert not can_transition("processing", "delivered")

    def test_shipped_cannot_be_cancelled(self):
        assert not can_transition("shipped", "cancelled")

    def test_same_status_is_not_a_transition(self):
        with pytest.raises(ValidationError):
            assert_can_transition("pending", "pending")


class TestParsing:
    def test_payment_type_is_case_insensitive(self):
        assert parse_payment_type("Online") is PaymentType.ONLINE
        assert parse_payment_type(" CASH ") is PaymentType.CASH

    def test_unknown_payment_type(self):
        with pytest.raises(ValidationError, match="cash"):
            parse_payment_type("card")

    def test_unknown_status(self):
        with pytest.raises(ValidationError):
            parse_status("completed")

    def test_payment_status_values(self):
        assert parse_payment_status("refunded").value == "refunded"
        with pytest.raises(ValidationError):
            parse_payment_status("paid")
