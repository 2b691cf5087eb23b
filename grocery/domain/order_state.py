"""Order status rules: enums stored as plain strings plus the transition table."""

from enum import Enum

from grocery.domain.exceptions import ValidationError


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentType(str, Enum):
    CASH = "cash"
    ONLINE = "online"


class NotificationType(str, Enum):
    NEW_ORDER = "new_order"
    STATUS_UPDATE = "status_update"
    PAYMENT_UPDATE = "payment_update"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value.strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid order status: {value}")


def parse_payment_status(value: str) -> PaymentStatus:
    try:
        return PaymentStatus(value.strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid payment status: {value}")


def parse_payment_type(value: str) -> PaymentType:
    try:
        return PaymentType(value.strip().lower())
    except ValueError:
        raise ValidationError("Invalid payment type. Must be 'cash' or 'online'")


def can_transition(current: str, target: str) -> bool:
    return OrderStatus(target) in _VALID_TRANSITIONS[OrderStatus(current)]


def assert_can_transition(current: str, target: str) -> None:
    """Raise ValidationError unless ``current -> target`` is an allowed move.

    Setting the status an order already has is not a transition and is
    rejected too, so callers never log a no-op as a status change.
    """
    if not can_transition(current, target):
        raise ValidationError(f"Cannot change order status from {current} to {target}")
