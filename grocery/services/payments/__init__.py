"""Payment gateway factory.

get_gateway() builds the adapter named by PAYMENT_GATEWAY on first use;
set_gateway() / reset_gateway() let tests swap it.
"""

from grocery.services.payments.fake import FakeGateway
from grocery.services.payments.flutterwave import FlutterwaveGateway
from grocery.services.payments.port import CheckoutRequest, HostedCheckout, PaymentGateway
from grocery.utils.settings import PAYMENT_GATEWAY

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    global _current_gateway
    if _current_gateway is None:
        if PAYMENT_GATEWAY == "flutterwave":
            _current_gateway = FlutterwaveGateway()
        else:
            _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    global _current_gateway
    _current_gateway = None


__all__ = [
    "CheckoutRequest",
    "FakeGateway",
    "FlutterwaveGateway",
    "HostedCheckout",
    "PaymentGateway",
    "get_gateway",
    "reset_gateway",
    "set_gateway",
]
