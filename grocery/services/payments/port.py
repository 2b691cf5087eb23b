"""Payment gateway port.

The contract every gateway adapter implements, so OrderService never knows
whether it is talking to Flutterwave or to the in-process fake.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CheckoutRequest:
    """What the gateway needs to open a hosted checkout page for one order."""

    order_id: int
    amount: Decimal
    customer_name: str
    customer_email: str
    customer_phone: str | None
    redirect_url: str


@dataclass(frozen=True)
class HostedCheckout:
    redirect_url: str
    tx_ref: str


class PaymentGateway(ABC):
    @abstractmethod
    def create_hosted_checkout(self, request: CheckoutRequest) -> HostedCheckout:
        """Open a hosted checkout; raises UpstreamError when the gateway is unusable."""
        ...

    @abstractmethod
    def verify_transaction(self, transaction_id: str) -> str:
        """Return the gateway's own status for a transaction, e.g. ``successful``."""
        ...

    @abstractmethod
    def verify_webhook_signature(self, signature: str | None) -> bool:
        ...
