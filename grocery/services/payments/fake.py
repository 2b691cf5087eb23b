"""In-process payment gateway for development and tests.

No network calls. Checkout creation can be switched to fail, and the
status returned by ``verify_transaction`` can be scripted per transaction id.
"""

import time

from grocery.domain.exceptions import UpstreamError
from grocery.services.payments.port import CheckoutRequest, HostedCheckout, PaymentGateway

FAKE_SIGNATURE = "test-signature"


class FakeGateway(PaymentGateway):
    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.transaction_statuses: dict[str, str] = {}
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Gateway unavailable") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def set_transaction_status(self, transaction_id: str, status: str) -> None:
        self.transaction_statuses[str(transaction_id)] = status

    def create_hosted_checkout(self, request: CheckoutRequest) -> HostedCheckout:
        self.calls.append({"method": "create_hosted_checkout", "order_id": request.order_id, "amount": request.amount})
        if not self.should_succeed:
            raise UpstreamError(f"Payment initiation failed: {self.failure_reason}")

        tx_ref = f"ORDER-{request.order_id}-{int(time.time() * 1000)}"
        return HostedCheckout(redirect_url=f"https://checkout.fake/pay/{tx_ref}", tx_ref=tx_ref)

    def verify_transaction(self, transaction_id: str) -> str:
        self.calls.append({"method": "verify_transaction", "transaction_id": transaction_id})
        return self.transaction_statuses.get(str(transaction_id), "successful")

    def verify_webhook_signature(self, signature: str | None) -> bool:
        return signature == FAKE_SIGNATURE
