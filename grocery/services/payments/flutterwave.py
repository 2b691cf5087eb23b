# grocery/services/payments/flutterwave.py
import hmac
import time

import requests

from grocery.domain.exceptions import UpstreamError
from grocery.services.payments.port import CheckoutRequest, HostedCheckout, PaymentGateway
from grocery.utils.logging import get_logger
from grocery.utils.retry import http_retry
from grocery.utils.settings import (
    FLW_BASE_URL,
    FLW_SECRET_HASH,
    FLW_SECRET_KEY,
    HTTP_TIMEOUT_SECONDS,
    PAYMENT_CURRENCY,
)

logger = get_logger(__name__)


class FlutterwaveGateway(PaymentGateway):
    def __init__(
        self,
        base_url: str | None = None,
        secret_key: str | None = None,
        secret_hash: str | None = None,
        timeout: float | None = None,
        currency: str | None = None,
    ):
        self.base_url = (base_url or FLW_BASE_URL).rstrip("/")
        self.secret_key = secret_key if secret_key is not None else FLW_SECRET_KEY
        self.secret_hash = secret_hash if secret_hash is not None else FLW_SECRET_HASH
        self.timeout = timeout or HTTP_TIMEOUT_SECONDS
        self.currency = currency or PAYMENT_CURRENCY

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.secret_key}",
        }

    # not retried: a second POST could open a second checkout for the same order
    def create_hosted_checkout(self, request: CheckoutRequest) -> HostedCheckout:
        tx_ref = f"ORDER-{request.order_id}-{int(time.time() * 1000)}"
        phone = "".join(ch for ch in (request.customer_phone or "") if ch.isdigit())
        body = {
            "tx_ref": tx_ref,
            "amount": str(request.amount),
            "currency": self.currency,
            "redirect_url": request.redirect_url,
            "payment_options": "card,mobilemoney,ussd",
            "meta": {"order_id": request.order_id},
            "customer": {
                "email": request.customer_email,
                "phonenumber": phone or None,
                "name": request.customer_name,
            },
            "customizations": {"description": f"Payment for order {request.order_id}"},
        }

        url = f"{self.base_url}/payments"
        logger.info("flutterwave_checkout", order_id=request.order_id, tx_ref=tx_ref)
        try:
            resp = requests.post(url, json=body, headers=self._headers(), timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json().get("data") or {}
        except (requests.RequestException, ValueError) as e:
            logger.warning("flutterwave_checkout_failed", order_id=request.order_id, error=str(e))
            raise UpstreamError(f"Payment initiation failed: {e}")

        link = data.get("link")
        if not link:
            raise UpstreamError("Payment initiation failed: gateway returned no checkout link")
        return HostedCheckout(redirect_url=link, tx_ref=data.get("tx_ref") or tx_ref)

    @http_retry()
    def _get_transaction(self, transaction_id: str) -> dict:
        url = f"{self.base_url}/transactions/{transaction_id}/verify"
        resp = requests.get(url, headers=self._headers(), timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def verify_transaction(self, transaction_id: str) -> str:
        try:
            payload = self._get_transaction(transaction_id)
        except requests.RequestException as e:
            raise UpstreamError(f"Transaction verification failed: {e}")
        return ((payload or {}).get("data") or {}).get("status", "")

    def verify_webhook_signature(self, signature: str | None) -> bool:
        if not signature or not self.secret_hash:
            return False
        return hmac.compare_digest(signature, self.secret_hash)
