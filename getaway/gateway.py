import hashlib
import hmac

import requests

from getaway.errors import UpstreamError


class RazorpayGateway:
    """
    Thin Razorpay Orders API client.

    Built once per app in ``create_app`` and passed to the services that use it.
    """

    def __init__(self, key_id, key_secret, api_base="https://api.razorpay.com/v1", timeout=10.0, session=None):
        self.key_id = key_id
        self.key_secret = key_secret or ""
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()

    @classmethod
    def from_config(cls, config):
        return cls(
            key_id=config.get("RAZORPAY_KEY_ID"),
            key_secret=config.get("RAZORPAY_KEY_SECRET"),
            api_base=config.get("RAZORPAY_API_BASE", "https://api.razorpay.com/v1"),
            timeout=config.get("RAZORPAY_TIMEOUT_SECONDS", 10.0),
        )

    def create_order(self, amount_minor, currency, receipt, notes=None):
        payload = {
            "amount": int(amount_minor),
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }
        try:
            res = self.http.post(
                f"{self.api_base}/orders",
                json=payload,
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as exc:
            raise UpstreamError("Payment gateway timed out.", details=str(exc)) from exc
        except requests.exceptions.RequestException as exc:
            raise UpstreamError("Payment gateway unreachable.", details=str(exc)) from exc

        try:
            data = res.json()
        except ValueError:
            data = {"raw_response": res.text}

        if res.status_code >= 400:
            error = data.get("error") if isinstance(data, dict) else None
            description = (error or {}).get("description") if isinstance(error, dict) else None
            raise UpstreamError(
                description or f"Payment gateway returned {res.status_code}",
                details=data,
            )
        if not isinstance(data, dict) or not data.get("id"):
            raise UpstreamError("Payment gateway returned an invalid order.", details=data)
        return data

    def expected_signature(self, order_id, payment_id):
        message = f"{order_id}|{payment_id}".encode("utf-8")
        return hmac.new(self.key_secret.encode("utf-8"), message, hashlib.sha256).hexdigest()

    def verify_signature(self, order_id, payment_id, signature):
        if not self.key_secret:
            return False
        if not all(isinstance(value, str) and value for value in (order_id, payment_id, signature)):
            return False
        expected = self.expected_signature(order_id, payment_id)
        return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
