import logging
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import parse_qs, urlparse

import paypalrestsdk
import requests
from paypalrestsdk.exceptions import ConnectionError as PayPalError

logger = logging.getLogger(__name__)

ACTIVATE_PLAN = [{"op": "replace", "path": "/", "value": {"state": "ACTIVE"}}]


@dataclass(frozen=True)
class ProviderResult:
    remote_id: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return bool(self.remote_id)

    @classmethod
    def success(cls, remote_id: str) -> "ProviderResult":
        return cls(remote_id=remote_id)

    @classmethod
    def failure(cls, error) -> "ProviderResult":
        return cls(error=str(error))


class PaymentProvider(Protocol):
    def create_single_payment(self, payload: dict) -> ProviderResult: ...

    def create_subscription_payment(self, payload: dict) -> ProviderResult: ...

    def execute_single_payment(self, payment_id: str) -> ProviderResult: ...

    def execute_subscription_payment(self, agreement_id: str) -> ProviderResult: ...


def _approval_token(agreement) -> str | None:
    # checkout.js needs the EC token, which PayPal only exposes inside the approval link
    for link in agreement.to_dict().get("links", []):
        if link.get("rel") == "approval_url":
            return parse_qs(urlparse(link.get("href", "")).query).get("token", [None])[0]
    return None


class PayPalClient:
    """PayPal REST calls used by the Express Checkout gateway."""

    def __init__(self, client_id: str, client_secret: str, mode: str = "sandbox"):
        self.api = paypalrestsdk.Api({
            "mode": "live" if mode == "live" else "sandbox",
            "client_id": client_id,
            "client_secret": client_secret,
        })

    def create_single_payment(self, payload: dict) -> ProviderResult:
        try:
            payment = paypalrestsdk.Payment(payload, api=self.api)
            if not payment.create():
                return ProviderResult.failure(payment.error)
        except (PayPalError, requests.RequestException) as exc:
            return ProviderResult.failure(exc)
        logger.info("Created PayPal payment %s", payment.id)
        return ProviderResult.success(payment.id)

    def create_subscription_payment(self, payload: dict) -> ProviderResult:
        try:
            plan = paypalrestsdk.BillingPlan(payload["billing_plan"], api=self.api)
            if not plan.create():
                return ProviderResult.failure(plan.error)
            if not plan.replace(ACTIVATE_PLAN):
                return ProviderResult.failure(plan.error)

            agreement_data = dict(payload["billing_agreement"])
            agreement_data["plan"] = {"id": plan.id}
            agreement_data["payer"] = {"payment_method": "paypal"}
            agreement = paypalrestsdk.BillingAgreement(agreement_data, api=self.api)
            if not agreement.create():
                return ProviderResult.failure(agreement.error)
        except (PayPalError, requests.RequestException) as exc:
            return ProviderResult.failure(exc)

        token = _approval_token(agreement)
        if not token:
            return ProviderResult.failure("Billing agreement has no approval token")
        logger.info("Created PayPal billing plan %s with agreement token %s", plan.id, token)
        return ProviderResult.success(token)

    def execute_single_payment(self, payment_id: str) -> ProviderResult:
        try:
            payment = paypalrestsdk.Payment.find(payment_id, api=self.api)

            execution = {}
            payer_info = payment.to_dict().get("payer", {}).get("payer_info") or {}
            if payer_info.get("payer_id"):
                execution["payer_id"] = payer_info["payer_id"]

            if not payment.execute(execution):
                return ProviderResult.failure(payment.error)
        except (PayPalError, requests.RequestException) as exc:
            return ProviderResult.failure(exc)

        if payment.state != "approved":
            return ProviderResult.failure(f"Payment {payment_id} is {payment.state}")
        return ProviderResult.success(payment.id)

    def execute_subscription_payment(self, agreement_id: str) -> ProviderResult:
        try:
            agreement = paypalrestsdk.BillingAgreement.execute(agreement_id, api=self.api)
        except (PayPalError, requests.RequestException) as exc:
            return ProviderResult.failure(exc)

        if agreement.state != "Active":
            return ProviderResult.failure(f"Billing agreement {agreement_id} is {agreement.state}")
        return ProviderResult.success(agreement.id)
