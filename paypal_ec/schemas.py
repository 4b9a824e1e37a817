"""Payment details posted by the checkout.js widget.

The widget sends ``{"type": "single" | "subscription", "data": {...}}`` where
``data`` is a PayPal payment resource or a billing plan/agreement pair. Only the
parts the gateway touches are typed; everything else is passed through to PayPal
untouched.
"""

from typing import Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from paypal_ec.payment_method_type import PAYMENT_TYPE_LABELS


class PaymentDetailsError(ValueError):
    """Raised when the posted payment details can't be used."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class TransactionRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    amount: dict[str, Any] | None = None
    item_list: dict[str, Any] | None = None


class SinglePaymentRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    payment_type: ClassVar[str] = "single"

    intent: str = "sale"
    payer: dict[str, Any] = Field(default_factory=dict)
    redirect_urls: dict[str, Any] = Field(default_factory=dict)
    transactions: list[TransactionRequest] = Field(default_factory=list)

    @field_validator("transactions")
    @classmethod
    def _single_transaction(cls, value):
        if len(value) > 1:
            raise ValueError(f"Only one transaction is allowed, {len(value)} given.")
        return value


class BillingPlanRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    payment_definitions: list[dict[str, Any]] = Field(default_factory=list)
    merchant_preferences: dict[str, Any] = Field(default_factory=dict)

    @field_validator("payment_definitions")
    @classmethod
    def _single_definition(cls, value):
        if len(value) > 1:
            raise ValueError(f"Only one payment definition is allowed, {len(value)} given.")
        return value


class SubscriptionPaymentRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    payment_type: ClassVar[str] = "subscription"

    billing_plan: BillingPlanRequest
    billing_agreement: dict[str, Any] = Field(default_factory=dict)


PaymentRequest = Union[SinglePaymentRequest, SubscriptionPaymentRequest]

REQUEST_MODELS = {
    SinglePaymentRequest.payment_type: SinglePaymentRequest,
    SubscriptionPaymentRequest.payment_type: SubscriptionPaymentRequest,
}


def parse_payment_details(payment_details: dict) -> PaymentRequest:
    for required_key in ("type", "data"):
        if not payment_details.get(required_key):
            raise PaymentDetailsError(
                f"payment_details must contain the {required_key} key.", field=required_key
            )

    payment_type = payment_details["type"]
    if not isinstance(payment_type, str) or payment_type not in PAYMENT_TYPE_LABELS:
        raise PaymentDetailsError(
            f'Payment type should be either "single" or "subscription", {payment_type} given instead.',
            field="type",
        )

    data = payment_details["data"]
    if not isinstance(data, dict):
        raise PaymentDetailsError("Payment data must be an object.", field="data")

    try:
        return REQUEST_MODELS[payment_type].model_validate(data)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(["data", *(str(part) for part in error["loc"])])
        message = error["msg"].removeprefix("Value error, ")
        raise PaymentDetailsError(f"{field}: {message}", field=field) from exc
