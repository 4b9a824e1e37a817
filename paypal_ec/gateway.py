import logging
from datetime import datetime, timedelta, timezone

from paypal_ec.config import GatewayConfig
from paypal_ec.payloads import build_single_payload, build_subscription_payload
from paypal_ec.paypal_service import PaymentProvider, ProviderResult
from paypal_ec.recurring import calculate_start_date, format_start_date
from paypal_ec.schemas import parse_payment_details

logger = logging.getLogger(__name__)

AUTHORIZATION_WINDOW = timedelta(days=29)


class PaymentStateError(ValueError):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PaypalExpressCheckout:
    """PayPal Express Checkout payment gateway.

    Payments go through two phases. ``create_payment`` registers the payment
    (or billing plan + agreement) with PayPal and stores the token the
    checkout.js popup needs. Once the buyer approves it in the popup,
    ``capture_payment`` executes it and completes the local payment.

    Provider failures, and any error raised while building or sending a
    request, are logged and leave local records untouched. Nothing from
    PayPal is raised to the caller.
    """

    plugin_id = "paypal_ec"
    label = "PayPal (Express Checkout)"

    def __init__(self, config: GatewayConfig, provider: PaymentProvider, clock=_utcnow):
        self.config = config
        self.provider = provider
        self.clock = clock

    def create_payment_method(self, db, payment_method, payment_details: dict):
        request = parse_payment_details(payment_details)

        payment_method.reusable = False
        payment_method.payment_type = request.payment_type
        db.add(payment_method)
        db.commit()

        # Staged for create_payment in the same request, payment_details is not a column
        payment_method.payment_details = request

    def create_payment(self, db, payment, capture: bool = True):
        if payment.state != "new":
            raise PaymentStateError(f"Payment {payment.id} is {payment.state}, expected new.")

        # Express checkout captures after the buyer confirms in the popup
        if capture:
            return

        payment_method = payment.payment_method
        request = payment_method.payment_details if payment_method is not None else None
        if request is None:
            logger.error("Payment %s has no PayPal payment details to submit", payment.id)
            return

        try:
            result = self._submit(payment_method.payment_type, request, payment.order)
        except Exception:
            logger.exception("PayPal %s payment for order %s could not be created",
                             payment_method.payment_type, payment.order_id)
            return

        if not result.ok:
            logger.error("PayPal %s payment for order %s failed: %s",
                         payment_method.payment_type, payment.order_id, result.error)
            return

        payment_method.remote_id = result.remote_id
        payment.remote_id = result.remote_id
        db.commit()

    def capture_payment(self, db, payment, amount=None):
        payment_method = payment.payment_method
        if payment_method is None or not payment_method.remote_id:
            logger.error("Payment %s has no PayPal token to execute", payment.id)
            return

        try:
            result = self._execute(payment_method)
        except Exception:
            logger.exception("PayPal execution of %s raised", payment_method.remote_id)
            return
        if not result.ok:
            logger.error("PayPal execution of %s failed: %s", payment_method.remote_id, result.error)
            return

        now = self.clock()
        payment.state = "completed"
        payment.authorized_at = now
        payment.expires_at = now + AUTHORIZATION_WINDOW
        payment.remote_id = result.remote_id
        payment_method.remote_id = result.remote_id
        db.commit()
        logger.info("Payment %s completed as %s", payment.id, result.remote_id)

    def _submit(self, payment_type, request, order) -> ProviderResult:
        if payment_type == "subscription":
            start_date = calculate_start_date(self.config.recurring_start_date, self.clock())
            payload = build_subscription_payload(
                request, order, self.config.base_url, format_start_date(start_date)
            )
            return self.provider.create_subscription_payment(payload)
        payload = build_single_payload(request, order, self.config.base_url)
        return self.provider.create_single_payment(payload)

    def _execute(self, payment_method) -> ProviderResult:
        if payment_method.payment_type == "subscription":
            return self.provider.execute_subscription_payment(payment_method.remote_id)
        if payment_method.payment_type == "single":
            return self.provider.execute_single_payment(payment_method.remote_id)
        return ProviderResult.failure(f"Unknown payment type {payment_method.payment_type!r}")

    def delete_payment_method(self, db, payment_method):
        db.delete(payment_method)
        db.commit()

    def void_payment(self, db, payment):
        logger.warning("Voiding PayPal payments is not supported, payment %s left as is", payment.id)

    def refund_payment(self, db, payment, amount=None):
        logger.warning("Refunding PayPal payments is not supported, payment %s left as is", payment.id)

    def update_payment_method(self, db, payment_method):
        logger.warning("PayPal payment method %s can't be updated", payment_method.id)
