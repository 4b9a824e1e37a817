from functools import lru_cache

from fastapi import APIRouter, Body, Depends, HTTPException

from paypal_ec.auth import verify_token
from paypal_ec.config import load_gateway_config
from paypal_ec.database import SessionLocal
from paypal_ec.gateway import PaypalExpressCheckout
from paypal_ec.models import Order, Payment, PaymentMethod
from paypal_ec.payment_method_type import PAYMENT_METHOD_TYPE, PAYMENT_TYPE_LABELS, build_label
from paypal_ec.paypal_service import PayPalClient
from paypal_ec.schemas import PaymentDetailsError

router = APIRouter(dependencies=[Depends(verify_token)])


@lru_cache
def get_paypal_client(client_id: str, client_secret: str, mode: str) -> PayPalClient:
    # One Api per credentials so its OAuth token is reused until it expires
    return PayPalClient(client_id, client_secret, mode)


def get_gateway() -> PaypalExpressCheckout:
    config = load_gateway_config()
    client = get_paypal_client(config.client_id, config.client_secret, config.mode)
    return PaypalExpressCheckout(config, client)


def _payment_summary(payment: Payment) -> dict:
    return {"payment_id": payment.id, "state": payment.state, "remote_id": payment.remote_id}


def _get_or_404(db, model, record_id):
    record = db.get(model, record_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"{model.__name__} {record_id} not found")
    return record


@router.post("/orders/{order_id}/paypal")
def start_checkout(
    order_id: int,
    payment_details: dict = Body(...),
    gateway: PaypalExpressCheckout = Depends(get_gateway),
):
    db = SessionLocal()
    try:
        order = _get_or_404(db, Order, order_id)

        payment_method = PaymentMethod(type=PAYMENT_METHOD_TYPE)
        try:
            gateway.create_payment_method(db, payment_method, payment_details)
        except PaymentDetailsError as exc:
            raise HTTPException(status_code=422, detail=str(exc))

        payment = Payment(
            order=order,
            payment_method=payment_method,
            amount=order.total,
            currency=order.currency,
            state="new",
        )
        db.add(payment)
        db.commit()

        gateway.create_payment(db, payment, capture=False)
        if not payment.remote_id:
            raise HTTPException(status_code=502, detail="PayPal did not issue a payment token")

        return {
            "payment_id": payment.id,
            "payment_method_id": payment_method.id,
            "token": payment.remote_id,
        }
    finally:
        db.close()


@router.post("/payments/{payment_id}/capture")
def capture_payment(payment_id: int, gateway: PaypalExpressCheckout = Depends(get_gateway)):
    db = SessionLocal()
    try:
        payment = _get_or_404(db, Payment, payment_id)
        gateway.capture_payment(db, payment)
        return _payment_summary(payment)
    finally:
        db.close()


@router.post("/payments/{payment_id}/void")
def void_payment(payment_id: int, gateway: PaypalExpressCheckout = Depends(get_gateway)):
    db = SessionLocal()
    try:
        payment = _get_or_404(db, Payment, payment_id)
        gateway.void_payment(db, payment)
        return _payment_summary(payment)
    finally:
        db.close()


@router.post("/payments/{payment_id}/refund")
def refund_payment(payment_id: int, gateway: PaypalExpressCheckout = Depends(get_gateway)):
    db = SessionLocal()
    try:
        payment = _get_or_404(db, Payment, payment_id)
        gateway.refund_payment(db, payment)
        return _payment_summary(payment)
    finally:
        db.close()


@router.get("/payment-methods/{payment_method_id}")
def get_payment_method(payment_method_id: int):
    db = SessionLocal()
    try:
        payment_method = _get_or_404(db, PaymentMethod, payment_method_id)
        return {
            "id": payment_method.id,
            "payment_type": payment_method.payment_type,
            "payment_type_label": PAYMENT_TYPE_LABELS.get(payment_method.payment_type),
            "remote_id": payment_method.remote_id,
            "label": build_label(payment_method),
        }
    finally:
        db.close()


@router.delete("/payment-methods/{payment_method_id}")
def delete_payment_method(
    payment_method_id: int, gateway: PaypalExpressCheckout = Depends(get_gateway)
):
    db = SessionLocal()
    try:
        payment_method = _get_or_404(db, PaymentMethod, payment_method_id)
        gateway.delete_payment_method(db, payment_method)
        return {"deleted": True}
    finally:
        db.close()
