"""The ``paypal_ec`` payment method type.

Its stored fields are the ``payment_type`` and ``remote_id`` columns of
:class:`paypal_ec.models.PaymentMethod`.
"""

PAYMENT_METHOD_TYPE = "paypal_ec"

PAYMENT_TYPE_LABELS = {
    "single": "Single Payment",
    "subscription": "Recurring Payment",
}


def build_label(payment_method) -> str:
    return f"**** {payment_method.payment_type} ({payment_method.remote_id})"
