"""Turn checkout requests into PayPal API payloads.

The order is authoritative for prices: amounts and line items sent by the
browser are always replaced with the order's own values.
"""

from decimal import Decimal

from paypal_ec.schemas import SinglePaymentRequest, SubscriptionPaymentRequest


# PayPal refuses decimals for these; their amounts are stored in whole units.
ZERO_DECIMAL_CURRENCIES = {"HUF", "JPY", "TWD"}


def format_amount(minor_units: int, currency: str = "USD") -> str:
    if currency.upper() in ZERO_DECIMAL_CURRENCIES:
        return str(int(minor_units))
    return f"{Decimal(minor_units) / 100:.2f}"


def order_line_items(order) -> list[dict]:
    return [
        {
            "name": item.title,
            "currency": order.currency,
            "price": format_amount(item.unit_price, order.currency),
            "quantity": int(item.quantity),
        }
        for item in order.items
    ]


def build_single_payload(request: SinglePaymentRequest, order, base_url: str) -> dict:
    payload = request.model_dump()
    payload["intent"] = payload.get("intent") or "sale"
    payload["payer"].setdefault("payment_method", "paypal")
    payload["redirect_urls"].update(return_url=base_url, cancel_url=base_url)

    if not payload["transactions"]:
        payload["transactions"].append({})
    transaction = payload["transactions"][0]
    transaction["amount"] = {
        "currency": order.currency,
        "total": format_amount(order.total, order.currency),
    }
    item_list = transaction.get("item_list") or {}
    item_list["items"] = order_line_items(order)
    transaction["item_list"] = item_list
    return payload


def build_subscription_payload(
    request: SubscriptionPaymentRequest, order, base_url: str, start_date: str
) -> dict:
    payload = request.model_dump()
    plan = payload["billing_plan"]
    plan["merchant_preferences"].update(return_url=base_url, cancel_url=base_url)

    if plan["payment_definitions"]:
        plan["payment_definitions"][0]["amount"] = {
            "value": format_amount(order.total, order.currency),
            "currency": order.currency,
        }

    payload["billing_agreement"]["start_date"] = start_date
    return payload
