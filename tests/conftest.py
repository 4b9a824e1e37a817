import os

# Must be set before paypal_ec.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_paypal_ec.db")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from paypal_ec.config import GatewayConfig
from paypal_ec.database import Base
from paypal_ec.gateway import PaypalExpressCheckout
from paypal_ec.models import Order, OrderItem
from paypal_ec.paypal_service import ProviderResult

SQLALCHEMY_DATABASE_URL = "sqlite:///./test_temp.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={
                       "check_same_thread": False})
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine)

NOW = datetime(2026, 4, 10, 9, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db():
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def order(db):
    order = Order(currency="USD", total=3500)
    order.items = [
        OrderItem(title="T-shirt", unit_price=1000, quantity=2),
        OrderItem(title="Mug", unit_price=1500, quantity=1),
    ]
    db.add(order)
    db.commit()
    return order


@pytest.fixture
def config():
    return GatewayConfig(
        client_id="client",
        client_secret="secret",
        recurring_start_date=15,
        base_url="https://shop.example.com/",
    )


@pytest.fixture
def provider(mocker):
    provider = mocker.Mock()
    provider.create_single_payment.return_value = ProviderResult.success("PAY-123")
    provider.create_subscription_payment.return_value = ProviderResult.success("EC-456")
    provider.execute_single_payment.return_value = ProviderResult.success("PAY-123")
    provider.execute_subscription_payment.return_value = ProviderResult.success("I-789")
    return provider


@pytest.fixture
def gateway(config, provider):
    return PaypalExpressCheckout(config, provider, clock=lambda: NOW)


def single_details(**data):
    data.setdefault("transactions", [{"amount": {"currency": "USD", "total": "0.01"}}])
    return {"type": "single", "data": data}


def subscription_details(**data):
    data.setdefault("billing_plan", {
        "name": "Monthly box",
        "type": "INFINITE",
        "payment_definitions": [{
            "name": "Monthly",
            "type": "REGULAR",
            "frequency": "MONTH",
            "frequency_interval": "1",
            "cycles": "0",
            "amount": {"value": "0.01", "currency": "USD"},
        }],
    })
    data.setdefault("billing_agreement", {"name": "Monthly box", "description": "Monthly box"})
    return {"type": "subscription", "data": data}
