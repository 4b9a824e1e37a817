from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from paypal_ec.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    currency = Column(String(3), nullable=False)
    total = Column(Integer, nullable=False)        # minor units

    items = relationship("OrderItem", back_populates="order", order_by="OrderItem.id")


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    unit_price = Column(Integer, nullable=False)   # minor units
    quantity = Column(Integer, nullable=False, default=1)

    order = relationship("Order", back_populates="items")


class PaymentMethod(Base):
    __tablename__ = "payment_methods"

    id = Column(Integer, primary_key=True)
    type = Column(String, nullable=False, default="paypal_ec")
    payment_type = Column(String)                  # single | subscription
    remote_id = Column(String, index=True)         # PayPal payment id or agreement token
    reusable = Column(Boolean, nullable=False, default=False)

    # Request-scoped; never written to the database.
    payment_details = None


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    payment_method_id = Column(Integer, ForeignKey("payment_methods.id", ondelete="SET NULL"))
    amount = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False)
    state = Column(String, nullable=False, default="new")   # new | completed | failed
    remote_id = Column(String, index=True)
    authorized_at = Column(DateTime(timezone=True))
    expires_at = Column(DateTime(timezone=True))

    order = relationship("Order")
    payment_method = relationship("PaymentMethod")
