"""
SQLAlchemy ORM models for the storefront backend.

Tables:
    products    — catalogue entries, addressed by handle in URLs
    cart_items  — the shared shopping cart
    orders      — checkout orders and their PayFast outcome

Nested data (customer info, line items, product specs) is kept in JSON
columns so each row reads like the document the frontend sends.
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, DateTime, Text, JSON

from database import Base
from domain.enums import OrderStatus


def _uuid() -> str:
    return str(uuid.uuid4())


class Product(Base):
    """Catalogue product."""
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_uuid)
    handle = Column(String(200), unique=True, nullable=False, index=True)
    title = Column(String(200), nullable=False)
    price = Column(Float, nullable=False)
    description = Column(Text, nullable=True)
    image = Column(String(300), nullable=True)
    specs = Column(JSON, nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "handle": self.handle,
            "title": self.title,
            "price": self.price,
            "description": self.description,
            "image": self.image,
            "specs": self.specs or {},
        }


class CartItem(Base):
    """One line in the cart; a product appears at most once."""
    __tablename__ = "cart_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    product_id = Column(String(36), unique=True, nullable=False, index=True)
    title = Column(String(200), nullable=False)
    price = Column(Float, nullable=False)
    image = Column(String(300), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "title": self.title,
            "price": self.price,
            "image": self.image,
            "quantity": self.quantity,
        }


class Order(Base):
    """Checkout order. Status moves pending → paid | failed, driven by ITN."""
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=_uuid)
    customer_info = Column(JSON, nullable=False)
    items = Column(JSON, nullable=False)
    total = Column(Float, nullable=False)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value, index=True)
    payment_status = Column(String(32), nullable=True)  # raw PayFast payment_status
    payment_id = Column(String(64), nullable=True)  # PayFast pf_payment_id
    confirmation_sent_at = Column(DateTime, nullable=True)  # paid-order email claimed
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customerInfo": self.customer_info,
            "items": self.items,
            "total": self.total,
            "status": self.status,
            "paymentStatus": self.payment_status,
            "paymentId": self.payment_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
