"""
Order service — listing, direct order placement and payment status lookups.
"""
import logging

from domain.errors import NotFoundError
from models import CheckoutRequest
from services import cart_service
from services.checkout_service import create_order
from services.order_store import OrderStore

logger = logging.getLogger(__name__)


async def list_orders(store: OrderStore) -> list[dict]:
    return [order.to_dict() for order in await store.find_all()]


async def place_order(store: OrderStore, request: CheckoutRequest) -> dict:
    """Create a pending order without going through PayFast, then empty the cart."""
    order = await create_order(store, request)
    await cart_service.clear_cart(store.db)
    return order.to_dict()


async def get_payment_status(store: OrderStore, order_id: str) -> dict:
    order = await store.find_one(order_id)
    if not order:
        raise NotFoundError("Order", order_id)
    return {
        "id": order.id,
        "status": order.status,
        "paymentStatus": order.payment_status,
        "total": order.total,
        "customerInfo": order.customer_info,
        "createdAt": order.created_at.isoformat() if order.created_at else None,
    }
