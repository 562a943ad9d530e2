"""
Checkout service — create pending orders and start PayFast payments.
"""
import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError

from config import Settings, settings
from db_models import Order
from domain.enums import OrderStatus
from domain.errors import UpstreamUnavailableError
from models import CheckoutRequest
from services.order_store import OrderStore
from services.payment_request import build_payment_data, validate_order_input

logger = logging.getLogger(__name__)


def _order_from_request(request: CheckoutRequest) -> Order:
    return Order(
        id=str(uuid.uuid4()),
        customer_info=request.customer_info.to_document(),
        items=[item.to_document() for item in request.items],
        total=request.total,
        status=OrderStatus.PENDING.value,
        payment_status=OrderStatus.PENDING.value,
    )


async def _persist(store: OrderStore, order: Order) -> Order:
    if not await store.is_available():
        raise UpstreamUnavailableError()
    try:
        return await store.insert(order)
    except SQLAlchemyError as e:
        await store.db.rollback()
        logger.error(f"Failed to save order {order.id}: {e}")
        raise UpstreamUnavailableError("Failed to save order")


async def create_order(store: OrderStore, request: CheckoutRequest) -> Order:
    """Validate and persist a pending order."""
    validate_order_input(
        request.customer_info.to_document() if request.customer_info else None,
        request.items,
        request.total,
    )
    order = await _persist(store, _order_from_request(request))
    logger.info(f"  🧾 Order created: {order.id} total={order.total}")
    return order


async def initiate_checkout(
    store: OrderStore,
    request: CheckoutRequest,
    config: Settings | None = None,
) -> dict:
    """
    Persist a pending order and return the signed PayFast form for it.

    Nothing is written when the request is incomplete or the store is down.
    """
    order = await create_order(store, request)
    payment = build_payment_data(
        order.id,
        order.customer_info,
        order.items,
        order.total,
        config or settings,
    )
    return {
        "success": True,
        "paymentData": payment.payment_data,
        "redirectUrl": payment.redirect_url,
        "orderId": order.id,
    }
