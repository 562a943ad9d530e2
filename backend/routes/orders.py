"""
Order endpoints.
"""
from fastapi import APIRouter, Depends

from deps import get_order_store
from domain.errors import UpstreamUnavailableError
from models import CheckoutRequest
from services import order_service
from services.order_store import OrderStore

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("")
async def list_orders(store: OrderStore = Depends(get_order_store)):
    if not await store.is_available():
        raise UpstreamUnavailableError()
    return await order_service.list_orders(store)


@router.post("")
async def create_order(request: CheckoutRequest, store: OrderStore = Depends(get_order_store)):
    order = await order_service.place_order(store, request)
    return {"success": True, "order": order}
