"""
Cart endpoints.

Reads degrade to an empty cart when the database is down; writes answer 503.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db, ping
from domain.errors import UpstreamUnavailableError
from models import CartAddRequest, CartUpdateRequest
from services import cart_service

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("")
async def get_cart(db: AsyncSession = Depends(get_db)):
    return await cart_service.get_cart(db)


@router.post("/add")
async def add_to_cart(request: CartAddRequest, db: AsyncSession = Depends(get_db)):
    cart = await cart_service.add_item(db, request.product_id, request.quantity)
    return {"success": True, "cart": cart}


@router.put("/{item_id}")
async def update_cart_item(item_id: str, request: CartUpdateRequest, db: AsyncSession = Depends(get_db)):
    cart = await cart_service.update_item(db, item_id, request.quantity)
    return {"success": True, "cart": cart}


@router.delete("/{item_id}")
async def remove_cart_item(item_id: str, db: AsyncSession = Depends(get_db)):
    cart = await cart_service.remove_item(db, item_id)
    return {"success": True, "cart": cart}


@router.delete("")
async def clear_cart(db: AsyncSession = Depends(get_db)):
    if not await ping(db):
        raise UpstreamUnavailableError()
    await cart_service.clear_cart(db)
    return {"success": True, "cart": []}
