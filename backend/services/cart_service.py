"""
Cart service — the single shared cart the storefront checks out from.

A product appears at most once; adding it again bumps the quantity with an
in-place UPDATE so concurrent adds are not lost.
"""
import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database import ping
from db_models import CartItem, Product
from domain.errors import NotFoundError, UpstreamUnavailableError

logger = logging.getLogger(__name__)


async def _require_store(db: AsyncSession) -> None:
    if not await ping(db):
        logger.warning("Database not connected, cannot modify cart")
        raise UpstreamUnavailableError()


async def _items(db: AsyncSession) -> list[dict]:
    res = await db.execute(select(CartItem).execution_options(populate_existing=True))
    return [item.to_dict() for item in res.scalars().all()]


async def get_cart(db: AsyncSession) -> list[dict]:
    """Current cart lines; empty when the store is unreachable."""
    if not await ping(db):
        logger.warning("Database not connected, returning empty cart")
        return []
    try:
        return await _items(db)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching cart: {e}")
        return []


async def add_item(db: AsyncSession, product_id: str, quantity: int = 1) -> list[dict]:
    await _require_store(db)

    product = (
        await db.execute(select(Product).where(Product.id == product_id))
    ).scalar_one_or_none()
    if not product:
        raise NotFoundError("Product", product_id)

    res = await db.execute(
        update(CartItem)
        .where(CartItem.product_id == product_id)
        .values(quantity=CartItem.quantity + quantity)
        .execution_options(synchronize_session=False)
    )
    if res.rowcount == 0:
        db.add(CartItem(
            product_id=product_id,
            title=product.title,
            price=product.price,
            image=product.image,
            quantity=quantity,
        ))
    await db.commit()
    logger.info(f"Cart: +{quantity} × {product.title}")
    return await _items(db)


async def update_item(db: AsyncSession, item_id: str, quantity: int) -> list[dict]:
    """Set a line's quantity; zero or less removes the line."""
    await _require_store(db)
    if quantity <= 0:
        await db.execute(delete(CartItem).where(CartItem.id == item_id))
    else:
        await db.execute(
            update(CartItem)
            .where(CartItem.id == item_id)
            .values(quantity=quantity)
            .execution_options(synchronize_session=False)
        )
    await db.commit()
    return await _items(db)


async def remove_item(db: AsyncSession, item_id: str) -> list[dict]:
    await _require_store(db)
    await db.execute(delete(CartItem).where(CartItem.id == item_id))
    await db.commit()
    return await _items(db)


async def clear_cart(db: AsyncSession) -> None:
    """Delete every cart line. Callers decide whether the store must be up."""
    await db.execute(delete(CartItem))
    await db.commit()


class SharedCart:
    """Cart handle passed to ITN processing, which only ever empties it."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def clear(self) -> None:
        await clear_cart(self.db)
