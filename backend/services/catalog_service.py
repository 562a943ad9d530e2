"""
Catalog service — product listing, lookup by handle, and seeding.

When the database cannot be reached the built-in sample catalogue is served
read-only, so the storefront still renders.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database import ping
from db_models import Product
from domain.errors import NotFoundError

logger = logging.getLogger(__name__)


SAMPLE_PRODUCTS: list[dict] = [
    {
        "id": "1",
        "handle": "digital-watch",
        "title": "Nuke NG101 Digital Watch",
        "price": 295,
        "description": "Built for tough jobs. Water resistant digital watch with durable polymer construction.",
        "image": "/images/g7.png",
        "specs": {"waterResistance": "30m", "material": "Polymer", "weight": "43g"},
    },
    {
        "id": "2",
        "handle": "nuke-cgsr001-digital-watch",
        "title": "Nuke CGSR001 Digital Watch",
        "price": 395,
        "description": "Professional grade digital watch with enhanced durability and precision.",
        "image": "/images/g6.png",
        "specs": {"waterResistance": "50m", "material": "Polymer", "weight": "47g"},
    },
    {
        "id": "3",
        "handle": "box-of-10x-nuke-ng101-digital-watches",
        "title": "Box of 10x Nuke NG101 Digital Watches",
        "price": 249.99,
        "description": "Bulk order of 10 Nuke NG101 Digital Watches. Perfect for teams and organizations.",
        "image": "/images/g7.png",
        "specs": {"waterResistance": "30m", "material": "Polymer", "weight": "43g"},
    },
    {
        "id": "4",
        "handle": "box-of-10x-nuke-cgsr001-digital-watches",
        "title": "Box of 10x Nuke CGSR001 Digital Watches",
        "price": 299.99,
        "description": "Bulk order of 10 Nuke CGSR001 Digital Watches. Professional grade for teams.",
        "image": "/images/g6.png",
        "specs": {"waterResistance": "50m", "material": "Polymer", "weight": "47g"},
    },
]


def _sample_by_handle(handle: str) -> dict:
    for product in SAMPLE_PRODUCTS:
        if product["handle"] == handle:
            return product
    raise NotFoundError("Product", handle)


async def list_products(db: AsyncSession) -> list[dict]:
    if not await ping(db):
        logger.warning("Database not connected, returning sample products")
        return SAMPLE_PRODUCTS
    try:
        res = await db.execute(select(Product).order_by(Product.id))
    except SQLAlchemyError as e:
        logger.error(f"Error fetching products: {e}")
        return SAMPLE_PRODUCTS
    return [p.to_dict() for p in res.scalars().all()]


async def get_product_by_handle(db: AsyncSession, handle: str) -> dict:
    """Product dict for ``handle``; NotFoundError when there is none."""
    if not await ping(db):
        logger.warning(f"Database not connected, looking up sample product {handle}")
        return _sample_by_handle(handle)
    try:
        res = await db.execute(select(Product).where(Product.handle == handle))
    except SQLAlchemyError as e:
        logger.error(f"Error fetching product {handle}: {e}")
        return _sample_by_handle(handle)

    product = res.scalar_one_or_none()
    if not product:
        raise NotFoundError("Product", handle)
    return product.to_dict()


async def seed_products(db: AsyncSession) -> int:
    """
    Insert the sample catalogue when the products table is empty.

    Returns the number of rows inserted (0 when products already exist).
    """
    count = (await db.execute(select(func.count()).select_from(Product))).scalar_one()
    logger.info(f"Found {count} existing products in database")
    if count:
        return 0

    db.add_all(Product(**p) for p in SAMPLE_PRODUCTS)
    await db.commit()
    logger.info(f"✅ Products seeded: {len(SAMPLE_PRODUCTS)}")
    return len(SAMPLE_PRODUCTS)
