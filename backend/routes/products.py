"""
Product catalogue endpoints.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db, ping
from domain.errors import UpstreamUnavailableError
from services import catalog_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("")
async def list_products(db: AsyncSession = Depends(get_db)):
    return await catalog_service.list_products(db)


@router.post("/seed")
async def seed_products(db: AsyncSession = Depends(get_db)):
    """Insert the sample catalogue if the table is empty."""
    if not await ping(db):
        raise UpstreamUnavailableError()
    inserted = await catalog_service.seed_products(db)
    return {"success": True, "message": "Products seeded successfully", "inserted": inserted}


@router.get("/{handle}")
async def get_product(handle: str, db: AsyncSession = Depends(get_db)):
    return await catalog_service.get_product_by_handle(db, handle)
