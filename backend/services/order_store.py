"""
Order store — the persistence collaborator used by checkout and ITN handling.

Wraps an AsyncSession handed in by the caller (FastAPI dependency), so nothing
here holds a global connection. Every write is a single statement committed on
its own; status changes are plain SET updates keyed by order id, optionally
guarded by column conditions, so concurrent or repeated ITNs never do a
read-modify-write.
"""
import logging
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from database import ping
from db_models import Order

logger = logging.getLogger(__name__)


class OrderStore:
    """insert / find_one / update_one over the orders table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def is_available(self) -> bool:
        """Capability check. Never raises; False means answer 503."""
        return await ping(self.db)

    async def insert(self, order: Order) -> Order:
        self.db.add(order)
        await self.db.commit()
        return order

    async def find_one(self, order_id: str) -> Order | None:
        result = await self.db.execute(
            select(Order)
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_all(self) -> list[Order]:
        result = await self.db.execute(select(Order).order_by(Order.created_at.desc()))
        return list(result.scalars().all())

    async def update_one(
        self,
        order_id: str,
        fields: dict[str, Any],
        *,
        only_if: dict[str, Any] | None = None,
    ) -> int:
        """
        SET ``fields`` on one order and return the number of rows changed.

        ``only_if`` adds column conditions to the WHERE clause (None means
        IS NULL). A return value of 0 means no such order, or the guard did
        not hold; callers treat that as a no-op, not an error.
        """
        stmt = update(Order).where(Order.id == order_id)
        for column_name, expected in (only_if or {}).items():
            column = getattr(Order, column_name)
            stmt = stmt.where(column.is_(None) if expected is None else column == expected)
        stmt = stmt.values(**fields).execution_options(synchronize_session=False)

        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount
