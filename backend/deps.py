"""
Shared FastAPI dependencies.

Routers import the store and mail collaborators from here so tests can swap
them with app.dependency_overrides.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from services.email_service import SmtpMailer
from services.order_store import OrderStore

_mailer: SmtpMailer | None = None


def get_order_store(db: AsyncSession = Depends(get_db)) -> OrderStore:
    return OrderStore(db)


def get_mailer() -> SmtpMailer:
    """Process-wide SMTP mailer, built from settings on first use."""
    global _mailer
    if _mailer is None:
        _mailer = SmtpMailer()
    return _mailer
