"""
Pytest configuration and shared fixtures for the storefront tests.

Provides an in-memory SQLite session, an httpx client bound to the FastAPI
app, a recording mailer, and PayFast helpers for building signed ITNs.
"""
import os
import tempfile

# Point the app's own engine somewhere harmless before anything imports it.
os.environ.setdefault(
    "DATABASE_URL", f"sqlite:///{os.path.join(tempfile.mkdtemp(), 'test.db')}"
)

import pytest
from typing import AsyncGenerator

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from config import settings
from database import Base, get_db
from deps import get_mailer
from middleware.rate_limit import limiter
from services.catalog_service import seed_products
from services.email_service import EmailResult
from services.payfast_signature import generate_signature

TEST_PASSPHRASE = "test-passphrase"


# ── Database Fixtures ────────────────────────────────────────────────


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create an in-memory SQLite database session for each test.

    Uses StaticPool to allow in-memory SQLite with async SQLAlchemy.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture(scope="function")
async def unreachable_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Session whose database file cannot be opened; every query fails."""
    engine = create_async_engine(
        "sqlite+aiosqlite:////nonexistent-dir/storefront.db",
        poolclass=StaticPool,
    )
    async with async_sessionmaker(engine, class_=AsyncSession)() as session:
        yield session
    await engine.dispose()


@pytest.fixture
async def seeded_db(db_session: AsyncSession) -> AsyncSession:
    await seed_products(db_session)
    return db_session


# ── Mail Fixtures ────────────────────────────────────────────────────


class FakeMailer:
    """Records every send() call instead of talking to SMTP."""

    def __init__(self):
        self.sent: list[dict] = []
        self.fail_with: str | None = None
        self.raise_exc: Exception | None = None

    async def send(self, recipient_name, recipient_email, subject, html_body, reply_to=None):
        if self.raise_exc:
            raise self.raise_exc
        if self.fail_with:
            return EmailResult(success=False, error=self.fail_with)
        self.sent.append({
            "recipient_name": recipient_name,
            "recipient_email": recipient_email,
            "subject": subject,
            "html_body": html_body,
            "reply_to": reply_to,
        })
        return EmailResult(success=True, message_id=f"<fake-{len(self.sent)}@test>")


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


# ── Settings Fixtures ────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def payfast_settings(monkeypatch):
    """Known passphrase and sandbox mode for every test."""
    monkeypatch.setattr(settings, "payfast_passphrase", TEST_PASSPHRASE)
    monkeypatch.setattr(settings, "payfast_sandbox", True)
    return settings


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    limiter.reset()
    yield
    limiter.reset()


# ── HTTP Client Fixtures ─────────────────────────────────────────────


def _client_for(session: AsyncSession, mailer: FakeMailer) -> AsyncClient:
    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def client(seeded_db: AsyncSession, mailer: FakeMailer) -> AsyncGenerator[AsyncClient, None]:
    """
    FastAPI client over a seeded in-memory database.

    Background tasks finish before the response is returned, so mail sent
    after an ITN is visible on ``mailer`` right away.
    """
    async with _client_for(seeded_db, mailer) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def offline_client(unreachable_db_session: AsyncSession, mailer: FakeMailer) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI client whose database is unreachable."""
    async with _client_for(unreachable_db_session, mailer) as c:
        yield c
    app.dependency_overrides.clear()


# ── Test Data Fixtures ───────────────────────────────────────────────


@pytest.fixture
def customer_info() -> dict:
    return {
        "firstName": "John",
        "lastName": "Doe",
        "email": "test@example.com",
        "phone": "0821234567",
        "address": "1 Long Street",
        "city": "Cape Town",
        "province": "Western Cape",
        "postalCode": "8001",
    }


@pytest.fixture
def checkout_payload(customer_info) -> dict:
    return {
        "customerInfo": customer_info,
        "items": [
            {"productId": "1", "title": "Nuke NG101 Digital Watch", "price": 295, "quantity": 2},
            {"productId": "2", "title": "Nuke CGSR001 Digital Watch", "price": 395, "quantity": 1},
        ],
        "total": 985,
    }


def signed_itn(order_id: str, payment_status: str = "COMPLETE", passphrase: str = TEST_PASSPHRASE, **extra) -> dict:
    """
    An ITN body as PayFast would post it for ``order_id``.

    Gateway-only fields are included; they are not part of the signature.
    """
    data = {
        "m_payment_id": order_id,
        "pf_payment_id": "1089250",
        "payment_status": payment_status,
        "item_name": f"Nuke Order - {order_id[:8]}",
        "amount_gross": "985.00",
        "amount_fee": "-22.65",
        "amount_net": "962.35",
        "custom_str1": order_id,
        "name_first": "John",
        "name_last": "Doe",
        "email_address": "test@example.com",
        "merchant_id": settings.payfast_merchant_id,
    }
    data.update(extra)
    data["signature"] = generate_signature(data, passphrase)
    return data


@pytest.fixture
def itn():
    return signed_itn
