"""
Tests for SMTP delivery and message rendering.

SMTP itself is never contacted: SmtpMailer._deliver is swapped out.
"""
import smtplib
from types import SimpleNamespace

import pytest

from config import Settings
from services.email_service import (
    SmtpMailer,
    render_order_confirmation,
    send_order_confirmation,
)


@pytest.fixture
def smtp_settings() -> Settings:
    return Settings(
        smtp_host="smtp.test",
        smtp_user="hello@nukebrand.com",
        smtp_password="pw",
        mail_from="hello@nukebrand.com",
        store_name="Nuke Brand",
    )


@pytest.fixture
def order():
    return SimpleNamespace(
        id="order-123",
        total=985.0,
        customer_info={
            "firstName": "John",
            "lastName": "Doe",
            "email": "test@example.com",
            "phone": "0821234567",
            "address": "1 Long Street",
            "city": "Cape Town",
            "postalCode": "8001",
        },
        items=[
            {"title": "Nuke NG101 Digital Watch", "price": 295, "quantity": 2},
            {"title": "Watch <Limited>", "price": 395, "quantity": 1},
        ],
    )


class TestSmtpMailer:

    @pytest.mark.unit
    def test_build_message_headers(self, smtp_settings):
        message = SmtpMailer(smtp_settings).build_message(
            "Nuke Brand", "inbox@nukebrand.com", "Hello", "<p>Hi</p>", reply_to="jane@example.com"
        )
        assert message["From"] == "Nuke Brand <hello@nukebrand.com>"
        assert message["To"] == "Nuke Brand <inbox@nukebrand.com>"
        assert message["Reply-To"] == "jane@example.com"
        assert message["Message-ID"]
        assert message.get_body(("html",)).get_content().strip() == "<p>Hi</p>"

    @pytest.mark.unit
    async def test_send_success(self, smtp_settings, monkeypatch):
        delivered = []
        mailer = SmtpMailer(smtp_settings)
        monkeypatch.setattr(mailer, "_deliver", delivered.append)

        result = await mailer.send("Nuke Brand", "inbox@nukebrand.com", "Hello", "<p>Hi</p>")

        assert result.success is True
        assert result.message_id == delivered[0]["Message-ID"]

    @pytest.mark.unit
    async def test_send_failure_returns_result(self, smtp_settings, monkeypatch):
        def refuse(message):
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

        mailer = SmtpMailer(smtp_settings)
        monkeypatch.setattr(mailer, "_deliver", refuse)

        result = await mailer.send("Nuke Brand", "inbox@nukebrand.com", "Hello", "<p>Hi</p>")

        assert result.success is False
        assert "bad credentials" in result.error

    @pytest.mark.unit
    async def test_connection_error_returns_result(self, smtp_settings, monkeypatch):
        def unreachable(message):
            raise ConnectionRefusedError("refused")

        mailer = SmtpMailer(smtp_settings)
        monkeypatch.setattr(mailer, "_deliver", unreachable)

        result = await mailer.send("Nuke Brand", "inbox@nukebrand.com", "Hello", "<p>Hi</p>")
        assert result.success is False


class TestOrderConfirmation:

    @pytest.mark.unit
    def test_render_lists_order_details(self, order):
        subject, body = render_order_confirmation(order)

        assert subject == "New Paid Order: order-123"
        assert "John" in body and "Doe" in body
        assert "0821234567" in body
        assert "1 Long Street, Cape Town, 8001" in body
        assert "R985.0" in body
        assert "Nuke NG101 Digital Watch (x2)" in body
        assert "Watch &lt;Limited&gt;" in body

    @pytest.mark.unit
    async def test_send_goes_to_store_inbox(self, order, mailer):
        from config import settings

        await send_order_confirmation(mailer, order)

        assert mailer.sent[0]["recipient_email"] == settings.store_inbox_email
        assert mailer.sent[0]["reply_to"] == "test@example.com"

    @pytest.mark.unit
    async def test_failures_swallowed(self, order, mailer):
        mailer.raise_exc = OSError("network down")
        await send_order_confirmation(mailer, order)
        assert mailer.sent == []
