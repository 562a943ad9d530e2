"""
HTTP tests for /api/payments.

Tests: initiate, notify (ITN), status, config.
"""
import pytest

from domain.constants import PAYFAST_SANDBOX_URL
from services.order_store import OrderStore
from services.payfast_signature import verify_signature


async def _initiate(client, payload) -> dict:
    response = await client.post("/api/payments/initiate", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


class TestInitiate:

    @pytest.mark.api
    async def test_returns_signed_payload(self, client, checkout_payload, payfast_settings):
        body = await _initiate(client, checkout_payload)

        assert body["success"] is True
        assert body["redirectUrl"] == PAYFAST_SANDBOX_URL
        data = body["paymentData"]
        assert data["m_payment_id"] == body["orderId"]
        assert data["amount"] == "985.00"
        assert data["item_name"] == f"Nuke Order - {body['orderId'][:8]}"
        assert verify_signature(data, data["signature"], payfast_settings.payfast_passphrase)

    @pytest.mark.api
    async def test_persists_pending_order(self, client, db_session, checkout_payload):
        body = await _initiate(client, checkout_payload)

        order = await OrderStore(db_session).find_one(body["orderId"])
        assert order.status == "pending"
        assert order.payment_status == "pending"
        assert order.total == 985
        assert order.customer_info["email"] == "test@example.com"
        assert [i["quantity"] for i in order.items] == [2, 1]

    @pytest.mark.api
    @pytest.mark.parametrize("missing", ["customerInfo", "items", "total"])
    async def test_missing_fields_rejected(self, client, db_session, checkout_payload, missing):
        del checkout_payload[missing]
        response = await client.post("/api/payments/initiate", json=checkout_payload)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["message"] == "Missing required payment information"
        assert await OrderStore(db_session).find_all() == []

    @pytest.mark.api
    async def test_partial_customer_info_is_400(self, client, db_session, checkout_payload):
        checkout_payload["customerInfo"] = {"firstName": "John", "email": ""}
        response = await client.post("/api/payments/initiate", json=checkout_payload)

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "validation"
        assert error["message"] == "Missing required payment information"
        assert error["details"]["missing"] == ["customerInfo.lastName", "customerInfo.email"]
        assert await OrderStore(db_session).find_all() == []

    @pytest.mark.api
    async def test_store_unavailable(self, offline_client, checkout_payload):
        response = await offline_client.post("/api/payments/initiate", json=checkout_payload)
        assert response.status_code == 503
        assert response.json()["error"]["message"] == "Database not available"


class TestNotify:

    @pytest.mark.api
    async def test_complete_marks_paid(self, client, db_session, checkout_payload, mailer, itn):
        order_id = (await _initiate(client, checkout_payload))["orderId"]

        response = await client.post("/api/payments/notify", data=itn(order_id, "COMPLETE"))

        assert response.status_code == 200
        assert response.text == "OK"
        order = await OrderStore(db_session).find_one(order_id)
        assert order.status == "paid"
        assert order.payment_id == "1089250"
        assert len(mailer.sent) == 1
        assert order_id in mailer.sent[0]["html_body"]

    @pytest.mark.api
    async def test_duplicate_notification_one_email(self, client, db_session, checkout_payload, mailer, itn):
        order_id = (await _initiate(client, checkout_payload))["orderId"]
        data = itn(order_id, "COMPLETE")

        first = await client.post("/api/payments/notify", data=data)
        second = await client.post("/api/payments/notify", data=data)

        assert (first.status_code, second.status_code) == (200, 200)
        assert (await OrderStore(db_session).find_one(order_id)).status == "paid"
        assert len(mailer.sent) == 1

    @pytest.mark.api
    async def test_invalid_signature(self, client, db_session, checkout_payload, mailer, itn):
        order_id = (await _initiate(client, checkout_payload))["orderId"]
        data = itn(order_id, "COMPLETE")
        data["signature"] = "0" * 32

        response = await client.post("/api/payments/notify", data=data)

        assert response.status_code == 400
        assert response.text == "Invalid signature"
        assert (await OrderStore(db_session).find_one(order_id)).status == "pending"
        assert mailer.sent == []

    @pytest.mark.api
    async def test_failed(self, client, db_session, checkout_payload, itn):
        order_id = (await _initiate(client, checkout_payload))["orderId"]

        response = await client.post("/api/payments/notify", data=itn(order_id, "FAILED"))

        assert response.status_code == 200
        assert (await OrderStore(db_session).find_one(order_id)).status == "failed"

    @pytest.mark.api
    async def test_unknown_order_still_ok(self, client, itn):
        response = await client.post("/api/payments/notify", data=itn("unknown-order", "COMPLETE"))
        assert response.status_code == 200
        assert response.text == "OK"

    @pytest.mark.api
    async def test_email_failure_still_ok(self, client, db_session, checkout_payload, mailer, itn):
        mailer.fail_with = "SMTP down"
        order_id = (await _initiate(client, checkout_payload))["orderId"]

        response = await client.post("/api/payments/notify", data=itn(order_id, "COMPLETE"))

        assert response.status_code == 200
        assert (await OrderStore(db_session).find_one(order_id)).status == "paid"

    @pytest.mark.api
    async def test_processing_error_is_500(self, client, monkeypatch, itn):
        async def broken_update(*args, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(OrderStore, "update_one", broken_update)
        response = await client.post("/api/payments/notify", data=itn("any-order", "COMPLETE"))

        assert response.status_code == 500
        assert response.text == "Error processing notification"


class TestStatusAndConfig:

    @pytest.mark.api
    async def test_status(self, client, checkout_payload):
        order_id = (await _initiate(client, checkout_payload))["orderId"]

        response = await client.get(f"/api/payments/status/{order_id}")

        assert response.status_code == 200
        order = response.json()["order"]
        assert order["id"] == order_id
        assert order["status"] == "pending"
        assert order["paymentStatus"] == "pending"
        assert order["total"] == 985
        assert order["customerInfo"]["firstName"] == "John"
        assert order["createdAt"]

    @pytest.mark.api
    async def test_status_unknown_order(self, client):
        response = await client.get("/api/payments/status/nope")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "notfound"

    @pytest.mark.api
    async def test_config_hides_secrets(self, client, payfast_settings):
        response = await client.get("/api/payments/config")

        body = response.json()
        assert body["merchantId"] == payfast_settings.payfast_merchant_id
        assert body["sandbox"] is True
        assert body["processUrl"] == PAYFAST_SANDBOX_URL
        assert body["passphraseConfigured"] is True
        assert payfast_settings.payfast_passphrase not in response.text
        assert payfast_settings.payfast_merchant_key not in response.text
