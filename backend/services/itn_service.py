"""
PayFast ITN (Instant Transaction Notification) handling.

PayFast POSTs the outcome of every payment to our notify_url and retries
until it gets a 200. The same notification can therefore arrive more than
once, and must be safe to apply again:

    - payment_status / payment_id are plain SETs
    - pending → paid | failed only happens while the order is still pending
    - the cart is cleared before pending → paid is committed, so a failed
      clear leaves the order pending for the retry
    - the paid-order email is claimed by stamping confirmation_sent_at,
      conditional on it still being NULL, so only one caller ever sends it
"""
import logging
from datetime import datetime
from typing import Any, Callable, Mapping

from domain.constants import SIGNATURE_FIELD
from domain.enums import GatewayPaymentStatus, OrderStatus
from domain.errors import SignatureMismatchError
from services.email_service import send_order_confirmation
from services.payfast_signature import verify_signature

logger = logging.getLogger(__name__)


async def _transition(store, order_id: str, status: OrderStatus) -> bool:
    """Move a pending order to ``status``. False when it was not pending."""
    changed = await store.update_one(
        order_id,
        {"status": status.value},
        only_if={"status": OrderStatus.PENDING.value},
    )
    return bool(changed)


async def _claim_confirmation(store, order_id: str) -> bool:
    claimed = await store.update_one(
        order_id,
        {"confirmation_sent_at": datetime.utcnow()},
        only_if={"confirmation_sent_at": None, "status": OrderStatus.PAID.value},
    )
    return bool(claimed)


async def process_notification(
    data: Mapping[str, Any],
    *,
    store,
    cart,
    mailer,
    passphrase: str | None,
    schedule: Callable[..., Any] | None = None,
) -> None:
    """
    Verify and apply one ITN.

    Args:
        data: The form fields PayFast posted, signature included.
        store: OrderStore the order lives in.
        cart: Object with an async ``clear()``; emptied when an order is paid.
        mailer: Passed through to the confirmation email.
        passphrase: Merchant passphrase the signature was made with.
        schedule: ``BackgroundTasks.add_task``-style callable used to send
            the confirmation email after the response. When None the email
            is awaited inline.

    Raises:
        SignatureMismatchError: the signature does not match; nothing is
            written.
    """
    payload = dict(data)
    signature = payload.pop(SIGNATURE_FIELD, None)

    if not verify_signature(payload, signature, passphrase):
        logger.error(f"❌ Invalid PayFast signature, notification rejected: {dict(data)}")
        raise SignatureMismatchError()

    order_id = payload.get("m_payment_id")
    payment_status = payload.get("payment_status")
    logger.info(f"  🔔 ITN verified: order={order_id} payment_status={payment_status}")

    updated = await store.update_one(
        order_id,
        {
            "payment_status": payment_status,
            "payment_id": payload.get("pf_payment_id"),
            "updated_at": datetime.utcnow(),
        },
    )
    if not updated:
        logger.warning(f"ITN for unknown order {order_id!r}, acknowledging anyway")
        return

    if payment_status == GatewayPaymentStatus.COMPLETE.value:
        # Cart first: if clearing fails the order stays pending and the
        # gateway's retry gets another go at both.
        order = await store.find_one(order_id)
        if order is not None and order.status == OrderStatus.PENDING.value:
            await cart.clear()

        if await _transition(store, order_id, OrderStatus.PAID):
            logger.info(f"  ✅ Order {order_id} paid")

        if await _claim_confirmation(store, order_id):
            order = await store.find_one(order_id)
            if schedule is not None:
                schedule(send_order_confirmation, mailer, order)
            else:
                await send_order_confirmation(mailer, order)

    elif payment_status == GatewayPaymentStatus.FAILED.value:
        if await _transition(store, order_id, OrderStatus.FAILED):
            logger.info(f"  Order {order_id} payment failed")
