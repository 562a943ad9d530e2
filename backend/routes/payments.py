"""
PayFast payment endpoints.

    POST /api/payments/initiate       — create order, return signed form
    POST /api/payments/notify         — ITN callback from PayFast (form-encoded)
    GET  /api/payments/status/{id}    — order/payment status for the return page
    GET  /api/payments/config         — public gateway settings
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from fastapi.responses import PlainTextResponse

from config import settings
from deps import get_mailer, get_order_store
from domain.errors import SignatureMismatchError
from models import CheckoutRequest, PaymentInitiateResponse
from services import order_service
from services.cart_service import SharedCart
from services.checkout_service import initiate_checkout
from services.itn_service import process_notification
from services.order_store import OrderStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post("/initiate", response_model=PaymentInitiateResponse)
async def initiate_payment(
    request: CheckoutRequest,
    store: OrderStore = Depends(get_order_store),
):
    return await initiate_checkout(store, request)


@router.post("/notify", response_class=PlainTextResponse)
async def payment_notification(
    request: Request,
    background_tasks: BackgroundTasks,
    store: OrderStore = Depends(get_order_store),
    mailer=Depends(get_mailer),
):
    """
    PayFast ITN. Always answers in plain text: PayFast only looks at the
    status code and retries anything that is not a 200.
    """
    try:
        data = dict(await request.form())
        logger.info(f"PayFast notification received: {data}")
        await process_notification(
            data,
            store=store,
            cart=SharedCart(store.db),
            mailer=mailer,
            passphrase=settings.payfast_passphrase,
            schedule=background_tasks.add_task,
        )
    except SignatureMismatchError as e:
        return PlainTextResponse(e.message, status_code=status.HTTP_400_BAD_REQUEST)
    except Exception:
        logger.exception("Error processing PayFast notification")
        return PlainTextResponse(
            "Error processing notification",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return PlainTextResponse("OK")


@router.get("/status/{order_id}")
async def payment_status(order_id: str, store: OrderStore = Depends(get_order_store)):
    order = await order_service.get_payment_status(store, order_id)
    return {"success": True, "order": order}


@router.get("/config")
async def payment_config():
    """Non-secret gateway settings, for checking which PayFast we talk to."""
    return {
        "merchantId": settings.payfast_merchant_id,
        "sandbox": settings.payfast_sandbox,
        "processUrl": settings.payfast_process_url,
        "returnUrl": settings.payfast_return_url,
        "cancelUrl": settings.payfast_cancel_url,
        "notifyUrl": settings.payfast_notify_url,
        "passphraseConfigured": bool(settings.payfast_passphrase),
    }
