"""
Contact form endpoint — forwards visitor messages to the store inbox.
"""
import logging

from fastapi import APIRouter, Depends

from deps import get_mailer
from domain.errors import DeliveryError
from middleware.rate_limit import rate_limit
from models import ContactRequest
from services.email_service import send_contact_message
from utils.validators import require_fields, validate_email

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/contact", tags=["contact"])


@router.post("/submit", dependencies=[Depends(rate_limit())])
async def submit_contact(request: ContactRequest, mailer=Depends(get_mailer)):
    require_fields(
        name=request.name,
        email=request.email,
        subject=request.subject,
        message=request.message,
    )
    validate_email(request.email)

    result = await send_contact_message(
        mailer,
        name=request.name,
        email=request.email,
        subject=request.subject,
        message=request.message,
    )
    if not result.success:
        raise DeliveryError("Failed to send email. Please try again later.")

    logger.info(f"  📨 Contact message from {request.email} forwarded")
    return {"success": True, "message": "Thank you for your message! We will get back to you soon."}
