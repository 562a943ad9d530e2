"""
Email delivery over SMTP.

Two messages leave the store:
    - contact form submissions → store inbox, Reply-To the visitor
    - paid-order notifications → store inbox, Reply-To the customer

SmtpMailer.send() never raises for delivery problems; it returns an
EmailResult so callers can decide whether a failure matters. For paid
orders it does not: the PayFast ITN must still be acknowledged.
"""
import html
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr, make_msgid

from config import Settings, settings
from services.async_executor import run_blocking

logger = logging.getLogger(__name__)


@dataclass
class EmailResult:
    success: bool
    error: str | None = None
    message_id: str | None = None


class SmtpMailer:
    """Sends HTML mail through the configured SMTP relay."""

    def __init__(self, config: Settings | None = None):
        self.config = config or settings

    def _deliver(self, message: EmailMessage) -> None:
        cfg = self.config
        with smtplib.SMTP(cfg.smtp_host, cfg.smtp_port, timeout=cfg.smtp_timeout_seconds) as smtp:
            if cfg.smtp_use_tls:
                smtp.starttls()
            if cfg.smtp_user:
                smtp.login(cfg.smtp_user, cfg.smtp_password)
            smtp.send_message(message)

    def build_message(
        self,
        recipient_name: str,
        recipient_email: str,
        subject: str,
        html_body: str,
        reply_to: str | None = None,
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = formataddr((self.config.store_name, self.config.mail_from))
        message["To"] = formataddr((recipient_name, recipient_email))
        message["Subject"] = subject
        message["Message-ID"] = make_msgid()
        if reply_to:
            message["Reply-To"] = reply_to
        message.set_content("This message is best viewed in an HTML-capable mail client.")
        message.add_alternative(html_body, subtype="html")
        return message

    async def send(
        self,
        recipient_name: str,
        recipient_email: str,
        subject: str,
        html_body: str,
        reply_to: str | None = None,
    ) -> EmailResult:
        message = self.build_message(recipient_name, recipient_email, subject, html_body, reply_to)
        try:
            await run_blocking(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email sending error ({subject!r} → {recipient_email}): {e}")
            return EmailResult(success=False, error=str(e))
        return EmailResult(success=True, message_id=message["Message-ID"])


# ════════════════════════════════════════════════════════════════════
# Message bodies
# ════════════════════════════════════════════════════════════════════


def render_contact_message(name: str, email: str, subject: str, message: str) -> tuple[str, str]:
    """(subject, html) for a contact form submission."""
    e = html.escape
    body = f"""
        <h2>New Contact Form Submission</h2>
        <p><strong>Name:</strong> {e(name)}</p>
        <p><strong>Email:</strong> {e(email)}</p>
        <p><strong>Subject:</strong> {e(subject)}</p>
        <p><strong>Message:</strong></p>
        <p>{e(message)}</p>
        <hr>
        <p><em>Sent from {e(settings.store_name)} website contact form</em></p>
    """
    return f"Contact Form: {subject}", body


def render_order_confirmation(order) -> tuple[str, str]:
    """(subject, html) announcing a paid order to the store."""
    e = html.escape
    info = order.customer_info or {}
    items_html = "".join(
        f"<li>{e(str(item.get('title', '')))} (x{item.get('quantity')}) - R{item.get('price')}</li>"
        for item in (order.items or [])
    )
    address = ", ".join(
        str(info.get(k)) for k in ("address", "city", "province", "postalCode") if info.get(k)
    )
    body = f"""
        <h2>New Paid Order Received</h2>
        <p><strong>Order ID:</strong> {e(order.id)}</p>
        <p><strong>Customer:</strong> {e(info.get('firstName', ''))} {e(info.get('lastName', ''))} ({e(info.get('email', ''))})</p>
        <p><strong>Phone:</strong> {e(info.get('phone') or '')}</p>
        <p><strong>Address:</strong> {e(address)}</p>
        <p><strong>Total:</strong> R{order.total}</p>
        <p><strong>Items:</strong></p>
        <ul>{items_html}</ul>
        <hr>
        <p><em>Sent automatically from {e(settings.store_name)} website (PayFast payment successful)</em></p>
    """
    return f"New Paid Order: {order.id}", body


# ════════════════════════════════════════════════════════════════════
# Senders
# ════════════════════════════════════════════════════════════════════


async def send_contact_message(mailer, *, name: str, email: str, subject: str, message: str) -> EmailResult:
    mail_subject, body = render_contact_message(name, email, subject, message)
    return await mailer.send(
        recipient_name=settings.store_name,
        recipient_email=settings.store_inbox_email,
        subject=mail_subject,
        html_body=body,
        reply_to=email,
    )


async def send_order_confirmation(mailer, order) -> None:
    """
    Notify the store of a paid order.

    Runs after the ITN response; failures are logged and dropped.
    """
    try:
        subject, body = render_order_confirmation(order)
        result = await mailer.send(
            recipient_name=settings.store_name,
            recipient_email=settings.store_inbox_email,
            subject=subject,
            html_body=body,
            reply_to=(order.customer_info or {}).get("email"),
        )
        if result.success:
            logger.info(f"  📧 Order confirmation email sent for {order.id}")
        else:
            logger.error(f"Order confirmation email failed for {order.id}: {result.error}")
    except Exception:
        logger.exception(f"send_order_confirmation crashed for order={getattr(order, 'id', None)}")
