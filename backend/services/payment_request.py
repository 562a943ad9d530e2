"""
PayFast payment request builder.

Turns an order (customer info, line items, total) into the hidden form
fields the browser posts to PayFast, signed with the merchant passphrase.
"""
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from config import Settings, settings
from domain.constants import (
    CUSTOM_STR_MAX_LENGTH,
    ITEM_NAME_ORDER_ID_CHARS,
    REQUIRED_CUSTOMER_FIELDS,
    SIGNATURE_FIELD,
    TRUNCATION_SUFFIX,
)
from domain.errors import ValidationError
from services.payfast_signature import format_amount, generate_signature

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentRequest:
    payment_data: dict[str, str]
    redirect_url: str


def validate_order_input(
    customer_info: Mapping[str, Any] | None,
    items: Sequence[Mapping[str, Any]] | None,
    total: float | None,
) -> None:
    """
    Raise ValidationError unless customer info, items and a total are present.

    A customer block without a name or email is reported per field, e.g.
    ``customerInfo.email``.
    """
    missing = []
    if not customer_info:
        missing.append("customerInfo")
    else:
        missing.extend(
            f"customerInfo.{field}"
            for field in REQUIRED_CUSTOMER_FIELDS
            if not customer_info.get(field)
        )
    if not items:
        missing.append("items")
    if total is None or total <= 0:
        missing.append("total")
    if missing:
        raise ValidationError(
            "Missing required payment information",
            details={"missing": missing},
        )


def build_order_summary(items: Sequence[Mapping[str, Any]]) -> str:
    """
    "Title(Qty), Title(Qty)" for custom_str2.

    PayFast rejects custom fields over 255 characters, so longer summaries
    are cut to 252 characters plus "...".
    """
    summary = ", ".join(f"{item['title']}({item['quantity']})" for item in items)
    if len(summary) > CUSTOM_STR_MAX_LENGTH:
        keep = CUSTOM_STR_MAX_LENGTH - len(TRUNCATION_SUFFIX)
        summary = summary[:keep] + TRUNCATION_SUFFIX
    return summary


def build_payment_data(
    order_id: str,
    customer_info: Mapping[str, Any] | None,
    items: Sequence[Mapping[str, Any]] | None,
    total: float | None,
    config: Settings | None = None,
) -> PaymentRequest:
    """
    Build the signed PayFast payload for one checkout attempt.

    The signature is computed over the canonical field subset first and only
    then added to the payload, so it never feeds into itself.
    """
    validate_order_input(customer_info, items, total)
    cfg = config or settings

    payment_data = {
        "merchant_id": cfg.payfast_merchant_id,
        "merchant_key": cfg.payfast_merchant_key,
        "return_url": cfg.payfast_return_url,
        "cancel_url": cfg.payfast_cancel_url,
        "notify_url": cfg.payfast_notify_url,
        # Order details
        "m_payment_id": order_id,
        "amount": format_amount(total),
        "item_name": f"{cfg.payfast_item_name_prefix} - {order_id[:ITEM_NAME_ORDER_ID_CHARS]}",
        # Customer details
        "name_first": customer_info.get("firstName") or "",
        "name_last": customer_info.get("lastName") or "",
        "email_address": customer_info.get("email") or "",
        "cell_number": customer_info.get("phone") or "",
        # Passthrough, echoed back in the ITN
        "custom_str1": order_id,
        "custom_str2": build_order_summary(items),
    }

    signature = generate_signature(payment_data, cfg.payfast_passphrase)
    payment_data[SIGNATURE_FIELD] = signature

    logger.info(
        f"  💳 PayFast payload built: order={order_id} amount={payment_data['amount']} "
        f"sandbox={cfg.payfast_sandbox}"
    )

    return PaymentRequest(
        payment_data=payment_data,
        redirect_url=cfg.payfast_process_url,
    )
