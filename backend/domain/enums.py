"""
Domain enums (minimal set used for clarity in services).
"""

from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class GatewayPaymentStatus(str, Enum):
    """payment_status values PayFast reports in an ITN."""
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"
    PENDING = "PENDING"
    CANCELLED = "CANCELLED"
