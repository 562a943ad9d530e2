"""
Pydantic models for request/response validation.

The storefront frontend posts camelCase JSON; models accept either the
Python name or the camelCase alias.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class StoreBase(BaseModel):
    """Shared base — allows construction by Python name or alias."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


# ── Checkout Models ─────────────────────────────────────────────────

class CustomerInfo(StoreBase):
    """Buyer details captured on the checkout form."""
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = Field(default=None, alias="postalCode")

    def to_document(self) -> dict:
        """camelCase dict, the shape stored on the order."""
        return self.model_dump(by_alias=True)


class LineItem(StoreBase):
    """A product line in an order."""
    title: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    id: Optional[str] = None
    product_id: Optional[str] = Field(default=None, alias="productId")
    image: Optional[str] = None

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class CheckoutRequest(StoreBase):
    """
    Body of POST /api/payments/initiate and POST /api/orders.

    Fields are optional at the schema level so that a missing block is
    reported by the checkout service as a single descriptive 400.
    """
    customer_info: Optional[CustomerInfo] = Field(default=None, alias="customerInfo")
    items: Optional[List[LineItem]] = None
    total: Optional[float] = None


class PaymentInitiateResponse(StoreBase):
    """Signed PayFast form fields plus where to post them."""
    success: bool = True
    payment_data: dict[str, str] = Field(..., alias="paymentData")
    redirect_url: str = Field(..., alias="redirectUrl")
    order_id: str = Field(..., alias="orderId")


# ── Cart Models ─────────────────────────────────────────────────────

class CartAddRequest(StoreBase):
    product_id: str = Field(..., alias="productId", min_length=1)
    quantity: int = Field(1, ge=1, le=100)


class CartUpdateRequest(StoreBase):
    # quantity <= 0 removes the line
    quantity: int = Field(..., le=100)


# ── Contact Models ──────────────────────────────────────────────────

class ContactRequest(StoreBase):
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
