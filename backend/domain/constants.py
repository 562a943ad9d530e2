"""
Domain constants used across services/routers.
"""

# PayFast process endpoints (browser form POST target)
PAYFAST_LIVE_URL = "https://www.payfast.co.za/eng/process"
PAYFAST_SANDBOX_URL = "https://sandbox.payfast.co.za/eng/process"

# Fields that go into the signed parameter string, in the order PayFast
# concatenates them. Shared by request building and ITN verification.
PAYFAST_SIGNATURE_FIELDS = (
    "merchant_id",
    "merchant_key",
    "return_url",
    "cancel_url",
    "notify_url",
    "name_first",
    "name_last",
    "email_address",
    "m_payment_id",
    "amount",
    "item_name",
)

SIGNATURE_FIELD = "signature"

# PayFast hard limit for custom_str* fields
CUSTOM_STR_MAX_LENGTH = 255
TRUNCATION_SUFFIX = "..."

# Characters of the order id that go into item_name
ITEM_NAME_ORDER_ID_CHARS = 8

# Checkout form fields PayFast needs for the buyer
REQUIRED_CUSTOMER_FIELDS = ("firstName", "lastName", "email")
