"""
PayFast signature protocol.

Handles:
    1. Value encoding — PayFast's space/plus variant of URI-component escaping
    2. Parameter string — fixed field order, empty fields skipped, passphrase last
    3. Signing — MD5 of the parameter string, lowercase hex
    4. Verification — recompute and compare against an inbound signature

The same ordered field list (PAYFAST_SIGNATURE_FIELDS) is used when we sign
outgoing payment forms and when we verify ITN callbacks. Any field outside
that list (signature, pf_payment_id, payment_status, custom_str*, ...) never
reaches the parameter string.

MD5 is what PayFast specifies; it is an interoperability checksum here, not
something we get to choose.
"""
import hashlib
import logging
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping
from urllib.parse import quote

from domain.constants import PAYFAST_SIGNATURE_FIELDS

logger = logging.getLogger(__name__)

# encodeURIComponent leaves A-Z a-z 0-9 - _ . ! ~ * ' ( ) untouched;
# quote() always keeps letters, digits and "_.-~".
_URI_COMPONENT_SAFE = "!*'()"
# ECMAScript WhiteSpace and LineTerminator code points, i.e. what /\s/ matches
# in a browser. Narrower than Python's \s in places (\x1c-\x1f, \x85) and
# wider in one (U+FEFF).
_WHITESPACE = re.compile(
    "[\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]"
)
_CENTS = Decimal("0.01")


# ════════════════════════════════════════════════════════════════════
# Encoding
# ════════════════════════════════════════════════════════════════════


def encode_uri_component(value: str) -> str:
    """Percent-encode ``value`` the way a browser's encodeURIComponent does."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def encode_value(value: str) -> str:
    """
    Encode one field value for the PayFast parameter string.

    Whitespace is first turned into "+", the result is URI-component encoded,
    and every "%2B" is put back to "+". Both spaces and literal plus signs
    therefore come out as "+".

    Example:
        >>> encode_value("Test Product")
        'Test+Product'
        >>> encode_value("a+b c@d")
        'a+b+c%40d'
    """
    plussed = _WHITESPACE.sub("+", value)
    return encode_uri_component(plussed).replace("%2B", "+")


def format_amount(value: Any) -> str:
    """
    Two-decimal money string, rounding ties up like JavaScript's toFixed(2).

    Floats are rounded from their exact binary value, so 10.125 gives
    "10.13" while 1.005 (stored just below) gives "1.00".
    """
    exact = value if isinstance(value, Decimal) else Decimal(float(value))
    return f"{exact.quantize(_CENTS, rounding=ROUND_HALF_UP):.2f}"


def stringify(value: Any) -> str:
    """Render a field value as text; money-like numbers get two decimals."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (float, Decimal)):
        return format_amount(value)
    return str(value)


# ════════════════════════════════════════════════════════════════════
# Parameter String
# ════════════════════════════════════════════════════════════════════


def build_param_string(
    data: Mapping[str, Any],
    passphrase: str | None,
    fields: Iterable[str] = PAYFAST_SIGNATURE_FIELDS,
) -> str:
    """
    Build the string PayFast hashes.

    Walks ``fields`` in order, skipping keys that are missing, None or "".
    The passphrase segment is always appended, even for an empty passphrase
    ("&passphrase="), and is plain URI-component encoded.
    """
    pairs = []
    for key in fields:
        value = data.get(key)
        if value is None or value == "":
            continue
        pairs.append(f"{key}={encode_value(stringify(value))}")

    param_string = "&".join(pairs)
    param_string += f"&passphrase={encode_uri_component(passphrase or '')}"
    return param_string


# ════════════════════════════════════════════════════════════════════
# Signing & Verification
# ════════════════════════════════════════════════════════════════════


def generate_signature(data: Mapping[str, Any], passphrase: str | None) -> str:
    """Return the 32-char lowercase hex MD5 signature for ``data``."""
    param_string = build_param_string(data, passphrase)
    return hashlib.md5(param_string.encode("utf-8")).hexdigest()


def verify_signature(
    data: Mapping[str, Any],
    signature: str | None,
    passphrase: str | None,
) -> bool:
    """
    Check an inbound signature against one recomputed from ``data``.

    ``data`` may still contain gateway-only fields; they are ignored because
    the parameter string only reads PAYFAST_SIGNATURE_FIELDS. Comparison is
    exact and case-sensitive.
    """
    if not signature:
        logger.warning("PayFast payload received without a signature")
        return False
    return generate_signature(data, passphrase) == signature
