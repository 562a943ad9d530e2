"""
Input validation utilities for the storefront.

Raise ValidationError (400) so the global handler formats the response.
"""
import re

from domain.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_email(email: str) -> str:
    """
    Check that ``email`` looks like local@domain.tld.

    Deliberately loose: no whitespace, exactly one "@", a dot in the domain.

    Raises:
        ValidationError if the address does not match
    """
    if not email or not EMAIL_PATTERN.match(email):
        raise ValidationError("Please enter a valid email address", details={"field": "email"})
    return email


def require_fields(**fields: str | None) -> None:
    """Raise ValidationError naming every field that is missing or blank."""
    missing = [name for name, value in fields.items() if not value or not str(value).strip()]
    if missing:
        raise ValidationError("All fields are required", details={"missing": missing})
