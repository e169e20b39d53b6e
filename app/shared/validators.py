"""Shared validation utilities"""

import re
from typing import Optional


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a phone number for storage.

    Keeps a leading '+' and the digits, drops spaces, dots and dashes.
    Blank input becomes None.

    Raises:
        ValueError: If the number has fewer than 6 or more than 15 digits
    """
    if phone is None or not phone.strip():
        return None

    phone = phone.strip()
    digits = re.sub(r"\D", "", phone)

    if len(digits) < 6 or len(digits) > 15:
        raise ValueError("Phone number must contain between 6 and 15 digits")

    return f"+{digits}" if phone.startswith("+") else digits


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def require_text(value: Optional[str], field_label: str) -> str:
    """Strip a required free-text field, rejecting blank values"""
    if value is None or not value.strip():
        raise ValueError(f"{field_label} is required")
    return value.strip()
