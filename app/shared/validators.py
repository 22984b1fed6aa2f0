"""Shared validation utilities"""

import re
from typing import Optional


def validate_uk_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize UK phone number to E.164 format.

    Args:
        phone: Phone number string in various formats (07700 900123, +44 7700 900123)

    Returns:
        Normalized phone number in E.164 format (+44XXXXXXXXXX)

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    # Remove all non-digit characters
    digits = re.sub(r"\D", "", phone)

    # Handle +44 / 0044 prefix
    if digits.startswith("0044"):
        digits = digits[4:]
    elif digits.startswith("44") and len(digits) == 12:
        digits = digits[2:]

    # Drop the trunk prefix
    if digits.startswith("0") and len(digits) == 11:
        digits = digits[1:]

    # UK national significant numbers are 10 digits (9 for a few legacy ranges)
    if len(digits) not in (9, 10):
        raise ValueError("Phone number must be a valid UK number")

    return f"+44{digits}"


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
