"""Data normalization utilities for contact details."""

import re


def normalize_phone(phone: str | None) -> str | None:
    """
    Normalize a US phone number to its 10 bare digits.

    Accepts any punctuation ("(555) 123-4567", "555.123.4567"). A leading
    country code is NOT stripped: "+1 555 123 4567" has 11 digits and is
    rejected, matching what the signup forms accept.

    Returns:
        10-digit string, or None if empty

    Raises:
        ValueError: If the input does not contain exactly 10 digits
    """
    if phone is None or not phone.strip():
        return None

    digits = re.sub(r"\D", "", phone)
    if len(digits) != 10:
        raise ValueError("Invalid phone number format")
    return digits


def to_e164(phone_digits: str) -> str:
    """10-digit US number → +1XXXXXXXXXX for SMS providers."""
    if phone_digits.startswith("+"):
        return phone_digits
    return f"+1{phone_digits}"


def normalize_email(email: str | None) -> str | None:
    if not email:
        return None
    return email.strip().lower()
