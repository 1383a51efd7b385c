"""
validators.py - Input validation utilities for the NDEF text tag application.

This module provides validation functions for various types of input data.
"""

import re

from .exceptions import ValidationError

# Text record language codes live in a 6-bit length field
MAX_LANGUAGE_CODE_LENGTH = 63


def is_valid_language_code(code) -> bool:
    """
    Check if a value can be used as a text record language code.

    Language codes are IANA tags such as "en" or "en-US": printable ASCII,
    1 to 63 bytes long.

    Args:
        code (str): Language code to validate

    Returns:
        bool: True if valid language code
    """
    if not isinstance(code, str) or not code:
        return False

    if len(code) > MAX_LANGUAGE_CODE_LENGTH:
        return False

    return bool(re.match(r'^[A-Za-z0-9-]+$', code))


def is_valid_nfc_uid(uid: str) -> bool:
    """
    Check if a string is a valid NFC tag UID.

    Args:
        uid (str): UID to validate

    Returns:
        bool: True if valid UID
    """
    # NFC UIDs are typically hex strings
    # The length depends on the tag type (4, 7, or 10 bytes)
    # We'll accept 8, 14, or 20 hex characters

    if not uid:
        return False

    # Remove colons, spaces, or dots if present (common separators)
    cleaned_uid = re.sub(r'[:\s\.]', '', uid).upper()

    # Check if it's a valid hex string of the appropriate length
    return bool(re.match(r'^[0-9A-F]{8}$|^[0-9A-F]{14}$|^[0-9A-F]{20}$', cleaned_uid))


def validate_language_code(code, field_name: str = "language_code"):
    """
    Validate a text record language code.

    Args:
        code (str): Language code to validate
        field_name (str): Name of the field for error message

    Raises:
        ValidationError: If the code is not usable
    """
    if not is_valid_language_code(code):
        raise ValidationError(
            f"{field_name} must be 1-{MAX_LANGUAGE_CODE_LENGTH} ASCII letters, digits or dashes",
            {"value": code}
        )

    return code
