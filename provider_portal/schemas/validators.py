"""Reusable field validators for wizard and publish schemas.

Each validator takes the raw value and either returns the normalized value
or raises ValueError with a message that is shown to the user as-is.
Pydantic turns the ValueError into a field error; `wizard.steps` strips
pydantic's "Value error, " prefix before surfacing it.
"""

import re

EMAIL_REGEX = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

AVAILABILITY_CHOICES = ("full-time", "part-time", "flexible")


def validate_text_length(
    value: str,
    label: str,
    min_length: int = 1,
    max_length: int | None = None,
) -> str:
    """Strip and length-check a required text field.

    Args:
        value: Input string
        label: Human-readable field name used in the message
        min_length: Minimum length after stripping
        max_length: Maximum length after stripping (None = unbounded)

    Returns:
        Stripped string

    Raises:
        ValueError: If the stripped value is outside the bounds
    """
    value = (value or "").strip()

    if not value:
        raise ValueError(f"{label} is required")

    if len(value) < min_length:
        raise ValueError(f"{label} must be at least {min_length} characters")

    if max_length is not None and len(value) > max_length:
        raise ValueError(f"{label} must be at most {max_length} characters")

    return value


def validate_email(value: str) -> str:
    """Validate email address.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email is invalid
    """
    if not value or not value.strip():
        raise ValueError("Email is required")

    value = value.strip().lower()

    if len(value) > 254:  # RFC 5321
        raise ValueError("Email address too long")

    if not EMAIL_REGEX.match(value):
        raise ValueError("Please enter a valid email address")

    return value


def validate_phone(value: str) -> str:
    """Validate phone number length (10-15 characters, as typed)."""
    value = (value or "").strip()

    if not value:
        raise ValueError("Phone number is required")

    if len(value) < 10:
        raise ValueError("Phone number must be at least 10 characters")

    if len(value) > 15:
        raise ValueError("Phone number must be at most 15 characters")

    return value


def validate_availability(value: str) -> str:
    value = (value or "").strip().lower()
    if value not in AVAILABILITY_CHOICES:
        raise ValueError(
            f"Availability must be one of: {', '.join(AVAILABILITY_CHOICES)}"
        )
    return value


def clean_string_list(values: list[str] | None) -> list[str] | None:
    """Strip entries and drop blanks; an empty result becomes None."""
    if values is None:
        return None
    cleaned = [v.strip() for v in values if v and v.strip()]
    return cleaned or None


def validate_optional_text(value: str | None, label: str, max_length: int) -> str | None:
    """Strip an optional text field; blank becomes None."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if len(value) > max_length:
        raise ValueError(f"{label} must be at most {max_length} characters")
    return value
