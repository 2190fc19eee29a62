"""
Input validation shared by every store implementation.

Both the SQL store and the in-memory store call these before writing, so a
malformed record is rejected with the same InvalidInputError regardless of
backend.
"""

import re
from datetime import datetime, timezone
from typing import Optional

from pydantic import EmailStr, HttpUrl, TypeAdapter, ValidationError

from fupisha.errors import InvalidInputError

ALIAS_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,32}$")

_url_adapter = TypeAdapter(HttpUrl)
_email_adapter = TypeAdapter(EmailStr)


def validate_long_url(value) -> str:
    """Return the normalized URL string or raise InvalidInputError."""
    try:
        url = _url_adapter.validate_python(str(value))
    except ValidationError as e:
        raise InvalidInputError(f"invalid url {value!r}", e) from e
    normalized = str(url)
    if len(normalized) > 2048:
        raise InvalidInputError("url longer than 2048 characters")
    return normalized


def validate_alias(value: str) -> str:
    if not isinstance(value, str) or not ALIAS_PATTERN.match(value):
        raise InvalidInputError(
            f"invalid alias {value!r}: use 1-32 letters, digits, '-' or '_'"
        )
    return value


def validate_email(value: str) -> str:
    """Return the normalized email or raise InvalidInputError."""
    try:
        return _email_adapter.validate_python(value)
    except ValidationError as e:
        raise InvalidInputError(f"invalid email {value!r}", e) from e


def validate_expiry(value: Optional[datetime]) -> Optional[datetime]:
    """Return the expiry as an aware UTC datetime; naive values are taken as UTC."""
    if value is None:
        return None
    if not isinstance(value, datetime):
        raise InvalidInputError(f"invalid expiry {value!r}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def validate_user_changes(changes: dict, allowed: frozenset) -> dict:
    unknown = set(changes) - allowed
    if unknown:
        raise InvalidInputError(f"cannot update user fields {sorted(unknown)}")

    cleaned = dict(changes)
    if "email" in cleaned:
        cleaned["email"] = validate_email(cleaned["email"])
    if "password_hash" in cleaned and not cleaned["password_hash"]:
        raise InvalidInputError("password hash must not be empty")
    if "verified" in cleaned:
        cleaned["verified"] = bool(cleaned["verified"])
    return cleaned


def validate_url_changes(changes: dict, allowed: frozenset) -> dict:
    unknown = set(changes) - allowed
    if unknown:
        raise InvalidInputError(f"cannot update url fields {sorted(unknown)}")

    cleaned = dict(changes)
    if "long_url" in cleaned:
        cleaned["long_url"] = validate_long_url(cleaned["long_url"])
    if "expires_at" in cleaned:
        cleaned["expires_at"] = validate_expiry(cleaned["expires_at"])
    return cleaned
