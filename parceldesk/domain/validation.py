"""Argument checks shared by the lifecycle operations and the HTTP layer."""

from __future__ import annotations

import uuid

from pydantic import EmailStr, TypeAdapter, ValidationError

from .errors import ForbiddenError, InvalidArgumentError

_email_adapter = TypeAdapter(EmailStr)


def parse_id(raw: str | uuid.UUID, resource: str = "id") -> uuid.UUID:
    """Turn a path/body identifier into a UUID or raise InvalidArgumentError."""
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidArgumentError(f"Invalid {resource}: {raw!r}") from exc


def normalize_email(raw: str | None, field: str = "email") -> str:
    """Validate *raw* as an address and return it trimmed and lower-cased."""
    if raw is None or not raw.strip():
        raise InvalidArgumentError(f"{field} is required")
    try:
        email = _email_adapter.validate_python(raw.strip())
    except ValidationError as exc:
        raise InvalidArgumentError(f"{field} is not a valid email address") from exc
    return email.lower()


def ensure_principal(principal_email: str, owner_email: str) -> str:
    """Return the normalised owner email if the caller is that owner."""
    owner = normalize_email(owner_email)
    if normalize_email(principal_email, "principal") != owner:
        raise ForbiddenError("Email mismatch: cannot read another user's records")
    return owner
