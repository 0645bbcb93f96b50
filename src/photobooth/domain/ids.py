"""Parsing of client-supplied identifiers."""

from uuid import UUID

from photobooth.domain.errors import NotFoundError, ValidationError


def require_id(value: str | UUID | None, code: str, label: str) -> UUID:
    """Return the id as a UUID.

    A missing value is a validation failure; a malformed one is reported as
    not-found so probing ids reveals nothing about other tenants.
    """
    if isinstance(value, UUID):
        return value
    if value is None or not str(value).strip():
        raise ValidationError(f"{label} is required", code=code)
    try:
        return UUID(str(value).strip())
    except ValueError:
        raise NotFoundError(
            f"{label.removesuffix(' ID')} not found", code=_not_found_code(code)
        ) from None


def _not_found_code(missing_code: str) -> str:
    entity = missing_code.removeprefix("MISSING_").removesuffix("_ID")
    return f"{entity}_NOT_FOUND"
