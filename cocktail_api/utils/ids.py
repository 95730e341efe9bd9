"""
Entity Identifiers

Every user and cocktail is identified by an opaque, store-generated string
(a UUID4 in canonical text form). Ids received from callers are validated
before any lookup so malformed values fail as a ValidationError instead of
a silent miss.
"""

import uuid

from cocktail_api.exceptions import ValidationError

ID_LENGTH = 36


def new_id() -> str:
    """Generate a new entity id."""
    return str(uuid.uuid4())


def is_valid_id(value: object) -> bool:
    """Check whether a value is a well-formed entity id."""
    if not isinstance(value, str) or len(value) != ID_LENGTH:
        return False
    try:
        return str(uuid.UUID(value)) == value.lower()
    except ValueError:
        return False


def ensure_valid_id(value: object, field: str = "id") -> str:
    """
    Validate a caller-supplied id and return its canonical (lowercase) form.

    Raises:
        ValidationError: If the value is not a well-formed id
    """
    if not is_valid_id(value):
        raise ValidationError.for_field(field, f"Invalid {field}")
    return str(value).lower()
