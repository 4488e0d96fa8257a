"""Identifier generation.

Publication identifiers are random UUIDs; manifest item IDs are sequential
and derived from the writer's resource counter.
"""

import os
import uuid

from .exceptions import IdentifierError


def new_uuid() -> str:
    """Return a random (version 4) UUID in canonical dashed form.

    Raises:
        IdentifierError: If the operating system random source fails
    """
    try:
        data = os.urandom(16)
    except (OSError, NotImplementedError) as e:
        raise IdentifierError(f"cannot generate UUID: {e}") from e
    return str(uuid.UUID(bytes=data, version=4))


def item_id(counter: int) -> str:
    """Return the manifest item ID for the given resource counter value.

    The counter is rendered as lower-case hex padded to two digits:
    1 -> "id01", 10 -> "id0a", 256 -> "id100".
    """
    if counter < 1:
        raise ValueError(f"resource counter must be positive, got {counter}")
    return f"id{counter:02x}"
