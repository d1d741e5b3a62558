"""Entry identifier generation."""

import uuid


def new_id() -> str:
    """Return a new opaque, collision-resistant identifier."""
    return uuid.uuid4().hex
