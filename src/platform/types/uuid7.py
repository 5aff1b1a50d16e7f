"""
UUID7 identifiers for every persisted entity.

uuid_utils generates time-ordered UUID7 values (index friendly for
append-heavy tables such as payment and audit_log). They are converted to
the standard library `uuid.UUID` so SQLAlchemy's `Uuid` column type and
pydantic handle them without custom schemas.
"""

from uuid import UUID

import uuid_utils


def generate_uuid7() -> UUID:
    return UUID(bytes=uuid_utils.uuid7().bytes)
