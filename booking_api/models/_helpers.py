from datetime import datetime, timezone

import ulid


def generate_ulid() -> str:
    return str(ulid.ULID())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
