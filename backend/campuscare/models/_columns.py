"""Column helpers shared by the ORM models."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware current UTC time (ORM-side default for timestamps)."""
    return datetime.now(timezone.utc)
