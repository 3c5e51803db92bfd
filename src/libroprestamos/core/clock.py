import datetime
from typing import Any, Optional

from pydantic import TypeAdapter

_DATETIME = TypeAdapter(datetime.datetime)


def utcnow() -> datetime.datetime:
    """Current time as an aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def ensure_utc(value: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)


def parse_utc(value: Any) -> Optional[datetime.datetime]:
    """
    Like ``ensure_utc`` but also accepts anything pydantic coerces to a datetime
    (ISO strings, epoch numbers).

    Raises:
        pydantic.ValidationError: If the value is not a datetime.
    """
    if value is None:
        return None
    return ensure_utc(_DATETIME.validate_python(value))
