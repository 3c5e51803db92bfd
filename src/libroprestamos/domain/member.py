import datetime
import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from libroprestamos.core.clock import ensure_utc, utcnow
from libroprestamos.domain.validation import require_email, require_non_empty


class Member(BaseModel):
    """Socio de la biblioteca."""
    model_config = ConfigDict(validate_assignment=True)

    id: Optional[int] = Field(default=None, frozen=True)
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = Field(default=None, frozen=True)
    membership_date: datetime.datetime = Field(default_factory=utcnow, frozen=True)

    @field_validator("first_name")
    @classmethod
    def _check_first_name(cls, value: str) -> str:
        return require_non_empty(value, "First name")

    @field_validator("last_name")
    @classmethod
    def _check_last_name(cls, value: str) -> str:
        return require_non_empty(value, "Last name")

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        return require_email(value)

    @field_validator("membership_date")
    @classmethod
    def _to_utc(cls, value: datetime.datetime) -> datetime.datetime:
        return ensure_utc(value)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def membership_duration_days(self, now: Optional[datetime.datetime] = None) -> int:
        """Días desde el alta del socio; un día empezado cuenta como completo."""
        now = ensure_utc(now) or utcnow()
        elapsed = abs(now - self.membership_date)
        return math.ceil(elapsed / datetime.timedelta(days=1))
