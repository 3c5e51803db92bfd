"""
Entidad de dominio Author.

Los nombres y el email se validan tanto al construir como al asignar
(``validate_assignment``), así que un Author nunca queda en un estado inválido.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from libroprestamos.core.clock import ensure_utc, utcnow
from libroprestamos.domain.validation import require_email, require_non_empty


class Author(BaseModel):
    """
    Autor de uno o varios libros.

    Atributos:
        id (Optional[int]): None hasta que el repositorio lo persiste; inmutable.
        first_name (str): Nombre, no vacío.
        last_name (str): Apellido, no vacío.
        email (str): Email único; debe contener "@".
        bio (Optional[str]): Biografía.
        created_at (datetime.datetime): Fecha de alta (UTC).
    """
    model_config = ConfigDict(validate_assignment=True)

    id: Optional[int] = Field(default=None, frozen=True)
    first_name: str
    last_name: str
    email: str
    bio: Optional[str] = None
    created_at: datetime.datetime = Field(default_factory=utcnow, frozen=True)

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

    @field_validator("created_at")
    @classmethod
    def _to_utc(cls, value: datetime.datetime) -> datetime.datetime:
        return ensure_utc(value)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def has_bio(self) -> bool:
        """True si el autor tiene una biografía no vacía."""
        return self.bio is not None and len(self.bio.strip()) > 0
