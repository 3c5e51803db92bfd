"""
Entidad de dominio Loan: el ciclo de vida de un préstamo.

Estados:
    Active   -> return_date es None.
    Returned -> return_date fijada; estado final.
    Overdue  -> Active y la fecha actual es posterior a due_date. No se guarda,
                se calcula cada vez.

La única transición es Active -> Returned mediante ``return_book()``.
"""

import datetime
import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator, PrivateAttr

from libroprestamos.core.clock import ensure_utc, parse_utc, utcnow
from libroprestamos.core.config import settings
from libroprestamos.core.exceptions import AlreadyReturnedError
from libroprestamos.domain.book import Book
from libroprestamos.domain.member import Member

ONE_DAY = datetime.timedelta(days=1)


class Loan(BaseModel):
    """
    Préstamo de un Book a un Member.

    Atributos:
        id (Optional[int]): None hasta que se persiste; inmutable.
        book (Book): Libro prestado.
        member (Member): Socio que lo tiene.
        loan_date (datetime.datetime): Fecha del préstamo (por defecto, ahora).
        due_date (datetime.datetime): Fecha límite. Si no se indica, es
            ``loan_date`` más ``settings.LOAN_DURATION_DAYS`` días. Inmutable.
        return_date (Optional[datetime.datetime]): Sólo lectura; una vez fijada no cambia.
            Al rehidratar se pasa como ``return_date`` al constructor o a ``model_validate``.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: Optional[int] = Field(default=None, frozen=True)
    book: Book = Field(..., frozen=True)
    member: Member = Field(..., frozen=True)
    loan_date: datetime.datetime = Field(..., frozen=True)
    due_date: datetime.datetime = Field(..., frozen=True)

    _return_date: Optional[datetime.datetime] = PrivateAttr(default=None)

    def __init__(self, return_date: Any = None, **data: Any) -> None:
        super().__init__(**data)
        self._return_date = parse_utc(return_date)

    @classmethod
    def model_validate(cls, obj: Any, **kwargs: Any) -> "Loan":
        if not isinstance(obj, dict):
            return super().model_validate(obj, **kwargs)
        obj = dict(obj)
        return_date = parse_utc(obj.pop("return_date", None))
        if isinstance(obj.get("book"), dict):
            obj["book"] = Book.model_validate(obj["book"])
        loan = super().model_validate(obj, **kwargs)
        loan._return_date = return_date
        return loan

    @model_validator(mode="before")
    @classmethod
    def _apply_default_due_date(cls, data: Any) -> Any:
        if isinstance(data, dict):
            try:
                loan_date = parse_utc(data.get("loan_date")) or utcnow()
            except ValidationError:
                # la validación del campo informa del error
                return data
            data = {**data, "loan_date": loan_date}
            if data.get("due_date") is None:
                data["due_date"] = loan_date + datetime.timedelta(days=settings.LOAN_DURATION_DAYS)
        return data

    @field_validator("loan_date", "due_date")
    @classmethod
    def _to_utc(cls, value: datetime.datetime) -> datetime.datetime:
        return ensure_utc(value)

    @property
    def return_date(self) -> Optional[datetime.datetime]:
        return self._return_date

    @property
    def is_returned(self) -> bool:
        return self._return_date is not None

    def is_overdue(self, now: Optional[datetime.datetime] = None) -> bool:
        """
        Indica si el préstamo está vencido.

        Args:
            now (Optional[datetime.datetime]): Instante de referencia; por defecto, ahora.

        Returns:
            bool: False si ya se devolvió; si no, True cuando ``now`` supera ``due_date``.
        """
        if self._return_date is not None:
            return False
        now = ensure_utc(now) or utcnow()
        return now > self.due_date

    def return_book(self, now: Optional[datetime.datetime] = None) -> None:
        """
        Cierra el préstamo y deja el libro disponible.

        Raises:
            AlreadyReturnedError: Si el préstamo ya estaba devuelto. No cambia nada.
        """
        if self._return_date is not None:
            raise AlreadyReturnedError(self.id)
        self._return_date = ensure_utc(now) or utcnow()
        self.book.mark_returned()

    def calculate_fine(self, daily_rate: Optional[float] = None, now: Optional[datetime.datetime] = None) -> float:
        """
        Calcula la multa de un préstamo vencido.

        Cada día empezado después de ``due_date`` cuenta como un día completo.

        Args:
            daily_rate (Optional[float]): Importe por día; por defecto ``settings.DAILY_FINE``.
            now (Optional[datetime.datetime]): Instante de referencia; por defecto, ahora.

        Returns:
            float: 0 si no está vencido; si no, días vencidos (redondeados hacia arriba) por ``daily_rate``.
        """
        if daily_rate is None:
            daily_rate = settings.DAILY_FINE
        now = ensure_utc(now) or utcnow()
        if not self.is_overdue(now):
            return 0.0
        days = math.ceil(abs(now - self.due_date) / ONE_DAY)
        return days * daily_rate

    def status(self, daily_rate: Optional[float] = None, now: Optional[datetime.datetime] = None) -> str:
        """Devuelve 'Returned', 'Overdue (X.XX fine)' o 'Active'."""
        if self._return_date is not None:
            return "Returned"
        now = ensure_utc(now) or utcnow()
        if self.is_overdue(now):
            return f"Overdue ({self.calculate_fine(daily_rate, now):.2f} fine)"
        return "Active"
