"""
Entidad de dominio Book.

Libros impresos y e-books son la misma entidad: ``kind`` indica la variante y
``ebook`` lleva los datos propios del e-book (formato y tamaño). El
comportamiento que cambia entre variantes (``info``, ``can_download``)
se decide mirando ``kind``.

La disponibilidad sólo cambia con ``borrow()`` y ``mark_returned()``.
"""

import datetime
import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, TypeAdapter, field_validator, model_validator

from libroprestamos.core.clock import ensure_utc, utcnow
from libroprestamos.core.config import settings
from libroprestamos.core.exceptions import BookUnavailableError
from libroprestamos.domain.author import Author
from libroprestamos.domain.validation import require_non_empty


_BOOL = TypeAdapter(bool)


class BookKind(str, enum.Enum):
    BOOK = "book"
    EBOOK = "ebook"


class EBookDetails(BaseModel):
    """
    Datos propios de un e-book.

    Atributos:
        format (str): Formato del fichero (PDF, EPUB...).
        file_size_mb (float): Tamaño del fichero en MB.
    """
    model_config = ConfigDict(frozen=True)

    format: str
    file_size_mb: float = Field(..., ge=0)


class Book(BaseModel):
    """
    Libro del catálogo, compuesto con su Author.

    Atributos:
        id (Optional[int]): None hasta que se persiste; inmutable.
        title (str): Título, no vacío.
        isbn (str): ISBN único, al menos 10 caracteres.
        author (Author): Autor del libro. Debe estar persistido antes de guardar el libro.
        published_year (Optional[int]): Año de publicación.
        genre (Optional[str]): Género literario.
        kind (BookKind): Variante del libro.
        ebook (Optional[EBookDetails]): Presente sólo cuando ``kind`` es EBOOK.
        created_at (datetime.datetime): Fecha de alta (UTC).
        available (bool): Sólo lectura. Al rehidratar se pasa como ``available``
            tanto al constructor como a ``model_validate``.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: Optional[int] = Field(default=None, frozen=True)
    title: str
    isbn: str
    author: Author = Field(..., frozen=True)
    published_year: Optional[int] = Field(default=None, frozen=True)
    genre: Optional[str] = Field(default=None, frozen=True)
    kind: BookKind = Field(default=BookKind.BOOK, frozen=True)
    ebook: Optional[EBookDetails] = Field(default=None, frozen=True)
    created_at: datetime.datetime = Field(default_factory=utcnow, frozen=True)

    _available: bool = PrivateAttr(default=True)

    def __init__(self, available: Any = True, **data: Any) -> None:
        super().__init__(**data)
        self._available = _BOOL.validate_python(available)

    @classmethod
    def model_validate(cls, obj: Any, **kwargs: Any) -> "Book":
        if isinstance(obj, dict) and "available" in obj:
            obj = dict(obj)
            available = _BOOL.validate_python(obj.pop("available"))
            book = super().model_validate(obj, **kwargs)
            book._available = available
            return book
        return super().model_validate(obj, **kwargs)

    @classmethod
    def new_ebook(
        cls,
        title: str,
        isbn: str,
        author: Author,
        file_size_mb: float,
        ebook_format: str,
        **kwargs: Any,
    ) -> "Book":
        """Construye la variante e-book."""
        return cls(
            title=title,
            isbn=isbn,
            author=author,
            kind=BookKind.EBOOK,
            ebook=EBookDetails(format=ebook_format, file_size_mb=file_size_mb),
            **kwargs,
        )

    @field_validator("title")
    @classmethod
    def _check_title(cls, value: str) -> str:
        return require_non_empty(value, "Title")

    @field_validator("isbn")
    @classmethod
    def _check_isbn(cls, value: str) -> str:
        if len(value.strip()) < 10:
            raise ValueError("ISBN must be at least 10 characters")
        return value

    @field_validator("created_at")
    @classmethod
    def _to_utc(cls, value: datetime.datetime) -> datetime.datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def _check_variant(self) -> "Book":
        if self.kind is BookKind.EBOOK and self.ebook is None:
            raise ValueError("E-books require format and file size")
        if self.kind is BookKind.BOOK and self.ebook is not None:
            raise ValueError("Only e-books carry e-book details")
        return self

    @property
    def available(self) -> bool:
        return self._available

    @property
    def is_ebook(self) -> bool:
        return self.kind is BookKind.EBOOK

    def borrow(self) -> None:
        """
        Marca el libro como prestado.

        Raises:
            BookUnavailableError: Si el libro ya estaba prestado.
        """
        if not self._available:
            raise BookUnavailableError(self.id)
        self._available = False

    def mark_returned(self) -> None:
        """Marca el libro como disponible de nuevo. Llamarlo dos veces no tiene efecto."""
        self._available = True

    def info(self) -> str:
        """
        Devuelve la descripción legible del libro.

        Los e-books añaden formato y tamaño a la descripción base.
        """
        year = self.published_year or "Unknown year"
        text = f"{self.title} by {self.author.full_name} ({year})"
        if self.kind is BookKind.EBOOK:
            text += f" [E-Book: {self.ebook.format}, {self.ebook.file_size_mb:g}MB]"
        return text

    def can_download(self, max_size_mb: Optional[float] = None) -> bool:
        """True si es un e-book cuyo fichero no supera ``max_size_mb``."""
        if self.kind is not BookKind.EBOOK:
            return False
        if max_size_mb is None:
            max_size_mb = settings.MAX_EBOOK_DOWNLOAD_MB
        return self.ebook.file_size_mb <= max_size_mb
