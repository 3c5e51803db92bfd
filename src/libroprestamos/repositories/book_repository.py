"""
Repositorio de libros.

Las filas de ``books`` sólo guardan ``author_id``; cada lectura reconstruye el
Book completo con su Author a través de ``AuthorRepository``.

- Lecturas de un único libro: si el autor no existe es un error de integridad.
- Lecturas masivas: se consulta cada autor distinto una sola vez y las filas
  cuyo autor no aparece se descartan.
"""

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from ..core.exceptions import IntegrityMissingError, NotFoundError, UnsavedEntityError
from ..domain.author import Author
from ..domain.book import Book, BookKind, EBookDetails
from ..models.book import BookRecord
from .author_repository import AuthorRepository
from .base import require_id

logger = logging.getLogger(__name__)


class BookRepository:
    def __init__(self, db: Session, authors: AuthorRepository):
        self.db = db
        self.authors = authors

    def _to_entity(self, record: BookRecord, author: Author) -> Book:
        kind = BookKind(record.kind)
        ebook = None
        if kind is BookKind.EBOOK:
            ebook = EBookDetails(format=record.ebook_format, file_size_mb=record.ebook_file_size_mb)
        return Book(
            id=record.id,
            title=record.title,
            isbn=record.isbn,
            author=author,
            published_year=record.published_year,
            genre=record.genre,
            kind=kind,
            ebook=ebook,
            available=record.available,
            created_at=record.created_at,
        )

    def _apply(self, record: BookRecord, book: Book) -> None:
        if book.author.id is None:
            raise UnsavedEntityError("Author must be saved to database before creating book")
        record.title = book.title
        record.isbn = book.isbn
        record.author_id = book.author.id
        record.published_year = book.published_year
        record.genre = book.genre
        record.available = book.available
        record.kind = book.kind.value
        record.ebook_format = book.ebook.format if book.ebook else None
        record.ebook_file_size_mb = book.ebook.file_size_mb if book.ebook else None

    def _fetch(self, stmt) -> List[BookRecord]:
        return list(self.db.execute(stmt.execution_options(populate_existing=True)).scalars().all())

    def _hydrate_one(self, record: BookRecord) -> Book:
        author = self.authors.find_by_id(record.author_id)
        if author is None:
            raise IntegrityMissingError("Author", record.author_id, "book", record.id)
        return self._to_entity(record, author)

    def _hydrate_many(self, records: Iterable[BookRecord]) -> List[Book]:
        """
        Convierte un lote de filas en Books consultando cada autor una sola vez.

        Las filas cuyo autor no existe se omiten del resultado.
        """
        records = list(records)
        authors_by_id: Dict[int, Author] = {}
        for author_id in dict.fromkeys(record.author_id for record in records):
            author = self.authors.find_by_id(author_id)
            if author is not None:
                authors_by_id[author_id] = author

        books = []
        for record in records:
            author = authors_by_id.get(record.author_id)
            if author is None:
                logger.warning(f"Skipping book {record.id}: author {record.author_id} not found.")
                continue
            books.append(self._to_entity(record, author))
        logger.debug(f"Hydrated {len(books)} of {len(records)} books using {len(authors_by_id)} authors.")
        return books

    def find_by_id(self, book_id: int) -> Optional[Book]:
        """
        Recupera un libro por su ID junto con su autor.

        Returns:
            Optional[Book]: El libro, o None si no existe.

        Raises:
            IntegrityMissingError: Si la fila existe pero su autor no.
        """
        rows = self._fetch(select(BookRecord).where(BookRecord.id == book_id).limit(1))
        return self._hydrate_one(rows[0]) if rows else None

    def find_by_isbn(self, isbn: str) -> Optional[Book]:
        rows = self._fetch(select(BookRecord).where(BookRecord.isbn == isbn).limit(1))
        return self._hydrate_one(rows[0]) if rows else None

    def find_all(self) -> List[Book]:
        return self._hydrate_many(self._fetch(select(BookRecord).order_by(BookRecord.id)))

    def find_available(self) -> List[Book]:
        stmt = select(BookRecord).where(BookRecord.available == True).order_by(BookRecord.id)
        return self._hydrate_many(self._fetch(stmt))

    def find_many(self, book_ids: Iterable[int]) -> List[Book]:
        """Carga varios libros a la vez; se omiten los IDs sin fila (o sin autor)."""
        book_ids = list(dict.fromkeys(book_ids))
        if not book_ids:
            return []
        stmt = select(BookRecord).where(BookRecord.id.in_(book_ids)).order_by(BookRecord.id)
        return self._hydrate_many(self._fetch(stmt))

    def find_by_author_id(self, author_id: int) -> List[Book]:
        author = self.authors.find_by_id(author_id)
        if author is None:
            raise NotFoundError("Author", author_id)
        rows = self._fetch(select(BookRecord).where(BookRecord.author_id == author_id).order_by(BookRecord.id))
        return [self._to_entity(row, author) for row in rows]

    def create(self, book: Book) -> Book:
        record = BookRecord(created_at=book.created_at)
        self._apply(record, book)
        self.db.add(record)
        self.db.flush()
        self.db.refresh(record)
        logger.debug(f"Book {record.id} inserted ({record.isbn}).")
        return self._hydrate_one(record)

    def update(self, book: Book) -> Book:
        book_id = require_id(book, "Cannot update book without ID")
        record = self.db.get(BookRecord, book_id, populate_existing=True)
        if record is None:
            raise NotFoundError("Book", book_id)
        self._apply(record, book)
        self.db.flush()
        self.db.refresh(record)
        return self._hydrate_one(record)

    def mark_borrowed(self, book_id: int) -> bool:
        """
        Marca el libro como prestado sólo si sigue disponible, en una única sentencia.

        Returns:
            bool: True si esta llamada cambió la disponibilidad; False si el libro
            no existe o ya estaba prestado.
        """
        result = self.db.execute(
            update(BookRecord)
            .where(BookRecord.id == book_id, BookRecord.available == True)
            .values(available=False),
            execution_options={"synchronize_session": False},
        )
        return result.rowcount == 1

    def delete(self, book_id: int) -> bool:
        """Borra el libro (y, por cascada, sus préstamos). True si existía."""
        result = self.db.execute(
            delete(BookRecord).where(BookRecord.id == book_id),
            execution_options={"synchronize_session": False},
        )
        return result.rowcount > 0
