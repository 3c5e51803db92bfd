"""
Modelo ORM para la tabla de libros de LibroPrestamos.
Los libros impresos y los e-books comparten tabla; ``kind`` distingue la variante
y las columnas ``ebook_*`` sólo se rellenan para e-books.
"""

from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from libroprestamos.db.session import Base
from libroprestamos.db.types import EpochTimestamp
from libroprestamos.core.clock import utcnow

class BookRecord(Base):
    """
    Representa una fila de la tabla ``books``.

    Atributos:
        id (int): Identificador primario.
        title (str): Título del libro.
        isbn (str): ISBN único.
        author_id (int): Clave foránea a ``authors.id`` (borrado en cascada).
        published_year (int): Año de publicación opcional.
        genre (str): Género opcional.
        available (bool): Si el libro se puede prestar.
        kind (str): ``book`` o ``ebook``.
        ebook_format (str): Formato del e-book (PDF, EPUB...).
        ebook_file_size_mb (float): Tamaño del fichero en MB.
        created_at (datetime): Fecha de alta.
    """
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    isbn = Column(String(20), unique=True, index=True, nullable=False)
    author_id = Column(Integer, ForeignKey("authors.id", ondelete="CASCADE"), nullable=False, index=True)
    published_year = Column(Integer, nullable=True)
    genre = Column(String(100), nullable=True)
    available = Column(Boolean, default=True, server_default="1", nullable=False, index=True)
    kind = Column(String(10), default="book", server_default="book", nullable=False)
    ebook_format = Column(String(20), nullable=True)
    ebook_file_size_mb = Column(Float, nullable=True)
    created_at = Column(EpochTimestamp, default=utcnow, nullable=False)

    author = relationship("AuthorRecord", back_populates="books")
    loans = relationship(
        "LoanRecord",
        back_populates="book",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<BookRecord(id={self.id}, title='{self.title[:30]}...', isbn='{self.isbn}')>"
