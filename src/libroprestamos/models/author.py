"""
Modelo ORM para la tabla de autores de LibroPrestamos.
Es la fila plana; la entidad de dominio equivalente es ``libroprestamos.domain.author.Author``.
"""

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from libroprestamos.db.session import Base
from libroprestamos.db.types import EpochTimestamp
from libroprestamos.core.clock import utcnow

class AuthorRecord(Base):
    """
    Representa una fila de la tabla ``authors``.

    Atributos:
        id (int): Identificador primario autoincremental.
        first_name (str): Nombre.
        last_name (str): Apellido.
        email (str): Correo electrónico único.
        bio (str): Biografía opcional.
        created_at (datetime): Fecha de alta, guardada como segundos epoch.
        books (List[BookRecord]): Libros del autor (se borran en cascada).
    """
    __tablename__ = "authors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    bio = Column(Text, nullable=True)
    created_at = Column(EpochTimestamp, default=utcnow, nullable=False)

    books = relationship(
        "BookRecord",
        back_populates="author",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<AuthorRecord(id={self.id}, email='{self.email}')>"
