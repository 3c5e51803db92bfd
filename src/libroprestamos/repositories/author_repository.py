"""
Repositorio de autores.
Traduce entre filas ``AuthorRecord`` y entidades ``Author``.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundError
from ..domain.author import Author
from ..models.author import AuthorRecord
from .base import require_id

logger = logging.getLogger(__name__)


class AuthorRepository:
    def __init__(self, db: Session):
        self.db = db

    def _to_entity(self, record: AuthorRecord) -> Author:
        return Author(
            id=record.id,
            first_name=record.first_name,
            last_name=record.last_name,
            email=record.email,
            bio=record.bio,
            created_at=record.created_at,
        )

    def _fetch(self, stmt) -> List[AuthorRecord]:
        return list(self.db.execute(stmt.execution_options(populate_existing=True)).scalars().all())

    def find_by_id(self, author_id: int) -> Optional[Author]:
        """
        Recupera un autor por su ID.

        Returns:
            Optional[Author]: El autor, o None si no existe.
        """
        rows = self._fetch(select(AuthorRecord).where(AuthorRecord.id == author_id).limit(1))
        return self._to_entity(rows[0]) if rows else None

    def find_all(self) -> List[Author]:
        rows = self._fetch(select(AuthorRecord).order_by(AuthorRecord.id))
        return [self._to_entity(row) for row in rows]

    def find_by_email(self, email: str) -> Optional[Author]:
        rows = self._fetch(select(AuthorRecord).where(AuthorRecord.email == email).limit(1))
        return self._to_entity(rows[0]) if rows else None

    def create(self, author: Author) -> Author:
        """
        Inserta el autor y devuelve una nueva instancia con el ID asignado.
        """
        record = AuthorRecord(
            first_name=author.first_name,
            last_name=author.last_name,
            email=author.email,
            bio=author.bio,
            created_at=author.created_at,
        )
        self.db.add(record)
        self.db.flush()
        self.db.refresh(record)
        logger.debug(f"Author {record.id} inserted ({record.email}).")
        return self._to_entity(record)

    def update(self, author: Author) -> Author:
        author_id = require_id(author, "Cannot update author without ID")
        record = self.db.get(AuthorRecord, author_id, populate_existing=True)
        if record is None:
            raise NotFoundError("Author", author_id)
        record.first_name = author.first_name
        record.last_name = author.last_name
        record.email = author.email
        record.bio = author.bio
        self.db.flush()
        self.db.refresh(record)
        return self._to_entity(record)

    def delete(self, author_id: int) -> bool:
        """Borra el autor (y, por cascada, sus libros). True si existía."""
        result = self.db.execute(
            delete(AuthorRecord).where(AuthorRecord.id == author_id),
            execution_options={"synchronize_session": False},
        )
        return result.rowcount > 0
