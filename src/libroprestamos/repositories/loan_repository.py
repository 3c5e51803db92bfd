"""
Repositorio de préstamos.

Cada Loan se devuelve con su Book (que a su vez lleva su Author) y su Member.
Igual que en BookRepository, una lectura individual con referencias rotas es
un error de integridad y las lecturas masivas descartan esas filas.
"""

import datetime
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from ..core.exceptions import IntegrityMissingError, NotFoundError, UnsavedEntityError
from ..domain.book import Book
from ..domain.loan import Loan
from ..domain.member import Member
from ..models.loan import LoanRecord
from .base import require_id
from .book_repository import BookRepository
from .member_repository import MemberRepository

logger = logging.getLogger(__name__)


class LoanRepository:
    def __init__(self, db: Session, books: BookRepository, members: MemberRepository):
        self.db = db
        self.books = books
        self.members = members

    def _to_entity(self, record: LoanRecord, book: Book, member: Member) -> Loan:
        return Loan(
            id=record.id,
            book=book,
            member=member,
            loan_date=record.loan_date,
            due_date=record.due_date,
            return_date=record.return_date,
        )

    def _apply(self, record: LoanRecord, loan: Loan) -> None:
        if loan.book.id is None or loan.member.id is None:
            raise UnsavedEntityError("Book and Member must be saved to database before creating loan")
        record.book_id = loan.book.id
        record.member_id = loan.member.id
        record.loan_date = loan.loan_date
        record.due_date = loan.due_date
        record.return_date = loan.return_date

    def _fetch(self, stmt) -> List[LoanRecord]:
        return list(self.db.execute(stmt.execution_options(populate_existing=True)).scalars().all())

    def _hydrate_one(self, record: LoanRecord) -> Loan:
        book = self.books.find_by_id(record.book_id)
        if book is None:
            raise IntegrityMissingError("Book", record.book_id, "loan", record.id)
        member = self.members.find_by_id(record.member_id)
        if member is None:
            raise IntegrityMissingError("Member", record.member_id, "loan", record.id)
        return self._to_entity(record, book, member)

    def _hydrate_many(self, records: Iterable[LoanRecord]) -> List[Loan]:
        """
        Convierte un lote de filas en Loans.

        Los libros se cargan en bloque (cada autor una vez) y cada socio distinto
        se consulta una sola vez. Las filas con referencias rotas se omiten.
        """
        records = list(records)
        books_by_id: Dict[int, Book] = {
            book.id: book for book in self.books.find_many(record.book_id for record in records)
        }
        members_by_id: Dict[int, Member] = {}
        for member_id in dict.fromkeys(record.member_id for record in records):
            member = self.members.find_by_id(member_id)
            if member is not None:
                members_by_id[member_id] = member

        loans = []
        for record in records:
            book = books_by_id.get(record.book_id)
            member = members_by_id.get(record.member_id)
            if book is None or member is None:
                logger.warning(
                    f"Skipping loan {record.id}: book {record.book_id} or member {record.member_id} not found."
                )
                continue
            loans.append(self._to_entity(record, book, member))
        return loans

    def find_by_id(self, loan_id: int) -> Optional[Loan]:
        """
        Recupera un préstamo por su ID con su libro y su socio.

        Raises:
            IntegrityMissingError: Si el libro o el socio referenciados no existen.
        """
        rows = self._fetch(select(LoanRecord).where(LoanRecord.id == loan_id).limit(1))
        return self._hydrate_one(rows[0]) if rows else None

    def find_all(self) -> List[Loan]:
        return self._hydrate_many(self._fetch(select(LoanRecord).order_by(LoanRecord.id)))

    def find_active(self) -> List[Loan]:
        """Préstamos sin fecha de devolución."""
        stmt = select(LoanRecord).where(LoanRecord.return_date.is_(None)).order_by(LoanRecord.id)
        return self._hydrate_many(self._fetch(stmt))

    def find_by_member_id(self, member_id: int) -> List[Loan]:
        if self.members.find_by_id(member_id) is None:
            raise NotFoundError("Member", member_id)
        stmt = select(LoanRecord).where(LoanRecord.member_id == member_id).order_by(LoanRecord.id)
        return self._hydrate_many(self._fetch(stmt))

    def create(self, loan: Loan) -> Loan:
        record = LoanRecord()
        self._apply(record, loan)
        self.db.add(record)
        self.db.flush()
        self.db.refresh(record)
        logger.debug(f"Loan {record.id} inserted (book {record.book_id}, member {record.member_id}).")
        return self._hydrate_one(record)

    def update(self, loan: Loan) -> Loan:
        loan_id = require_id(loan, "Cannot update loan without ID")
        record = self.db.get(LoanRecord, loan_id, populate_existing=True)
        if record is None:
            raise NotFoundError("Loan", loan_id)
        self._apply(record, loan)
        self.db.flush()
        self.db.refresh(record)
        return self._hydrate_one(record)

    def mark_returned(self, loan_id: int, when: datetime.datetime) -> bool:
        """
        Fija la fecha de devolución sólo si el préstamo sigue activo, en una única sentencia.

        Returns:
            bool: True si esta llamada cerró el préstamo; False si no existe o ya estaba devuelto.
        """
        result = self.db.execute(
            update(LoanRecord)
            .where(LoanRecord.id == loan_id, LoanRecord.return_date.is_(None))
            .values(return_date=when),
            execution_options={"synchronize_session": False},
        )
        return result.rowcount == 1

    def delete(self, loan_id: int) -> bool:
        result = self.db.execute(
            delete(LoanRecord).where(LoanRecord.id == loan_id),
            execution_options={"synchronize_session": False},
        )
        return result.rowcount > 0
