"""
Servicio de préstamos: préstamo y devolución de libros, vencimientos y multas.

Préstamo y devolución escriben dos filas (libro y préstamo); ambas escrituras
van dentro de la misma transacción, así que o se guardan las dos o ninguna.
El paso de disponible a prestado y el cierre del préstamo se hacen con
actualizaciones condicionales, de modo que dos préstamos (o dos devoluciones)
simultáneos no pueden tener éxito a la vez.
"""

import datetime
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.clock import ensure_utc, utcnow
from ..core.config import settings
from ..core.exceptions import AlreadyReturnedError, BookUnavailableError, NotFoundError
from ..db.session import transaction
from ..domain.loan import Loan
from ..repositories import AuthorRepository, BookRepository, LoanRepository, MemberRepository

logger = logging.getLogger(__name__)


class LoanService:
    def __init__(self, db: Session):
        self.db = db
        self.authors = AuthorRepository(db)
        self.books = BookRepository(db, self.authors)
        self.members = MemberRepository(db)
        self.loans = LoanRepository(db, self.books, self.members)

    def borrow_book(self, book_id: int, member_id: int) -> Loan:
        """
        Presta un libro a un socio.

        Args:
            book_id (int): ID del libro.
            member_id (int): ID del socio.

        Returns:
            Loan: El préstamo creado, con libro y socio.

        Raises:
            NotFoundError: Si el libro o el socio no existen.
            BookUnavailableError: Si el libro ya está prestado. No se escribe nada.
        """
        book = self.books.find_by_id(book_id)
        if book is None:
            raise NotFoundError("Book", book_id)
        member = self.members.find_by_id(member_id)
        if member is None:
            raise NotFoundError("Member", member_id)
        if not book.available:
            logger.warning(f"Borrow rejected: book {book_id} is not available.")
            raise BookUnavailableError(book_id)

        loan = Loan(book=book, member=member)
        with transaction(self.db):
            book.borrow()
            if not self.books.mark_borrowed(book_id):
                # otro préstamo se adelantó entre la lectura y esta actualización
                raise BookUnavailableError(book_id)
            created = self.loans.create(loan)
        logger.info(f"Loan {created.id} opened: book {book_id} to member {member_id}, due {created.due_date.isoformat()}")
        return created

    def return_book(self, loan_id: int) -> Loan:
        """
        Registra la devolución de un préstamo.

        Raises:
            NotFoundError: Si el préstamo no existe.
            AlreadyReturnedError: Si ya se devolvió. No se escribe nada.
        """
        loan = self.loans.find_by_id(loan_id)
        if loan is None:
            raise NotFoundError("Loan", loan_id)
        if loan.is_returned:
            logger.warning(f"Return rejected: loan {loan_id} was already returned.")
            raise AlreadyReturnedError(loan_id)

        with transaction(self.db):
            loan.return_book()
            if not self.loans.mark_returned(loan_id, loan.return_date):
                # otra devolución se confirmó después de la lectura
                raise AlreadyReturnedError(loan_id)
            self.books.update(loan.book)
            updated = self.loans.find_by_id(loan_id)
        logger.info(f"Loan {loan_id} returned; book {loan.book.id} available again.")
        return updated

    def get_active_loans(self) -> List[Loan]:
        return self.loans.find_active()

    def get_member_loans(self, member_id: int) -> List[Loan]:
        return self.loans.find_by_member_id(member_id)

    def get_overdue_loans(self, now: Optional[datetime.datetime] = None) -> List[Loan]:
        """Préstamos activos vencidos en ``now`` (por defecto, ahora). Se recalcula en cada llamada."""
        now = ensure_utc(now) or utcnow()
        return [loan for loan in self.loans.find_active() if loan.is_overdue(now)]

    def calculate_total_fines(self, daily_rate: Optional[float] = None, now: Optional[datetime.datetime] = None) -> float:
        """Suma de las multas de todos los préstamos vencidos."""
        if daily_rate is None:
            daily_rate = settings.DAILY_FINE
        now = ensure_utc(now) or utcnow()
        return sum(loan.calculate_fine(daily_rate, now) for loan in self.get_overdue_loans(now))

    def get_loan_by_id(self, loan_id: int) -> Optional[Loan]:
        return self.loans.find_by_id(loan_id)
