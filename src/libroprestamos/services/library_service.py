"""
Servicio de catálogo: alta de autores, libros y socios, y consultas del catálogo.

Aplica las reglas de negocio que implican a más de una entidad (el autor debe
existir, emails e ISBN únicos) antes de llamar a los repositorios.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import DuplicateEmailError, DuplicateIsbnError, NotFoundError
from ..db.session import transaction
from ..domain.author import Author
from ..domain.book import Book
from ..domain.member import Member
from ..repositories import AuthorRepository, BookRepository, MemberRepository

logger = logging.getLogger(__name__)


class LibraryService:
    def __init__(self, db: Session):
        self.db = db
        self.authors = AuthorRepository(db)
        self.books = BookRepository(db, self.authors)
        self.members = MemberRepository(db)

    def register_author(self, first_name: str, last_name: str, email: str, bio: Optional[str] = None) -> Author:
        """
        Registra un nuevo autor.

        Raises:
            pydantic.ValidationError: Si el nombre está vacío o el email no es válido.
            DuplicateEmailError: Si ya existe un autor con ese email.
        """
        author = Author(first_name=first_name, last_name=last_name, email=email, bio=bio)
        if self.authors.find_by_email(email) is not None:
            logger.warning(f"Author registration rejected, email already used: {email}")
            raise DuplicateEmailError("Author", email)
        with transaction(self.db):
            created = self.authors.create(author)
        logger.info(f"Author {created.id} registered: {created.full_name}")
        return created

    def _check_new_book(self, isbn: str, author_id: int) -> Author:
        author = self.authors.find_by_id(author_id)
        if author is None:
            raise NotFoundError("Author", author_id)
        if self.books.find_by_isbn(isbn) is not None:
            logger.warning(f"Book rejected, ISBN already used: {isbn}")
            raise DuplicateIsbnError(isbn)
        return author

    def add_book(
        self,
        title: str,
        isbn: str,
        author_id: int,
        published_year: Optional[int] = None,
        genre: Optional[str] = None,
    ) -> Book:
        """
        Añade un libro impreso al catálogo.

        Raises:
            NotFoundError: Si el autor no existe.
            DuplicateIsbnError: Si el ISBN ya está registrado.
        """
        author = self._check_new_book(isbn, author_id)
        book = Book(title=title, isbn=isbn, author=author, published_year=published_year, genre=genre)
        with transaction(self.db):
            created = self.books.create(book)
        logger.info(f"Book {created.id} added: {created.info()}")
        return created

    def add_ebook(
        self,
        title: str,
        isbn: str,
        author_id: int,
        file_size_mb: float,
        ebook_format: str,
        published_year: Optional[int] = None,
        genre: Optional[str] = None,
    ) -> Book:
        """Añade un e-book al catálogo; mismas reglas que ``add_book``."""
        author = self._check_new_book(isbn, author_id)
        book = Book.new_ebook(
            title,
            isbn,
            author,
            file_size_mb=file_size_mb,
            ebook_format=ebook_format,
            published_year=published_year,
            genre=genre,
        )
        with transaction(self.db):
            created = self.books.create(book)
        logger.info(f"E-book {created.id} added: {created.info()}")
        return created

    def register_member(self, first_name: str, last_name: str, email: str, phone: Optional[str] = None) -> Member:
        """
        Registra un nuevo socio.

        Raises:
            DuplicateEmailError: Si ya existe un socio con ese email.
        """
        member = Member(first_name=first_name, last_name=last_name, email=email, phone=phone)
        if self.members.find_by_email(email) is not None:
            logger.warning(f"Member registration rejected, email already used: {email}")
            raise DuplicateEmailError("Member", email)
        with transaction(self.db):
            created = self.members.create(member)
        logger.info(f"Member {created.id} registered: {created.full_name}")
        return created

    def get_available_books(self) -> List[Book]:
        return self.books.find_available()

    def get_books_by_author(self, author_id: int) -> List[Book]:
        return self.books.find_by_author_id(author_id)

    def get_all_authors(self) -> List[Author]:
        return self.authors.find_all()

    def get_all_members(self) -> List[Member]:
        return self.members.find_all()

    def get_book_by_id(self, book_id: int) -> Optional[Book]:
        return self.books.find_by_id(book_id)

    def get_author_by_id(self, author_id: int) -> Optional[Author]:
        return self.authors.find_by_id(author_id)

    def get_member_by_id(self, member_id: int) -> Optional[Member]:
        return self.members.find_by_id(member_id)
