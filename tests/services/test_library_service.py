# tests/services/test_library_service.py
import pytest
from pydantic import ValidationError

from libroprestamos.core.exceptions import DuplicateEmailError, DuplicateIsbnError, NotFoundError
from libroprestamos.domain.book import BookKind
from libroprestamos.services import LibraryService


@pytest.fixture
def library(db_session):
    return LibraryService(db_session)


@pytest.fixture
def orwell_id(library):
    return library.register_author("George", "Orwell", "orwell@example.com", bio="English novelist").id


def test_register_author(library):
    author = library.register_author("J.K.", "Rowling", "jk@example.com")

    assert author.id is not None
    assert library.get_author_by_id(author.id).full_name == "J.K. Rowling"
    assert [a.id for a in library.get_all_authors()] == [author.id]


def test_register_author_duplicate_email(library, orwell_id):
    with pytest.raises(DuplicateEmailError, match="orwell@example.com"):
        library.register_author("Eric", "Blair", "orwell@example.com")
    assert len(library.get_all_authors()) == 1


def test_register_author_invalid_email_writes_nothing(library):
    with pytest.raises(ValidationError, match="Invalid email format"):
        library.register_author("Ann", "Smith", "ann.example.com")
    assert library.get_all_authors() == []


def test_add_book(library, orwell_id):
    book = library.add_book("1984", "9780451524935", orwell_id, published_year=1949, genre="Dystopia")

    assert book.id is not None
    assert book.available is True
    assert book.info() == "1984 by George Orwell (1949)"
    assert library.get_book_by_id(book.id) == book


def test_add_book_unknown_author(library):
    with pytest.raises(NotFoundError, match="Author with ID 999 not found"):
        library.add_book("Ghost", "1234567890", 999)


def test_add_book_duplicate_isbn(library, orwell_id):
    library.add_book("1984", "9780451524935", orwell_id)

    with pytest.raises(DuplicateIsbnError):
        library.add_book("Nineteen Eighty-Four", "9780451524935", orwell_id)
    assert len(library.get_books_by_author(orwell_id)) == 1


def test_add_ebook(library, orwell_id):
    ebook = library.add_ebook("Animal Farm", "9780451526342", orwell_id, file_size_mb=2.5, ebook_format="PDF")

    found = library.get_book_by_id(ebook.id)
    assert found.kind is BookKind.EBOOK
    assert found.is_ebook
    assert found.can_download(max_size_mb=10)
    assert found.info() == "Animal Farm by George Orwell (Unknown year) [E-Book: PDF, 2.5MB]"


def test_add_ebook_duplicate_isbn(library, orwell_id):
    library.add_book("1984", "9780451524935", orwell_id)

    with pytest.raises(DuplicateIsbnError):
        library.add_ebook("1984", "9780451524935", orwell_id, file_size_mb=1, ebook_format="EPUB")


def test_get_books_by_author(library, orwell_id):
    other = library.register_author("Aldous", "Huxley", "huxley@example.com")
    first = library.add_book("1984", "9780451524935", orwell_id)
    library.add_book("Brave New World", "9780060850524", other.id)
    second = library.add_book("Animal Farm", "9780451526342", orwell_id)

    assert [b.id for b in library.get_books_by_author(orwell_id)] == [first.id, second.id]
    with pytest.raises(NotFoundError):
        library.get_books_by_author(404)


def test_get_available_books(library, orwell_id):
    first = library.add_book("1984", "9780451524935", orwell_id)
    second = library.add_book("Animal Farm", "9780451526342", orwell_id)
    library.books.mark_borrowed(first.id)

    assert [b.id for b in library.get_available_books()] == [second.id]


def test_register_member(library):
    member = library.register_member("John", "Doe", "a@b.com", phone="555-0100")

    assert library.get_member_by_id(member.id).phone == "555-0100"
    assert [m.id for m in library.get_all_members()] == [member.id]


def test_register_member_duplicate_email(library):
    library.register_member("John", "Doe", "a@b.com")

    with pytest.raises(DuplicateEmailError, match="Member with email a@b.com already exists"):
        library.register_member("John", "Doe", "a@b.com")
    assert len(library.get_all_members()) == 1


def test_lookups_return_none_for_unknown_ids(library):
    assert library.get_book_by_id(1) is None
    assert library.get_author_by_id(1) is None
    assert library.get_member_by_id(1) is None
