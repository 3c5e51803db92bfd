# tests/repositories/test_book_repository.py
import pytest
from sqlalchemy import text

from libroprestamos.core.exceptions import IntegrityMissingError, NotFoundError, UnsavedEntityError
from libroprestamos.domain.author import Author
from libroprestamos.domain.book import Book, BookKind
from libroprestamos.repositories import AuthorRepository, BookRepository

# --- Helper Fixtures ---
@pytest.fixture
def saved_author(author_repo):
    return author_repo.create(Author(first_name="George", last_name="Orwell", email="orwell@example.com"))

@pytest.fixture
def saved_book(book_repo, saved_author):
    return book_repo.create(Book(title="1984", isbn="9780451524935", author=saved_author, published_year=1949))

def _count_calls(monkeypatch, obj, name):
    calls = []
    original = getattr(obj, name)

    def wrapper(*args, **kwargs):
        calls.append(args)
        return original(*args, **kwargs)

    monkeypatch.setattr(obj, name, wrapper)
    return calls
# --------------------------------------------------------------------------------

def test_create_returns_new_instance_with_id(book_repo, saved_author):
    book = Book(title="Animal Farm", isbn="9780451526342", author=saved_author, genre="Satire")

    created = book_repo.create(book)

    assert book.id is None
    assert created.id is not None
    assert created.author == saved_author
    assert created.available is True

def test_find_by_id_round_trip(book_repo, saved_book):
    found = book_repo.find_by_id(saved_book.id)

    assert found == saved_book
    assert found.author.full_name == "George Orwell"
    assert found.created_at == saved_book.created_at

def test_find_by_id_missing(book_repo):
    assert book_repo.find_by_id(12345) is None

def test_find_by_isbn(book_repo, saved_book):
    assert book_repo.find_by_isbn("9780451524935").id == saved_book.id
    assert book_repo.find_by_isbn("0000000000") is None

def test_ebook_round_trip(book_repo, saved_author):
    created = book_repo.create(
        Book.new_ebook("Down and Out", "9780156262255", saved_author, file_size_mb=3.5, ebook_format="EPUB")
    )

    found = book_repo.find_by_id(created.id)

    assert found.kind is BookKind.EBOOK
    assert found.ebook.format == "EPUB"
    assert found.ebook.file_size_mb == pytest.approx(3.5)
    assert found.info().endswith("[E-Book: EPUB, 3.5MB]")

def test_create_requires_saved_author(book_repo):
    author = Author(first_name="Unsaved", last_name="Writer", email="unsaved@example.com")

    with pytest.raises(UnsavedEntityError):
        book_repo.create(Book(title="Draft", isbn="1234567890", author=author))

def test_bulk_read_fetches_each_author_once(book_repo, author_repo, monkeypatch):
    authors = [
        author_repo.create(Author(first_name=f"Writer{i}", last_name="Test", email=f"writer{i}@example.com"))
        for i in range(3)
    ]
    for i in range(10):
        book_repo.create(Book(title=f"Book {i}", isbn=f"97800000000{i:02d}", author=authors[i % 3]))

    calls = _count_calls(monkeypatch, author_repo, "find_by_id")
    books = book_repo.find_all()

    assert len(books) == 10
    assert len(calls) == 3
    assert {book.author.id for book in books} == {author.id for author in authors}

def test_find_available_excludes_borrowed(book_repo, saved_book, saved_author):
    other = book_repo.create(Book(title="Animal Farm", isbn="9780451526342", author=saved_author))

    assert book_repo.mark_borrowed(saved_book.id) is True

    available = book_repo.find_available()
    assert [book.id for book in available] == [other.id]

def test_mark_borrowed_only_once(book_repo, saved_book):
    assert book_repo.mark_borrowed(saved_book.id) is True
    assert book_repo.mark_borrowed(saved_book.id) is False
    assert book_repo.find_by_id(saved_book.id).available is False

def test_mark_borrowed_unknown_book(book_repo):
    assert book_repo.mark_borrowed(999) is False

def test_update_persists_availability(book_repo, saved_book):
    saved_book.borrow()
    saved_book.title = "Nineteen Eighty-Four"

    updated = book_repo.update(saved_book)

    assert updated.available is False
    assert book_repo.find_by_id(saved_book.id).title == "Nineteen Eighty-Four"

def test_update_errors(book_repo, saved_author, saved_book):
    with pytest.raises(UnsavedEntityError):
        book_repo.update(Book(title="No id", isbn="1234567890", author=saved_author))

    book_repo.delete(saved_book.id)
    with pytest.raises(NotFoundError, match=f"Book with ID {saved_book.id} not found"):
        book_repo.update(saved_book)

def test_find_by_author_id(book_repo, saved_author, saved_book):
    books = book_repo.find_by_author_id(saved_author.id)

    assert [book.id for book in books] == [saved_book.id]
    with pytest.raises(NotFoundError) as excinfo:
        book_repo.find_by_author_id(777)
    assert excinfo.value.kind == "Author"
    assert excinfo.value.entity_id == 777

def test_find_many(book_repo, saved_author, saved_book):
    other = book_repo.create(Book(title="Animal Farm", isbn="9780451526342", author=saved_author))

    books = book_repo.find_many([other.id, saved_book.id, other.id, 404])

    assert sorted(book.id for book in books) == sorted([saved_book.id, other.id])
    assert book_repo.find_many([]) == []

def test_delete(book_repo, saved_book):
    assert book_repo.delete(saved_book.id) is True
    assert book_repo.delete(saved_book.id) is False
    assert book_repo.find_by_id(saved_book.id) is None

def test_orphan_book_single_read_fails_bulk_read_skips(loose_session):
    authors = AuthorRepository(loose_session)
    books = BookRepository(loose_session, authors)
    kept_author = authors.create(Author(first_name="Kept", last_name="Author", email="kept@example.com"))
    gone_author = authors.create(Author(first_name="Gone", last_name="Author", email="gone@example.com"))
    kept = books.create(Book(title="Kept Book", isbn="1111111111", author=kept_author))
    orphan = books.create(Book(title="Orphan Book", isbn="2222222222", author=gone_author))

    loose_session.execute(text("DELETE FROM authors WHERE id = :id"), {"id": gone_author.id})

    with pytest.raises(IntegrityMissingError, match=f"Author {gone_author.id} not found for book {orphan.id}"):
        books.find_by_id(orphan.id)
    assert [book.id for book in books.find_all()] == [kept.id]
