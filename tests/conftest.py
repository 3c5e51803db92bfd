# tests/conftest.py
import datetime
import os
import sys

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add the src directory to the Python path to allow imports
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
src_path = os.path.join(project_root, 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from libroprestamos.db.session import create_db_engine
from libroprestamos.db.init_db import init_db
from libroprestamos.domain.author import Author
from libroprestamos.domain.book import Book
from libroprestamos.domain.member import Member
from libroprestamos.repositories import AuthorRepository, BookRepository, LoanRepository, MemberRepository

# --- Test Database Setup ---
# In-memory SQLite; StaticPool keeps every session on the same connection
TEST_DATABASE_URL = "sqlite://"


def _make_engine(enforce_foreign_keys: bool):
    engine = create_db_engine(
        TEST_DATABASE_URL,
        enforce_foreign_keys=enforce_foreign_keys,
        poolclass=StaticPool,
        echo=False,
    )
    init_db(engine)
    return engine


# A fresh database per test: services commit, so rolling back an outer
# transaction is not enough to isolate tests.
@pytest.fixture(scope="function")
def db_engine():
    engine = _make_engine(enforce_foreign_keys=True)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db_session_factory(db_engine):
    """Returns a SQLAlchemy session factory bound to the test engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(db_session_factory):
    session = db_session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def loose_session():
    """Session on a database without foreign key enforcement, for orphan rows."""
    engine = _make_engine(enforce_foreign_keys=False)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


# --- Helper entities (not persisted) ---
@pytest.fixture
def now():
    return datetime.datetime(2024, 3, 15, 12, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture
def orwell():
    return Author(id=1, first_name="George", last_name="Orwell", email="george.orwell@example.com")


@pytest.fixture
def nineteen_eighty_four(orwell):
    return Book(id=1, title="1984", isbn="9780451524935", author=orwell, published_year=1949, genre="Dystopia")


@pytest.fixture
def john():
    return Member(id=1, first_name="John", last_name="Doe", email="a@b.com")


# --- Repositories on the test session ---
@pytest.fixture
def author_repo(db_session):
    return AuthorRepository(db_session)


@pytest.fixture
def book_repo(db_session, author_repo):
    return BookRepository(db_session, author_repo)


@pytest.fixture
def member_repo(db_session):
    return MemberRepository(db_session)


@pytest.fixture
def loan_repo(db_session, book_repo, member_repo):
    return LoanRepository(db_session, book_repo, member_repo)
