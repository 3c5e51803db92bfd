from .base import Repository, require_id
from .author_repository import AuthorRepository
from .book_repository import BookRepository
from .member_repository import MemberRepository
from .loan_repository import LoanRepository

__all__ = [
    "Repository",
    "require_id",
    "AuthorRepository",
    "BookRepository",
    "MemberRepository",
    "LoanRepository",
]
