from .library_service import LibraryService
from .loan_service import LoanService

__all__ = [
    "LibraryService",
    "LoanService",
]
