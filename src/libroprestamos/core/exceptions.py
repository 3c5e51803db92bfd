"""
Errores de dominio de LibroPrestamos.

Las validaciones de campos las hace pydantic (``ValidationError``) al construir
o asignar; aquí viven los errores de negocio que lanzan repositorios y servicios.
"""

from typing import Optional


class LibraryError(Exception):
    """Clase base de todos los errores de dominio."""


class NotFoundError(LibraryError):
    """No existe la entidad buscada por ID."""

    def __init__(self, kind: str, entity_id: int):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} with ID {entity_id} not found")


class StateConflictError(LibraryError):
    """Una regla de negocio rechaza la operación en el estado actual."""


class BookUnavailableError(StateConflictError):
    def __init__(self, book_id: Optional[int] = None):
        self.book_id = book_id
        super().__init__("Book is not available for borrowing")


class AlreadyReturnedError(StateConflictError):
    def __init__(self, loan_id: Optional[int] = None):
        self.loan_id = loan_id
        super().__init__("Book has already been returned")


class DuplicateEmailError(StateConflictError):
    def __init__(self, kind: str, email: str):
        self.kind = kind
        self.email = email
        super().__init__(f"{kind} with email {email} already exists")


class DuplicateIsbnError(StateConflictError):
    def __init__(self, isbn: str):
        self.isbn = isbn
        super().__init__(f"Book with ISBN {isbn} already exists")


class IntegrityMissingError(LibraryError):
    """Una fila referencia a otra que ya no existe."""

    def __init__(self, kind: str, entity_id: int, owner_kind: str, owner_id: Optional[int]):
        self.kind = kind
        self.entity_id = entity_id
        self.owner_kind = owner_kind
        self.owner_id = owner_id
        super().__init__(f"{kind} {entity_id} not found for {owner_kind} {owner_id}")


class UnsavedEntityError(LibraryError):
    """Se usó una entidad sin ID donde hace falta una ya guardada."""
