"""
Contrato común de los repositorios y utilidades compartidas.

Cada repositorio traduce entre filas planas (``libroprestamos.models``) y
entidades de dominio (``libroprestamos.domain``). Los repositorios hacen
``flush`` pero nunca ``commit``: la transacción la controla el servicio.
"""

from typing import List, Optional, Protocol, TypeVar, runtime_checkable

from libroprestamos.core.exceptions import UnsavedEntityError

EntityT = TypeVar("EntityT")


@runtime_checkable
class Repository(Protocol[EntityT]):
    """Operaciones que ofrece todo repositorio de entidades."""

    def find_by_id(self, entity_id: int) -> Optional[EntityT]: ...

    def find_all(self) -> List[EntityT]: ...

    def create(self, entity: EntityT) -> EntityT: ...

    def update(self, entity: EntityT) -> EntityT: ...

    def delete(self, entity_id: int) -> bool: ...


def require_id(entity, message: str) -> int:
    """Devuelve ``entity.id`` o lanza UnsavedEntityError si la entidad nunca se guardó."""
    if entity.id is None:
        raise UnsavedEntityError(message)
    return entity.id
