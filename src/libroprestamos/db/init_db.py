"""
Creación del esquema de LibroPrestamos.

Importa todos los modelos para que queden registrados en ``Base`` y crea las
tablas que falten. No gestiona migraciones.
"""

import logging
from typing import Optional

from sqlalchemy.engine import Engine

from libroprestamos.db.session import Base, engine as default_engine
from libroprestamos.models import author, book, member, loan  # noqa: F401

logger = logging.getLogger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Crea las tablas ``authors``, ``books``, ``members`` y ``loans``.

    Args:
        bind (Optional[Engine]): Motor a usar; por defecto el configurado en settings.
    """
    bind = bind or default_engine
    Base.metadata.create_all(bind=bind)
    logger.info(f"Schema ready: {', '.join(sorted(Base.metadata.tables))}")
