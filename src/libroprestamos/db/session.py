"""
Configuración y utilidades para la gestión de la sesión de base de datos SQLAlchemy en LibroPrestamos.
Incluye la creación del motor, la fábrica de sesiones, la clase base para los modelos ORM
y el contexto transaccional que usan los servicios para agrupar varias escrituras.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from libroprestamos.core.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str, enforce_foreign_keys: bool = True, **kwargs) -> Engine:
    """
    Crea un motor SQLAlchemy para la URL dada.

    En SQLite las claves foráneas (y por tanto los borrados en cascada) sólo se
    respetan si cada conexión activa ``PRAGMA foreign_keys``.

    Args:
        url (str): URL de conexión.
        enforce_foreign_keys (bool): Activa las claves foráneas en SQLite.
        **kwargs: Argumentos adicionales para ``create_engine``.

    Returns:
        Engine: Motor configurado.
    """
    kwargs.setdefault("echo", settings.SQL_ECHO)
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)
    engine = create_engine(url, **kwargs)
    if url.startswith("sqlite") and enforce_foreign_keys:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


engine = create_db_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """
    Proporciona una sesión de base de datos y la cierra al terminar.

    Yields:
        Session: Sesión de base de datos SQLAlchemy.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Agrupa las escrituras del bloque en una única transacción.

    Hace commit si el bloque termina sin errores; ante cualquier excepción
    hace rollback y la vuelve a lanzar.
    """
    try:
        yield db
        db.commit()
    except Exception as e:
        logger.warning(f"Rolling back transaction: {e}")
        db.rollback()
        raise
