"""
Tipos de columna propios.

Las fechas se guardan como segundos desde epoch (entero) y se devuelven como ``datetime`` con zona horaria UTC.
"""

import datetime
from sqlalchemy import Integer
from sqlalchemy.types import TypeDecorator

from libroprestamos.core.clock import ensure_utc


class EpochTimestamp(TypeDecorator):
    """Fecha UTC con zona horaria guardada como segundos enteros desde epoch."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return int(ensure_utc(value).timestamp())

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return datetime.datetime.fromtimestamp(value, tz=datetime.timezone.utc)
