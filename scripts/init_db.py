"""
Script para crear las tablas de LibroPrestamos en la base de datos configurada.

Uso:
    python scripts/init_db.py

La URL se toma de DATABASE_URL (entorno o fichero .env).
"""

import logging
import sys

from libroprestamos.core.config import settings

logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

from libroprestamos.db.init_db import init_db


if __name__ == "__main__":
    logger.info(f"Inicializando base de datos ({settings.ENVIRONMENT})...")
    try:
        init_db()
    except Exception as e:
        logger.exception(f"Error creando las tablas: {e}")
        sys.exit(1)
    logger.info("Base de datos lista.")
