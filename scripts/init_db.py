# scripts/init_db.py
"""
Crear las tablas users y bookings desde los modelos SQLAlchemy

Uso:
    python scripts/init_db.py
"""
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import inspect

from app.config.database import engine
from app.config.settings import settings
from app.shared.database.models import Base

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


def init_db() -> bool:
    logger.info(f"Conectando a: {settings.database_url.split('@')[1] if '@' in settings.database_url else settings.database_url}")

    Base.metadata.create_all(bind=engine)

    tables = inspect(engine).get_table_names()
    for table in ("users", "bookings"):
        if table not in tables:
            logger.error(f"Tabla '{table}' no fue creada")
            return False
        logger.info(f"Tabla '{table}' lista")
    return True


if __name__ == "__main__":
    sys.exit(0 if init_db() else 1)
