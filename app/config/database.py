# app/config/database.py
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from .settings import settings

# Configuración del engine
engine_kwargs = {
    "pool_pre_ping": True,
    "echo": settings.debug
}

if settings.database_url.startswith("sqlite"):
    # SQLite comparte la conexión entre el threadpool y el event loop
    engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    engine_kwargs["pool_recycle"] = 300

# Create engine
engine = create_engine(
    settings.database_url_with_ssl,
    **engine_kwargs
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Database dependency
def get_db():
    """Database dependency for FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def is_unique_violation(error: IntegrityError, column: str) -> bool:
    """Detecta la violación de unicidad sobre una columna (SQLite y PostgreSQL)"""
    message = str(getattr(error, "orig", error)).lower()
    return column in message and ("unique" in message or "duplicate" in message)
