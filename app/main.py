# app/main.py
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from app.config.settings import settings
from app.config.database import engine
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging
from app.core.middleware import setup_middleware
from app.api.v1.router import api_router
from app.shared.database.models import Base

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"{settings.app_name} starting - version {settings.version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"JWT Algorithm: {settings.algorithm}, token expire: {settings.access_token_expire_minutes} minutes")
    logger.info(f"Password hash rounds: {settings.password_hash_rounds}")
    logger.info(f"Database: {settings.database_url.split('@')[1] if '@' in settings.database_url else settings.database_url}")

    if not settings.is_production:
        # En producción el esquema se crea con scripts/init_db.py
        Base.metadata.create_all(bind=engine)

    yield

    # Shutdown
    logger.info(f"{settings.app_name} shutting down")


setup_logging(settings)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Intercity courier bookings: accounts, password reset and shipment tracking codes",
    docs_url="/docs",
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# Setup middleware
setup_middleware(app, settings.cors_origins)
add_exception_handlers(app)

# Include routers
app.include_router(api_router, prefix="/api/v1")


# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "RedCap Courier API",
        "version": settings.version,
        "status": "running",
        "environment": settings.environment,
        "docs": "/docs",
        "api": "/api/v1"
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": settings.version,
        "app": settings.app_name,
        "environment": settings.environment
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
