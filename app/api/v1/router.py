# app/api/v1/router.py
from fastapi import APIRouter
from app.api.v1.auth import router as auth_router
from app.api.v1.profile import router as profile_router
from app.modules.bookings.router import router as bookings_router


# Crear router principal de la API v1
api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(
    profile_router,
    prefix="/profile",
    tags=["Profile"]
)

api_router.include_router(
    bookings_router,
    prefix="/bookings",
    tags=["Bookings"]
)


@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": "RedCap Courier API v1",
        "status": "active",
        "docs": "/docs",
        "available_endpoints": {
            "authentication": "/api/v1/auth",
            "profile": "/api/v1/profile",
            "bookings": "/api/v1/bookings"
        }
    }
