# app/modules/bookings/router.py
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.config.settings import Settings
from app.core.auth.dependencies import get_current_user, get_settings
from app.shared.database.models import User
from .service import BookingRegistry
from .schemas import (
    BookingCreateRequest, BookingResponse,
    BookingCreatedResponse, BookingDetailResponse, BookingListResponse
)

router = APIRouter()


def get_booking_registry(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> BookingRegistry:
    return BookingRegistry(db, max_attempts=settings.tracking_code_max_attempts)


@router.post("", response_model=BookingCreatedResponse)
def create_booking(
    payload: BookingCreateRequest,
    current_user: User = Depends(get_current_user),
    registry: BookingRegistry = Depends(get_booking_registry)
):
    """
    Crear una reserva para el usuario autenticado

    **Validaciones:**
    - Remitente y destinatario (nombre + teléfono)
    - Direcciones completas de recolección y entrega
    - vehicleType, packageType, pickupDate

    Si faltan campos se devuelven todos en `details.fields`.
    La reserva queda en estado `Pending` con un `trackingCode` único.
    """
    booking = registry.create(current_user.id, payload)
    return BookingCreatedResponse(
        success=True,
        message="Booking created",
        booking=BookingResponse.model_validate(booking)
    )


@router.get("", response_model=BookingListResponse)
def list_bookings(
    current_user: User = Depends(get_current_user),
    registry: BookingRegistry = Depends(get_booking_registry)
):
    """Reservas del usuario autenticado, más recientes primero"""
    bookings = registry.list(current_user.id)
    return BookingListResponse(
        success=True,
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        count=len(bookings)
    )


@router.get("/{booking_id}", response_model=BookingDetailResponse)
def get_booking(
    booking_id: int = Path(..., description="ID de la reserva"),
    current_user: User = Depends(get_current_user),
    registry: BookingRegistry = Depends(get_booking_registry)
):
    """Una reserva, solo si pertenece al usuario (si no, 404)"""
    booking = registry.get(current_user.id, booking_id)
    return BookingDetailResponse(
        success=True,
        booking=BookingResponse.model_validate(booking)
    )
