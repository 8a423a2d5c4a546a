# app/modules/bookings/__init__.py
"""
Módulo Bookings - Reservas de envío

- Crear reserva con código de seguimiento único (estado inicial Pending)
- Listar reservas del usuario, más recientes primero
- Consultar una reserva propia

Arquitectura:
- router.py: Endpoints de reservas
- service.py: BookingRegistry, validación y reintentos de tracking code
- repository.py: Acceso a datos de reservas
- tracking.py: Generador de códigos de seguimiento
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import BookingRegistry
from .repository import BookingsRepository
from .tracking import TrackingCodeGenerator

__all__ = [
    "router",
    "BookingRegistry",
    "BookingsRepository",
    "TrackingCodeGenerator"
]
