# app/modules/bookings/service.py
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import logging

from dateutil import parser as date_parser
from sqlalchemy.orm import Session

from app.core.exceptions import (
    MissingFieldsError, ValidationError, NotFoundError, CodeGenerationExhaustedError
)
from app.shared.database.models import Booking, BookingStatus
from .repository import BookingsRepository, TrackingCodeCollision
from .schemas import BookingCreateRequest
from .tracking import TrackingCodeGenerator

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5

REQUIRED_FIELDS = (
    "sender_name",
    "sender_phone",
    "pickup_door_number",
    "pickup_street",
    "pickup_city",
    "pickup_state",
    "pickup_pincode",

    "receiver_name",
    "receiver_phone",
    "delivery_door_number",
    "delivery_street",
    "delivery_city",
    "delivery_state",
    "delivery_pincode",

    "vehicle_type",
    "package_type",
    "pickup_date",
)

# campo del payload -> columna de bookings
COLUMN_MAP = {
    "sender_name": "pickup_name",
    "sender_phone": "pickup_phone",
    "pickup_door_number": "pickup_door_number",
    "pickup_building_name": "pickup_building_name",
    "pickup_street": "pickup_street",
    "pickup_city": "pickup_city",
    "pickup_state": "pickup_state",
    "pickup_pincode": "pickup_pincode",

    "receiver_name": "dropoff_name",
    "receiver_phone": "dropoff_phone",
    "delivery_door_number": "dropoff_door_number",
    "delivery_building_name": "dropoff_building_name",
    "delivery_street": "dropoff_street",
    "delivery_city": "dropoff_city",
    "delivery_state": "dropoff_state",
    "delivery_pincode": "dropoff_pincode",

    "vehicle_type": "vehicle_type",
    "package_type": "package_type",
}


def _wire_name(field: str) -> str:
    return BookingCreateRequest.model_fields[field].alias or field


def _normalize(value: Any) -> Any:
    """Strings vacíos -> None"""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def parse_pickup_date(value: str) -> datetime:
    """ISO-8601 o 'YYYY-MM-DD HH:MM:SS'; con zona horaria se pasa a UTC naive"""
    try:
        parsed = date_parser.isoparse(value)
    except (ValueError, OverflowError):
        try:
            parsed = date_parser.parse(value)
        except (ValueError, OverflowError):
            raise ValidationError([_wire_name("pickup_date")], message="Invalid pickupDate")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class BookingRegistry:
    """Crea reservas y resuelve lecturas limitadas al dueño"""

    def __init__(
        self,
        db: Session,
        generator: Optional[TrackingCodeGenerator] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self.db = db
        self.repository = BookingsRepository(db)
        self.generator = generator or TrackingCodeGenerator()
        self.max_attempts = max_attempts

    def validate(self, payload: BookingCreateRequest) -> Dict[str, Any]:
        """Devuelve los valores normalizados o falla con todos los campos ausentes"""
        values = {field: _normalize(getattr(payload, field)) for field in BookingCreateRequest.model_fields}

        missing = [_wire_name(f) for f in REQUIRED_FIELDS if values[f] is None]
        if missing:
            raise MissingFieldsError(missing)

        return values

    def create(self, user_id: int, payload: BookingCreateRequest) -> Booking:
        values = self.validate(payload)

        booking_data = {column: values[field] for field, column in COLUMN_MAP.items()}
        booking_data.update(
            user_id=user_id,
            status=BookingStatus.PENDING,
            package_contents=values["description"] or values["package_type"],
            fragile=bool(values["fragile"]),
            pickup_at=parse_pickup_date(values["pickup_date"]),
        )

        for attempt in range(1, self.max_attempts + 1):
            booking_data["tracking_code"] = self.generator.generate()
            try:
                booking = self.repository.insert_booking(booking_data)
            except TrackingCodeCollision:
                logger.warning(
                    f"Tracking code collision ({booking_data['tracking_code']}), "
                    f"attempt {attempt}/{self.max_attempts}"
                )
                continue

            logger.info(f"Booking {booking.id} created for user {user_id} ({booking.tracking_code})")
            return booking

        logger.error(f"Tracking code generation exhausted for user {user_id}")
        raise CodeGenerationExhaustedError(self.max_attempts)

    def get(self, user_id: int, booking_id: int) -> Booking:
        booking = self.repository.get_owned_booking(booking_id, user_id)
        # Ajena o inexistente: misma respuesta
        if booking is None:
            raise NotFoundError()
        return booking

    def list(self, user_id: int) -> List[Booking]:
        return self.repository.get_bookings_by_user(user_id)
