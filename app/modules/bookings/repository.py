# app/modules/bookings/repository.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Any, Dict, List, Optional
import logging

from app.config.database import is_unique_violation
from app.core.exceptions import InternalStorageError
from app.shared.database.models import Booking

logger = logging.getLogger(__name__)


class TrackingCodeCollision(Exception):
    """La inserción chocó con la restricción única de tracking_code"""


class BookingsRepository:
    def __init__(self, db: Session):
        self.db = db

    def insert_booking(self, booking_data: Dict[str, Any]) -> Booking:
        """Insertar reserva en una sola transacción"""
        booking = Booking(**booking_data)
        try:
            self.db.add(booking)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if is_unique_violation(e, "tracking_code"):
                raise TrackingCodeCollision(booking_data.get("tracking_code"))
            logger.exception("Integrity error inserting booking")
            raise InternalStorageError()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Storage error inserting booking")
            raise InternalStorageError()

        self.db.refresh(booking)
        return booking

    def get_owned_booking(self, booking_id: int, user_id: int) -> Optional[Booking]:
        """Reserva por id, solo si pertenece al usuario"""
        return self.db.query(Booking).filter(
            Booking.id == booking_id,
            Booking.user_id == user_id
        ).first()

    def get_bookings_by_user(self, user_id: int) -> List[Booking]:
        """Reservas del usuario, más recientes primero"""
        return self.db.query(Booking).filter(
            Booking.user_id == user_id
        ).order_by(Booking.created_at.desc(), Booking.id.desc()).all()
