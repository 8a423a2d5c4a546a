# app/shared/database/models.py
import enum

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Enum, ForeignKey,
    UniqueConstraint, CheckConstraint, func
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

# =====================================================
# MIXIN PARA TIMESTAMPS
# =====================================================
class TimestampMixin:
    """Mixin que agrega campos created_at y updated_at"""
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(DateTime, nullable=False, server_default=func.current_timestamp(), onupdate=func.current_timestamp())


class AddressMixin:
    """Bloque de dirección postal del usuario"""
    door_number = Column(String(50), nullable=False)
    building_name = Column(String(255))
    street = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    pincode = Column(String(20), nullable=False)


class BookingStatus(str, enum.Enum):
    PENDING = "Pending"
    SHIPPED = "Shipped"
    IN_TRANSIT = "In Transit"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


# =====================================================
# USUARIOS
# =====================================================

class User(Base, TimestampMixin, AddressMixin):
    """Usuario registrado. Los campos de credenciales solo los modifican
    CredentialStore y ResetTokenManager."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    phone = Column(String(50))
    password_hash = Column(String(255), nullable=False)

    # Reset de contraseña: digest SHA-256 del token, nunca el token en claro
    reset_token = Column(String(64))
    reset_token_expires_at = Column(DateTime)

    # Relationships
    bookings = relationship("Booking", back_populates="owner")

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        CheckConstraint(
            "(reset_token IS NULL) = (reset_token_expires_at IS NULL)",
            name="ck_users_reset_token_pair",
        ),
    )


# =====================================================
# RESERVAS
# =====================================================

class Booking(Base, TimestampMixin):
    """Reserva de envío. tracking_code y user_id no cambian tras la inserción."""
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    tracking_code = Column(String(32), nullable=False)
    status = Column(
        Enum(BookingStatus, name="booking_status", native_enum=False,
             values_callable=lambda e: [m.value for m in e], length=20),
        nullable=False,
        default=BookingStatus.PENDING,
    )

    # Recolección
    pickup_name = Column(String(255), nullable=False)
    pickup_phone = Column(String(50), nullable=False)
    pickup_door_number = Column(String(50), nullable=False)
    pickup_building_name = Column(String(255))
    pickup_street = Column(String(255), nullable=False)
    pickup_city = Column(String(100), nullable=False)
    pickup_state = Column(String(100), nullable=False)
    pickup_pincode = Column(String(20), nullable=False)

    # Entrega
    dropoff_name = Column(String(255), nullable=False)
    dropoff_phone = Column(String(50), nullable=False)
    dropoff_door_number = Column(String(50), nullable=False)
    dropoff_building_name = Column(String(255))
    dropoff_street = Column(String(255), nullable=False)
    dropoff_city = Column(String(100), nullable=False)
    dropoff_state = Column(String(100), nullable=False)
    dropoff_pincode = Column(String(20), nullable=False)

    # Paquete
    package_type = Column(String(100), nullable=False)
    package_contents = Column(String(500))
    fragile = Column(Boolean, nullable=False, default=False)
    vehicle_type = Column(String(50), nullable=False)
    pickup_at = Column(DateTime)

    # Relationships
    owner = relationship("User", back_populates="bookings")

    __table_args__ = (
        UniqueConstraint("tracking_code", name="uq_bookings_tracking_code"),
    )
