# app/modules/bookings/schemas.py
from pydantic import Field
from typing import List, Optional
from datetime import datetime

from app.shared.database.models import BookingStatus
from app.shared.schemas.common import BaseResponse, CamelModel


class BookingCreateRequest(CamelModel):
    """
    Payload de creación de reserva.

    Todos los campos son opcionales a nivel de schema: BookingRegistry valida
    los obligatorios y reporta todos los que faltan en una sola respuesta.
    """
    # Remitente / recolección
    sender_name: Optional[str] = None
    sender_phone: Optional[str] = None
    pickup_door_number: Optional[str] = None
    pickup_building_name: Optional[str] = None
    pickup_street: Optional[str] = None
    pickup_city: Optional[str] = None
    pickup_state: Optional[str] = None
    pickup_pincode: Optional[str] = None

    # Destinatario / entrega
    receiver_name: Optional[str] = None
    receiver_phone: Optional[str] = None
    delivery_door_number: Optional[str] = None
    delivery_building_name: Optional[str] = None
    delivery_street: Optional[str] = None
    delivery_city: Optional[str] = None
    delivery_state: Optional[str] = None
    delivery_pincode: Optional[str] = None

    # Paquete y vehículo
    vehicle_type: Optional[str] = None
    package_type: Optional[str] = None
    description: Optional[str] = Field(None, max_length=500)
    fragile: Optional[bool] = None
    pickup_date: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "senderName": "Ravi",
                "senderPhone": "9876543210",
                "pickupDoorNumber": "12",
                "pickupStreet": "Anna Salai",
                "pickupCity": "Chennai",
                "pickupState": "Tamil Nadu",
                "pickupPincode": "600002",
                "receiverName": "Meena",
                "receiverPhone": "9123456780",
                "deliveryDoorNumber": "4B",
                "deliveryStreet": "MG Road",
                "deliveryCity": "Bengaluru",
                "deliveryState": "Karnataka",
                "deliveryPincode": "560001",
                "vehicleType": "Mini Truck",
                "packageType": "Documents",
                "description": "Legal papers",
                "fragile": False,
                "pickupDate": "2025-01-15 10:30:00"
            }
        }
    }


class BookingResponse(CamelModel):
    id: int
    user_id: int
    tracking_code: str
    status: BookingStatus

    pickup_name: str
    pickup_phone: str
    pickup_door_number: str
    pickup_building_name: Optional[str] = None
    pickup_street: str
    pickup_city: str
    pickup_state: str
    pickup_pincode: str

    dropoff_name: str
    dropoff_phone: str
    dropoff_door_number: str
    dropoff_building_name: Optional[str] = None
    dropoff_street: str
    dropoff_city: str
    dropoff_state: str
    dropoff_pincode: str

    package_type: str
    package_contents: Optional[str] = None
    fragile: bool
    vehicle_type: str
    pickup_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class BookingCreatedResponse(BaseResponse):
    booking: BookingResponse


class BookingDetailResponse(BaseResponse):
    booking: BookingResponse


class BookingListResponse(BaseResponse):
    bookings: List[BookingResponse]
    count: int
