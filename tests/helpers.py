"""Test payloads and request helpers."""

TEST_SECRET = "test-secret-key"

VALID_REGISTRATION = {
    "email": "a@x.com",
    "password": "secret1",
    "fullName": "A",
    "doorNumber": "12",
    "street": "Main",
    "city": "X",
    "state": "Y",
    "pincode": "600001",
}

VALID_BOOKING = {
    "senderName": "Ravi",
    "senderPhone": "9876543210",
    "pickupDoorNumber": "12",
    "pickupBuildingName": "",
    "pickupStreet": "Anna Salai",
    "pickupCity": "Chennai",
    "pickupState": "Tamil Nadu",
    "pickupPincode": "600002",
    "receiverName": "Meena",
    "receiverPhone": "9123456780",
    "deliveryDoorNumber": "4B",
    "deliveryBuildingName": "Lake View",
    "deliveryStreet": "MG Road",
    "deliveryCity": "Bengaluru",
    "deliveryState": "Karnataka",
    "deliveryPincode": "560001",
    "vehicleType": "Mini Truck",
    "packageType": "Documents",
    "description": "",
    "fragile": True,
    "pickupDate": "2025-01-15 10:30:00",
}


def register(client, **overrides):
    payload = {**VALID_REGISTRATION, **overrides}
    return client.post("/api/v1/auth/register", json=payload)


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
