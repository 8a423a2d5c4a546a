"""
Tests for BookingRegistry and the /bookings endpoints.
"""

import asyncio
from datetime import datetime

import pytest

from app.core.auth.session import SessionIssuer
from app.core.exceptions import CodeGenerationExhaustedError, MissingFieldsError, NotFoundError, ValidationError
from app.modules.bookings.schemas import BookingCreateRequest
from app.modules.bookings.service import BookingRegistry
from app.modules.bookings.tracking import TrackingCodeGenerator
from app.shared.database.models import Booking, BookingStatus
from tests.helpers import TEST_SECRET, VALID_BOOKING, auth_headers, register


class ScriptedGenerator:
    """Devuelve códigos predefinidos, para forzar colisiones"""

    def __init__(self, codes):
        self.codes = list(codes)
        self.calls = 0

    def generate(self):
        self.calls += 1
        return self.codes.pop(0)


@pytest.fixture
def owner(credential_store):
    return asyncio.run(credential_store.register("owner@x.com", "secret1", {
        "full_name": "Owner", "door_number": "1", "street": "Main",
        "city": "X", "state": "Y", "pincode": "600001",
    }))


def make_payload(**overrides):
    return BookingCreateRequest.model_validate({**VALID_BOOKING, **overrides})


class TestRegistryCreate:

    def test_create_persists_pending_booking(self, db_session, owner):
        booking = BookingRegistry(db_session).create(owner.id, make_payload())

        assert booking.id is not None
        assert booking.user_id == owner.id
        assert booking.status == BookingStatus.PENDING
        assert booking.tracking_code.startswith("RC")
        assert booking.created_at is not None
        assert booking.pickup_name == "Ravi"
        assert booking.dropoff_name == "Meena"
        assert booking.dropoff_building_name == "Lake View"
        assert booking.fragile is True
        assert booking.pickup_at == datetime(2025, 1, 15, 10, 30)

    def test_empty_optional_fields_become_null(self, db_session, owner):
        booking = BookingRegistry(db_session).create(owner.id, make_payload())
        assert booking.pickup_building_name is None

    def test_package_contents_falls_back_to_type(self, db_session, owner):
        registry = BookingRegistry(db_session)
        assert registry.create(owner.id, make_payload()).package_contents == "Documents"
        assert registry.create(owner.id, make_payload(description="Legal papers")).package_contents == "Legal papers"

    def test_reports_every_missing_field(self, db_session, owner):
        payload = make_payload(senderPhone=None, deliveryCity="", vehicleType="   ")
        with pytest.raises(MissingFieldsError) as exc_info:
            BookingRegistry(db_session).create(owner.id, payload)

        assert exc_info.value.fields == ["senderPhone", "deliveryCity", "vehicleType"]
        assert db_session.query(Booking).count() == 0

    def test_iso_pickup_date_with_timezone(self, db_session, owner):
        booking = BookingRegistry(db_session).create(owner.id, make_payload(pickupDate="2025-01-15T16:00:00+05:30"))
        assert booking.pickup_at == datetime(2025, 1, 15, 10, 30)

    def test_invalid_pickup_date(self, db_session, owner):
        with pytest.raises(ValidationError) as exc_info:
            BookingRegistry(db_session).create(owner.id, make_payload(pickupDate="someday"))
        assert exc_info.value.fields == ["pickupDate"]
        assert db_session.query(Booking).count() == 0


class TestTrackingCodeCollisions:

    def test_retries_with_fresh_code(self, db_session, owner):
        BookingRegistry(db_session, generator=ScriptedGenerator(["RCTAKEN"])).create(owner.id, make_payload())

        generator = ScriptedGenerator(["RCTAKEN", "RCTAKEN", "RCFRESH"])
        booking = BookingRegistry(db_session, generator=generator).create(owner.id, make_payload())

        assert booking.tracking_code == "RCFRESH"
        assert generator.calls == 3
        assert db_session.query(Booking).count() == 2

    def test_exhaustion_after_bounded_attempts(self, db_session, owner):
        BookingRegistry(db_session, generator=ScriptedGenerator(["RCTAKEN"])).create(owner.id, make_payload())

        generator = ScriptedGenerator(["RCTAKEN"] * 10)
        registry = BookingRegistry(db_session, generator=generator, max_attempts=5)
        with pytest.raises(CodeGenerationExhaustedError):
            registry.create(owner.id, make_payload())

        assert generator.calls == 5
        assert db_session.query(Booking).count() == 1

    def test_ten_thousand_unique_codes_persisted(self, db_session, owner):
        registry = BookingRegistry(db_session, generator=TrackingCodeGenerator())
        payload = make_payload()
        for _ in range(10_000):
            registry.create(owner.id, payload)

        codes = [code for (code,) in db_session.query(Booking.tracking_code).all()]
        assert len(codes) == 10_000
        assert len(set(codes)) == 10_000


class TestRegistryReads:

    def test_get_owned(self, db_session, owner):
        registry = BookingRegistry(db_session)
        created = registry.create(owner.id, make_payload())
        assert registry.get(owner.id, created.id).tracking_code == created.tracking_code

    def test_get_other_users_booking_is_not_found(self, db_session, owner):
        registry = BookingRegistry(db_session)
        created = registry.create(owner.id, make_payload())
        with pytest.raises(NotFoundError):
            registry.get(owner.id + 1, created.id)
        with pytest.raises(NotFoundError):
            registry.get(owner.id, created.id + 100)

    def test_list_newest_first(self, db_session, owner):
        registry = BookingRegistry(db_session)
        first = registry.create(owner.id, make_payload())
        second = registry.create(owner.id, make_payload())
        third = registry.create(owner.id, make_payload())

        # created_at viene del servidor; forzamos horas distintas
        first.created_at = datetime(2025, 1, 1)
        second.created_at = datetime(2025, 3, 1)
        third.created_at = datetime(2025, 2, 1)
        db_session.commit()

        assert [b.id for b in registry.list(owner.id)] == [second.id, third.id, first.id]
        assert registry.list(owner.id + 1) == []


class TestBookingsApi:

    def test_create_and_read(self, client, registered_user):
        token, user = registered_user
        response = client.post("/api/v1/bookings", json=VALID_BOOKING, headers=auth_headers(token))
        assert response.status_code == 200, response.text
        booking = response.json()["booking"]
        assert booking["status"] == "Pending"
        assert booking["trackingCode"].startswith("RC")
        assert booking["userId"] == user["id"]
        assert booking["pickupBuildingName"] is None

        detail = client.get(f"/api/v1/bookings/{booking['id']}", headers=auth_headers(token))
        assert detail.status_code == 200
        assert detail.json()["booking"]["trackingCode"] == booking["trackingCode"]

        listing = client.get("/api/v1/bookings", headers=auth_headers(token)).json()
        assert listing["count"] == 1
        assert listing["bookings"][0]["id"] == booking["id"]

    def test_three_missing_fields_reported(self, client, registered_user):
        token, _ = registered_user
        payload = {k: v for k, v in VALID_BOOKING.items() if k not in ("receiverName", "pickupPincode", "pickupDate")}
        response = client.post("/api/v1/bookings", json=payload, headers=auth_headers(token))

        assert response.status_code == 400
        body = response.json()
        assert body["errorCode"] == "MISSING_FIELDS"
        assert set(body["details"]["fields"]) == {"receiverName", "pickupPincode", "pickupDate"}
        for field in ("receiverName", "pickupPincode", "pickupDate"):
            assert field in body["message"]

    def test_requires_session(self, client):
        assert client.post("/api/v1/bookings", json=VALID_BOOKING).status_code == 401
        assert client.get("/api/v1/bookings").status_code == 401
        assert client.get("/api/v1/bookings/1").status_code == 401

    def test_token_for_missing_user_is_unauthorized(self, client, db_session):
        ghost = SessionIssuer(secret_key=TEST_SECRET).mint(999, "ghost@x.com").token

        response = client.post("/api/v1/bookings", json=VALID_BOOKING, headers=auth_headers(ghost))
        assert response.status_code == 401
        assert response.json()["errorCode"] == "UNAUTHORIZED"
        assert client.get("/api/v1/bookings", headers=auth_headers(ghost)).status_code == 401
        assert db_session.query(Booking).count() == 0

    def test_foreign_booking_is_not_found_not_forbidden(self, client, registered_user):
        token, _ = registered_user
        created = client.post("/api/v1/bookings", json=VALID_BOOKING, headers=auth_headers(token)).json()["booking"]

        other_token = register(client, email="b@x.com").json()["token"]
        foreign = client.get(f"/api/v1/bookings/{created['id']}", headers=auth_headers(other_token))
        missing = client.get("/api/v1/bookings/999999", headers=auth_headers(other_token))

        assert foreign.status_code == missing.status_code == 404
        assert foreign.json()["errorCode"] == missing.json()["errorCode"] == "NOT_FOUND"
        assert foreign.json()["message"] == missing.json()["message"]

        assert client.get("/api/v1/bookings", headers=auth_headers(other_token)).json()["count"] == 0

    def test_status_and_owner_cannot_be_injected(self, client, registered_user):
        token, user = registered_user
        payload = {**VALID_BOOKING, "status": "Delivered", "userId": 999, "trackingCode": "RCMINE"}
        booking = client.post("/api/v1/bookings", json=payload, headers=auth_headers(token)).json()["booking"]
        assert booking["status"] == "Pending"
        assert booking["userId"] == user["id"]
        assert booking["trackingCode"] != "RCMINE"
