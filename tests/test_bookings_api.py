"""API tests for booking creation, lifecycle and tracking."""
import json
import re
from unittest.mock import patch

import pytest

from carwash.core.config import settings
from carwash.models import Customer


def _create(client, payload):
    response = client.post("/api/bookings", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["booking"]


def _set_status(admin_client, booking_id, status):
    return admin_client.put(f"/api/bookings/{booking_id}", json={"status": status})


class TestCreateBooking:

    def test_public_booking(self, client, booking_payload, service, branch):
        booking = _create(client, booking_payload())

        assert re.fullmatch(r"BCW\d{10}", booking["booking_code"])
        assert booking["status"] == "pending"
        assert booking["booking_source"] == "online"
        assert booking["created_by_admin"] is False
        assert booking["customer_phone"] == "+6281234567890"
        assert booking["subtotal_price"] == 45000
        assert booking["total_price"] == 45000
        assert booking["loyalty_points_earned"] == 4
        assert booking["points_credited"] is False
        assert booking["services"]["name"] == service.name
        assert booking["branches"]["name"] == branch.name
        assert booking["allowed_transitions"] == ["confirmed", "cancelled"]

    def test_missing_fields_are_all_listed(self, client):
        response = client.post("/api/bookings", json={})
        assert response.status_code == 400
        detail = response.json()["detail"]
        for field in ("customer_name", "customer_phone", "customer_email", "service_id", "branch_id",
                      "booking_date", "booking_time", "vehicle_plate_number", "payment_method"):
            assert f"{field} is required" in detail

    def test_non_object_body(self, client):
        response = client.post("/api/bookings", json=["not", "an", "object"])
        assert response.status_code == 400

    def test_non_finite_total_is_rejected(self, client, booking_payload):
        body = json.dumps(booking_payload(total_price=123456789)).replace("123456789", "1e400")
        response = client.post("/api/bookings", content=body, headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json()["detail"].startswith("total_price")

    def test_wrong_types_are_rejected(self, client, booking_payload):
        response = client.post("/api/bookings", json=booking_payload(
            service_id="abc",
            is_pickup_service="yes",
            customer_name=123,
            vehicle_plate_number="not a plate",
        ))
        assert response.status_code == 400
        detail = response.json()["detail"]
        for field in ("service_id", "is_pickup_service", "customer_name", "vehicle_plate_number"):
            assert field in detail

    def test_unknown_service(self, client, booking_payload):
        response = client.post("/api/bookings", json=booking_payload(service_id=999))
        assert response.status_code == 404

    def test_inactive_service(self, client, db_session, booking_payload, service):
        service.is_active = False
        db_session.commit()
        response = client.post("/api/bookings", json=booking_payload())
        assert response.status_code == 400

    def test_pickup_not_supported(self, client, booking_payload):
        response = client.post("/api/bookings", json=booking_payload(
            is_pickup_service=True, pickup_address="Jl. Melati No. 3"
        ))
        assert response.status_code == 400

    def test_pickup_fee_is_added(self, client, booking_payload, pickup_service):
        booking = _create(client, booking_payload(
            service_id=pickup_service.id,
            total_price=75000,
            is_pickup_service=True,
            pickup_address="Jl. Melati No. 3",
        ))
        assert booking["subtotal_price"] == 75000
        assert booking["total_price"] == 75000
        assert booking["pickup_address"] == "Jl. Melati No. 3"
        assert booking["allowed_transitions"] == ["confirmed", "cancelled"]

    def test_client_total_is_not_trusted(self, client, booking_payload):
        booking = _create(client, booking_payload(total_price=1))
        assert booking["total_price"] == 45000

    def test_admin_manual_booking_is_confirmed(self, admin_client, booking_payload):
        booking = _create(admin_client, booking_payload(created_by_admin=True, payment_method="cash"))
        assert booking["status"] == "confirmed"
        assert booking["booking_source"] == "offline"
        assert booking["created_by_admin"] is True
        assert booking["admin_username"] == settings.ADMIN_USERNAME

    def test_admin_flag_ignored_without_session(self, client, booking_payload):
        booking = _create(client, booking_payload(created_by_admin=True, booking_source="offline"))
        assert booking["status"] == "pending"
        assert booking["booking_source"] == "online"
        assert booking["created_by_admin"] is False


class TestCustomerUpsert:

    def test_repeat_customer_is_merged(self, client, db_session, booking_payload):
        _create(client, booking_payload(vehicle_plate_number="b 1234 xyz"))
        _create(client, booking_payload(customer_phone="+6281234567890", vehicle_plate_number="B 1234 XYZ"))
        _create(client, booking_payload(customer_phone="6281234567890", vehicle_plate_number="B 5678 ABC",
                                        customer_name="Budi S."))

        customers = db_session.query(Customer).all()
        assert len(customers) == 1
        customer = customers[0]
        assert customer.phone == "+6281234567890"
        assert customer.total_bookings == 3
        assert customer.vehicle_plate_numbers == ["B 1234 XYZ", "B 5678 ABC"]
        assert customer.name == "Budi S."

    def test_upsert_failure_does_not_fail_booking(self, client, booking_payload):
        with patch(
            "carwash.services.booking_service.CustomerService.upsert_from_booking",
            side_effect=RuntimeError("boom"),
        ):
            response = client.post("/api/bookings", json=booking_payload())
        assert response.status_code == 201


class TestLoyaltyOnBookings:

    def test_redemption_is_capped_and_debited(self, client, db_session, booking_payload):
        db_session.add(Customer(name="Budi Santoso", phone="+6281234567890", total_bookings=1,
                                total_loyalty_points=100, vehicle_plate_numbers=[]))
        db_session.commit()

        booking = _create(client, booking_payload(loyalty_points_used=100))
        assert booking["loyalty_points_used"] == 45
        assert booking["total_price"] == 0
        assert booking["loyalty_points_earned"] == 0

        customer = db_session.query(Customer).one()
        db_session.refresh(customer)
        assert customer.total_loyalty_points == 55
        assert [(t.type.value, t.points) for t in customer.loyalty_transactions] == [("redeem", -45)]

    def test_redemption_without_balance(self, client, booking_payload):
        booking = _create(client, booking_payload(loyalty_points_used=10))
        assert booking["loyalty_points_used"] == 0
        assert booking["total_price"] == 45000

    def test_completion_credits_points_once(self, client, admin_client, db_session, booking_payload):
        booking = _create(client, booking_payload())

        for status in ("confirmed", "in-progress", "completed"):
            response = _set_status(admin_client, booking["id"], status)
            assert response.status_code == 200, response.text

        response = _set_status(admin_client, booking["id"], "completed")
        assert response.status_code == 200
        assert response.json()["booking"]["points_credited"] is True

        customer = db_session.query(Customer).one()
        db_session.refresh(customer)
        assert customer.total_loyalty_points == 4
        assert [(t.type.value, t.points) for t in customer.loyalty_transactions] == [("earn", 4)]

    def test_completion_without_customer_defers_credit(self, client, admin_client, db_session, booking_payload):
        with patch(
            "carwash.services.booking_service.CustomerService.upsert_from_booking",
            side_effect=RuntimeError("boom"),
        ):
            booking = _create(client, booking_payload())

        for status in ("confirmed", "in-progress", "completed"):
            assert _set_status(admin_client, booking["id"], status).status_code == 200
        assert admin_client.get(f"/api/bookings/{booking['id']}").json()["booking"]["points_credited"] is False

        db_session.add(Customer(name="Budi Santoso", phone="+6281234567890", total_bookings=1,
                                total_loyalty_points=0, vehicle_plate_numbers=[]))
        db_session.commit()

        response = _set_status(admin_client, booking["id"], "completed")
        assert response.status_code == 200
        assert response.json()["booking"]["points_credited"] is True

        customer = db_session.query(Customer).one()
        db_session.refresh(customer)
        assert customer.total_loyalty_points == 4


class TestStatusTransitions:

    def test_non_pickup_flow(self, client, admin_client, booking_payload):
        booking = _create(client, booking_payload())
        for status in ("confirmed", "in-progress", "completed"):
            response = _set_status(admin_client, booking["id"], status)
            assert response.status_code == 200
            assert response.json()["booking"]["status"] == status

        response = _set_status(admin_client, booking["id"], "cancelled")
        assert response.status_code == 409
        assert "'completed'" in response.json()["detail"]

    def test_pickup_must_be_picked_up(self, client, admin_client, booking_payload, pickup_service):
        booking = _create(client, booking_payload(
            service_id=pickup_service.id,
            total_price=75000,
            is_pickup_service=True,
            pickup_address="Jl. Melati No. 3",
        ))
        assert _set_status(admin_client, booking["id"], "confirmed").status_code == 200

        response = _set_status(admin_client, booking["id"], "in-progress")
        assert response.status_code == 409

        response = _set_status(admin_client, booking["id"], "picked-up")
        assert response.status_code == 200
        assert response.json()["booking"]["allowed_transitions"] == ["in-progress"]
        assert _set_status(admin_client, booking["id"], "in-progress").status_code == 200

    def test_non_pickup_cannot_be_picked_up(self, client, admin_client, booking_payload):
        booking = _create(client, booking_payload())
        _set_status(admin_client, booking["id"], "confirmed")
        response = _set_status(admin_client, booking["id"], "picked-up")
        assert response.status_code == 409

    def test_unknown_status(self, client, admin_client, booking_payload):
        booking = _create(client, booking_payload())
        response = _set_status(admin_client, booking["id"], "washing")
        assert response.status_code == 400

    def test_requires_admin(self, client, booking_payload):
        booking = _create(client, booking_payload())
        response = _set_status(client, booking["id"], "confirmed")
        assert response.status_code == 401


class TestBookingUpdates:

    def test_field_corrections_are_normalized(self, client, admin_client, booking_payload):
        booking = _create(client, booking_payload())
        response = admin_client.put(f"/api/bookings/{booking['id']}", json={
            "customer_phone": "0813 1111 2222",
            "vehicle_plate_number": "d 9 ab",
            "booking_time": "8:00",
            "payment_method": "qris",
            "total_price": 1,
        })
        assert response.status_code == 200
        updated = response.json()["booking"]
        assert updated["customer_phone"] == "+6281311112222"
        assert updated["vehicle_plate_number"] == "D 9 AB"
        assert updated["booking_time"] == "08:00"
        assert updated["payment_method"] == "qris"
        assert updated["total_price"] == 45000

    def test_nothing_to_update(self, client, admin_client, booking_payload):
        booking = _create(client, booking_payload())
        response = admin_client.put(f"/api/bookings/{booking['id']}", json={"total_price": 1})
        assert response.status_code == 400

    @pytest.mark.parametrize("body", [
        {"branch_id": "x"},
        {"branch_id": 1.5},
        {"customer_name": None},
        {"customer_email": 42},
        {"booking_date": "2026-02-30"},
        {"payment_method": None},
        {"vehicle_plate_number": "??"},
    ])
    def test_type_invalid_corrections(self, client, admin_client, booking_payload, body):
        booking = _create(client, booking_payload())
        response = admin_client.put(f"/api/bookings/{booking['id']}", json=body)
        assert response.status_code == 400

        unchanged = admin_client.get(f"/api/bookings/{booking['id']}").json()["booking"]
        assert unchanged["customer_name"] == booking["customer_name"]
        assert unchanged["booking_date"] == booking["booking_date"]

    def test_unknown_booking(self, admin_client):
        response = admin_client.put("/api/bookings/999", json={"status": "confirmed"})
        assert response.status_code == 404


class TestDeleteBooking:

    @pytest.mark.parametrize("path", [
        ("confirmed",),
        ("confirmed", "in-progress"),
        ("confirmed", "in-progress", "completed"),
    ])
    def test_active_bookings_cannot_be_deleted(self, client, admin_client, booking_payload, path):
        booking = _create(client, booking_payload())
        for status in path:
            _set_status(admin_client, booking["id"], status)

        response = admin_client.delete(f"/api/bookings/{booking['id']}")
        assert response.status_code == 409
        assert f"'{path[-1]}'" in response.json()["detail"]

    def test_pending_booking_can_be_deleted(self, client, admin_client, booking_payload):
        booking = _create(client, booking_payload())
        response = admin_client.delete(f"/api/bookings/{booking['id']}")
        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert admin_client.get(f"/api/bookings/{booking['id']}").status_code == 404

    def test_cancelled_booking_can_be_deleted(self, client, admin_client, booking_payload):
        booking = _create(client, booking_payload())
        _set_status(admin_client, booking["id"], "cancelled")
        assert admin_client.delete(f"/api/bookings/{booking['id']}").status_code == 200


class TestListAndTrack:

    def test_list_requires_admin(self, client):
        assert client.get("/api/bookings").status_code == 401

    def test_list_filters(self, client, admin_client, booking_payload):
        first = _create(client, booking_payload())
        _create(client, booking_payload(booking_date="2026-11-03", customer_name="Rina", customer_phone="085711112222"))
        _set_status(admin_client, first["id"], "confirmed")

        data = admin_client.get("/api/bookings").json()
        assert data["total"] == 2
        assert data["page"] == 1

        data = admin_client.get("/api/bookings", params={"status": "confirmed"}).json()
        assert [b["id"] for b in data["bookings"]] == [first["id"]]

        data = admin_client.get("/api/bookings", params={"date": "2026-11-03"}).json()
        assert data["bookings"][0]["customer_name"] == "Rina"

        data = admin_client.get("/api/bookings", params={"search": "rina"}).json()
        assert data["total"] == 1

        data = admin_client.get("/api/bookings", params={"limit": 1, "page": 2}).json()
        assert data["total"] == 2
        assert len(data["bookings"]) == 1


    def test_search_wildcards_match_literally(self, client, admin_client, booking_payload):
        _create(client, booking_payload())
        _create(client, booking_payload(customer_name="Rina_50%", customer_phone="085711112222"))

        for term, expected in (("%", 1), ("_", 1), ("a_5", 1), ("R%a", 0)):
            data = admin_client.get("/api/bookings", params={"search": term}).json()
            assert data["total"] == expected, term

    def test_bad_filter_value(self, admin_client):
        response = admin_client.get("/api/bookings", params={"status": "washing"})
        assert response.status_code == 400

    def test_track_by_code(self, client, booking_payload):
        booking = _create(client, booking_payload())
        response = client.get(f"/api/bookings/by-code/{booking['booking_code'].lower()}")
        assert response.status_code == 200
        assert response.json()["booking"]["id"] == booking["id"]

        assert client.get("/api/bookings/by-code/BCW0000000000").status_code == 404

    def test_whatsapp_link(self, client, admin_client, booking_payload):
        booking = _create(client, booking_payload())
        response = admin_client.get(f"/api/bookings/{booking['id']}/whatsapp-link")
        assert response.status_code == 200
        data = response.json()
        assert data["phone"] == "6281234567890"
        assert data["url"].startswith("https://wa.me/6281234567890?text=")
        assert booking["booking_code"] in data["message"]
        assert "Menunggu Konfirmasi" in data["message"]


class TestPaymentProof:

    def test_upload(self, client, booking_payload):
        booking = _create(client, booking_payload())
        upload_result = {
            "secure_url": "https://res.cloudinary.com/demo/image/upload/proof.jpg",
            "public_id": "bcw/payment-proofs/proof",
        }
        with patch("carwash.services.booking_service.upload_image", return_value=upload_result) as upload:
            response = client.post(
                f"/api/bookings/by-code/{booking['booking_code']}/payment-proof",
                files={"file": ("proof.jpg", b"\xff\xd8\xff\xe0fake-jpeg", "image/jpeg")},
            )
        assert response.status_code == 200
        assert response.json()["booking"]["payment_proof"] == upload_result["secure_url"]
        assert upload.call_args.kwargs["public_id"].startswith(booking["booking_code"])

    def test_rejects_other_file_types(self, client, booking_payload):
        booking = _create(client, booking_payload())
        response = client.post(
            f"/api/bookings/by-code/{booking['booking_code']}/payment-proof",
            files={"file": ("proof.pdf", b"%PDF-1.4", "application/pdf")},
        )
        assert response.status_code == 400

    def test_rejects_large_files(self, client, booking_payload, monkeypatch):
        booking = _create(client, booking_payload())
        monkeypatch.setattr(settings, "PAYMENT_PROOF_MAX_BYTES", 8)
        response = client.post(
            f"/api/bookings/by-code/{booking['booking_code']}/payment-proof",
            files={"file": ("proof.png", b"\x89PNG" + b"0" * 32, "image/png")},
        )
        assert response.status_code == 400

    def test_upload_failure(self, client, booking_payload):
        booking = _create(client, booking_payload())
        with patch("carwash.services.booking_service.upload_image", side_effect=RuntimeError("cloudinary down")):
            response = client.post(
                f"/api/bookings/by-code/{booking['booking_code']}/payment-proof",
                files={"file": ("proof.webp", b"RIFFfake", "image/webp")},
            )
        assert response.status_code == 500
        assert response.json()["detail"] == "Error uploading payment proof"
