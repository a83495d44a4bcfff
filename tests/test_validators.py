"""Tests for request payload validation."""
from datetime import date

import pytest

from carwash.models.booking import BookingStatus, PaymentMethod
from carwash.schemas.booking import BookingCreate, BookingUpdate
from carwash.schemas.branch import BranchCreate, BranchUpdate
from carwash.schemas.service import ServiceCreate, ServiceUpdate
from carwash.utils.search import contains_pattern
from carwash.utils.validators import (
    normalize_phone_number,
    normalize_time,
    normalize_vehicle_plate,
    validate_date,
    validate_email,
    validate_payload,
    validate_phone_number,
    validate_time,
    validate_vehicle_plate,
)


def _valid_booking(**overrides):
    payload = {
        "customer_name": "Siti Aminah",
        "customer_phone": "081234567890",
        "customer_email": "siti@example.com",
        "service_id": 1,
        "branch_id": 1,
        "booking_date": "2026-11-02",
        "booking_time": "9:05",
        "total_price": 45000,
        "vehicle_plate_number": "b  1234   xyz",
        "payment_method": "cash",
    }
    payload.update(overrides)
    return payload


class TestFieldValidators:

    @pytest.mark.parametrize("phone", ["081234567890", "6281234567890", "+6281234567890", "0812 3456 7890"])
    def test_accepts_indonesian_numbers(self, phone):
        assert validate_phone_number(phone)

    @pytest.mark.parametrize("phone", ["12345", "0812", "+1 555 123 4567", "08123abc4567", None])
    def test_rejects_other_numbers(self, phone):
        assert not validate_phone_number(phone)

    def test_email(self):
        assert validate_email("budi@example.com")
        assert not validate_email("budi@example")
        assert not validate_email("budi example.com")

    def test_date_must_exist_on_the_calendar(self):
        assert validate_date("2026-02-28")
        assert not validate_date("2026-02-30")
        assert not validate_date("02-11-2026")

    def test_time(self):
        assert validate_time("09:30")
        assert validate_time("9:30")
        assert validate_time("23:59")
        assert not validate_time("24:00")
        assert not validate_time("12:60")

    @pytest.mark.parametrize("plate", ["B 1234 XYZ", "b1234xyz", "AB 1 C", " d  9  ab "])
    def test_accepts_plates(self, plate):
        assert validate_vehicle_plate(plate)

    @pytest.mark.parametrize("plate", ["1234", "ABC 1234 XY", "B 12345 XY", "B 1234 WXYZ", "B-1234-XY", 1234])
    def test_rejects_plates(self, plate):
        assert not validate_vehicle_plate(plate)

    def test_normalizers(self):
        assert normalize_phone_number("0812 3456 7890") == "+6281234567890"
        assert normalize_phone_number("6281234567890") == "+6281234567890"
        assert normalize_phone_number("+6281234567890") == "+6281234567890"
        assert normalize_vehicle_plate("  b 1234   xyz ") == "B 1234 XYZ"
        assert normalize_time("9:05") == "09:05"

    def test_search_pattern_escapes_wildcards(self):
        assert contains_pattern(" budi ") == "%budi%"
        assert contains_pattern("50%_off") == "%50\\%\\_off%"
        assert contains_pattern("a\\b") == "%a\\\\b%"


class TestBookingCreate:

    def test_valid_payload_is_normalized(self):
        payload, errors = validate_payload(BookingCreate, _valid_booking())
        assert errors == []
        assert payload.customer_phone == "+6281234567890"
        assert payload.vehicle_plate_number == "B 1234 XYZ"
        assert payload.booking_time == "09:05"
        assert payload.booking_date == date(2026, 11, 2)
        assert payload.payment_method == PaymentMethod.CASH
        assert payload.loyalty_points_used == 0

    def test_input_is_not_modified(self):
        data = _valid_booking()
        validate_payload(BookingCreate, data)
        assert data["customer_phone"] == "081234567890"
        assert data["booking_time"] == "9:05"

    def test_every_missing_field_is_reported(self):
        payload, errors = validate_payload(BookingCreate, {})
        assert payload is None
        for field in (
            "customer_name",
            "customer_phone",
            "customer_email",
            "service_id",
            "branch_id",
            "booking_date",
            "booking_time",
            "vehicle_plate_number",
            "payment_method",
            "total_price",
        ):
            assert f"{field} is required" in errors

    def test_non_object_payload(self):
        payload, errors = validate_payload(BookingCreate, ["not", "an", "object"])
        assert payload is None
        assert len(errors) == 1

    def test_pickup_requires_address(self):
        _, errors = validate_payload(BookingCreate, _valid_booking(is_pickup_service=True))
        assert "pickup_address is required for pickup service" in errors

        _, errors = validate_payload(BookingCreate, _valid_booking(is_pickup_service=True, pickup_address="  "))
        assert "pickup_address is required for pickup service" in errors

        payload, errors = validate_payload(
            BookingCreate, _valid_booking(is_pickup_service=True, pickup_address="Jl. Melati 3")
        )
        assert errors == []
        assert payload.pickup_address == "Jl. Melati 3"

    def test_pickup_rule_reported_with_other_errors(self):
        _, errors = validate_payload(BookingCreate, _valid_booking(is_pickup_service=True, customer_phone="12345"))
        assert "pickup_address is required for pickup service" in errors
        assert any(e.startswith("customer_phone must be an Indonesian mobile number") for e in errors)

    def test_format_errors_accumulate(self):
        _, errors = validate_payload(BookingCreate, _valid_booking(
            customer_phone="12345",
            customer_email="nope",
            booking_date="2026-13-01",
            booking_time="25:00",
            payment_method="bitcoin",
            total_price=-1,
            vehicle_plate_number="12-34",
        ))
        assert len(errors) == 7
        assert "customer_email must be a valid email address" in errors
        assert "booking_date must be a valid date in YYYY-MM-DD format" in errors
        assert "booking_time must be in HH:MM format" in errors
        assert any(e.startswith("vehicle_plate_number must be an Indonesian plate number") for e in errors)

    @pytest.mark.parametrize("overrides,field", [
        ({"customer_name": 123}, "customer_name"),
        ({"customer_name": "   "}, "customer_name"),
        ({"service_id": "abc"}, "service_id"),
        ({"branch_id": 0}, "branch_id"),
        ({"total_price": "lots"}, "total_price"),
        ({"total_price": float("inf")}, "total_price"),
        ({"total_price": float("nan")}, "total_price"),
        ({"is_pickup_service": "yes"}, "is_pickup_service"),
        ({"loyalty_points_used": -5}, "loyalty_points_used"),
        ({"loyalty_points_used": 2.5}, "loyalty_points_used"),
        ({"booking_date": 20261102}, "booking_date"),
        ({"created_by_admin": "true"}, "created_by_admin"),
    ])
    def test_type_errors(self, overrides, field):
        payload, errors = validate_payload(BookingCreate, _valid_booking(**overrides))
        assert payload is None
        assert len(errors) == 1
        assert errors[0].startswith(field)


class TestBookingUpdate:

    def test_only_sent_fields_are_set(self):
        payload, errors = validate_payload(BookingUpdate, {"status": "confirmed", "total_price": 1})
        assert errors == []
        assert payload.model_dump(exclude_unset=True) == {"status": BookingStatus.CONFIRMED}

    def test_corrections_are_normalized(self):
        payload, _ = validate_payload(BookingUpdate, {
            "customer_phone": "0813 1111 2222",
            "vehicle_plate_number": "d 9 ab",
            "booking_time": "8:00",
            "booking_date": "2026-12-01",
        })
        assert payload.model_dump(exclude_unset=True) == {
            "customer_phone": "+6281311112222",
            "vehicle_plate_number": "D 9 AB",
            "booking_time": "08:00",
            "booking_date": date(2026, 12, 1),
        }

    def test_rejects_blank_and_null_fields(self):
        _, errors = validate_payload(BookingUpdate, {
            "customer_name": "  ",
            "booking_time": "7:5",
            "status": None,
            "customer_email": None,
            "branch_id": "x",
        })
        assert "customer_name is required" in errors
        assert "booking_time must be in HH:MM format" in errors
        assert "status cannot be null" in errors
        assert "customer_email cannot be null" in errors
        assert any(e.startswith("branch_id") for e in errors)

    def test_nullable_text_can_be_cleared(self):
        payload, errors = validate_payload(BookingUpdate, {"notes": None, "payment_proof": None})
        assert errors == []
        assert payload.model_dump(exclude_unset=True) == {"notes": None, "payment_proof": None}


class TestServiceValidation:

    def test_valid_service(self):
        payload, errors = validate_payload(ServiceCreate, {
            "name": "Cuci Motor Kecil Steam",
            "category": "motorcycle",
            "price": 13000,
            "pickup_fee": 10000,
            "supports_pickup": True,
        })
        assert errors == []
        assert payload.price == 13000
        assert payload.is_active is True

    def test_all_errors_reported(self):
        payload, errors = validate_payload(ServiceCreate, {"category": "truck", "price": 0, "duration": -10})
        assert payload is None
        assert "name is required" in errors
        assert any(e.startswith("category") for e in errors)
        assert any(e.startswith("price") for e in errors)
        assert any(e.startswith("duration") for e in errors)

    @pytest.mark.parametrize("body", [
        {"price": 45000.5},
        {"price": float("inf")},
        {"pickup_fee": -1},
        {"duration": 1e400},
        {"supports_pickup": "yes"},
        {"features": "wax"},
        {"name": None},
        {"category": None},
    ])
    def test_update_rejects_bad_types(self, body):
        payload, errors = validate_payload(ServiceUpdate, body)
        assert payload is None
        assert errors


class TestBranchValidation:

    def test_nested_shape_is_flattened(self):
        payload, errors = validate_payload(BranchCreate, {
            "name": "Cabang 3",
            "address": "Jl. Cut Mutia No. 50",
            "bankAccount": {"bank": "BRI", "accountNumber": "1122334455"},
            "operatingHours": {"open": "7:00", "close": "20:00:00"},
            "staffCount": 4,
            "colour": "blue",
        })
        assert errors == []
        assert payload.bank_name == "BRI"
        assert payload.bank_account_number == "1122334455"
        assert payload.operating_hours_open == "07:00"
        assert payload.operating_hours_close == "20:00"
        assert payload.staff_count == 4

    @pytest.mark.parametrize("body,field", [
        ({"latitude": "abc"}, "latitude"),
        ({"latitude": 91}, "latitude"),
        ({"longitude": float("nan")}, "longitude"),
        ({"phone": 12345}, "phone"),
        ({"manager": ["a"]}, "manager"),
        ({"bankAccount": {"bank": 7}}, "bank_name"),
        ({"staff_count": -1}, "staff_count"),
        ({"status": None}, "status"),
        ({"operatingHours": {"close": "9pm"}}, "operating_hours_close"),
    ])
    def test_update_rejects_bad_types(self, body, field):
        payload, errors = validate_payload(BranchUpdate, body)
        assert payload is None
        assert errors[0].startswith(field)

    def test_update_keeps_only_sent_fields(self):
        payload, _ = validate_payload(BranchUpdate, {"operatingHours": {"close": "21:00"}})
        assert payload.model_dump(exclude_unset=True) == {"operating_hours_close": "21:00"}
