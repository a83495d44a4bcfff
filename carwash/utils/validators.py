import re
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

PHONE_PATTERN = re.compile(r'^(\+62|62|0)[0-9]{9,13}$')
EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')
TIME_PATTERN = re.compile(r'^([01]?[0-9]|2[0-3]):[0-5][0-9]$')
PLATE_PATTERN = re.compile(r'^[A-Z]{1,2}\s?\d{1,4}\s?[A-Z]{1,3}$')

PHONE_MESSAGE = "must be an Indonesian mobile number (+62, 62 or 0 followed by 9-13 digits)"

Model = TypeVar("Model", bound=BaseModel)

def validate_phone_number(phone: str) -> bool:
    """Indonesian mobile number: +62, 62 or 0 followed by 9-13 digits"""
    if not isinstance(phone, str):
        return False
    return bool(PHONE_PATTERN.match(re.sub(r'\s', '', phone)))

def validate_email(email: str) -> bool:
    if not isinstance(email, str):
        return False
    return bool(EMAIL_PATTERN.match(email.strip()))

def validate_date(value: str) -> bool:
    """YYYY-MM-DD that is also a real calendar date"""
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True

def validate_time(value: str) -> bool:
    if not isinstance(value, str):
        return False
    return bool(TIME_PATTERN.match(value))

def validate_vehicle_plate(plate: str) -> bool:
    """Indonesian plate: 1-2 letters, 1-4 digits, 1-3 letters"""
    if not isinstance(plate, str):
        return False
    return bool(PLATE_PATTERN.match(normalize_vehicle_plate(plate)))

def normalize_phone_number(phone: str) -> str:
    """Normalize to +62 format; unrecognized formats are returned unchanged"""
    cleaned = re.sub(r'\s', '', phone)
    if cleaned.startswith("+62"):
        return cleaned
    if cleaned.startswith("62"):
        return f"+{cleaned}"
    if cleaned.startswith("0"):
        return f"+62{cleaned[1:]}"
    return phone

def normalize_vehicle_plate(plate: str) -> str:
    return re.sub(r'\s+', ' ', plate.strip().upper())

def normalize_time(value: str) -> str:
    """Zero-pad an H:MM time to HH:MM"""
    hours, minutes = value.split(":")
    return f"{int(hours):02d}:{minutes}"

# Field cleaners for pydantic ``field_validator``s. Each returns the
# normalized value or raises ValueError with a message that reads after the
# field name.

def clean_required_text(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValueError("is required")
    return value.strip()

def clean_phone(value: Optional[str]) -> str:
    if value is None:
        raise ValueError("is required")
    if not validate_phone_number(value):
        raise ValueError(PHONE_MESSAGE)
    return normalize_phone_number(value)

def clean_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not validate_email(value):
        raise ValueError("must be a valid email address")
    return value.strip()

def clean_booking_date(value: Any) -> Any:
    """Runs before date parsing so only the YYYY-MM-DD string form gets through"""
    if value is None or isinstance(value, date):
        return value
    if not validate_date(value):
        raise ValueError("must be a valid date in YYYY-MM-DD format")
    return value

def clean_time(value: Optional[str]) -> str:
    if value is None:
        raise ValueError("is required")
    # HH:MM:SS as stored by some databases
    if len(value) == 8 and value.count(":") == 2:
        value = value[:5]
    if not validate_time(value):
        raise ValueError("must be in HH:MM format")
    return normalize_time(value)

def clean_plate(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValueError("is required")
    if not validate_vehicle_plate(value):
        raise ValueError("must be an Indonesian plate number such as B 1234 XYZ")
    return normalize_vehicle_plate(value)

def reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("cannot be null")
    return value

def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> List[str]:
    """One ``"<field> <message>"`` line per pydantic error"""
    messages = []
    for error in errors:
        location = ".".join(
            str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")
        )
        if error.get("type") == "missing":
            message = "is required"
        elif error.get("type") == "value_error" and error.get("ctx", {}).get("error") is not None:
            message = str(error["ctx"]["error"])
        else:
            message = error.get("msg", "is invalid")
        messages.append(f"{location} {message}".strip())
    return messages

def validate_payload(model: Type[Model], data: Any) -> Tuple[Optional[Model], List[str]]:
    """Validate a raw payload against a request model.

    Returns ``(payload, [])`` with the typed, normalized model on success, or
    ``(None, errors)`` listing every violated rule. The input is never
    modified.
    """
    try:
        return model.model_validate(data), []
    except ValidationError as e:
        return None, format_validation_errors(e.errors())
