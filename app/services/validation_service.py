"""
DP Travels Backend - Request Validation
Presence, email format, date and size checks for submitted forms
"""

import re
import logging
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional
from zoneinfo import ZoneInfo

from app.config import settings
from app.models import BookingRequest, ContactQuery, DestinationBookingRequest

logger = logging.getLogger(__name__)


# local-part@domain.tld, no whitespace and exactly one "@"
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

CONTACT_FIELDS = ("name", "email", "phone", "message")
BOOKING_FIELDS = ("name", "email", "phone", "destination", "cab", "travellers", "bookingDate")
DESTINATION_BOOKING_FIELDS = ("Name", "Email", "Ctno", "nofTravellers", "veh")

MAX_TRAVELLER_DIGITS = 4


class RequestValidationFailure(ValueError):
    """A submitted form was rejected. Always maps to a 400 response."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.missing = missing or []


def today() -> date:
    """Current calendar date in the business time zone."""
    return datetime.now(ZoneInfo(settings.business_timezone)).date()


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def trimmed_fields(fields: Mapping[str, Any]) -> dict:
    return {key: _clean(value) for key, value in fields.items()}


def missing_fields(fields: Mapping[str, str], required: Iterable[str]) -> List[str]:
    return [name for name in required if not fields.get(name)]


def require_fields(fields: Mapping[str, str], required: Iterable[str]) -> None:
    missing = missing_fields(fields, required)
    if missing:
        logger.warning(f"Missing required fields: {missing}")
        raise RequestValidationFailure(
            f"Missing required fields: {', '.join(missing)}",
            missing=missing,
        )


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def require_email(email: str) -> None:
    if not is_valid_email(email):
        logger.warning("Invalid email format")
        raise RequestValidationFailure("Invalid email format.")


def parse_travellers(raw: str) -> int:
    # ASCII digits with a bounded length
    if not (raw.isascii() and raw.isdigit()) or len(raw) > MAX_TRAVELLER_DIGITS:
        raise RequestValidationFailure("Travellers must be a positive whole number.")
    try:
        travellers = int(raw)
    except ValueError:
        raise RequestValidationFailure("Travellers must be a positive whole number.")
    if travellers < 1:
        raise RequestValidationFailure("Travellers must be a positive whole number.")
    return travellers


def parse_booking_date(raw: str, current: Optional[date] = None) -> date:
    """Parse a YYYY-MM-DD date and reject anything before today."""
    try:
        booking_date = date.fromisoformat(raw)
    except ValueError:
        raise RequestValidationFailure("Invalid booking date.")

    if booking_date < (current or today()):
        logger.warning(f"Booking date in the past: {booking_date}")
        raise RequestValidationFailure("Booking date cannot be in the past.")
    return booking_date


def validate_contact_query(
    fields: Mapping[str, Any],
    max_message_length: Optional[int] = None,
) -> ContactQuery:
    data = trimmed_fields(fields)
    require_fields(data, CONTACT_FIELDS)
    require_email(data["email"])

    limit = settings.message_max_length if max_message_length is None else max_message_length
    if len(data["message"]) > limit:
        raise RequestValidationFailure(f"Message must be at most {limit} characters.")

    return ContactQuery(
        name=data["name"],
        email=data["email"],
        phone=data["phone"],
        message=data["message"],
    )


def validate_booking(fields: Mapping[str, Any], current: Optional[date] = None) -> BookingRequest:
    """
    Validate a booking form submission.

    Destination and cab are taken as submitted; they are not checked
    against the catalog.
    """
    data = trimmed_fields(fields)
    require_fields(data, BOOKING_FIELDS)
    require_email(data["email"])

    return BookingRequest(
        name=data["name"],
        email=data["email"],
        phone=data["phone"],
        destination=data["destination"],
        cab=data["cab"],
        travellers=parse_travellers(data["travellers"]),
        bookingDate=parse_booking_date(data["bookingDate"], current),
        message=data.get("message") or None,
    )


def validate_destination_booking(destination: str, fields: Mapping[str, Any]) -> DestinationBookingRequest:
    data = trimmed_fields(fields)
    require_fields(data, DESTINATION_BOOKING_FIELDS)
    require_email(data["Email"])

    return DestinationBookingRequest(
        destination=destination,
        Name=data["Name"],
        Email=data["Email"],
        Ctno=data["Ctno"],
        nofTravellers=parse_travellers(data["nofTravellers"]),
        veh=data["veh"],
        message=data.get("message") or None,
    )
