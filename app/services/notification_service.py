"""
DP Travels Backend - Notification Composer
Builds subject lines and HTML bodies for the business inbox
"""

from datetime import date
from html import escape
from typing import List, Optional, Tuple

from app.models import BookingRequest, ContactQuery, DestinationBookingRequest, EmailContent


CONTACT_FROM_NAME = "Website Contact"
BOOKING_FROM_NAME = "DP Travels Booking"

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def format_long_date(value: date) -> str:
    """2025-11-05 -> "5 November 2025" (en-IN long form)."""
    return f"{value.day} {MONTH_NAMES[value.month - 1]} {value.year}"


def _rows_html(rows: List[Tuple[str, str]]) -> str:
    return "\n".join(
        f'<tr><td style="padding: 6px 12px; color: #6b7280;"><strong>{label}:</strong></td>'
        f'<td style="padding: 6px 12px;">{escape(value)}</td></tr>'
        for label, value in rows
    )


def _wrap_html(title: str, rows: List[Tuple[str, str]], message: Optional[str] = None) -> str:
    message_section = ""
    if message:
        message_section = f"""
            <div style="background: #f9fafb; padding: 15px; border-radius: 8px; border-left: 4px solid #0f766e; margin-top: 15px;">
                <h3 style="margin: 0 0 10px 0;">Message:</h3>
                <p style="margin: 0; white-space: pre-wrap;">{escape(message)}</p>
            </div>
            """

    return f"""
        <div style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; max-width: 600px; margin: 0 auto;">
            <div style="background: #0f766e; padding: 16px 20px; border-radius: 12px 12px 0 0;">
                <h2 style="color: white; margin: 0;">{title}</h2>
            </div>
            <div style="background: #ffffff; padding: 20px; border: 1px solid #e5e7eb; border-top: none; border-radius: 0 0 12px 12px;">
                <table style="border-collapse: collapse;">
                {_rows_html(rows)}
                </table>
                {message_section}
            </div>
        </div>
        """


def compose_contact_query(query: ContactQuery) -> EmailContent:
    rows = [
        ("Name", query.name),
        ("Email", query.email),
        ("Phone", query.phone),
    ]
    return EmailContent(
        subject=f"📩 New Contact Form Query from {query.name}",
        html_body=_wrap_html("New Contact Message", rows, query.message),
        from_name=CONTACT_FROM_NAME,
        reply_to=query.email,
    )


def compose_booking(booking: BookingRequest) -> EmailContent:
    rows = [
        ("Name", booking.name),
        ("Email", booking.email),
        ("Phone", booking.phone),
        ("Destination", booking.destination),
        ("Cab", booking.cab),
        ("Travellers", str(booking.travellers)),
        ("Booking Date", format_long_date(booking.booking_date)),
    ]
    return EmailContent(
        subject=f"🧳 New Booking Request from {booking.name}",
        html_body=_wrap_html("New Booking Request", rows, booking.message),
        from_name=BOOKING_FROM_NAME,
        reply_to=booking.email,
    )


def compose_destination_booking(booking: DestinationBookingRequest) -> EmailContent:
    rows = [
        ("Name", booking.name),
        ("Email", booking.email),
        ("Contact Number", booking.phone),
        ("Destination", booking.destination),
        ("Vehicle", booking.cab),
        ("Travellers", str(booking.travellers)),
    ]
    return EmailContent(
        subject=f"🧳 New {booking.destination} Booking Request from {booking.name}",
        html_body=_wrap_html(f"{escape(booking.destination)} Booking Request", rows, booking.message),
        from_name=BOOKING_FROM_NAME,
        reply_to=booking.email,
    )
