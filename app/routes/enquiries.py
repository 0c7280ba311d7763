"""
DP Travels Backend - Enquiry Routes
Contact and booking form endpoints that relay submissions to the business inbox
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
import logging

from app.models import EmailContent, SubmissionResponse
from app.services.email_service import DispatchError, MailDispatcher, get_mail_dispatcher
from app.services.notification_service import (
    compose_booking,
    compose_contact_query,
    compose_destination_booking,
)
from app.services.validation_service import (
    RequestValidationFailure,
    validate_booking,
    validate_contact_query,
    validate_destination_booking,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Enquiries"])


# Destination landing pages post here; path suffix -> destination name
DESTINATION_ROUTES = {
    "gtk": "Gangtok",
    "pelling": "Pelling",
    "Zuluk": "Zuluk",
    "namchi": "Namchi",
    "guru": "Guru Dongmar Lake",
    "tsomo": "Tsomo Lake",
}

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_form_fields(request: Request) -> dict:
    """Read a JSON object body, or a url-encoded form posted without JavaScript."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return dict(form)

    try:
        data = await request.json()
    except ValueError:
        raise RequestValidationFailure("Request body must be a JSON object.")

    if not isinstance(data, dict):
        raise RequestValidationFailure("Request body must be a JSON object.")
    return data


async def dispatch_response(
    dispatcher: MailDispatcher,
    content: EmailContent,
    success_message: str,
    failure_message: str,
) -> JSONResponse:
    try:
        await dispatcher.send(content)
    except DispatchError as e:
        logger.error(f"{failure_message} {e}")
        return JSONResponse(
            status_code=500,
            content=SubmissionResponse(
                success=False,
                error=failure_message,
                details=str(e),
            ).model_dump(exclude_none=True),
        )

    return JSONResponse(
        status_code=200,
        content=SubmissionResponse(success=True, message=success_message).model_dump(exclude_none=True),
    )


@router.post("/send-query", response_model=SubmissionResponse)
async def send_query(request: Request, dispatcher: MailDispatcher = Depends(get_mail_dispatcher)):
    """
    Contact form.

    Body: name, email, phone, message (at most 1000 characters).
    """
    logger.info("/send-query request received")
    fields = await read_form_fields(request)
    query = validate_contact_query(fields)

    return await dispatch_response(
        dispatcher,
        compose_contact_query(query),
        success_message="Your message has been sent successfully!",
        failure_message="Failed to send email.",
    )


@router.post("/send-booking", response_model=SubmissionResponse)
async def send_booking(request: Request, dispatcher: MailDispatcher = Depends(get_mail_dispatcher)):
    """
    Booking form.

    Body: name, email, phone, destination, cab, travellers, bookingDate
    (YYYY-MM-DD, today or later) and an optional message.
    Every call sends a new email; repeated submissions are not merged.
    """
    logger.info("/send-booking request received")
    fields = await read_form_fields(request)
    booking = validate_booking(fields)

    return await dispatch_response(
        dispatcher,
        compose_booking(booking),
        success_message="Booking request sent successfully!",
        failure_message="Failed to send booking email.",
    )


def _destination_endpoint(slug: str, destination: str):
    async def send_destination_booking(
        request: Request,
        dispatcher: MailDispatcher = Depends(get_mail_dispatcher),
    ):
        logger.info(f"{destination} booking request received")
        fields = await read_form_fields(request)
        booking = validate_destination_booking(destination, fields)

        return await dispatch_response(
            dispatcher,
            compose_destination_booking(booking),
            success_message=f"Your {destination} booking request has been sent successfully!",
            failure_message="Failed to send booking email.",
        )

    send_destination_booking.__name__ = f"send_{slug.lower()}"
    return send_destination_booking


for slug, destination in DESTINATION_ROUTES.items():
    router.add_api_route(
        f"/send-{slug}",
        _destination_endpoint(slug, destination),
        methods=["POST"],
        response_model=SubmissionResponse,
        name=f"send_{slug.lower()}",
        summary=f"{destination} booking",
        description="Body: Name, Email, Ctno, nofTravellers, veh and an optional message.",
    )
