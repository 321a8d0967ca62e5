from typing import Any, Dict

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from booking_api.core.errors import InvalidRequestBodyError, StorageError
from booking_api.core.logger import logger
from booking_api.core.security import verify_admin_key
from booking_api.models.booking_models import DemoBookingRequest
from booking_api.services.db_service import BookingStore
from booking_api.services.notification_service import EmailNotifier
from booking_api.services.validation import validate_booking

router = APIRouter()

def get_store(request: Request) -> BookingStore:
    return request.app.state.store

def get_notifier(request: Request) -> EmailNotifier:
    return request.app.state.notifier

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

async def read_booking_request(request: Request) -> DemoBookingRequest:
    """
    Parses the submission from a JSON body or a plain HTML form post.
    Raises InvalidRequestBodyError for anything that is not an object of strings.
    """
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith(FORM_CONTENT_TYPES):
            form = await request.form()
            payload = {key: form.get(key) for key in form.keys()}
        else:
            payload = await request.json()
        return DemoBookingRequest.model_validate(payload)
    except (ValueError, ValidationError) as e:
        logger.info(f"⚠️ Rejected malformed booking body ({content_type or 'no content type'}): {e}")
        raise InvalidRequestBodyError() from e

@router.post("/demo-bookings")
async def create_demo_booking(
    background_tasks: BackgroundTasks,
    req: DemoBookingRequest = Depends(read_booking_request),
    store: BookingStore = Depends(get_store),
    notifier: EmailNotifier = Depends(get_notifier),
) -> Dict[str, Any]:
    fields = validate_booking(req.model_dump())

    try:
        booking_id = await run_in_threadpool(store.create, fields)
    except StorageError as e:
        raise StorageError("Failed to save booking request") from e

    logger.info(f"📥 New demo booking created: ID {booking_id}, Email: {fields['email']}")

    # Runs after the response is sent; the notifier never raises
    background_tasks.add_task(notifier.send_confirmation, fields["email"], fields["name"])
    background_tasks.add_task(notifier.send_admin_alert, booking_id, fields)

    return {
        "success": True,
        "bookingId": booking_id,
        "message": "Demo booking request submitted successfully!",
    }

@router.get("/demo-bookings", dependencies=[Depends(verify_admin_key)])
async def list_demo_bookings(store: BookingStore = Depends(get_store)) -> Dict[str, Any]:
    try:
        bookings = await run_in_threadpool(store.list_all)
    except StorageError as e:
        raise StorageError("Failed to retrieve bookings") from e

    return {
        "success": True,
        "count": len(bookings),
        "bookings": [booking.model_dump(mode="json") for booking in bookings],
    }
