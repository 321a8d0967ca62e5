from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict

BOOKING_FIELDS = (
    "name",
    "email",
    "phone",
    "organization",
    "org_type",
    "preferred_date",
    "preferred_time_slot",
    "message",
)

# --- Incoming Request Models ---

class DemoBookingRequest(BaseModel):
    # Required-ness is checked by validate_booking so the client gets a 400, not a 422
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    organization: Optional[str] = None
    org_type: Optional[str] = None
    preferred_date: Optional[str] = None
    preferred_time_slot: Optional[str] = None
    message: Optional[str] = None

# --- Stored Models ---

class BookingRecord(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    organization: Optional[str] = None
    org_type: Optional[str] = None
    preferred_date: Optional[str] = None
    preferred_time_slot: Optional[str] = None
    message: Optional[str] = None
    created_at: datetime
