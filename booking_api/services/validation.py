import re
from typing import Any, Dict

from booking_api.core.errors import InvalidEmailFormatError, MissingFieldError

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

def validate_booking(fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Checks a booking submission.
    Raises MissingFieldError if name or email is absent/empty,
    InvalidEmailFormatError if email is not shaped like local@domain.tld.
    Returns: the same fields, untouched.
    """
    if not fields.get("name") or not fields.get("email"):
        raise MissingFieldError()

    if not EMAIL_PATTERN.fullmatch(fields["email"]):
        raise InvalidEmailFormatError()

    return fields
