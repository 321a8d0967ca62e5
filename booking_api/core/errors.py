class BookingAPIError(Exception):
    """
    Base error for the booking API.
    Carries the HTTP status and the client-facing message; the exception
    handler in main.py renders it as {"success": false, "message": ...}.
    """
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class MissingFieldError(BookingAPIError):
    status_code = 400
    message = "Name and email are required"


class InvalidEmailFormatError(BookingAPIError):
    status_code = 400
    message = "Invalid email format"


class UnauthorizedError(BookingAPIError):
    status_code = 401
    message = "Unauthorized: Invalid API key"


class StorageError(BookingAPIError):
    status_code = 500
    message = "Storage unavailable"


class NotificationError(BookingAPIError):
    """Raised by the SMTP transport. Never reaches a client."""
    message = "Failed to send email"


class InvalidRequestBodyError(BookingAPIError):
    status_code = 400
    message = "Invalid request body"
