import hmac

from fastapi import Header, Request

from booking_api.core.errors import UnauthorizedError
from booking_api.core.logger import logger

async def verify_admin_key(request: Request, x_api_key: str = Header(None)):
    """
    Verify the admin key from the `x-api-key` header.
    The value must equal ADMIN_API_KEY exactly. With no key configured on the
    server every request is rejected.
    """
    expected = request.app.state.settings.ADMIN_API_KEY

    if not x_api_key or not expected or not hmac.compare_digest(
        x_api_key.encode("utf-8"), expected.encode("utf-8")
    ):
        client_host = request.client.host if request.client else "unknown"
        logger.warning(f"🔒 Unauthorized bookings listing attempt from {client_host}")
        raise UnauthorizedError()
    return True
