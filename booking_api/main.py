from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from booking_api.api import bookings
from booking_api.core.config import Settings, settings as default_settings
from booking_api.core.errors import BookingAPIError
from booking_api.core.logger import setup_logging, logger
from booking_api.services.db_service import BookingStore
from booking_api.services.notification_service import EmailNotifier, build_notifier


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[BookingStore] = None,
    notifier: Optional[EmailNotifier] = None,
) -> FastAPI:
    """
    Builds the application with its collaborators.
    Anything not passed in is constructed from settings; tests pass fakes.
    """
    settings = settings or default_settings
    store = store or BookingStore(settings.DATABASE_PATH)
    notifier = notifier or build_notifier(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info(f"🚀 Starting {settings.PROJECT_NAME} on port {settings.PORT}")
        store.open()
        yield
        # Shutdown
        logger.info("🛑 Shutting down backend")
        store.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.store = store
    app.state.notifier = notifier

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(BookingAPIError)
    async def booking_error_handler(request: Request, exc: BookingAPIError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"⚠️ Rejected malformed request body on {request.url.path}")
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Invalid request body"}
        )

    # Global Exception Handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"🔥 UNHANDLED ERROR: {str(exc)}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal Server Error"}
        )

    app.include_router(bookings.router, prefix=settings.API_PREFIX, tags=["Demo Bookings"])

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "environment": settings.ENVIRONMENT, "timestamp": datetime.now().isoformat()}

    return app


setup_logging(default_settings.LOG_FILE)
app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "booking_api.main:app",
        host="0.0.0.0",
        port=default_settings.PORT,
        reload=default_settings.ENVIRONMENT == "development"
    )
