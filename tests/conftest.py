import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from booking_api.core.config import Settings
from booking_api.main import create_app
from booking_api.services.db_service import BookingStore
from booking_api.services.notification_service import EmailNotifier

ADMIN_KEY = "test-admin-key"

@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_PATH=str(tmp_path / "demo.db"),
        ADMIN_API_KEY=ADMIN_KEY,
        SMTP_HOST="",
        SMTP_USER="",
        SMTP_PASS="",
        LOG_FILE="",
    )

@pytest.fixture
def store(settings):
    store = BookingStore(settings.DATABASE_PATH)
    store.open()
    yield store
    store.close()

@pytest.fixture
def notifier():
    return MagicMock(spec=EmailNotifier)

@pytest.fixture
def client(settings, store, notifier):
    app = create_app(settings, store=store, notifier=notifier)
    with TestClient(app) as client:
        yield client
