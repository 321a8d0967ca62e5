from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Enervalix Demo Booking API"
    API_PREFIX: str = "/api"

    # Server
    PORT: int = 4000
    ENVIRONMENT: str = "development"
    SITE_URL: str = ""

    # Storage
    DATABASE_PATH: str = "./demo.db"

    # Security
    ADMIN_API_KEY: str = ""

    # Email
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASS: str = ""
    FROM_EMAIL: str = ""
    ADMIN_EMAIL: str = ""

    # Logging
    LOG_FILE: str = "logs/errors.log"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def public_url(self) -> str:
        return (self.SITE_URL or f"http://localhost:{self.PORT}").rstrip("/")

settings = Settings()
