from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # Application
    PROJECT_NAME: str = "Idea2Impact Registration"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    PORT: int = 5000

    # Database
    DATABASE_URL: str = "sqlite:///./registrations.db"

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "https://idea2impact.vercel.app",
        "https://idea-2-impact-buildathon.vercel.app",
        "http://localhost:3000",
        "http://localhost:5173",  # Vite default
    ]

    # SMTP relay
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASS: Optional[str] = None
    SMTP_SECURE: bool = False  # implicit TLS (port 465)
    SMTP_STARTTLS: bool = True
    SMTP_TIMEOUT: float = 10.0

    # Notification
    SENDER_EMAIL: Optional[str] = None
    SENDER_NAME: str = "Idea2Impact"
    NOTIFY_RECIPIENT: Optional[str] = None  # falls back to the submitter
    EMAIL_SUBJECT: str = "New Hackathon Registration — Idea2Impact 2026"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = "app.log"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def expose_error_details(self) -> bool:
        """Raw error text is only returned to callers outside production."""
        return self.DEBUG or self.ENVIRONMENT.lower() != "production"

    @property
    def sender_address(self) -> Optional[str]:
        return self.SENDER_EMAIL or self.SMTP_USER

settings = Settings()
