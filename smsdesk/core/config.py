"""Application configuration"""
import os
from dotenv import load_dotenv

load_dotenv()


def _to_bool(value: str) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    # Database Configuration
    DATABASE_USER = os.getenv("DATABASE_USER", "postgres")
    DATABASE_PASSWORD = os.getenv("DATABASE_PASSWORD", "postgres")
    DATABASE_HOST = os.getenv("DATABASE_HOST", "localhost")
    DATABASE_PORT = os.getenv("DATABASE_PORT", "5432")
    DATABASE_NAME = os.getenv("DATABASE_NAME", "smsdesk")
    DATABASE_URL_OVERRIDE = os.getenv("DATABASE_URL")

    @property
    def DATABASE_URL(self) -> str:
        """Explicit DATABASE_URL wins, otherwise assemble a PostgreSQL URL"""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"

    # SMS Gateway
    SMS_CUSTOM_ENDPOINT = os.getenv(
        "SMS_CUSTOM_ENDPOINT", "https://allapifreetest.rf.gd/coustom_sms/send_sms.php"
    )
    SMS_BOMBER_ENDPOINT = os.getenv(
        "SMS_BOMBER_ENDPOINT", "https://hardboomber.allapifree.workers.dev/"
    )
    SMS_GATEWAY_TIMEOUT = float(os.getenv("SMS_GATEWAY_TIMEOUT", 30))
    # Turn off only for gateways serving a self-signed certificate.
    SMS_GATEWAY_VERIFY_TLS = _to_bool(os.getenv("SMS_GATEWAY_VERIFY_TLS", "true"))

    # Credits
    INITIAL_CREDITS = int(os.getenv("INITIAL_CREDITS", 5))

    # OTP expiry (minutes)
    OTP_EXPIRE_MINUTES = int(os.getenv("OTP_EXPIRE_MINUTES", 15))

    # Registration
    ALLOW_ADMIN_SELF_REGISTRATION = _to_bool(os.getenv("ALLOW_ADMIN_SELF_REGISTRATION", "false"))

    # Logging Configuration
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE", "smsdesk/logs/logs.txt")

    # Development/Production Settings
    ENVIRONMENT = os.getenv("ENVIRONMENT", "production")
    DEBUG = _to_bool(os.getenv("DEBUG", "false"))
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Project Metadata
    PROJECT_NAME = "SMS Desk API"
    PROJECT_VERSION = "1.0.0"
    API_PREFIX = "/api"

    # Session (signed JWT carried in an HTTP-only cookie)
    SECRET_KEY = os.getenv("SECRET_KEY", "message-tool-secret-change-this-in-production")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "smsdesk_session")
    SESSION_EXPIRE_MINUTES = int(os.getenv("SESSION_EXPIRE_MINUTES", 60 * 24))  # 24 hours
    SESSION_COOKIE_SECURE = _to_bool(os.getenv("SESSION_COOKIE_SECURE", "false"))

    # Initial administrator (created on first start when no admin exists)
    ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "ChangeMe@Admin123")
    ADMIN_FULL_NAME = os.getenv("ADMIN_FULL_NAME", "SMS Desk Admin")
    ADMIN_PHONE = os.getenv("ADMIN_PHONE", "1234567890")


settings = Settings()
