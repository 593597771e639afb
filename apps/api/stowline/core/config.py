"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    TESTING: bool = False

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"

    # Set to True when running behind a load balancer to trust X-Forwarded-For
    TRUST_PROXY_HEADERS: bool = False

    # Database
    DATABASE_URL: str

    # Session Token (supports key rotation)
    JWT_SECRET: str = "change-this-in-production"
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_EXPIRES_HOURS: int = 12

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Frontend (links in SMS/email)
    FRONTEND_URL: str = "http://localhost:3000"

    # Dev-only
    DEV_SECRET: str = "change-me"

    # Sentry
    SENTRY_DSN: str = ""

    # Redis (rate limit storage)
    REDIS_URL: str = "redis://localhost:6379/0"

    # Rate limits (requests per minute)
    RATE_LIMIT_AUTH: int = 5  # Verification code sends
    RATE_LIMIT_API: int = 60  # General API

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Twilio (SMS)
    TWILIO_ACCOUNT_SID: str = ""
    TWILIO_AUTH_TOKEN: str = ""
    TWILIO_FROM_NUMBER: str = ""

    # SendGrid (email)
    SENDGRID_API_KEY: str = ""
    EMAIL_FROM_ADDRESS: str = "notifications@stowline.app"
    EMAIL_FROM_NAME: str = "Stowline"

    # Dispatch platform (driver/worker registration)
    DISPATCH_API_URL: str = "https://onfleet.com/api/v2"
    DISPATCH_API_KEY: str = ""
    DISPATCH_DEFAULT_TEAM_ID: str = ""

    # Google Places (reviews)
    GOOGLE_PLACES_API_URL: str = "https://maps.googleapis.com/maps/api/place/details/json"
    GOOGLE_PLACES_API_KEY: str = ""
    GOOGLE_PLACE_ID: str = ""
    REVIEWS_LIMIT: int = 20

    # File storage
    STORAGE_BACKEND: str = "local"  # "local" or "s3"
    LOCAL_STORAGE_PATH: str = "/tmp/stowline-uploads"
    LOCAL_STORAGE_BASE_URL: str = "http://localhost:8000/uploads"
    S3_BUCKET: str = "stowline-uploads"
    S3_REGION: str = "us-east-1"
    S3_ENDPOINT_URL: str = ""
    S3_PUBLIC_BASE_URL: str = ""
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    UPLOAD_MAX_BYTES: int = 10 * 1024 * 1024  # 10 MB

    # Business policy
    CANCELLATION_FEE: int = 65  # USD, charged inside the notice window
    CANCELLATION_NOTICE_HOURS: int = 24
    STORAGE_UNIT_LOW_STOCK_THRESHOLD: int = 50
    MOVER_MIN_APPROVED_DRIVERS: int = 1
    VERIFICATION_CODE_TTL_MINUTES: int = 10

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.JWT_SECRET]
        if self.JWT_SECRET_PREVIOUS:
            secrets.append(self.JWT_SECRET_PREVIOUS)
        return secrets

    @property
    def cookie_secure(self) -> bool:
        """Secure cookies only in production."""
        return self.ENV not in ("dev", "test")

    @property
    def sms_enabled(self) -> bool:
        return bool(self.TWILIO_ACCOUNT_SID and self.TWILIO_AUTH_TOKEN and self.TWILIO_FROM_NUMBER)

    @property
    def email_enabled(self) -> bool:
        return bool(self.SENDGRID_API_KEY)


settings = Settings()
