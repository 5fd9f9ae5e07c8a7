"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"

    LOG_LEVEL: str = "INFO"

    # Database (primary application database; workspace data sources may override)
    DATABASE_URL: str
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # Signing key for OAuth state tokens
    JWT_SECRET: str = "change-this-in-production"
    OAUTH_STATE_MAX_AGE_SECONDS: int = 300

    # Google APIs OAuth (Gmail + Calendar access, separate from login)
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_APIS_CALLBACK_URL: str = (
        "http://localhost:8000/auth/google-apis/get-access-token"
    )

    # Frontend (for safe redirects)
    FRONTEND_URL: str = "http://localhost:3000"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Token Encryption (Fernet key for connected account tokens)
    TOKEN_ENCRYPTION_KEY: str = ""  # Generate with: python -c "from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())"

    # Provider feature flags
    CALENDAR_PROVIDER_GOOGLE_ENABLED: bool = False
    MESSAGING_PROVIDER_GMAIL_ENABLED: bool = False

    # Background jobs
    JOB_DEFAULT_MAX_ATTEMPTS: int = 3
    WORKER_POLL_INTERVAL: int = 10
    WORKER_BATCH_SIZE: int = 10
    WORKER_QUEUES: str = ""  # Comma-separated; empty means all queues

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute)
    RATE_LIMIT_OAUTH: int = 20
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def worker_queues_list(self) -> list[str]:
        """Parse WORKER_QUEUES into a list (empty = every queue)."""
        return [q.strip() for q in self.WORKER_QUEUES.split(",") if q.strip()]

    @property
    def google_apis_configured(self) -> bool:
        return bool(self.GOOGLE_CLIENT_ID and self.GOOGLE_CLIENT_SECRET)


settings = Settings()
