"""Application configuration."""

from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "LedgerDesk API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    log_level: str = getenv("LOG_LEVEL", "INFO")
    database_url: str = getenv("DATABASE_URL", "sqlite:///./ledgerdesk.db")
    statement_timeout_ms: int = int(getenv("STATEMENT_TIMEOUT_MS", "15000"))
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "60"))
    admin_email: str = getenv("ADMIN_EMAIL", "")
    admin_pass: str = getenv("ADMIN_PASS", "")
    default_company_name: str = getenv("DEFAULT_COMPANY_NAME", "Default Company")
    audit_purge_batch_size: int = int(getenv("AUDIT_PURGE_BATCH_SIZE", "500"))
    integration_webhook_secret: str = getenv("INTEGRATION_WEBHOOK_SECRET", "dev-integration-webhook-secret")
    webhook_timeout_seconds: float = float(getenv("WEBHOOK_TIMEOUT_SECONDS", "30"))
    webhook_max_retries: int = int(getenv("WEBHOOK_MAX_RETRIES", "3"))
    webhook_initial_delay_seconds: float = float(getenv("WEBHOOK_INITIAL_DELAY_SECONDS", "1"))
    webhook_max_delay_seconds: float = float(getenv("WEBHOOK_MAX_DELAY_SECONDS", "30"))
    webhook_backoff_multiplier: float = float(getenv("WEBHOOK_BACKOFF_MULTIPLIER", "2"))


settings: Settings = Settings()
