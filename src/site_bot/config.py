"""Site Bot — configuration loaded from environment."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, loaded from .env or environment variables."""

    # ── Database ──────────────────────────────────────────
    database_url: str = "sqlite+aiosqlite:///./site_bot.db"

    # ── WhatsApp Business API ─────────────────────────────
    whatsapp_verify_token: str = "changeme"
    whatsapp_api_token: str = ""
    whatsapp_phone_number_id: str = ""
    whatsapp_app_secret: str = ""
    whatsapp_api_base_url: str = "https://graph.facebook.com/v21.0"

    # ── Phone numbers ─────────────────────────────────────
    default_country_code: str = "91"

    # ── One-time codes ────────────────────────────────────
    otp_ttl_minutes: int = 10
    otp_max_attempts: int = 3
    otp_bcrypt_rounds: int = 10

    # ── Resilience ────────────────────────────────────────
    persistence_timeout_ms: int = 2500
    persistence_retries: int = 2
    retry_backoff_ms: int = 1000
    transport_timeout_ms: int = 5000
    otp_timeout_ms: int = 5000
    upload_timeout_ms: int = 15000

    # ── Inbound queue ─────────────────────────────────────
    queue_workers: int = 4
    queue_max_size: int = 1000

    # ── Object storage (Cloudflare R2 / S3) ───────────────
    r2_endpoint_url: str = ""
    r2_bucket: str = ""
    r2_access_key: str = ""
    r2_secret_key: str = ""
    r2_region: str = "auto"
    r2_public_url: str = ""

    # ── Email notifications ───────────────────────────────
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    email_from: str = "bot@example.com"
    sales_email: str = ""
    procurement_email: str = ""

    # ── App ───────────────────────────────────────────────
    app_name: str = "Site Bot"
    admin_contact: str = "+91-XXXXXXXXXX"
    debug: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton settings instance
settings = Settings()
