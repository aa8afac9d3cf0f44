from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "Workboard"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Database
    database_url: str = ""  # Loaded from environment, validated in model_validator
    database_echo: bool = False

    # Security
    secret_key: str = ""  # Loaded from environment, validated in model_validator
    algorithm: str = "HS256"
    jwt_issuer: str = "workboard"
    jwt_audience: str = "workboard-clients"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7
    reset_token_expire_minutes: int = 60
    refresh_token_bytes: int = 64

    # CORS - comma-separated list of allowed origins
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Storage
    storage_root: str = "/var/workboard/uploads"
    max_upload_size: int = 20 * 1024 * 1024  # 20MB default

    # Redis Cache (optional shared permission cache)
    redis_enabled: bool = False
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str | None = None

    # Cache TTL (Time-To-Live) in seconds
    cache_ttl_permissions: int = 300  # 5 minutes

    # Outbound email
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True
    smtp_from_email: str = ""
    frontend_url: str = "http://localhost:3000"

    # Transport
    request_timeout_seconds: float = 30.0
    login_rate_limit: str = "5/minute"

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required fields are loaded from environment"""
        if not self.database_url:
            raise ValueError("DATABASE_URL is required. Set in environment or .env file.")
        if not self.secret_key:
            raise ValueError("SECRET_KEY is required. Generate with: openssl rand -hex 32")
        if self.algorithm != "HS256":
            raise ValueError(f"Unsupported signing algorithm '{self.algorithm}'. Must be 'HS256'")
        return self

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="allow", case_sensitive=False
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
