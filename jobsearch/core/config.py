"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.

Settings are frozen: they are read once and handed to the token service,
password hasher, asset store and mailer when those are constructed.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

    # MongoDB
    mongodb_uri: str = "mongodb://127.0.0.1:27017"
    mongodb_db: str = "JobSearchApp_DB"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # Password hashing work factor
    bcrypt_salt_rounds: int = 8

    # Password recovery
    otp_expire_minutes: int = 10

    # Local buffer for uploaded resumes before they reach the asset store
    upload_dir: str = "uploads"

    # Cloudinary (asset store)
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""

    # SMTP (OTP delivery)
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_from_email: Optional[str] = None

    @property
    def smtp_enabled(self) -> bool:
        """True when enough SMTP settings are present to send mail."""
        return bool(self.smtp_host and self.smtp_user and self.smtp_password)

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
