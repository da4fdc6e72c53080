from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List, Optional

from clyra_api.core.notifier import MailConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    port: int = 5050
    log_level: str = "INFO"

    # MongoDB URI - must be provided via environment variables
    mongodb_uri: Optional[str] = None
    mongodb_url: Optional[str] = None  # Alternative environment variable name
    mongodb_db: Optional[str] = None

    # CORS settings (comma separated, unset means any origin)
    cors_origin: Optional[str] = None

    # Admin notification mail
    mail_enabled: bool = False
    mail_user: Optional[str] = None
    mail_pass: Optional[str] = None
    mail_to: Optional[str] = None
    mail_from_name: str = "Clyra Overseas Website"
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    mail_connection_timeout: float = 10.0
    mail_socket_timeout: float = 15.0

    # Shared secret for /api/admin-data
    access_code: Optional[str] = None

    @property
    def effective_mongo_uri(self) -> str:
        """Get the effective MongoDB URI from available sources"""
        uri = self.mongodb_uri or self.mongodb_url
        if not uri:
            raise ValueError("MongoDB URI not configured! Please set MONGODB_URI in your environment variables.")
        return uri

    @property
    def allowed_origins(self) -> List[str]:
        if not self.cors_origin:
            return ["*"]
        return [origin.strip() for origin in self.cors_origin.split(",") if origin.strip()]

    @property
    def mail_config(self) -> MailConfig:
        return MailConfig(
            enabled=self.mail_enabled,
            user=self.mail_user,
            password=self.mail_pass,
            recipient=self.mail_to or self.mail_user,
            from_name=self.mail_from_name,
            host=self.smtp_host,
            port=self.smtp_port,
            connection_timeout=self.mail_connection_timeout,
            socket_timeout=self.mail_socket_timeout,
        )


@lru_cache
def get_settings():
    return Settings()
