# app/core/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    api_title: str = Field(default="Systoons Contact API", alias="API_TITLE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Shown in the notification body and header
    site_name: str = Field(default="systoons.com", alias="SITE_NAME")
    brand_name: str = Field(default="Systoons", alias="BRAND_NAME")

    # First entry is the fallback origin for callers that are not allowed
    cors_origins: str = Field(
        default="https://systoons.com,https://www.systoons.com,https://systoons.pages.dev,http://localhost:8000",
        alias="CORS_ORIGINS",
    )
    # Preview deployments: any origin ending with this suffix is allowed
    cors_origin_suffix: Optional[str] = Field(default=".systoons.pages.dev", alias="CORS_ORIGIN_SUFFIX")

    mail_sender: str = Field(default="noreply@systoons.com", alias="MAIL_SENDER")
    mail_sender_name: str = Field(default="Systoons Website", alias="MAIL_SENDER_NAME")
    mail_recipient: str = Field(default="contact@systoons.com", alias="MAIL_RECIPIENT")

    # Mail transport: "fake" (logs only, dev) | "smtp" | "ses"
    mail_transport: str = Field(default="fake", alias="MAIL_TRANSPORT")

    smtp_host: str = Field(default="localhost", alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_username: Optional[str] = Field(default=None, alias="SMTP_USERNAME")
    smtp_password: Optional[str] = Field(default=None, alias="SMTP_PASSWORD")
    smtp_starttls: bool = Field(default=True, alias="SMTP_STARTTLS")
    smtp_timeout: float = Field(default=10.0, alias="SMTP_TIMEOUT")

    ses_region: str = Field(default="us-east-1", alias="SES_REGION")

settings = Settings()
