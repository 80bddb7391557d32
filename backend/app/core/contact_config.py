# app/core/contact_config.py
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from app.core.settings import Settings

ALLOW_METHODS = "POST, OPTIONS"
ALLOW_HEADERS = "Content-Type"


@dataclass(frozen=True)
class CorsPolicy:
    allowed_origins: Tuple[str, ...]
    origin_suffix: Optional[str] = None

    def __post_init__(self):
        if not self.allowed_origins:
            raise ValueError("CorsPolicy needs at least one allowed origin")

    @property
    def default_origin(self) -> str:
        return self.allowed_origins[0]

    def is_allowed(self, origin: str) -> bool:
        if not origin:
            return False
        if origin in self.allowed_origins:
            return True
        return bool(self.origin_suffix) and origin.endswith(self.origin_suffix)

    def headers_for(self, origin: Optional[str]) -> Dict[str, str]:
        origin = origin or ""
        return {
            "Access-Control-Allow-Origin": origin if self.is_allowed(origin) else self.default_origin,
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
        }


@dataclass(frozen=True)
class ContactConfig:
    """Everything the contact handler needs, fixed at construction time."""
    cors: CorsPolicy
    sender: str
    sender_name: str
    recipient: str
    site_name: str
    brand_name: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "ContactConfig":
        origins = tuple(o.strip() for o in settings.cors_origins.split(",") if o.strip())
        return cls(
            cors=CorsPolicy(
                allowed_origins=origins,
                origin_suffix=(settings.cors_origin_suffix or "").strip() or None,
            ),
            sender=settings.mail_sender,
            sender_name=settings.mail_sender_name,
            recipient=settings.mail_recipient,
            site_name=settings.site_name,
            brand_name=settings.brand_name,
        )
