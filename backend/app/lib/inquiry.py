import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

MISSING_FIELDS = "missing_fields"
INVALID_EMAIL = "invalid_email"

DEFAULT_COMPANY = "Not provided"
DEFAULT_MESSAGE = "No message provided"

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Order matters: "&" must be replaced before the entities that contain it.
_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
)

_ERROR_MESSAGES = {
    MISSING_FIELDS: "Name and email are required",
    INVALID_EMAIL: "Invalid email address",
}


class ValidationError(Exception):
    def __init__(self, code: str):
        self.code = code
        super().__init__(_ERROR_MESSAGES.get(code, code))

    @property
    def message(self) -> str:
        return _ERROR_MESSAGES.get(self.code, self.code)


@dataclass(frozen=True)
class Inquiry:
    name: str
    email: str
    company: str
    message: str


def _clean(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def escape_html(text: str) -> str:
    for raw, entity in _HTML_ESCAPES:
        text = text.replace(raw, entity)
    return text


def parse_inquiry(payload: Optional[Mapping[str, Any]]) -> Inquiry:
    """
    Validate an untrusted form payload and return a fully populated Inquiry.
    Raises ValidationError before anything is built if a precondition fails.
    """
    fields = payload if isinstance(payload, Mapping) else {}

    name = _clean(fields.get("name"))
    email = _clean(fields.get("email"))
    if not name or not email:
        raise ValidationError(MISSING_FIELDS)

    if not is_valid_email(email):
        raise ValidationError(INVALID_EMAIL)

    return Inquiry(
        name=name,
        email=email,
        company=_clean(fields.get("company")) or DEFAULT_COMPANY,
        message=_clean(fields.get("message")) or DEFAULT_MESSAGE,
    )
