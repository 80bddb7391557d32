# app/core/mail_transport.py
import logging
import smtplib
import ssl
from typing import Any, Dict, List, Optional

from app.core.settings import Settings
from app.lib.compose import ComposedMessage

log = logging.getLogger("uvicorn.error")


class TransportError(RuntimeError):
    """Raised when the mail provider refuses or fails to take a message."""


class MailTransport:
    name = "base"

    def send(self, message: ComposedMessage) -> None:
        raise NotImplementedError

    def summary(self) -> Dict[str, Any]:
        return {"transport": self.name}


# -----------------------
# Fake (dev / tests)
# -----------------------
class FakeTransport(MailTransport):
    name = "fake"

    def __init__(self, fail_with: Optional[Exception] = None):
        self.sent: List[ComposedMessage] = []
        self.raw: List[bytes] = []
        self._fail_with = fail_with

    def send(self, message: ComposedMessage) -> None:
        if self._fail_with is not None:
            raise TransportError(f"fake transport failure: {self._fail_with}") from self._fail_with
        # Serialize like the real transports so bad headers fail here too.
        try:
            raw = message.as_bytes()
        except ValueError as exc:
            raise TransportError(f"fake transport could not build message: {exc}") from exc
        self.sent.append(message)
        self.raw.append(raw)
        log.info(f"[mail:fake] to={message.recipient} subject={message.subject!r}")


# -----------------------
# SMTP
# -----------------------
class SmtpTransport(MailTransport):
    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        starttls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.starttls = starttls
        self.timeout = timeout

    def send(self, message: ComposedMessage) -> None:
        try:
            email_msg = message.to_email_message()
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.starttls:
                    server.starttls(context=ssl.create_default_context())
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(email_msg)
        except (smtplib.SMTPException, OSError, ValueError) as exc:
            raise TransportError(f"SMTP send via {self.host}:{self.port} failed: {exc}") from exc
        log.info(f"[mail:smtp] sent to={message.recipient} via {self.host}:{self.port}")

    def summary(self) -> Dict[str, Any]:
        return {
            "transport": self.name,
            "host": self.host,
            "port": self.port,
            "starttls": self.starttls,
            "auth": bool(self.username and self.password),
        }


# -----------------------
# Amazon SES
# -----------------------
class SesTransport(MailTransport):
    name = "ses"

    def __init__(self, region: str, client=None):
        self.region = region
        self._client = client

    def get_client(self):
        if self._client is None:
            import boto3
            self._client = boto3.client("ses", region_name=self.region)
        return self._client

    def send(self, message: ComposedMessage) -> None:
        from botocore.exceptions import BotoCoreError, ClientError
        try:
            raw = message.as_bytes()
            resp = self.get_client().send_raw_email(
                Source=message.sender,
                Destinations=[message.recipient],
                RawMessage={"Data": raw},
            )
        except (BotoCoreError, ClientError, ValueError) as exc:
            raise TransportError(f"SES send_raw_email failed: {exc}") from exc
        log.info(f"[mail:ses] sent to={message.recipient} message_id={resp.get('MessageId')}")

    def summary(self) -> Dict[str, Any]:
        return {"transport": self.name, "region": self.region}


def get_transport(settings: Settings) -> MailTransport:
    provider = (settings.mail_transport or "fake").strip().lower()
    if provider == "fake":
        return FakeTransport()
    if provider == "smtp":
        return SmtpTransport(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            starttls=settings.smtp_starttls,
            timeout=settings.smtp_timeout,
        )
    if provider == "ses":
        return SesTransport(region=settings.ses_region)
    raise ValueError(f"Unknown MAIL_TRANSPORT: {settings.mail_transport!r} (expected fake, smtp or ses)")
