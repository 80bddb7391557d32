from dataclasses import dataclass
from email import policy
from email.message import EmailMessage
from email.utils import formataddr

from app.core.contact_config import ContactConfig
from app.lib.inquiry import Inquiry, escape_html

HTML_TEMPLATE = """
<div style="font-family: -apple-system, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background: #3A87E7; padding: 20px; border-radius: 12px 12px 0 0;">
    <h2 style="color: white; margin: 0;">\U0001F3A8 New {brand} Inquiry</h2>
  </div>
  <div style="background: #f9f9f9; padding: 24px; border-radius: 0 0 12px 12px;">
    <table style="width: 100%; border-collapse: collapse;">
      <tr><td style="padding: 8px 0; font-weight: bold; color: #1B3A5C;">Name</td><td style="padding: 8px 0;">{name}</td></tr>
      <tr><td style="padding: 8px 0; font-weight: bold; color: #1B3A5C;">Email</td><td style="padding: 8px 0;"><a href="mailto:{email}">{email}</a></td></tr>
      <tr><td style="padding: 8px 0; font-weight: bold; color: #1B3A5C;">Company</td><td style="padding: 8px 0;">{company}</td></tr>
    </table>
    <div style="margin-top: 16px; padding: 16px; background: white; border-radius: 8px; border-left: 4px solid #FFD243;">
      <p style="margin: 0 0 4px; font-weight: bold; color: #1B3A5C;">Message</p>
      <p style="margin: 0; white-space: pre-wrap;">{message}</p>
    </div>
    <p style="margin-top: 20px; font-size: 13px; color: #888;">Reply directly to respond to {email}</p>
  </div>
</div>
"""


@dataclass(frozen=True)
class ComposedMessage:
    sender: str
    sender_name: str
    recipient: str
    subject: str
    reply_to: str
    text: str
    html: str

    def to_email_message(self) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = formataddr((self.sender_name, self.sender))
        msg["To"] = self.recipient
        msg["Subject"] = self.subject
        msg["Reply-To"] = self.reply_to
        msg.set_content(self.text)
        msg.add_alternative(self.html, subtype="html")
        return msg

    def as_bytes(self) -> bytes:
        return self.to_email_message().as_bytes(policy=policy.SMTP)


def _header_value(value: str) -> str:
    # Header values must be a single line under str.splitlines(); the bodies
    # keep the name as submitted.
    return " ".join(value.splitlines())


def render_text(inquiry: Inquiry, site_name: str) -> str:
    return "\n".join([
        f"New contact form submission from {site_name}",
        "",
        f"Name: {inquiry.name}",
        f"Email: {inquiry.email}",
        f"Company: {inquiry.company}",
        "",
        "Message:",
        inquiry.message,
        "",
        "---",
        f"Reply directly to this email to respond to {inquiry.email}",
    ])


def render_html(inquiry: Inquiry, brand_name: str) -> str:
    return HTML_TEMPLATE.format(
        brand=escape_html(brand_name),
        name=escape_html(inquiry.name),
        email=escape_html(inquiry.email),
        company=escape_html(inquiry.company),
        message=escape_html(inquiry.message),
    )


def compose_message(inquiry: Inquiry, config: ContactConfig) -> ComposedMessage:
    """Build the notification email for a validated inquiry. Pure, no I/O."""
    return ComposedMessage(
        sender=config.sender,
        sender_name=config.sender_name,
        recipient=config.recipient,
        subject=_header_value(f"New inquiry from {inquiry.name}"),
        reply_to=inquiry.email,
        text=render_text(inquiry, config.site_name),
        html=render_html(inquiry, config.brand_name),
    )
