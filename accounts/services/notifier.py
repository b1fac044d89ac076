"""Notification sink: deliver password-reset links by SMTP email."""

import html
import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import TYPE_CHECKING, Protocol

from accounts.core.errors import DeliveryError

if TYPE_CHECKING:
    from accounts.core.config import Settings

logger = logging.getLogger(__name__)

RESET_EMAIL_SUBJECT = "Password reset"

RESET_EMAIL_TEXT = """You are receiving this email because you (or someone else) requested a password reset for your account.

Open the link below to choose a new password:

{link}

If you did not request a reset, ignore this email. Your password will stay the same.
"""

RESET_EMAIL_HTML = """\
<div style="max-width: 600px; margin: 0 auto; font-family: Arial, sans-serif; color: #333; background: #fff8e1; padding: 20px; border: 1px solid #ffcc80; border-radius: 10px;">
  <header style="text-align: center; padding-bottom: 20px;">
    <h2 style="color: #ff9800;">Password reset</h2>
  </header>
  <section style="background: #fff3e0; padding: 20px; border-radius: 10px; border: 1px solid #ffe0b2;">
    <p style="font-size: 18px;">You are receiving this email because you (or someone else) requested a password reset for your account.</p>
    <p style="font-size: 16px;">Click the button below, or paste the link into your browser, to choose a new password:</p>
    <a href="{link}" style="display: inline-block; padding: 15px 25px; margin: 20px 0; font-size: 18px; background: #ff9800; color: #ffffff; text-decoration: none; border-radius: 5px;">Reset password</a>
    <p style="font-size: 14px; color: #888;">If you did not request a reset, ignore this email. Your password will stay the same.</p>
  </section>
  <footer style="text-align: center; padding-top: 20px;">
    <p style="font-size: 14px; color: #888;">Thanks,<br>The support team</p>
  </footer>
</div>
"""


class NotificationSink(Protocol):
    """Anything that can deliver a reset link to an email address."""

    def send_password_reset(self, to_email: str, reset_link: str) -> None: ...


def build_reset_message(sender: str, to_email: str, reset_link: str) -> EmailMessage:
    """Build a multipart (text + HTML) reset email."""
    msg = EmailMessage()
    msg["Subject"] = RESET_EMAIL_SUBJECT
    msg["From"] = sender
    msg["To"] = to_email
    msg.set_content(RESET_EMAIL_TEXT.format(link=reset_link))
    msg.add_alternative(
        RESET_EMAIL_HTML.format(link=html.escape(reset_link, quote=True)),
        subtype="html",
    )
    return msg


def is_smtp_configured(settings: "Settings") -> bool:
    if not settings.SMTP_HOST or not settings.SMTP_HOST.strip():
        return False
    if not settings.SMTP_USERNAME or not settings.SMTP_USERNAME.strip():
        return False
    if settings.SMTP_PASSWORD is None:
        return False
    if not settings.SMTP_PASSWORD.get_secret_value().strip():
        return False
    return True


class SmtpNotificationSink:
    """
    Send reset emails through an SMTP relay (STARTTLS + login by default).

    One connection per message; no retries. Any SMTP or socket failure is
    raised as DeliveryError so the caller can report it.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: str | None = None,
        use_tls: bool = True,
        timeout: float = 15.0,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._sender = sender or username
        self._use_tls = use_tls
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: "Settings") -> "SmtpNotificationSink | None":
        """Return a sink for the configured relay, or None when SMTP credentials are missing."""
        if not is_smtp_configured(settings):
            return None
        return cls(
            host=settings.SMTP_HOST.strip(),
            port=settings.SMTP_PORT,
            username=(settings.SMTP_USERNAME or "").strip(),
            password=settings.SMTP_PASSWORD.get_secret_value(),
            sender=(settings.MAIL_FROM or "").strip() or None,
            use_tls=settings.SMTP_USE_TLS,
            timeout=settings.MAIL_SEND_TIMEOUT_SEC,
        )

    def send_password_reset(self, to_email: str, reset_link: str) -> None:
        msg = build_reset_message(self._sender, to_email, reset_link)
        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
                if self._use_tls:
                    smtp.starttls(context=ssl.create_default_context())
                smtp.login(self._username, self._password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "Password reset email failed",
                extra={"smtp_host": self._host, "error_type": type(e).__name__},
            )
            raise DeliveryError("Failed to send password reset email.") from e
        logger.info("Password reset email sent", extra={"smtp_host": self._host})
