"""
Email notification for new registrations, delivered over SMTP.
"""
import logging
import smtplib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import List

from jinja2 import Environment, PackageLoader, select_autoescape

from idea2impact.core.config import Settings
from idea2impact.core.errors import (
    DeliveryAuthenticationError,
    DeliveryConnectionError,
    DeliveryError,
    DeliveryTimeoutError,
    GenericDeliveryError,
)

logger = logging.getLogger(__name__)

NOT_SPECIFIED = "Not specified"

TEMPLATES = Environment(
    loader=PackageLoader("idea2impact", "templates"),
    autoescape=select_autoescape(["html"]),
)


@dataclass(frozen=True)
class DeliveryReceipt:
    """What the relay told us about one accepted message."""

    message_id: str
    recipients: List[str]
    accepted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def render_registration_email(registration):
    """Return (html, text) bodies for a stored registration."""
    context = {"registration": registration, "placeholder": NOT_SPECIFIED}
    html = TEMPLATES.get_template("registration_email.html").render(**context)
    text = TEMPLATES.get_template("registration_email.txt").render(**context)
    return html, text


def _timed_out(exc: Exception) -> bool:
    # smtplib re-raises a read timeout as SMTPServerDisconnected("... timed out")
    return any(isinstance(e, TimeoutError) for e in (exc, exc.__cause__, exc.__context__))


def classify_smtp_error(exc: Exception, registration=None) -> DeliveryError:
    """Map a relay failure onto the delivery error taxonomy."""
    if isinstance(exc, smtplib.SMTPAuthenticationError):
        cls = DeliveryAuthenticationError
    elif _timed_out(exc):
        cls = DeliveryTimeoutError
    elif isinstance(exc, (smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected)):
        cls = DeliveryConnectionError
    elif isinstance(exc, smtplib.SMTPException):
        cls = GenericDeliveryError
    elif isinstance(exc, OSError):
        # refused, unreachable, DNS failure
        cls = DeliveryConnectionError
    else:
        cls = GenericDeliveryError
    return cls(str(exc) or exc.__class__.__name__, registration=registration)


class NotificationSender:
    """Sends one email per registration through the configured relay.

    A fresh connection is opened for every call and always closed afterwards.
    There is exactly one send attempt.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def notify(self, registration) -> DeliveryReceipt:
        recipient = self.settings.NOTIFY_RECIPIENT or registration.email
        message = self.build_message(registration, recipient)

        try:
            smtp = self._connect()
            try:
                smtp.send_message(message)
            finally:
                self._disconnect(smtp)
        except Exception as e:
            error = classify_smtp_error(e, registration=registration)
            logger.error(f"❌ Email for registration {registration.id} failed ({error.kind}): {e}")
            raise error from e

        # a single refused recipient makes send_message raise
        receipt = DeliveryReceipt(message_id=message["Message-ID"], recipients=[recipient])
        logger.info(f"✅ Email sent: {receipt.message_id}")
        return receipt

    def build_message(self, registration, recipient: str) -> EmailMessage:
        html, text = render_registration_email(registration)

        message = EmailMessage()
        message["Subject"] = self.settings.EMAIL_SUBJECT
        message["From"] = formataddr((self.settings.SENDER_NAME, self._from_address()))
        message["To"] = recipient
        message["Message-ID"] = make_msgid(domain=self._msgid_domain())
        message.set_content(text)
        message.add_alternative(html, subtype="html")
        return message

    def verify(self) -> dict:
        """Check that the relay accepts a connection (and our login). Sends nothing."""
        try:
            smtp = self._connect()
            try:
                smtp.noop()
            finally:
                self._disconnect(smtp)
        except Exception as e:
            error = classify_smtp_error(e)
            logger.error(f"❌ SMTP verification failed ({error.kind}): {e}")
            raise error from e

        logger.info(f"✅ SMTP relay {self.settings.SMTP_HOST}:{self.settings.SMTP_PORT} is reachable")
        return self.describe()

    def describe(self) -> dict:
        """Relay configuration summary, without secrets"""
        return {
            "host": self.settings.SMTP_HOST,
            "port": self.settings.SMTP_PORT,
            "secure": self.settings.SMTP_SECURE,
            "starttls": self.settings.SMTP_STARTTLS and not self.settings.SMTP_SECURE,
            "user": self.settings.SMTP_USER,
            "sender": self.settings.sender_address,
        }

    def _connect(self) -> smtplib.SMTP:
        s = self.settings
        if s.SMTP_SECURE:
            smtp = smtplib.SMTP_SSL(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT)
        else:
            smtp = smtplib.SMTP(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT)

        try:
            if s.SMTP_STARTTLS and not s.SMTP_SECURE:
                smtp.starttls()
            if s.SMTP_USER and s.SMTP_PASS:
                smtp.login(s.SMTP_USER, s.SMTP_PASS)
        except Exception:
            smtp.close()
            raise
        return smtp

    def _disconnect(self, smtp):
        """QUIT, falling back to dropping the socket. Never raises."""
        try:
            smtp.quit()
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"SMTP teardown failed: {e}")
            smtp.close()

    def _from_address(self) -> str:
        return self.settings.sender_address or f"no-reply@{self.settings.SMTP_HOST}"

    def _msgid_domain(self) -> str:
        return self._from_address().rpartition("@")[2]
