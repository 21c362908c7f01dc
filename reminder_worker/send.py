import json
import logging
import smtplib
from email.message import EmailMessage
from typing import List, Optional, Protocol

import requests

from .config import SmtpConfig, WhatsAppSendConfig
from .errors import ConfigurationError, TransportError
from .scheduler_config import SMTP_TIMEOUT, WHATSAPP_TIMEOUT
from .schemas import Notification

# Setup logger
logger = logging.getLogger(__name__)


class NotificationTransport(Protocol):
    def send(self, notification: Notification) -> None:
        """Hand one notification over for delivery. Raises TransportError on failure."""
        ...


# =========================================================
# EMAIL (SMTP)
# =========================================================
class EmailTransport:
    def __init__(self, config: Optional[SmtpConfig] = None) -> None:
        self.config = config or SmtpConfig()

    def _build_message(self, notification: Notification) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.config.SMTP_FROM
        message["To"] = notification.to
        message["Subject"] = notification.subject
        message.set_content(notification.body)
        return message

    def send(self, notification: Notification) -> None:
        """
        Sends the reminder by e-mail.

        BCC addresses only go into the SMTP envelope, never into the headers.
        """
        if not self.config.configured:
            raise ConfigurationError("Missing SMTP configuration (SMTP_HOST / SMTP_FROM)")

        message = self._build_message(notification)
        recipients = [notification.to, *notification.bcc]

        try:
            with smtplib.SMTP(self.config.SMTP_HOST, self.config.SMTP_PORT, timeout=SMTP_TIMEOUT) as server:
                if self.config.SMTP_USE_TLS:
                    server.starttls()
                if self.config.SMTP_USER:
                    server.login(self.config.SMTP_USER, self.config.SMTP_PASSWORD or "")
                server.send_message(message, to_addrs=recipients)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP send error: {e}")
            raise TransportError(f"Failed to send e-mail to {notification.to}: {e}") from e


# =========================================================
# WHATSAPP (Cloud API)
# =========================================================
def _api_url(config: WhatsAppSendConfig) -> str:
    return f"https://graph.facebook.com/{config.VERSION}/{config.PHONE_NUMBER_ID}/messages"

def _get_text_payload(recipient: str, text: str) -> str:
    return json.dumps(
        {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": recipient,
            "type": "text",
            "text": {"preview_url": False, "body": text},
        }
    )

class WhatsAppTransport:
    """
    Delivers the reminder as one WhatsApp text to the primary and every BCC
    number. With this transport ``email_to`` / ``email_bcc`` hold phone
    numbers in international format instead of e-mail addresses.

    Each number is a separate API call. The notification counts as sent
    once any number accepted it. Numbers that rejected it are logged and
    TransportError is raised only when every call failed.
    """

    def __init__(self, config: Optional[WhatsAppSendConfig] = None) -> None:
        self.config = config or WhatsAppSendConfig()

    def _post(self, recipient: str, text: str) -> None:
        headers = {
            "Content-type": "application/json",
            "Authorization": f"Bearer {self.config.ACCESS_TOKEN}",
        }
        try:
            resp = requests.post(
                _api_url(self.config),
                data=_get_text_payload(recipient, text),
                headers=headers,
                timeout=WHATSAPP_TIMEOUT
            )
            resp.raise_for_status()
        except requests.Timeout as e:
            logger.error("WhatsApp request timed out")
            raise TransportError("Request timed out", status_code=408) from e
        except requests.RequestException as e:
            logger.error(f"WhatsApp send error: {e}")
            status_code = e.response.status_code if e.response is not None else 500
            raise TransportError(f"Failed to send message to {recipient}", status_code=status_code) from e

    def send(self, notification: Notification) -> None:
        if not self.config.configured:
            raise ConfigurationError("Missing WhatsApp configuration (ACCESS_TOKEN / VERSION / PHONE_NUMBER_ID)")

        text = f"*{notification.subject}*\n\n{notification.body}"
        recipients: List[str] = [notification.to, *notification.bcc]
        failed: List[str] = []
        last_error: Optional[TransportError] = None
        for recipient in recipients:
            try:
                self._post(recipient, text)
            except TransportError as e:
                failed.append(recipient)
                last_error = e

        if last_error is not None and len(failed) == len(recipients):
            raise TransportError(
                f"WhatsApp delivery failed for every recipient: {last_error}",
                status_code=last_error.status_code
            ) from last_error
        if failed:
            logger.warning(f"WhatsApp reminder not delivered to {len(failed)} of {len(recipients)} recipients: {failed}")


def build_transport(kind: str) -> NotificationTransport:
    """Transport by name: "email" (default) or "whatsapp"."""
    kind = (kind or "email").strip().lower()
    if kind == "email":
        return EmailTransport()
    if kind == "whatsapp":
        return WhatsAppTransport()
    raise ConfigurationError(f"Unknown transport: {kind!r}")
