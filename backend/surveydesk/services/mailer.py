import logging

import httpx

from surveydesk.core.config import Settings
from surveydesk.core.errors import MailDeliveryError

logger = logging.getLogger(__name__)

SUBJECT = "Your verification code"

def code_message(code: str) -> str:
    return f"Your survey verification code is {code}. It expires shortly; do not share it."

class ConsoleMailer:
    """Writes codes to the log instead of sending them. For local runs only."""

    def send_code(self, email: str, code: str) -> None:
        logger.info("verification code for %s: %s", email, code)

class HttpMailer:
    def __init__(self, api_url: str, api_key: str | None, sender: str, timeout: float = 5.0, transport: httpx.BaseTransport | None = None):
        self.api_url = api_url
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout
        self.transport = transport

    def send_code(self, email: str, code: str) -> None:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        payload = {"from": self.sender, "to": [email], "subject": SUBJECT, "text": code_message(code)}
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                r = client.post(self.api_url, json=payload, headers=headers)
                r.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("mail delivery to %s failed: %s", email, e)
            raise MailDeliveryError("Failed to send verification code. Please try again.") from e

def build_mailer(settings: Settings):
    if settings.mail_backend == "http":
        if not settings.mail_api_url:
            raise ValueError("mail_api_url is required when mail_backend is 'http'")
        return HttpMailer(settings.mail_api_url, settings.mail_api_key, settings.mail_from, settings.mail_timeout_seconds)
    return ConsoleMailer()
