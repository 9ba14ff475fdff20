"""One-time-code email verification for respondents.

`OtpIdentityProvider` issues and checks codes. `VerificationGate` is the
two-step flow a respondent walks through (enter email, then enter code) and
only reports that the address is reachable; no account or session is ever
created.
"""
import enum
import hashlib
import hmac
import logging
import re
import secrets
from datetime import datetime, timedelta
from typing import Callable, Protocol

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from surveydesk.core.config import Settings
from surveydesk.core.errors import CodeRejected, InvalidCode, InvalidEmail, ResendCooldownActive
from surveydesk.models import EmailVerification
from surveydesk.utils.email import is_valid_email, normalize_email
from surveydesk.utils.timeutils import as_utc, utcnow

logger = logging.getLogger(__name__)

class IdentityProvider(Protocol):
    def send_code(self, email: str) -> None: ...
    def verify_code(self, email: str, code: str) -> bool: ...
    def last_sent_at(self, email: str) -> datetime | None: ...

def random_code(length: int) -> str:
    return "".join(secrets.choice("0123456789") for _ in range(length))

class OtpIdentityProvider:
    """Codes are stored hashed; only the latest code for an address is accepted."""

    def __init__(self, db: Session, mailer, settings: Settings, code_factory: Callable[[int], str] = random_code, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.mailer = mailer
        self.settings = settings
        self.code_factory = code_factory
        self.clock = clock

    def _hash(self, email: str, code: str) -> str:
        return hmac.new(self.settings.secret_key.encode(), f"{email}:{code}".encode(), hashlib.sha256).hexdigest()

    def _latest(self, email: str) -> EmailVerification | None:
        return self.db.execute(
            select(EmailVerification)
            .where(EmailVerification.email == email)
            .order_by(EmailVerification.id.desc())
            .limit(1)
        ).scalar_one_or_none()

    def last_sent_at(self, email: str) -> datetime | None:
        row = self._latest(email)
        return as_utc(row.created_at) if row else None

    def send_code(self, email: str) -> None:
        now = self.clock()
        code = self.code_factory(self.settings.otp_length)
        try:
            self.db.execute(
                update(EmailVerification)
                .where(EmailVerification.email == email, EmailVerification.consumed_at.is_(None))
                .values(superseded=True)
            )
            self.db.add(EmailVerification(
                email=email,
                code_hash=self._hash(email, code),
                created_at=now,
                expires_at=now + timedelta(seconds=self.settings.otp_ttl_seconds),
            ))
            self.db.flush()
            self.mailer.send_code(email, code)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("issued verification code for %s", email)

    def verify_code(self, email: str, code: str) -> bool:
        row = self._latest(email)
        now = self.clock()
        if row is None or row.superseded or row.consumed_at is not None:
            return False
        if as_utc(row.expires_at) <= now:
            logger.warning("expired code presented for %s", email)
            return False

        row.attempts += 1
        if row.attempts > self.settings.otp_max_attempts:
            row.superseded = True
            self.db.commit()
            logger.warning("too many attempts for %s, code burned", email)
            return False

        if not hmac.compare_digest(row.code_hash, self._hash(email, code)):
            self.db.commit()
            logger.warning("wrong code presented for %s", email)
            return False

        row.consumed_at = now
        self.db.commit()
        return True

class GateState(str, enum.Enum):
    awaiting_email = "awaiting_email"
    awaiting_code = "awaiting_code"
    verified = "verified"
    cancelled = "cancelled"

class VerificationGate:
    def __init__(self, identity: IdentityProvider, code_length: int = 6, cooldown_seconds: int = 60, clock: Callable[[], datetime] = utcnow):
        self.identity = identity
        self.code_length = code_length
        self.code_re = re.compile(rf"^\d{{{code_length}}}$")
        self.cooldown = timedelta(seconds=cooldown_seconds)
        self.clock = clock
        self.state = GateState.awaiting_email
        self.email: str | None = None
        self.last_sent_at: datetime | None = None

    @classmethod
    def resume(cls, identity: IdentityProvider, email: str, **kwargs) -> "VerificationGate":
        """Rebuild the gate for an address from what the identity provider remembers."""
        gate = cls(identity, **kwargs)
        email = normalize_email(email)
        sent = identity.last_sent_at(email)
        if sent is not None:
            gate.state = GateState.awaiting_code
            gate.email = email
            gate.last_sent_at = sent
        return gate

    def resend_available_in(self) -> int:
        if self.last_sent_at is None:
            return 0
        remaining = (self.last_sent_at + self.cooldown - self.clock()).total_seconds()
        return max(0, int(remaining + 0.999))

    def _send(self) -> None:
        remaining = self.resend_available_in()
        if remaining > 0:
            raise ResendCooldownActive(remaining)
        self.identity.send_code(self.email)
        self.last_sent_at = self.clock()
        self.state = GateState.awaiting_code

    def request_code(self, email: str) -> None:
        if self.state in (GateState.verified, GateState.cancelled):
            raise InvalidEmail("Verification flow is already finished")
        if not email or not email.strip():
            raise InvalidEmail("Please enter your email address")
        if not is_valid_email(email):
            raise InvalidEmail("Please enter a valid email address")
        email = normalize_email(email)
        if email != self.email:
            self.last_sent_at = None
        self.email = email
        self._send()

    def resend(self) -> None:
        if self.state != GateState.awaiting_code:
            raise InvalidCode("No code has been requested yet")
        self._send()

    def verify(self, code: str) -> str:
        if self.state != GateState.awaiting_code:
            raise InvalidCode("No code has been requested yet")
        code = (code or "").strip()
        if not code:
            raise InvalidCode("Please enter the verification code")
        if not self.code_re.match(code):
            raise InvalidCode(f"Please enter all {self.code_length} digits of the verification code")
        if not self.identity.verify_code(self.email, code):
            raise CodeRejected("Invalid code. Please try again.")
        self.state = GateState.verified
        return self.email

    def back(self) -> None:
        if self.state == GateState.awaiting_code:
            self.state = GateState.awaiting_email

    def cancel(self) -> None:
        self.state = GateState.cancelled
