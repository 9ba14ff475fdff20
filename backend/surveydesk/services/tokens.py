"""Signed proof that a respondent verified an email address.

A token is `<b64(payload)>.<b64(hmac-sha256)>` with the email in `sub` and
the expiry in `exp`. It carries no session and grants nothing beyond
"this address received and returned a code".
"""
import base64
import hashlib
import hmac
import json
from datetime import datetime

from surveydesk.core.errors import InvalidVerificationToken

def _b64u_encode(b: bytes) -> str:
    return base64.urlsafe_b64encode(b).rstrip(b"=").decode()

def _b64u_decode(s: str) -> bytes:
    pad = "=" * (-len(s) % 4)
    return base64.urlsafe_b64decode(s + pad)

def sign_verification(email: str, secret: str, ttl_sec: int, now: datetime) -> str:
    data = {"sub": email, "purpose": "respondent", "exp": int(now.timestamp()) + int(ttl_sec)}
    raw = json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode()
    sig = hmac.new(secret.encode(), raw, hashlib.sha256).digest()
    return f"{_b64u_encode(raw)}.{_b64u_encode(sig)}"

def read_verification(token: str, secret: str, now: datetime) -> str:
    """Return the verified email, or raise InvalidVerificationToken."""
    try:
        raw_b64, sig_b64 = token.split(".", 1)
        raw = _b64u_decode(raw_b64)
        sig = _b64u_decode(sig_b64)
    except (ValueError, TypeError) as e:
        raise InvalidVerificationToken("Malformed verification token") from e

    expected = hmac.new(secret.encode(), raw, hashlib.sha256).digest()
    if not hmac.compare_digest(sig, expected):
        raise InvalidVerificationToken("Verification token signature mismatch")

    try:
        data = json.loads(raw.decode())
    except ValueError as e:
        raise InvalidVerificationToken("Malformed verification token") from e
    if data.get("purpose") != "respondent" or not data.get("sub"):
        raise InvalidVerificationToken("Not a respondent verification token")
    if data.get("exp", 0) < int(now.timestamp()):
        raise InvalidVerificationToken("Verification expired, please verify your email again")
    return data["sub"]
