import re

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

PERSONAL_DOMAINS = {
    "gmail.com", "yahoo.com", "hotmail.com", "outlook.com", "icloud.com",
    "aol.com", "protonmail.com", "gmx.com", "mail.com",
}

def normalize_email(email: str) -> str:
    return email.strip().lower()

def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email.strip()))

def get_email_domain(email: str) -> str | None:
    _, sep, domain = email.strip().rpartition("@")
    if not sep or not domain:
        return None
    return domain.lower()

def is_business_domain(domain: str) -> bool:
    return domain.lower() not in PERSONAL_DOMAINS
