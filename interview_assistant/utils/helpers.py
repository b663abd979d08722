import re
from typing import List, Optional

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\(?([0-9]{3})\)?[-. ]?([0-9]{3})[-. ]?([0-9]{4})$")
SCRIPT_TAG_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
HTML_TAG_RE = re.compile(r"<[^>]*>")

CONTACT_FIELDS = ("name", "email", "phone")


def validate_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


def validate_phone(phone: str) -> bool:
    if PHONE_RE.match((phone or "").strip()):
        return True
    digits = re.sub(r"\D", "", phone or "")
    return len(digits) == 11 and digits.startswith("1")


def format_phone(phone: str) -> str:
    """Render 10 (or 1-prefixed 11) digit numbers as ``(XXX) XXX-XXXX``."""
    digits = re.sub(r"\D", "", phone or "")
    if len(digits) == 11 and digits[0] == "1":
        digits = digits[1:]
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return phone


def sanitize_input(value: Optional[str]) -> str:
    if not value:
        return ""
    cleaned = SCRIPT_TAG_RE.sub("", value)
    cleaned = HTML_TAG_RE.sub("", cleaned)
    return cleaned.strip()


def missing_fields(name: str, email: str, phone: str) -> List[str]:
    values = {"name": name, "email": email, "phone": phone}
    return [field for field in CONTACT_FIELDS if not (values[field] or "").strip()]


def format_duration(seconds: int) -> str:
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def format_time(seconds: int) -> str:
    minutes, secs = divmod(max(int(seconds), 0), 60)
    return f"{minutes:02d}:{secs:02d}"
