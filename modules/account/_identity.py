import re
from typing import Any, Dict, Optional

PHONE_DOMAIN = "phone.local"
_NON_DIGIT = re.compile(r"\D")

def phone_digits(value: Any) -> str:
    if value is None:
        return ""
    return _NON_DIGIT.sub("", str(value))

def phone_identifier(value: Any) -> Optional[str]:
    digits = phone_digits(value)
    return f"{digits}@{PHONE_DOMAIN}" if digits else None

def _trimmed(value: Any) -> str:
    return str(value).strip() if value is not None else ""

def build_login_identifier(new_phone: Any = None, new_email: Any = None) -> Optional[str]:
    """Phone wins over email when both are given."""
    ident = phone_identifier(new_phone)
    if ident:
        return ident
    email = _trimmed(new_email)
    return email or None

def identifier_from_profile(doc: Optional[Dict[str, Any]]) -> Optional[str]:
    """Current login identifier as stored on a profile document: email, else phone."""
    if not doc:
        return None
    email = _trimmed(doc.get("email"))
    if email:
        return email
    return phone_identifier(doc.get("phone"))
