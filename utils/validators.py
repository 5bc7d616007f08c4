import re
from urllib.parse import urlsplit

EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")


def normalize_email(email) -> str:
    if email is None:
        return ""
    return str(email).strip().lower()


def validate_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


def is_absolute_url(value: str) -> bool:
    """
    An absolute URL needs a scheme and something after it:
      - http(s)/ftp style => must carry a host
      - other schemes (mailto:, urn:) => must carry a non-empty path
    """
    if not value or any(ch.isspace() for ch in value.strip()):
        return False
    try:
        parts = urlsplit(value.strip())
        # raises ValueError on malformed ports
        parts.port
    except ValueError:
        return False
    if not parts.scheme or not re.match(r"^[A-Za-z][A-Za-z0-9+.-]*$", parts.scheme):
        return False
    if parts.netloc:
        return bool(parts.hostname)
    if parts.scheme.lower() in ("http", "https", "ftp", "ftps", "ws", "wss"):
        return False
    return bool(parts.path)
