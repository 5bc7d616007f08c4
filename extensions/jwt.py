# extensions/jwt.py
import base64
import hashlib
import hmac
import json
import time
import uuid
from typing import Any, Callable, Mapping


def _b64(data: bytes):
    return base64.urlsafe_b64encode(data).rstrip(b"=")


def _b64json(obj):
    return _b64(json.dumps(obj, separators=(",", ":")).encode())


def _decode_segment(seg: str):
    pad = "=" * (-len(seg) % 4)
    return json.loads(base64.urlsafe_b64decode(seg + pad).decode())


class TokenError(ValueError):
    pass


class TokenSigner:
    """
    HS256 token issue/verify.
    The secret, lifetime and clock are fixed at construction; one instance is
    built by create_app from configuration and shared read-only afterwards.
    """

    def __init__(self, secret: str, expires_seconds: int = 3600, clock: Callable[[], float] = time.time):
        if not secret:
            raise ValueError("token signing secret must not be empty")
        self._secret = secret.encode()
        self.expires_seconds = expires_seconds
        self.clock = clock

    def _sign(self, signing: bytes) -> bytes:
        return _b64(hmac.new(self._secret, signing, hashlib.sha256).digest())

    def issue(self, user: Mapping[str, Any]) -> str:
        """Sign a token embedding the sanitized user record."""
        now = int(self.clock())
        header = {"alg": "HS256", "typ": "JWT"}
        payload = {
            "sub": user["id"],
            "user": dict(user),
            "iat": now,
            "exp": now + self.expires_seconds,
            "jti": uuid.uuid4().hex,
        }
        signing = _b64json(header) + b"." + _b64json(payload)
        return (signing + b"." + self._sign(signing)).decode()

    def verify(self, token: str) -> dict:
        try:
            h_b, p_b, sig_b = token.split(".")
            expected = self._sign(f"{h_b}.{p_b}".encode()).decode()
            if not hmac.compare_digest(expected, sig_b):
                raise TokenError("signature mismatch")
            header = _decode_segment(h_b)
            if header.get("alg") != "HS256":
                raise TokenError("unsupported algorithm")
            payload = _decode_segment(p_b)
        except TokenError:
            raise
        except Exception:
            raise TokenError("malformed token")

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or self.clock() >= exp:
            raise TokenError("token expired")
        if not isinstance(payload.get("user"), dict) or payload.get("sub") is None:
            raise TokenError("token payload invalid")
        return payload

    def remaining_seconds(self, payload: Mapping[str, Any]) -> int:
        return max(int(payload.get("exp", 0) - self.clock()), 1)
