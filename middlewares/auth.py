# middlewares/auth.py
"""
Session authenticator: bearer token -> Actor.

By default the identity embedded in the token is trusted as-is, so role or
name changes only apply after the user logs in again. ``refetch_user``
switches to loading the user record on every request instead.
"""
import logging
from typing import Callable, Optional

from extensions.jwt import TokenError, TokenSigner
from utils.exceptions import InvalidToken, Unauthenticated
from utils.permissions import Actor

logger = logging.getLogger(__name__)


def extract_bearer(auth_header: Optional[str]) -> Optional[str]:
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


class SessionAuthenticator:
    def __init__(
        self,
        signer: TokenSigner,
        *,
        refetch_user: bool = False,
        user_loader: Optional[Callable[[int], Optional[dict]]] = None,
        is_revoked: Optional[Callable[[str], bool]] = None,
    ):
        if refetch_user and user_loader is None:
            raise ValueError("refetch_user requires a user_loader")
        self.signer = signer
        self.refetch_user = refetch_user
        self.user_loader = user_loader
        self.is_revoked = is_revoked

    def verify(self, token: str) -> dict:
        """Signature, expiry and revocation; returns the raw payload."""
        try:
            payload = self.signer.verify(token)
        except TokenError as e:
            logger.info("token rejected: %s", e)
            raise InvalidToken()
        if self.is_revoked and self.is_revoked(payload.get("jti")):
            raise InvalidToken()
        return payload

    def authenticate(self, auth_header: Optional[str]) -> Actor:
        token = extract_bearer(auth_header)
        if not token:
            raise Unauthenticated()
        payload = self.verify(token)
        user = payload["user"]
        if self.refetch_user:
            user = self.user_loader(int(payload["sub"]))
            if not user:
                raise InvalidToken()
        try:
            return Actor.from_payload(user)
        except (KeyError, TypeError, ValueError):
            raise InvalidToken()
