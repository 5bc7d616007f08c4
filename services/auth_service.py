# services/auth_service.py
import logging

from extensions.jwt import TokenSigner
from repositories.user_repository import UserRepository
from utils.exceptions import InvalidCredentials, MissingCredentials
from utils.password import verify_password
from utils.validators import normalize_email

logger = logging.getLogger(__name__)


class CredentialVerifier:
    """
    email + password -> {token, user}.
    Unknown email and wrong password fail identically (same error, same
    message, one hash comparison each) so accounts cannot be enumerated.
    """

    def __init__(self, signer: TokenSigner):
        self.signer = signer

    def authenticate(self, email, password) -> dict:
        if not email or not password or not isinstance(email, str) or not isinstance(password, str):
            raise MissingCredentials()
        user = UserRepository.find_by_email(normalize_email(email))
        if not verify_password(user.password_hash if user else None, password):
            logger.warning("failed login attempt")
            raise InvalidCredentials()
        sanitized = user.to_dict()
        token = self.signer.issue(sanitized)
        logger.info("user %s logged in", user.id)
        return {"token": token, "user": sanitized}

    def issue_for(self, user) -> str:
        return self.signer.issue(user.to_dict())
