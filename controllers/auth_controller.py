# controllers/auth_controller.py
import logging

from flask import Blueprint, current_app, request

from controllers.auth_helpers import auth_required, get_authenticator
from controllers.request_helpers import json_object
from middlewares.auth import extract_bearer
from repositories.token_repository import TokenRepository
from services.password_service import PasswordService
from utils.exceptions import BizError
from utils.permissions import get_current_actor
from utils.response import json_response

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def get_verifier():
    return current_app.extensions["credential_verifier"]


@auth_bp.post("/login")
def login():
    data = json_object()
    result = get_verifier().authenticate(data.get("email"), data.get("password"))
    return json_response(data=result)


@auth_bp.post("/logout")
def logout():
    token = extract_bearer(request.headers.get("Authorization"))
    if not token or not current_app.config.get("TOKEN_REVOCATION_ENABLED", True):
        return json_response(message="Logged out")
    try:
        payload = get_authenticator().verify(token)
    except BizError:
        # already unusable
        return json_response(message="Logged out")
    signer = get_authenticator().signer
    TokenRepository.revoke(payload.get("jti"), signer.remaining_seconds(payload))
    logger.info("user %s logged out", payload.get("sub"))
    return json_response(message="Logged out")


@auth_bp.get("/me")
@auth_required()
def me():
    return json_response(data={"user": get_current_actor().to_dict()})


@auth_bp.put("/users/password")
@auth_required()
def update_password():
    data = json_object()
    user = PasswordService.change_password(
        get_current_actor(),
        current_password=data.get("currentPassword", data.get("current_password")),
        new_password=data.get("newPassword", data.get("new_password")),
    )
    token = get_verifier().issue_for(user)
    return json_response(message="Password updated", data={"token": token})
