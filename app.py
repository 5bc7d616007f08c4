# app.py
from flask import Flask
from werkzeug.exceptions import MethodNotAllowed, RequestEntityTooLarge

from config.settings import get_config
from extensions.database import db, migrate
from extensions.jwt import TokenSigner
from extensions.logger import init_logger
from middlewares.auth import SessionAuthenticator
from repositories.token_repository import TokenRepository
from repositories.user_repository import UserRepository
from services.auth_service import CredentialVerifier
from services.user_service import UserService
from utils.exceptions import BizError, PayloadTooLarge
from utils.response import json_response
from controllers.auth_controller import auth_bp
from controllers.user_controller import user_bp
from controllers.project_controller import project_bp
from controllers.document_controller import document_bp


def _load_user_payload(user_id: int):
    user = UserRepository.find_by_id(user_id)
    return user.to_dict() if user else None


def init_auth(app, clock=None):
    """Build the token signer once from config and hand it to both auth components."""
    cfg = app.config
    signer_kwargs = {"expires_seconds": cfg["JWT_EXPIRES_SECONDS"]}
    if clock is not None:
        signer_kwargs["clock"] = clock
    signer = TokenSigner(cfg["JWT_SECRET_KEY"], **signer_kwargs)
    app.extensions["token_signer"] = signer
    app.extensions["credential_verifier"] = CredentialVerifier(signer)
    app.extensions["session_authenticator"] = SessionAuthenticator(
        signer,
        refetch_user=cfg.get("AUTH_REFETCH_USER", False),
        user_loader=_load_user_payload,
        is_revoked=TokenRepository.is_revoked if cfg.get("TOKEN_REVOCATION_ENABLED", True) else None,
    )


def create_app(config_name="development", clock=None):
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    # extensions
    db.init_app(app)
    migrate.init_app(app, db)
    init_logger(app)
    init_auth(app, clock=clock)

    with app.app_context():
        UserService.ensure_default_admin(app)

    # login / me / password
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    # admin user management
    app.register_blueprint(user_bp, url_prefix="/api/admin")
    # projects
    app.register_blueprint(project_bp)
    # project documents
    app.register_blueprint(document_bp)

    # error handling
    @app.errorhandler(404)
    def not_found(e):
        return json_response(message="Resource not found", code=404)

    @app.errorhandler(MethodNotAllowed)
    def method_not_allowed(e):
        return json_response(message="Method not allowed", code=405)

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(e):
        err = PayloadTooLarge()
        return json_response(message=err.message, code=err.code)

    @app.errorhandler(500)
    def server_error(e):
        return json_response(message="Something went wrong! Please try again later.", code=500)

    @app.errorhandler(BizError)
    def _biz_err(e: BizError):
        if e.code >= 500:
            app.logger.error("request failed: %s", e.message)
        return json_response(code=e.code, message=e.message, data=e.data)

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=8888, debug=True)
