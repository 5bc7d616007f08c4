# config/settings.py
import os
from dotenv import load_dotenv

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
load_dotenv(os.path.join(BASE_DIR, ".env"))  # load .env automatically


def _as_bool(val, default=False):
    if val is None:
        return default
    return str(val).lower() in ("1", "true", "yes", "on")


def _as_list(val, default):
    if not val:
        return list(default)
    return [item.strip() for item in val.split(",") if item.strip()]


DEFAULT_UPLOAD_MIME_TYPES = (
    # Word
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    # Excel
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    # PowerPoint
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    # PDF / text
    "application/pdf",
    "text/plain",
    "text/csv",
    # Images
    "image/jpeg",
    "image/png",
)


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = os.getenv("REDIS_URL", "redis://127.0.0.1:6379/0")

    # ========= Token =========
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "jwt-secret-key")
    JWT_EXPIRES_SECONDS = int(os.getenv("JWT_EXPIRES_SECONDS", 3600))
    # Trust the identity embedded in the token; set to re-load the user on every request
    AUTH_REFETCH_USER = _as_bool(os.getenv("AUTH_REFETCH_USER"), False)
    TOKEN_REVOCATION_ENABLED = _as_bool(os.getenv("TOKEN_REVOCATION_ENABLED"), True)

    # ========= Uploads =========
    MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", 15 * 1024 * 1024))
    # multipart envelope on top of the file itself
    MAX_CONTENT_LENGTH = MAX_UPLOAD_BYTES + 1024 * 1024
    ALLOWED_UPLOAD_MIME_TYPES = _as_list(
        os.getenv("ALLOWED_UPLOAD_MIME_TYPES"), DEFAULT_UPLOAD_MIME_TYPES
    )

    # ========= Logging =========
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR = os.getenv("LOG_DIR", "./logs")
    LOG_JSON = os.getenv("LOG_JSON", "1") == "1"
    LOG_FILE_ENABLED = _as_bool(os.getenv("LOG_FILE_ENABLED"), True)
    LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", 5 * 1024 * 1024))
    LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", 5))
    APP_NAME = os.getenv("APP_NAME", "project-tracker")

    # Bootstrap admin, only created when both email and password are configured
    ADMIN_INIT_EMAIL = os.getenv("ADMIN_INIT_EMAIL")
    ADMIN_INIT_PASSWORD = os.getenv("ADMIN_INIT_PASSWORD")
    ADMIN_INIT_NAME = os.getenv("ADMIN_INIT_NAME", "Admin")

    # ========= Password change =========
    # werkzeug generate_password_hash method, empty => library default
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD") or None
    PASSWORD_MIN_LENGTH = int(os.getenv("PASSWORD_MIN_LENGTH", 4))
    PASSWORD_CHANGE_FAIL_LIMIT = int(os.getenv("PASSWORD_CHANGE_FAIL_LIMIT", 5))
    PASSWORD_CHANGE_BLOCK_SECONDS = int(os.getenv("PASSWORD_CHANGE_BLOCK_SECONDS", 900))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DEV_DATABASE_URI", "sqlite:///" + os.path.join(BASE_DIR, "dev.db")
    )


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URI", "sqlite:///:memory:")
    JWT_SECRET_KEY = "test-jwt-secret"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    LOG_FILE_ENABLED = False
    LOG_JSON = False
    ADMIN_INIT_EMAIL = None
    ADMIN_INIT_PASSWORD = None


config_map = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(config_name):
    return config_map.get(config_name, DevelopmentConfig)
