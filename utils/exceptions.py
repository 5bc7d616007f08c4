# utils/exceptions.py
from typing import Any, Optional
from werkzeug.exceptions import HTTPException


class BizError(HTTPException):
    code: int  # HTTP status code
    message: str  # human readable message
    data: Optional[Any]  # optional payload

    default_code = 400
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None, data: Any = None):
        self.code = code or self.default_code
        self.message = message or self.default_message
        self.data = data
        super().__init__(description=self.message)


class ValidationError(BizError):
    default_code = 400
    default_message = "Invalid input"


class MissingCredentials(ValidationError):
    default_message = "Please provide email and password"


class LeadNotFound(ValidationError):
    default_message = "Lead user not found"


class TeamMemberNotFound(ValidationError):
    default_message = "One or more team members not found"


class InvalidURL(ValidationError):
    default_message = "Invalid URL format"


class PayloadTooLarge(ValidationError):
    default_message = "File too large"


class InvalidCredentials(BizError):
    default_code = 401
    default_message = "Incorrect email or password"


class Unauthenticated(BizError):
    default_code = 401
    default_message = "Authentication required"


class InvalidToken(BizError):
    default_code = 401
    default_message = "Invalid or expired token"


class Forbidden(BizError):
    default_code = 403
    default_message = "Access denied"


class NotFound(BizError):
    default_code = 404
    default_message = "Not found"


class Conflict(BizError):
    default_code = 409
    default_message = "Conflict"


class TooManyAttempts(BizError):
    default_code = 429
    default_message = "Too many attempts"


class ServerError(BizError):
    default_code = 500
    default_message = "Something went wrong! Please try again later."
