# app/core/exceptions.py
from typing import Any, Dict, List, Optional


class RedCapError(Exception):
    """
    Base exception for the RedCap API.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500,
                 details: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        self.headers = headers
        super().__init__(self.message)


class ValidationError(RedCapError):
    """
    Raised when input is malformed. details["fields"] lists every offending field.
    """
    def __init__(self, fields: List[str], message: Optional[str] = None, code: str = "VALIDATION_ERROR",
                 status_code: int = 422):
        self.fields = list(fields)
        super().__init__(
            message or f"Invalid fields: {', '.join(self.fields)}",
            code=code,
            status_code=status_code,
            details={"fields": self.fields},
        )


class MissingFieldsError(ValidationError):
    def __init__(self, fields: List[str]):
        super().__init__(
            fields,
            message=f"Missing required fields: {', '.join(fields)}",
            code="MISSING_FIELDS",
            status_code=400,
        )


class DuplicateEmailError(RedCapError):
    def __init__(self, message: str = "Email already registered"):
        super().__init__(message, code="DUPLICATE_EMAIL", status_code=409)


class InvalidCredentialsError(RedCapError):
    """
    Same signal for an unknown email and a wrong password.
    """
    def __init__(self):
        super().__init__("Invalid email or password", code="INVALID_CREDENTIALS", status_code=401)


class UnauthorizedError(RedCapError):
    """
    Raised for a missing, invalid or expired session token. Subclasses exist only
    for internal logging; callers always see the same message and code.
    """
    def __init__(self):
        super().__init__(
            "Could not validate credentials",
            code="UNAUTHORIZED",
            status_code=401,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidSignatureError(UnauthorizedError):
    pass


class ExpiredTokenError(UnauthorizedError):
    pass


class NotFoundError(RedCapError):
    """
    Raised when a resource is absent or not owned by the caller.
    """
    def __init__(self, message: str = "Not found"):
        super().__init__(message, code="NOT_FOUND", status_code=404)


class InvalidOrExpiredTokenError(RedCapError):
    def __init__(self):
        super().__init__("Invalid or expired reset token", code="INVALID_OR_EXPIRED_TOKEN", status_code=400)


class CodeGenerationExhaustedError(RedCapError):
    def __init__(self, attempts: int):
        super().__init__(
            "Could not allocate a tracking code, please retry",
            code="CODE_GENERATION_EXHAUSTED",
            status_code=503,
            details={"attempts": attempts},
        )


class InternalStorageError(RedCapError):
    def __init__(self, message: str = "A storage error occurred. Please try again later."):
        super().__init__(message, code="INTERNAL_STORAGE_ERROR", status_code=500)
