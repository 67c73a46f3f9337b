from typing import Dict, Optional


class AppError(Exception):
    """Базовая ошибка приложения с HTTP-статусом"""

    status_code = 500

    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.fields = fields

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.fields:
            body["fields"] = self.fields
        return body


class AuthenticationError(AppError):
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class AuthorizationError(AppError):
    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class ValidationError(AppError):
    status_code = 400


class RateLimitError(AppError):
    status_code = 429

    def __init__(self, message: str = "Too many requests. Please try again shortly."):
        super().__init__(message)
