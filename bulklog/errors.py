from __future__ import annotations


class BulkLogError(Exception):
    """Base error; ``status_code`` is the HTTP status the API answers with."""

    status_code: int = 500
    default_message: str = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BulkLogError):
    status_code = 400
    default_message = "Invalid request."


class Unauthenticated(BulkLogError):
    status_code = 401
    default_message = "Invalid or expired token."


class InvalidCredentials(BulkLogError):
    status_code = 401
    default_message = "Invalid credentials."


class NotFound(BulkLogError):
    status_code = 404
    default_message = "Not found."


class DuplicateEmail(BulkLogError):
    status_code = 409
    default_message = "Email already registered."


class StorageError(BulkLogError):
    status_code = 500
    default_message = "Storage failure."
