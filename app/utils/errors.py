"""
Domain errors raised by the service layer.

Route handlers translate these into the uniform error responses in
``responses.error``.
"""


class ServiceError(Exception):
    default_message = "Request could not be processed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(ServiceError):
    default_message = "Resource not found"


class ValidationError(ServiceError):
    default_message = "Invalid request"

    def __init__(self, message: str = None, field: str = None):
        super().__init__(message)
        self.field = field


class InvalidTransitionError(ValidationError):
    def __init__(self, entity: str, current, action: str):
        super().__init__(f"Cannot {action} a {entity} that is {current}.", field="status")
        self.current = current
        self.action = action


class ConflictError(ValidationError):
    default_message = "Request conflicts with existing data"


class AuthorizationDenied(ServiceError):
    default_message = "Access denied"


class StorageError(ServiceError):
    default_message = "File storage failure"
