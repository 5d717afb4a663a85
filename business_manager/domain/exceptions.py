"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Command input rejected before any remote call"""

    def __init__(self, message: str, details: list | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or []


class AuthenticationError(DomainException):
    """Identity provider rejected the request"""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class AuthenticationRequired(AuthenticationError):
    """Store operation attempted without a signed-in principal"""

    def __init__(self, message: str = "Please sign in to continue"):
        super().__init__("auth-required", message)


class RemoteUnavailable(DomainException):
    """Record store operation failed"""

    pass


class RecordNotFound(RemoteUnavailable):
    """Record to update does not exist in the store"""

    pass
