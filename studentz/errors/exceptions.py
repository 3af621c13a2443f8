class AppError(Exception):
    """Base application exception."""

    status = 500

    def __init__(self, message: str, code: str = "APP_ERROR"):
        super().__init__(message)
        self.code = code

    @property
    def message(self) -> str:
        return str(self)


class ValidationFailure(AppError):
    """Missing or malformed field. Reported immediately, never retried."""

    status = 400

    def __init__(self, message: str, violations=None):
        super().__init__(message, code="VALIDATION_ERROR")
        self.violations = list(violations or [message])


class DuplicateIdentifier(AppError):
    """The store already holds a record with this identifier."""

    def __init__(self, message: str, identifier: str = ""):
        super().__init__(message, code="DUPLICATE_IDENTIFIER")
        self.identifier = identifier


class StoreFailure(AppError):
    def __init__(self, message: str = "Server error"):
        super().__init__(message, code="STORE_FAILURE")


class TransportFailure(AppError):
    """Network or store unreachable, including timeouts."""

    def __init__(self, message: str):
        super().__init__(message, code="TRANSPORT_FAILURE")


class PayloadTooLarge(AppError):
    status = 413

    def __init__(self, message: str = "Payload too large"):
        super().__init__(message, code="PAYLOAD_TOO_LARGE")


class ImageRejected(AppError):
    status = 400

    def __init__(self, message: str):
        super().__init__(message, code="IMAGE_REJECTED")


class StoreUnavailable(StoreFailure):
    """Store locked or unreachable past STORE_TIMEOUT."""

    status = 503

    def __init__(self, message: str = "Store unavailable, try again"):
        super().__init__(message)
        self.code = "STORE_UNAVAILABLE"
