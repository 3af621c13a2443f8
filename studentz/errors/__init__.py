from .exceptions import (
    AppError,
    ValidationFailure,
    DuplicateIdentifier,
    StoreFailure,
    TransportFailure,
    PayloadTooLarge,
    ImageRejected,
    StoreUnavailable,
)
from .handlers import register_error_handlers
