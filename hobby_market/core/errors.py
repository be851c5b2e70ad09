"""Error codes and exceptions shared by views, services and API handlers."""

from enum import Enum


class ErrorCode(Enum):
    VALIDATION_FAILED = "VALIDATION_FAILED"
    NOT_SIGNED_IN = "NOT_SIGNED_IN"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    RECORD_MALFORMED = "RECORD_MALFORMED"
    IDENTITY_PROVIDER_FAILED = "IDENTITY_PROVIDER_FAILED"


class HobbyMarketError(Exception):
    """Base error with a code and a user-safe message."""

    code: ErrorCode

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class PublishValidationError(HobbyMarketError):
    code = ErrorCode.VALIDATION_FAILED


class NotSignedInError(HobbyMarketError):
    code = ErrorCode.NOT_SIGNED_IN

    def __init__(self, message: str = "Please sign in to publish a hobby.") -> None:
        super().__init__(message)


class StoreError(HobbyMarketError):
    """The document store rejected or failed a read/write."""

    code = ErrorCode.STORE_UNAVAILABLE


class RecordDecodeError(HobbyMarketError):
    """A stored document does not match the expected shape."""

    code = ErrorCode.RECORD_MALFORMED

    def __init__(self, collection: str, doc_id: str, errors: list[dict] | None = None) -> None:
        super().__init__(f"Malformed {collection} document")
        self.collection = collection
        self.doc_id = doc_id
        self.errors = errors or []


class IdentityProviderError(HobbyMarketError):
    code = ErrorCode.IDENTITY_PROVIDER_FAILED

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
