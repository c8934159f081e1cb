"""
Failure taxonomy for artifact resolution.

Every failure raised by the resolution pipeline is an
``ArtifactResolutionError`` carrying a stable ``ErrorKind``. Hosts usually
only need to tell "not found" apart from everything else:

    try:
        artifact = resolver.find_artifact("com.example.Foo")
    except ArtifactResolutionError as e:
        if is_not_found(e):
            ...  # fall through to another resolver
        else:
            raise
"""

from enum import Enum
from typing import Any, Optional

from botocore.exceptions import ClientError
from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Failure categories for artifact resolution."""

    INVALID_NAME = "invalid_name"                   # None, empty or bad leading character
    UNRESOLVABLE_REQUEST = "unresolvable_request"   # translator produced no request
    NOT_FOUND = "not_found"                         # store has no object at the location
    INVALID_SIZE = "invalid_size"                   # declared size missing or out of range
    TRUNCATED_TRANSFER = "truncated_transfer"       # stream ended before declared size
    STORE_ERROR = "store_error"                     # transport/client failure


NOT_FOUND_KINDS = frozenset({ErrorKind.NOT_FOUND, ErrorKind.UNRESOLVABLE_REQUEST})

NOT_FOUND_CODES = frozenset({"NoSuchKey", "NoSuchBucket", "NotFound", "404"})
ACCESS_DENIED_CODES = frozenset({"AccessDenied", "403", "Forbidden"})
RETRYABLE_CODES = frozenset({
    "SlowDown", "Throttling", "ThrottlingException", "RequestTimeout",
    "InternalError", "ServiceUnavailable", "500", "502", "503", "504",
})


class ErrorInfo(BaseModel):
    """
    Serializable description of a resolution failure, suitable for logs and
    for reporting to a host that cannot inspect Python exceptions.
    """

    kind: ErrorKind = Field(description="Failure category")
    code: str = Field(default="UNKNOWN", description="Stable error code")
    message: str = Field(default="", description="Human-readable error message")
    artifact: Optional[str] = Field(None, description="Name being resolved")
    retryable: bool = Field(
        default=False,
        description="Whether a caller-side retry could plausibly succeed"
    )
    exception_type: Optional[str] = Field(
        None, description="Class name of the underlying cause"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d = {
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
        }
        if self.artifact is not None:
            d["artifact"] = self.artifact
        if self.exception_type is not None:
            d["exception_type"] = self.exception_type
        if self.details:
            d["details"] = self.details
        return d


class ArtifactResolutionError(Exception):
    """Base class for every failure surfaced by the resolution pipeline."""

    kind: ErrorKind = ErrorKind.STORE_ERROR

    def __init__(
        self,
        message: str,
        *,
        name: Optional[str] = None,
        cause: Optional[BaseException] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.name = name
        self.cause = cause
        self.details = dict(details or {})

    @property
    def code(self) -> str:
        return self.kind.value.upper()

    @property
    def retryable(self) -> bool:
        return False

    def info(self) -> ErrorInfo:
        return ErrorInfo(
            kind=self.kind,
            code=self.code,
            message=str(self),
            artifact=self.name,
            retryable=self.retryable,
            exception_type=type(self.cause).__name__ if self.cause is not None else None,
            details={k: v for k, v in self.details.items() if v is not None},
        )


class InvalidNameError(ArtifactResolutionError, ValueError):
    kind = ErrorKind.INVALID_NAME


class ArtifactNotFoundError(ArtifactResolutionError):
    kind = ErrorKind.NOT_FOUND


class UnresolvableRequestError(ArtifactNotFoundError):
    """The name translator could not produce a fetch request for the name."""

    kind = ErrorKind.UNRESOLVABLE_REQUEST


class InvalidSizeError(ArtifactResolutionError):
    kind = ErrorKind.INVALID_SIZE

    def __init__(self, message: str, *, size: Optional[int], **kwargs) -> None:
        details = dict(kwargs.pop("details", None) or {})
        details["size"] = size
        super().__init__(message, details=details, **kwargs)
        self.size = size


class TruncatedTransferError(ArtifactResolutionError):
    kind = ErrorKind.TRUNCATED_TRANSFER

    def __init__(self, message: str, *, expected: int, received: int, **kwargs) -> None:
        details = dict(kwargs.pop("details", None) or {})
        details.update({"expected": expected, "received": received})
        super().__init__(message, details=details, **kwargs)
        self.expected = expected
        self.received = received


class StoreError(ArtifactResolutionError):
    kind = ErrorKind.STORE_ERROR

    @property
    def store_code(self) -> Optional[str]:
        if isinstance(self.cause, ClientError):
            return self.cause.response.get("Error", {}).get("Code")
        return None

    @property
    def code(self) -> str:
        store_code = self.store_code
        if store_code:
            return f"S3_{store_code}"
        return super().code

    @property
    def retryable(self) -> bool:
        store_code = self.store_code
        if store_code is not None:
            return store_code in RETRYABLE_CODES
        # connectivity faults without an S3 error code
        return isinstance(self.cause, OSError) or (
            self.cause is not None and "timeout" in type(self.cause).__name__.lower()
        )


def is_not_found(error: BaseException) -> bool:
    """True when the failure means "no such artifact" rather than a hard fault."""
    return isinstance(error, ArtifactResolutionError) and error.kind in NOT_FOUND_KINDS


def client_error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def classify_client_error(error: ClientError) -> ErrorKind:
    """Map a botocore ClientError onto the failure taxonomy."""
    code = client_error_code(error)
    if code in NOT_FOUND_CODES:
        return ErrorKind.NOT_FOUND
    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    if status == 404:
        return ErrorKind.NOT_FOUND
    return ErrorKind.STORE_ERROR


__all__ = [
    "ACCESS_DENIED_CODES",
    "ArtifactNotFoundError",
    "ArtifactResolutionError",
    "ErrorInfo",
    "ErrorKind",
    "InvalidNameError",
    "InvalidSizeError",
    "StoreError",
    "TruncatedTransferError",
    "UnresolvableRequestError",
    "classify_client_error",
    "client_error_code",
    "is_not_found",
]
