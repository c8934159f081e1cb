from botocore.exceptions import ClientError, ReadTimeoutError

from s3loader.core.errors import (
    ArtifactNotFoundError,
    ArtifactResolutionError,
    ErrorInfo,
    ErrorKind,
    InvalidNameError,
    InvalidSizeError,
    StoreError,
    TruncatedTransferError,
    UnresolvableRequestError,
    classify_client_error,
    is_not_found,
)


def _client_error(code, status=None):
    response = {"Error": {"Code": code, "Message": code}}
    if status is not None:
        response["ResponseMetadata"] = {"HTTPStatusCode": status}
    return ClientError(response, "GetObject")


def test_kinds():
    assert InvalidNameError("x").kind is ErrorKind.INVALID_NAME
    assert ArtifactNotFoundError("x").kind is ErrorKind.NOT_FOUND
    assert UnresolvableRequestError("x").kind is ErrorKind.UNRESOLVABLE_REQUEST
    assert InvalidSizeError("x", size=0).kind is ErrorKind.INVALID_SIZE
    assert TruncatedTransferError("x", expected=2, received=1).kind is ErrorKind.TRUNCATED_TRANSFER
    assert StoreError("x").kind is ErrorKind.STORE_ERROR


def test_not_found_distinguished_from_harder_failures():
    assert is_not_found(ArtifactNotFoundError("x"))
    assert is_not_found(UnresolvableRequestError("x"))
    assert not is_not_found(InvalidNameError("x"))
    assert not is_not_found(InvalidSizeError("x", size=-1))
    assert not is_not_found(TruncatedTransferError("x", expected=2, received=1))
    assert not is_not_found(StoreError("x"))
    assert not is_not_found(ValueError("x"))


def test_all_failures_share_a_base():
    for err in (InvalidNameError("x"), UnresolvableRequestError("x"), StoreError("x")):
        assert isinstance(err, ArtifactResolutionError)
    # caller-input error
    assert isinstance(InvalidNameError("x"), ValueError)


def test_info_for_invalid_size():
    info = InvalidSizeError("too big", name="a.B", size=2**31).info()
    assert isinstance(info, ErrorInfo)
    assert info.to_dict() == {
        "kind": "invalid_size",
        "code": "INVALID_SIZE",
        "message": "too big",
        "retryable": False,
        "artifact": "a.B",
        "details": {"size": 2**31},
    }


def test_truncated_transfer_details():
    err = TruncatedTransferError("short", name="a.B", expected=10, received=4)
    assert err.info().details == {"expected": 10, "received": 4}


def test_store_error_codes_and_retryability():
    throttled = StoreError("x", cause=_client_error("SlowDown", 503))
    assert throttled.code == "S3_SlowDown"
    assert throttled.retryable
    assert throttled.info().exception_type == "ClientError"

    denied = StoreError("x", cause=_client_error("AccessDenied", 403))
    assert denied.code == "S3_AccessDenied"
    assert not denied.retryable

    timeout = StoreError("x", cause=ReadTimeoutError(endpoint_url="https://s3"))
    assert timeout.code == "STORE_ERROR"
    assert timeout.retryable

    assert StoreError("x", cause=ConnectionResetError()).retryable
    assert StoreError("x", cause=ConnectionRefusedError()).retryable
    assert StoreError("x", cause=TimeoutError()).retryable
    assert not StoreError("x").retryable


def test_classify_client_error():
    assert classify_client_error(_client_error("NoSuchKey")) is ErrorKind.NOT_FOUND
    assert classify_client_error(_client_error("NoSuchBucket")) is ErrorKind.NOT_FOUND
    assert classify_client_error(_client_error("Unknown", 404)) is ErrorKind.NOT_FOUND
    assert classify_client_error(_client_error("AccessDenied", 403)) is ErrorKind.STORE_ERROR
    assert classify_client_error(_client_error("InternalError", 500)) is ErrorKind.STORE_ERROR
