"""
Artifact retrieval: one remote fetch per call, fully materialized in memory.

    fetcher = ArtifactFetcher(Boto3StoreClient(s3), FixedBucketTranslator("code"))
    artifact = fetcher.fetch_artifact("com.example.Foo")
    # artifact.data is exactly as long as the object the store declared

Failures are raised as ArtifactResolutionError subclasses (see
s3loader.core.errors). There is no caching and no retry.
"""

from typing import BinaryIO, Optional

from botocore.exceptions import IncompleteReadError

from s3loader.core.errors import (
    ArtifactNotFoundError,
    InvalidNameError,
    InvalidSizeError,
    StoreError,
    TruncatedTransferError,
    UnresolvableRequestError,
)
from s3loader.core.logger import LoggingContext, setup_logger
from s3loader.models import (
    MAX_BUFFER,
    CodeOrigin,
    FetchRequest,
    MaterializedArtifact,
    ObjectMetadata,
)
from s3loader.store import TRANSPORT_ERRORS, RemoteStoreClient
from s3loader.translate import NameTranslator, validate_artifact_name

logger = setup_logger(__name__, include_location=True)


def checked_size(name: str, metadata: Optional[ObjectMetadata]) -> int:
    """Declared object size, provided it fits in one buffer."""
    size = metadata.size_in_bytes if metadata is not None else None
    if size is None or isinstance(size, bool) or not isinstance(size, int):
        raise InvalidSizeError(f"Store declared no usable size for {name}: {size!r}", name=name, size=size)
    if size <= 0:
        raise InvalidSizeError(f"Declared size of {name} is not positive: {size}", name=name, size=size)
    if size > MAX_BUFFER:
        raise InvalidSizeError(
            f"Declared size of {name} exceeds maximum buffer ({MAX_BUFFER}): {size}",
            name=name,
            size=size,
        )
    return size


def drain(name: str, stream: Optional[BinaryIO], size: int) -> bytes:
    """
    Read exactly ``size`` bytes from ``stream``.

    Each pass asks for at most the unfilled remainder, so nothing past the
    declared length is consumed. An empty read, or botocore's
    IncompleteReadError, before the buffer is full means the store
    delivered less than it declared.
    """
    if stream is None:
        raise TruncatedTransferError(
            f"Store returned no content stream for {name}",
            name=name, expected=size, received=0,
        )
    buffer = bytearray(size)
    offset = 0
    passes = 0
    with memoryview(buffer) as view:
        while offset < size:
            remaining = size - offset
            try:
                chunk = stream.read(remaining)
            except IncompleteReadError as e:
                # botocore bodies verify ContentLength themselves at end of data
                raise TruncatedTransferError(
                    f"Transfer of {name} ended after {offset} of {size} bytes: {e}",
                    name=name, expected=size, received=offset, cause=e,
                ) from e
            if not chunk:
                raise TruncatedTransferError(
                    f"Transfer of {name} ended after {offset} of {size} bytes",
                    name=name, expected=size, received=offset,
                )
            count = len(chunk)
            if count > remaining:
                raise StoreError(
                    f"Stream returned {count} bytes for {name} when at most {remaining} were requested",
                    name=name,
                    details={"expected": size, "offset": offset},
                )
            view[offset:offset + count] = chunk
            offset += count
            passes += 1
    logger.debug(f"Read {offset} bytes of {name} in {passes} pass(es)")
    return bytes(buffer)


class ArtifactFetcher:
    """Translates a name, fetches the object and returns its complete bytes."""

    def __init__(self, client: RemoteStoreClient, translator: NameTranslator):
        if client is None:
            raise ValueError("client is required")
        if translator is None:
            raise ValueError("translator is required")
        self.client = client
        self.translator = translator

    def fetch_artifact(self, name: str) -> MaterializedArtifact:
        validate_artifact_name(name)
        return self.fetch(name, self.translator.translate(name))

    def fetch_resource(self, name: str) -> MaterializedArtifact:
        # Resource names are arbitrary keys; only emptiness is rejected
        if not name:
            raise InvalidNameError("Resource name must not be empty", name=name)
        return self._materialize(name, self.translator.translate_resource(name))

    def fetch(self, name: str, request: Optional[FetchRequest]) -> MaterializedArtifact:
        validate_artifact_name(name)
        return self._materialize(name, request)

    def code_origin(self, request: Optional[FetchRequest]) -> CodeOrigin:
        """Provenance for bytes fetched with ``request``; the bucket's URL when available."""
        if request is None:
            return CodeOrigin()
        try:
            url = self.client.url_for(request.bucket, None)
        except TRANSPORT_ERRORS as e:
            logger.warning(f"Could not derive code origin for bucket {request.bucket}: {e}")
            url = None
        return CodeOrigin(url=url)

    def _materialize(self, name: str, request: Optional[FetchRequest]) -> MaterializedArtifact:
        if request is None:
            raise UnresolvableRequestError(f"No fetch request could be computed for {name}", name=name)

        with LoggingContext(logger, artifact=name, bucket=request.bucket, key=request.key):
            logger.info(f"Fetching {name} from {request.uri}")
            try:
                store_object = self.client.fetch_object(request)
                if store_object is None:
                    raise ArtifactNotFoundError(
                        f"No object for {name} at {request.uri}",
                        name=name,
                        details={"bucket": request.bucket, "key": request.key},
                    )
                with store_object:
                    size = checked_size(name, store_object.metadata)
                    data = drain(name, store_object.stream, size)
            except TRANSPORT_ERRORS as e:
                logger.error(f"Store error while fetching {name} from {request.uri}: {e}")
                raise StoreError(
                    f"Failed to fetch {name} from {request.uri}: {e}",
                    name=name,
                    cause=e,
                    details={"bucket": request.bucket, "key": request.key},
                ) from e

            origin = self.code_origin(request)
            logger.success(f"Fetched {name} ({len(data)} bytes) from {request.uri}")
            return MaterializedArtifact(name=name, data=data, origin=origin)

    def __repr__(self) -> str:
        return f"ArtifactFetcher(client={self.client!r}, translator={self.translator!r})"


__all__ = ["ArtifactFetcher", "checked_size", "drain"]
