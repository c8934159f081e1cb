"""
Value types passed through the resolution pipeline.

FetchRequest    - store addressing of one artifact (bucket + key + options)
ObjectMetadata  - what the store declares about an object before transfer
StoreObject     - an open object handle: metadata plus a readable stream
CodeOrigin      - best-effort provenance URL for materialized bytes
MaterializedArtifact - fully transferred bytes handed to the caller
"""

from typing import Any, BinaryIO, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

# Largest contiguous buffer the loader will allocate for one artifact
MAX_BUFFER = 2**31 - 1


class FetchRequest(BaseModel):
    """Store-specific addressing of one artifact. Immutable."""
    model_config = ConfigDict(frozen=True)

    bucket: str
    key: str
    requester_pays: bool = Field(default=False, description="Bill the transfer to the requester")

    def to_get_object_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"Bucket": self.bucket, "Key": self.key}
        if self.requester_pays:
            kwargs["RequestPayer"] = "requester"
        return kwargs

    @property
    def uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


class ObjectMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    size_in_bytes: Optional[int] = Field(default=None, description="Declared object length")
    content_type: Optional[str] = None
    etag: Optional[str] = None


class CodeOrigin(BaseModel):
    """Where materialized bytes came from. ``url`` is None when the store cannot say."""
    model_config = ConfigDict(frozen=True)

    url: Optional[str] = None


class MaterializedArtifact(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    data: bytes
    origin: CodeOrigin = Field(default_factory=CodeOrigin)

    @property
    def size(self) -> int:
        return len(self.data)


class StoreObject:
    """
    An open object returned by a store client.

    Closing the object closes its stream and then runs the client's release
    hook, if any. Use it as a context manager so both happen on every exit
    path.
    """

    def __init__(
        self,
        metadata: ObjectMetadata,
        stream: Optional[BinaryIO],
        release: Optional[Callable[[], None]] = None,
    ):
        self.metadata = metadata
        self.stream = stream
        self._release = release
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            if self.stream is not None:
                self.stream.close()
        finally:
            if self._release is not None:
                self._release()

    def __enter__(self) -> "StoreObject":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"StoreObject(size={self.metadata.size_in_bytes}, closed={self.closed})"
