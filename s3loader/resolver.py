"""
Resolution policy in front of the ArtifactFetcher.

Primary artifacts always go to the remote store and every failure is
reported. Resources are advisory: a primary resolver is asked first, the
store second, and any failure becomes "no result".
"""

import io
from typing import Any, BinaryIO, Iterator, Optional, Protocol, runtime_checkable

from s3loader.core.errors import ArtifactResolutionError, StoreError
from s3loader.core.logger import setup_logger
from s3loader.fetcher import ArtifactFetcher
from s3loader.models import FetchRequest, MaterializedArtifact
from s3loader.store import TRANSPORT_ERRORS

logger = setup_logger(__name__, include_location=True)


@runtime_checkable
class PrimaryResolver(Protocol):
    def resolve(self, name: str) -> Optional[BinaryIO]:
        ...


@runtime_checkable
class ArtifactLoader(Protocol):
    """Turns materialized bytes into whatever loadable unit the host needs."""

    def define(self, artifact: MaterializedArtifact) -> Any:
        ...


class DelegatingResolver:

    def __init__(
        self,
        fetcher: ArtifactFetcher,
        primary: Optional[PrimaryResolver] = None,
        loader: Optional[ArtifactLoader] = None,
    ):
        if fetcher is None:
            raise ValueError("fetcher is required")
        self.fetcher = fetcher
        self.primary = primary
        self.loader = loader

    def find_artifact(self, name: str) -> MaterializedArtifact:
        return self.fetcher.fetch_artifact(name)

    def load(self, name: str) -> Any:
        if self.loader is None:
            raise ValueError("No artifact loader configured")
        return self.loader.define(self.find_artifact(name))

    def get_resource_as_stream(self, name: Optional[str]) -> Optional[BinaryIO]:
        """
        Open a resource: the primary resolver's stream if it has one, otherwise
        an in-memory stream over the bytes fetched from the store, otherwise None.
        """
        if not name:
            return None
        if self.primary is not None:
            stream = self.primary.resolve(name)
            if stream is not None:
                return stream
        try:
            artifact = self.fetcher.fetch_resource(name)
        except ArtifactResolutionError as e:
            # Resource lookups never abort the caller, outages included
            logger.debug(f"Resource {name} unavailable ({e.kind.value}): {e}")
            return None
        return io.BytesIO(artifact.data)

    def find_resource(self, name: Optional[str]) -> Optional[str]:
        request = self._resource_request(name)
        if request is None:
            return None
        try:
            return self.fetcher.client.url_for(request.bucket, request.key)
        except TRANSPORT_ERRORS as e:
            logger.debug(f"No URL for resource {name}: {e}")
            return None

    def find_resources(self, name: Optional[str]) -> Iterator[str]:
        """Yield the URL of ``name`` if there is one. Transport failures raise StoreError."""
        request = self._resource_request(name)
        if request is None:
            return
        try:
            url = self.fetcher.client.url_for(request.bucket, request.key)
        except TRANSPORT_ERRORS as e:
            raise StoreError(
                f"Failed to locate resource {name}: {e}",
                name=name,
                cause=e,
                details={"bucket": request.bucket, "key": request.key},
            ) from e
        if url is not None:
            yield url

    def _resource_request(self, name: Optional[str]) -> Optional[FetchRequest]:
        if not name:
            return None
        request = self.fetcher.translator.translate_resource(name)
        if request is None or not request.bucket:
            return None
        return request


__all__ = ["ArtifactLoader", "DelegatingResolver", "PrimaryResolver"]
