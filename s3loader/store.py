"""
Remote object store access for artifact resolution.

The pipeline only depends on the ``RemoteStoreClient`` protocol;
``Boto3StoreClient`` implements it over a boto3 S3 client.
"""

from typing import Any, Optional, Protocol, runtime_checkable
from urllib.parse import quote

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from s3loader.core.config import LoaderSettings
from s3loader.core.errors import (
    ACCESS_DENIED_CODES,
    ErrorKind,
    classify_client_error,
    client_error_code,
)
from s3loader.core.logger import setup_logger
from s3loader.models import FetchRequest, ObjectMetadata, StoreObject

logger = setup_logger(__name__, include_location=True)

# Errors a store client may raise for connectivity, permission or protocol faults
TRANSPORT_ERRORS = (BotoCoreError, ClientError, OSError)


@runtime_checkable
class RemoteStoreClient(Protocol):
    """Store access consumed by the fetcher. Must be safe for concurrent use."""

    def fetch_object(self, request: FetchRequest) -> Optional[StoreObject]:
        """Open the object addressed by ``request``; None when it does not exist."""
        ...

    def url_for(self, bucket: str, key: Optional[str] = None) -> Optional[str]:
        """Direct URL for a bucket (key None) or object; None when unavailable."""
        ...


class Boto3StoreClient:
    """RemoteStoreClient backed by a boto3 S3 client."""

    def __init__(self, client: Any):
        if client is None:
            raise ValueError("client is required")
        self.client = client

    def fetch_object(self, request: FetchRequest) -> Optional[StoreObject]:
        logger.debug(f"[S3] get_object {request.uri} (requester_pays={request.requester_pays})")
        try:
            response = self.client.get_object(**request.to_get_object_kwargs())
        except ClientError as e:
            if classify_client_error(e) is ErrorKind.NOT_FOUND:
                logger.debug(f"[S3] Object not found: {request.uri}")
                return None
            if client_error_code(e) in ACCESS_DENIED_CODES:
                logger.warning(f"[S3] Access denied to {request.uri}")
            raise

        metadata = ObjectMetadata(
            size_in_bytes=response.get("ContentLength"),
            content_type=response.get("ContentType"),
            etag=response.get("ETag"),
        )
        return StoreObject(metadata=metadata, stream=response.get("Body"))

    def url_for(self, bucket: str, key: Optional[str] = None) -> Optional[str]:
        if not bucket:
            return None
        endpoint = self.client.meta.endpoint_url
        if not endpoint:
            return None
        base = f"{endpoint.rstrip('/')}/{quote(bucket, safe='')}/"
        if key is None:
            return base
        return base + quote(key, safe="/~")

    def __repr__(self) -> str:
        return f"Boto3StoreClient(endpoint={getattr(self.client.meta, 'endpoint_url', None)!r})"


def create_s3_client(settings: LoaderSettings):
    """Build a boto3 S3 client; credentials come from boto3's default chain."""
    config = BotoConfig(
        connect_timeout=settings.connect_timeout,
        read_timeout=settings.read_timeout,
        retries={"total_max_attempts": settings.max_attempts, "mode": "standard"},
    )
    s3_kwargs = {"config": config}
    if settings.region:
        s3_kwargs["region_name"] = settings.region
    if settings.endpoint_url:
        s3_kwargs["endpoint_url"] = settings.endpoint_url
    logger.debug(f"Creating S3 client (region={settings.region}, endpoint={settings.endpoint_url})")
    return boto3.client("s3", **s3_kwargs)


__all__ = [
    "Boto3StoreClient",
    "RemoteStoreClient",
    "TRANSPORT_ERRORS",
    "create_s3_client",
]
