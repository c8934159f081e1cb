"""Wiring for a fixed-bucket resolver from settings."""

from typing import Any, Optional

from s3loader.core.config import LoaderSettings, get_loader_settings
from s3loader.core.logger import setup_logger
from s3loader.fetcher import ArtifactFetcher
from s3loader.resolver import ArtifactLoader, DelegatingResolver, PrimaryResolver
from s3loader.store import Boto3StoreClient, create_s3_client
from s3loader.translate import FixedBucketTranslator

logger = setup_logger(__name__, include_location=True)


def create_resolver(
    settings: Optional[LoaderSettings] = None,
    client: Optional[Any] = None,
    primary: Optional[PrimaryResolver] = None,
    loader: Optional[ArtifactLoader] = None,
) -> DelegatingResolver:
    """
    Build a DelegatingResolver for the configured bucket.

    ``client`` is a boto3 S3 client; one is created from ``settings`` when
    omitted. Settings default to the environment (S3LOADER_* variables).
    """
    if settings is None:
        settings = get_loader_settings()
    translator = FixedBucketTranslator(
        bucket=settings.require_bucket(),
        requester_pays=settings.requester_pays,
        suffix=settings.artifact_suffix,
    )
    store = Boto3StoreClient(client if client is not None else create_s3_client(settings))
    logger.info(f"Artifact resolver ready for bucket {translator.bucket}")
    return DelegatingResolver(ArtifactFetcher(store, translator), primary=primary, loader=loader)
