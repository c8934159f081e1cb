from .core.errors import (
    ArtifactNotFoundError,
    ArtifactResolutionError,
    ErrorKind,
    InvalidNameError,
    InvalidSizeError,
    StoreError,
    TruncatedTransferError,
    UnresolvableRequestError,
    is_not_found,
)
from .factory import create_resolver
from .fetcher import ArtifactFetcher
from .models import MAX_BUFFER, CodeOrigin, FetchRequest, MaterializedArtifact, ObjectMetadata, StoreObject
from .resolver import ArtifactLoader, DelegatingResolver, PrimaryResolver
from .store import Boto3StoreClient, RemoteStoreClient
from .translate import CustomTranslator, FixedBucketTranslator, NameTranslator

__all__ = [
    "ArtifactFetcher",
    "ArtifactLoader",
    "ArtifactNotFoundError",
    "ArtifactResolutionError",
    "Boto3StoreClient",
    "CodeOrigin",
    "CustomTranslator",
    "DelegatingResolver",
    "ErrorKind",
    "FetchRequest",
    "FixedBucketTranslator",
    "InvalidNameError",
    "InvalidSizeError",
    "MAX_BUFFER",
    "MaterializedArtifact",
    "NameTranslator",
    "ObjectMetadata",
    "PrimaryResolver",
    "RemoteStoreClient",
    "StoreError",
    "StoreObject",
    "TruncatedTransferError",
    "UnresolvableRequestError",
    "create_resolver",
    "is_not_found",
]
