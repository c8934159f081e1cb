"""
Name translation: logical artifact names to store fetch requests.

Primary artifacts use dotted names ("com.example.Foo") that map to keys
("com/example/Foo.class"). Resource names are used as keys verbatim.
"""

import unicodedata
from typing import Callable, Optional, Protocol, runtime_checkable

from s3loader.core.errors import InvalidNameError
from s3loader.models import FetchRequest

NAME_SEPARATOR = "."
KEY_SEPARATOR = "/"
DEFAULT_SUFFIX = ".class"


def is_identifier_start(ch: str) -> bool:
    # compiled-code names may also start with currency symbols or connector punctuation
    return ch.isidentifier() or unicodedata.category(ch) in ("Sc", "Pc")


def validate_artifact_name(name: Optional[str]) -> str:
    """Return ``name`` unchanged or raise InvalidNameError."""
    if name is None:
        raise InvalidNameError("Artifact name is required", name=None)
    if not isinstance(name, str):
        raise InvalidNameError(f"Artifact name must be a string, got {type(name).__name__}", name=str(name))
    if not name:
        raise InvalidNameError("Artifact name must not be empty", name=name)
    if not is_identifier_start(name[0]):
        raise InvalidNameError(
            f"Artifact name must start with an identifier character: {name!r}",
            name=name,
        )
    return name


def artifact_name_to_key(name: str, suffix: str = DEFAULT_SUFFIX) -> str:
    return name.replace(NAME_SEPARATOR, KEY_SEPARATOR) + suffix


@runtime_checkable
class NameTranslator(Protocol):
    def translate(self, name: str) -> Optional[FetchRequest]:
        """Request for a primary artifact, or None if the name cannot be resolved."""
        ...

    def translate_resource(self, name: str) -> Optional[FetchRequest]:
        """Request for an auxiliary resource, or None if the name cannot be resolved."""
        ...


class FixedBucketTranslator:
    """Derives every request from the name alone against one configured bucket."""

    def __init__(self, bucket: str, requester_pays: bool = False, suffix: str = DEFAULT_SUFFIX):
        if not bucket:
            raise ValueError("bucket is required")
        self.bucket = bucket
        self.requester_pays = requester_pays
        self.suffix = suffix

    def translate(self, name: str) -> Optional[FetchRequest]:
        validate_artifact_name(name)
        return FetchRequest(
            bucket=self.bucket,
            key=artifact_name_to_key(name, self.suffix),
            requester_pays=self.requester_pays,
        )

    def translate_resource(self, name: str) -> Optional[FetchRequest]:
        if not name:
            return None
        return FetchRequest(bucket=self.bucket, key=name, requester_pays=self.requester_pays)

    def __repr__(self) -> str:
        return f"FixedBucketTranslator(bucket={self.bucket!r}, requester_pays={self.requester_pays})"


class CustomTranslator:
    """
    Translator whose mappings are supplied per name.

    Pass callables, or subclass and override ``map_name`` / ``map_resource``.
    Either mapping may return None to signal that a name cannot be resolved.
    Without a resource mapping, resources are not resolvable.
    """

    def __init__(
        self,
        map_name: Optional[Callable[[str], Optional[FetchRequest]]] = None,
        map_resource: Optional[Callable[[str], Optional[FetchRequest]]] = None,
    ):
        self._map_name = map_name
        self._map_resource = map_resource

    def map_name(self, name: str) -> Optional[FetchRequest]:
        if self._map_name is None:
            return None
        return self._map_name(name)

    def map_resource(self, name: str) -> Optional[FetchRequest]:
        if self._map_resource is None:
            return None
        return self._map_resource(name)

    def translate(self, name: str) -> Optional[FetchRequest]:
        validate_artifact_name(name)
        return self.map_name(name)

    def translate_resource(self, name: str) -> Optional[FetchRequest]:
        if not name:
            return None
        return self.map_resource(name)


__all__ = [
    "CustomTranslator",
    "DEFAULT_SUFFIX",
    "FixedBucketTranslator",
    "NameTranslator",
    "artifact_name_to_key",
    "is_identifier_start",
    "validate_artifact_name",
]
