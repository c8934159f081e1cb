import io

import pytest

from s3loader.fetcher import ArtifactFetcher
from s3loader.models import ObjectMetadata, StoreObject
from s3loader.translate import FixedBucketTranslator

_UNSET = object()


class ChunkedStream(io.RawIOBase):
    """Delivers at most ``chunk`` bytes per read, like a network body."""

    def __init__(self, data: bytes, chunk: int = 7):
        self._data = data
        self._pos = 0
        self._chunk = chunk
        self.reads = []

    def readable(self):
        return True

    def read(self, size=-1):
        if size is None or size < 0:
            size = len(self._data) - self._pos
        self.reads.append(size)
        n = min(size, self._chunk)
        out = self._data[self._pos:self._pos + n]
        self._pos += len(out)
        return out


class FakeStore:
    """In-memory RemoteStoreClient recording every call."""

    def __init__(self, endpoint="https://store.example"):
        self.endpoint = endpoint
        self.objects = {}
        self.fetch_calls = []
        self.url_calls = []
        self.opened = []
        self.fetch_error = None
        self.url_error = None

    def put(self, bucket, key, data, declared_size=_UNSET, chunk=7):
        size = len(data) if declared_size is _UNSET else declared_size
        self.objects[(bucket, key)] = (data, size, chunk)

    def fetch_object(self, request):
        self.fetch_calls.append(request)
        if self.fetch_error is not None:
            raise self.fetch_error
        entry = self.objects.get((request.bucket, request.key))
        if entry is None:
            return None
        data, size, chunk = entry
        stream = ChunkedStream(data, chunk=chunk)
        obj = StoreObject(ObjectMetadata(size_in_bytes=size), stream)
        self.opened.append(obj)
        return obj

    def url_for(self, bucket, key=None):
        self.url_calls.append((bucket, key))
        if self.url_error is not None:
            raise self.url_error
        if key is None:
            return f"{self.endpoint}/{bucket}/"
        return f"{self.endpoint}/{bucket}/{key}"


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def translator():
    return FixedBucketTranslator("code-bucket")


@pytest.fixture
def fetcher(store, translator):
    return ArtifactFetcher(store, translator)
