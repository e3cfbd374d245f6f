# tests/conftest.py
import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from imagepost.exceptions import StorageError
from imagepost.main import create_app
from imagepost.services.key_builder import KeyBuilder
from imagepost.settings import Settings

FIXED_NOW = datetime(2024, 3, 9, 23, 59, 30, tzinfo=timezone.utc)


class InMemoryStorage:
    """ObjectStorage fake. Keys listed in `fail_on` raise StorageError."""

    def __init__(self):
        self.objects = {}
        self.content_types = {}
        self.calls = []
        self.fail_on = set()
        self.fail_all = False

    def put_object(self, key, data, content_type=None):
        self.calls.append(key)
        if self.fail_all or any(key.endswith(suffix) for suffix in self.fail_on):
            raise StorageError(f"failed to write {key}")
        self.objects[key] = bytes(data)
        self.content_types[key] = content_type
        return f"mem://bucket/{key}"

    def list_keys(self, prefix=""):
        return sorted(k for k in self.objects if k.startswith(prefix))


class SequentialIds:
    """Deterministic uuid factory."""

    def __init__(self):
        self.issued = []

    def __call__(self):
        value = uuid.UUID(int=len(self.issued) + 1)
        self.issued.append(value)
        return value


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def ids():
    return SequentialIds()


@pytest.fixture
def settings():
    return Settings(bucket="test-bucket", metrics_enabled=False)


@pytest.fixture
def sibling_settings():
    return Settings(
        bucket="test-bucket",
        caption_layout="sibling",
        max_caption_length=None,
        metrics_enabled=False,
    )


@pytest.fixture
def make_client(storage):
    """Build a TestClient for the given settings, backed by the in-memory store."""
    def _make(settings, key_builder=None):
        app = create_app(settings, storage=storage, key_builder=key_builder)
        return TestClient(app)
    return _make


@pytest.fixture
def client(make_client, settings):
    return make_client(settings)


@pytest.fixture
def sibling_client(make_client, sibling_settings):
    return make_client(sibling_settings)


@pytest.fixture
def fixed_key_builder(ids):
    return KeyBuilder(clock=lambda: FIXED_NOW, id_factory=ids)
