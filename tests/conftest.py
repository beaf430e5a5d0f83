from __future__ import annotations

import pytest

from gateway.common.config import Settings, get_settings
from gateway.infra.storage.s3_client import BackendClients
from gateway.services.s3_gateway import S3Gateway
from tests.fakes import FakeS3Client, FakeS3Store


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def settings() -> Settings:
    return Settings(STREAM_CHUNK_BYTES=4)


@pytest.fixture()
def store() -> FakeS3Store:
    return FakeS3Store()


@pytest.fixture()
def backend(store) -> FakeS3Client:
    return FakeS3Client(store)


@pytest.fixture()
def anon_backend(store) -> FakeS3Client:
    return FakeS3Client(store, anonymous=True)


@pytest.fixture()
def clients(backend, anon_backend) -> BackendClients:
    return BackendClients(client=backend, anon_client=anon_backend)


@pytest.fixture()
def gateway(clients, settings) -> S3Gateway:
    return S3Gateway(clients, settings=settings)


@pytest.fixture()
def bucket(gateway) -> str:
    gateway.make_bucket("us-east-1", "mybucket")
    return "mybucket"
