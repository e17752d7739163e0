import os
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from s3link.core.config import get_settings
from s3link.services import storage as storage_service
from s3link.services.storage import ObjectStoreClient, PreparedRequest, RetrieveRequest


class FakeObjectStore:
    """Collaborator double that always resolves to a path-style URL with a port."""

    def __init__(self, version: str = "1.40.0", forces_path_style: bool = False) -> None:
        self.version = version
        self.forces_path_style = forces_path_style
        self.retrieve_calls: list[tuple[str, str]] = []
        self.presign_calls: list[tuple[str, object]] = []

    def create_retrieve_request(self, bucket: str, key: str) -> RetrieveRequest:
        self.retrieve_calls.append((bucket, key))
        return RetrieveRequest(bucket=bucket, key=key)

    def prepare(self, descriptor: RetrieveRequest) -> PreparedRequest:
        return PreparedRequest(
            bucket=descriptor.bucket,
            key=descriptor.key,
            scheme="http",
            host="s3.example.com",
            port=8443,
            path=f"/{descriptor.bucket}/{descriptor.key}",
        )

    def create_presigned_url(self, request: PreparedRequest, expiration) -> str:
        self.presign_calls.append((request.url, expiration))
        return f"{request.url}?signed={expiration}"


@pytest.fixture(scope="session", autouse=True)
def configure_environment():
    os.environ["S3_ACCESS_KEY"] = "test"
    os.environ["S3_SECRET_KEY"] = "test-secret"
    os.environ["S3_REGION"] = "us-east-1"
    os.environ["S3_DEFAULT_BUCKET"] = ""
    os.environ["S3_USE_SSL"] = "true"
    os.environ.pop("S3_ENDPOINT_URL", None)
    os.environ.pop("S3_SESSION_TOKEN", None)
    get_settings.cache_clear()
    storage_service.reset_object_store()


@pytest.fixture(autouse=True)
def clear_settings_cache():
    yield
    get_settings.cache_clear()
    storage_service.reset_object_store()


@pytest.fixture
def fake_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def object_store() -> ObjectStoreClient:
    return ObjectStoreClient()


@pytest.fixture
def local_object_store(monkeypatch) -> ObjectStoreClient:
    monkeypatch.setenv("S3_ENDPOINT_URL", "http://localhost:9000")
    monkeypatch.setenv("S3_ADDRESSING_STYLE", "path")
    get_settings.cache_clear()
    return ObjectStoreClient()
