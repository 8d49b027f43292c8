"""Shared fixtures: in-memory SQLite, an in-memory object store and a test client."""
import io
from typing import BinaryIO, Dict, List, Optional, Tuple, Union

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies import get_image_host
from app.db.base import Base
from app.db.product_store import ProductStore
from app.db.session import get_db
from app.infrastructure.storage import ProductImageHost
from app.infrastructure.storage.object_storage import ObjectStorageInterface, StorageConfig
from app.main import app
from app.models.product import Product  # noqa: F401
from app.services.core import ProductService

IMAGE_BUCKET = "product-images"


class InMemoryStorage(ObjectStorageInterface):
    """Object store double that remembers what was uploaded and deleted"""

    def __init__(self):
        super().__init__(StorageConfig(
            endpoint="assets.test", access_key="test", secret_key="test",
            secure=False, image_bucket=IMAGE_BUCKET,
        ))
        self.objects: Dict[Tuple[str, str], bytes] = {}
        self.content_types: Dict[Tuple[str, str], Optional[str]] = {}
        self.deleted: List[str] = []
        self.fail_uploads = False
        self.fail_deletes = False

    def ensure_bucket_exists(self, bucket_name: str) -> bool:
        return True

    def upload_file_object(
        self,
        file_data: Union[bytes, BinaryIO],
        bucket_name: str,
        object_name: str,
        content_type: Optional[str] = None
    ) -> bool:
        if self.fail_uploads:
            return False
        data = file_data if isinstance(file_data, bytes) else file_data.read()
        self.objects[(bucket_name, object_name)] = data
        self.content_types[(bucket_name, object_name)] = content_type
        return True

    def delete_file(self, bucket_name: str, object_name: str) -> bool:
        self.deleted.append(object_name)
        if self.fail_deletes:
            return False
        self.objects.pop((bucket_name, object_name), None)
        return True

    def get_public_url(self, bucket_name: str, object_name: str) -> str:
        return f"http://assets.test/{bucket_name}/{object_name}"

    def initialize(self) -> bool:
        return True


def make_image(width: int = 64, height: int = 64, image_format: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 120, 40)).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def engine():
    """Create a test database engine."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db_session):
    return ProductStore(db_session)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def image_host(storage):
    return ProductImageHost(storage=storage, bucket=IMAGE_BUCKET, folder="products")


@pytest.fixture
def service(store, image_host):
    return ProductService(store=store, image_host=image_host)


@pytest.fixture
def png_bytes():
    return make_image()


@pytest.fixture
def client(session_factory, image_host):
    """Test client wired to the in-memory database and object store."""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_host] = lambda: image_host
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def image_factory():
    return make_image
