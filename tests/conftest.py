import os
import sys
from pathlib import Path

# Тестам не нужна файловая БД приложения и реальный S3
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["S3_BUCKET"] = ""

# Добавляем корень проекта в PYTHONPATH
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from messenger.core.database import get_db
from messenger.main import app
from messenger.models.base import Base, User
from messenger.services.image_storage import ImageUploadError, UploadedImage, get_image_storage
from messenger.services.realtime import ConnectionRegistry, get_connection_registry


class FakeImageStorage:
    """Хранилище изображений в памяти вместо S3."""

    def __init__(self):
        self.uploaded = []
        self.deleted = []
        self.fail_upload = False

    def upload(self, image):
        if self.fail_upload:
            raise ImageUploadError("S3 unreachable")
        key = f"chat-images/test-{len(self.uploaded) + 1}.png"
        self.uploaded.append((image, key))
        return UploadedImage(url=f"https://cdn.test/{key}", public_id=key)

    def delete(self, public_id):
        self.deleted.append(public_id)


@pytest.fixture()
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.sqlite'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def users(db):
    """Три пользователя: alice, bob, carol."""
    alice = User(full_name="Alice", email="alice@example.com", password="hash-a")
    bob = User(full_name="Bob", email="bob@example.com", password="hash-b")
    carol = User(full_name="Carol", email="carol@example.com", password="hash-c")
    db.add_all([alice, bob, carol])
    db.commit()
    return {"alice": alice.id, "bob": bob.id, "carol": carol.id}


@pytest.fixture()
def storage():
    return FakeImageStorage()


@pytest.fixture()
def registry():
    return ConnectionRegistry(max_connections_per_user=2)


@pytest.fixture()
def client(session_factory, storage, registry):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_storage] = lambda: storage
    app.dependency_overrides[get_connection_registry] = lambda: registry
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth(user_id):
    return {"X-User-Id": str(user_id)}
