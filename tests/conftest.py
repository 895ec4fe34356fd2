"""Shared pytest fixtures.

The environment is pointed at a throw-away SQLite file and media directory
before any application module is imported, since settings are read once.
"""
import io
import os
import tempfile
from pathlib import Path

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="haven-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_ROOT / 'test.db'}"
os.environ["MEDIA_DIR"] = str(_TEST_ROOT / "media")
os.environ["ADMIN_TOKEN"] = "test-admin-token"
os.environ["LOG_DIR"] = ""

from collections.abc import Generator
from unittest.mock import patch

import pytest
from PIL import Image

from data.database.connection import Base, SessionLocal, engine, init_db
from src.services import auth_service, profile_service
from src.utils.storage import ImageStorage

ADMIN_TOKEN = "test-admin-token"
PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def mock_sleep() -> Generator[None, None, None]:
    """Patch time.sleep globally so retry loops run instantly."""
    with patch("time.sleep"):
        yield


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh tables for every test."""
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(tmp_path):
    return ImageStorage(tmp_path / "media", public_base_url="http://testserver")


def make_image_bytes(image_format: str = "PNG", size=(8, 8)) -> bytes:
    """A tiny valid image in ``image_format``."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 120, 40)).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


def register(db, email: str, first_name: str = "Ana", last_name: str = "Lopez"):
    """Sign up ``email`` and return the auth user."""
    result = auth_service.sign_up(db, first_name, last_name, email, PASSWORD)
    assert result["success"], result.get("error")
    return result["user"]


@pytest.fixture
def buyer(db):
    return register(db, "buyer@example.com", "Bea", "Buyer")


@pytest.fixture
def seller(db):
    user = register(db, "potter@example.com", "Paula", "Potter")
    result = profile_service.become_artisan(db, user.id, {"shop_name": "Paula's Pottery"})
    assert result["success"]
    return user


@pytest.fixture
def other_seller(db):
    user = register(db, "smith@example.com", "Sam", "Smith")
    profile_service.become_artisan(db, user.id, {"shop_name": "Forge & Anvil"})
    return user


@pytest.fixture
def product_data():
    return {
        "title": "Handmade Ceramic Coffee Mug",
        "description": "Glazed stoneware mug.",
        "price": 24.99,
        "category": "Pottery & Ceramics",
        "stock": 15,
    }
