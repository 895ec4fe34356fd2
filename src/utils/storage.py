"""Filesystem object storage for product and profile images.

Each bucket is a directory under ``settings.media_dir``; the application
mounts that directory with ``StaticFiles`` so every stored object has a
public URL of the form ``<PUBLIC_BASE_URL>/storage/<bucket>/<path>``.
"""
import io
import secrets
import time
from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional

from PIL import Image, UnidentifiedImageError

from src.config import settings
from src.logging_config import get_logger

logger = get_logger("storage")

PRODUCTS_BUCKET = "products"
PROFILES_BUCKET = "profiles"
DEFAULT_BUCKETS = (PRODUCTS_BUCKET, PROFILES_BUCKET)

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")
# Pillow format names accepted for the types above
ALLOWED_IMAGE_FORMATS = ("JPEG", "PNG", "WEBP")


class StorageError(Exception):
    """Raised when an object cannot be stored or located."""


class ImageStorage:
    """Bucketed object store backed by a local directory."""

    def __init__(self, root: Path, public_base_url: str = "", route: str = "/storage", buckets: Iterable[str] = DEFAULT_BUCKETS):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")
        self.route = "/" + route.strip("/")
        self.root.mkdir(parents=True, exist_ok=True)
        for bucket in buckets:
            (self.root / bucket).mkdir(parents=True, exist_ok=True)

    def _object_file(self, bucket: str, path: str) -> Path:
        bucket_dir = self.root / bucket
        if not bucket_dir.is_dir():
            raise StorageError("Bucket not found")
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts or not relative.parts:
            raise StorageError(f"Invalid object path: {path}")
        return bucket_dir.joinpath(*relative.parts)

    def upload(self, bucket: str, path: str, content: bytes, upsert: bool = False) -> str:
        """
        Store ``content`` at ``bucket/path``.

        Raises:
            StorageError: unknown bucket, invalid path, or an existing object
                when ``upsert`` is False
        """
        target = self._object_file(bucket, path)
        if target.exists() and not upsert:
            raise StorageError(f"The resource already exists: {bucket}/{path}")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        logger.info("Stored %s/%s (%d bytes)", bucket, path, len(content))
        return path

    def list(self, bucket: str, prefix: str = "", limit: int = 100) -> List[str]:
        """Object paths in ``bucket`` (optionally under ``prefix``), sorted."""
        bucket_dir = self.root / bucket
        if not bucket_dir.is_dir():
            raise StorageError("Bucket not found")
        base = bucket_dir / prefix if prefix else bucket_dir
        if not base.exists():
            return []
        names = sorted(
            p.relative_to(bucket_dir).as_posix()
            for p in base.rglob("*")
            if p.is_file()
        )
        return names[:limit]

    def remove(self, bucket: str, paths: Iterable[str]) -> List[str]:
        """Delete objects; returns the paths that existed and were removed."""
        removed = []
        for path in paths:
            target = self._object_file(bucket, path)
            if target.is_file():
                target.unlink()
                removed.append(path)
        logger.info("Removed %d object(s) from %s", len(removed), bucket)
        return removed

    def exists(self, bucket: str, path: str) -> bool:
        return self._object_file(bucket, path).is_file()

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}{self.route}/{bucket}/{path}"


def object_path_from_url(url: str, folder: str) -> str:
    """Map a stored public URL back to its object path, e.g. ``products/<file>``."""
    file_name = url.rstrip("/").split("/")[-1]
    return f"{folder}/{file_name}"


def build_object_name(owner_id: str, filename: str, with_random: bool = True) -> str:
    """``<owner>-<epoch ms>[-<random>].<ext>`` for a new upload."""
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else "jpg"
    stamp = int(time.time() * 1000)
    if with_random:
        return f"{owner_id}-{stamp}-{secrets.token_hex(3)}.{extension}"
    return f"{owner_id}-{stamp}.{extension}"


def validate_image(content_type: Optional[str], content: bytes, max_bytes: int) -> Optional[str]:
    """
    Check an uploaded image.

    Returns:
        A user-facing error message, or None when the upload is acceptable
    """
    if not content:
        return "Invalid file provided"
    if content_type not in ALLOWED_IMAGE_TYPES:
        return "Invalid file type. Only JPEG, PNG, and WebP images are allowed."
    if len(content) > max_bytes:
        return f"File is too large. Maximum size is {max_bytes // (1024 * 1024)}MB."
    try:
        with Image.open(io.BytesIO(content)) as img:
            image_format = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError):
        return "Invalid file provided"
    if image_format not in ALLOWED_IMAGE_FORMATS:
        return "Invalid file type. Only JPEG, PNG, and WebP images are allowed."
    return None


@lru_cache(maxsize=1)
def get_storage() -> ImageStorage:
    """Shared storage instance built from settings."""
    return ImageStorage(
        root=Path(settings.media_dir),
        public_base_url=settings.public_base_url,
        route=settings.storage_route,
    )
