"""Media uploader factory.

Provides get_uploader() / set_uploader() to swap implementations:
- FakeMediaUploader for development and testing
- CloudinaryMediaUploader for production (MEDIA_PROVIDER=cloudinary)
"""

from shared.config import settings
from .cloudinary_adapter import CloudinaryMediaUploader
from .fake_adapter import FakeMediaUploader
from .port import MediaUploadError, MediaUploader

_current_uploader: MediaUploader | None = None


def _build_default() -> MediaUploader:
    if settings.MEDIA_PROVIDER == "cloudinary":
        return CloudinaryMediaUploader(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            upload_preset=settings.CLOUDINARY_UPLOAD_PRESET,
        )
    return FakeMediaUploader()


def get_uploader() -> MediaUploader:
    """Return the current media uploader. Also usable as a FastAPI dependency."""
    global _current_uploader
    if _current_uploader is None:
        _current_uploader = _build_default()
    return _current_uploader


def set_uploader(uploader: MediaUploader) -> None:
    """Override the active media uploader (useful for tests)."""
    global _current_uploader
    _current_uploader = uploader


def reset_uploader() -> None:
    global _current_uploader
    _current_uploader = None


__all__ = [
    "CloudinaryMediaUploader",
    "FakeMediaUploader",
    "MediaUploadError",
    "MediaUploader",
    "get_uploader",
    "set_uploader",
    "reset_uploader",
]
