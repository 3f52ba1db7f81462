"""Media host port (abstract interface).

Product images live on an external media host. The services only need two
operations: push a batch of local files and get one public URL back per file,
and remove previously uploaded images by URL.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from shared.api.errors import InternalError


class MediaUploadError(InternalError):
    default_message = "Failed to upload one or more images"


class MediaUploader(ABC):
    """Abstract media host interface."""

    @abstractmethod
    async def upload_many(self, paths: Sequence[str]) -> list[str]:
        """Upload local files; return one public URL per path, in order.

        Either every file is uploaded or MediaUploadError is raised.
        """
        ...

    @abstractmethod
    async def delete_many(self, urls: Sequence[str]) -> None:
        """Delete previously uploaded images identified by their public URLs."""
        ...
