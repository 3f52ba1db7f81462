"""In-memory media host for development and testing.

No external calls are made. URLs are derived from the file name so tests can
assert on ordering; `should_fail` simulates the host rejecting a batch.
"""

import os
from typing import Sequence
from uuid import uuid4

from .port import MediaUploadError, MediaUploader


class FakeMediaUploader(MediaUploader):

    def __init__(self, base_url: str = "https://media.example.test") -> None:
        self.base_url = base_url.rstrip("/")
        self.should_fail: bool = False
        self.stored: set[str] = set()
        self.calls: list[dict] = []

    async def upload_many(self, paths: Sequence[str]) -> list[str]:
        self.calls.append({"method": "upload_many", "paths": list(paths)})
        if self.should_fail:
            raise MediaUploadError()
        urls = [
            f"{self.base_url}/{uuid4().hex[:8]}/{os.path.basename(path)}" for path in paths
        ]
        self.stored.update(urls)
        return urls

    async def delete_many(self, urls: Sequence[str]) -> None:
        self.calls.append({"method": "delete_many", "urls": list(urls)})
        for url in urls:
            self.stored.discard(url)
