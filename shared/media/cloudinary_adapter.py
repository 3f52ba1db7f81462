"""Cloudinary media host adapter, talking to the REST upload API over httpx.

Uploads are signed with the account's API secret unless an unsigned upload
preset is configured.
"""

import asyncio
import hashlib
import re
import time
from typing import Optional, Sequence

import httpx
import structlog

from shared.observability import ecomm_media_uploads_total
from .port import MediaUploadError, MediaUploader

logger = structlog.get_logger(__name__)

API_BASE = "https://api.cloudinary.com/v1_1"
_VERSION_SEGMENT = re.compile(r"^v\d+$")


def public_id_from_url(url: str) -> Optional[str]:
    """https://res.cloudinary.com/<cloud>/image/upload/v123/shop/abc.jpg -> 'shop/abc'"""
    if "/upload/" not in url:
        return None
    segments = url.split("/upload/", 1)[1].split("/")
    if segments and _VERSION_SEGMENT.match(segments[0]):
        segments = segments[1:]
    if not segments:
        return None
    segments[-1] = segments[-1].rsplit(".", 1)[0]
    return "/".join(segments)


class CloudinaryMediaUploader(MediaUploader):

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        upload_preset: str = "",
        timeout: float = 30.0,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.upload_preset = upload_preset
        self.timeout = timeout

    def _sign(self, params: dict) -> dict:
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        signature = hashlib.sha1(f"{to_sign}{self.api_secret}".encode()).hexdigest()
        return {**params, "api_key": self.api_key, "signature": signature}

    def _upload_fields(self) -> dict:
        if self.upload_preset:
            return {"upload_preset": self.upload_preset}
        return self._sign({"timestamp": int(time.time())})

    async def _upload_one(self, client: httpx.AsyncClient, path: str) -> str:
        with open(path, "rb") as fh:
            resp = await client.post(
                f"{API_BASE}/{self.cloud_name}/image/upload",
                data=self._upload_fields(),
                files={"file": fh},
            )
        resp.raise_for_status()
        return resp.json()["secure_url"]

    async def upload_many(self, paths: Sequence[str]) -> list[str]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            results = await asyncio.gather(
                *(self._upload_one(client, path) for path in paths),
                return_exceptions=True,
            )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            ecomm_media_uploads_total.labels(status="failed").inc()
            logger.error("media_upload_failed", failed=len(failures), total=len(paths), error=str(failures[0]))
            # All or nothing: drop whatever did make it to the host
            uploaded = [r for r in results if isinstance(r, str)]
            if uploaded:
                await self.delete_many(uploaded)
            raise MediaUploadError(error=str(failures[0]))

        ecomm_media_uploads_total.labels(status="success").inc()
        return list(results)

    async def delete_many(self, urls: Sequence[str]) -> None:
        public_ids = [pid for pid in (public_id_from_url(url) for url in urls) if pid]
        if not public_ids:
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            for public_id in public_ids:
                params = self._sign({"public_id": public_id, "timestamp": int(time.time())})
                resp = await client.post(f"{API_BASE}/{self.cloud_name}/image/destroy", data=params)
                if resp.status_code != 200:
                    logger.warning("media_delete_failed", public_id=public_id, status_code=resp.status_code)
