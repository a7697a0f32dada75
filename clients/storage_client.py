"""Attachment relay backed by Cloudinary.

Uploads a base64 payload and returns its public ``secure_url``. Credentials
are passed on every call instead of through ``cloudinary.config``.
"""
import logging
from typing import Any, Dict, Optional

import cloudinary.uploader
from fastapi import Depends
from fastapi.concurrency import run_in_threadpool

from core.config import Settings, get_settings
from core.exceptions import AttachmentUploadError

logger = logging.getLogger("AttachmentRelay")


class CloudinaryRelay:
    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        folder: str = "legal-app",
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _upload_options(self) -> Dict[str, Any]:
        return {
            "folder": self.folder,
            "resource_type": "auto",
            "access_mode": "public",
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
        }

    async def upload(self, base64_payload: str, mime_type: str) -> str:
        if not self.is_configured:
            raise AttachmentUploadError("Cloudinary credentials not configured")

        data_uri = f"data:{mime_type};base64,{base64_payload}"
        try:
            result = await run_in_threadpool(cloudinary.uploader.upload, data_uri, **self._upload_options())
        except Exception as e:
            raise AttachmentUploadError(str(e)) from e

        url = (result or {}).get("secure_url")
        if not url:
            raise AttachmentUploadError("Upload response did not include a secure_url")
        logger.info(f"Uploaded attachment to {url}")
        return url


relay_singleton: CloudinaryRelay | None = None


def get_attachment_relay(settings: Settings = Depends(get_settings)) -> CloudinaryRelay:
    global relay_singleton
    if relay_singleton is None:
        relay_singleton = CloudinaryRelay(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            folder=settings.cloudinary_folder,
        )
    return relay_singleton
